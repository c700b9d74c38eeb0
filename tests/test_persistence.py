import tempfile
import unittest
from pathlib import Path

from chembalance.balancer import balance_reaction
from chembalance.persistence import sqlite_store


class TestSqliteStore(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.path = Path(self._tmp.name) / "nested" / "chem.db"
        self.connection = sqlite_store.connect(self.path)
        sqlite_store.ensure_schema(self.connection)

    def tearDown(self):
        self.connection.close()
        self._tmp.cleanup()

    def test_seed_atoms_is_idempotent(self):
        self.assertEqual(sqlite_store.seed_atoms(self.connection), 118)
        self.assertEqual(sqlite_store.seed_atoms(self.connection), 0)

        atoms = sqlite_store.load_atoms(self.connection)
        self.assertEqual(atoms[0], ("H", 1))
        self.assertEqual(atoms[25], ("Fe", 26))
        self.assertIn("Og", sqlite_store.load_symbols(self.connection))

    def test_custom_atom_table(self):
        sqlite_store.seed_atoms(self.connection, [("H", 1), ("O", 8)])
        symbols = sqlite_store.load_symbols(self.connection)
        self.assertEqual(symbols, frozenset({"H", "O"}))
        self.assertEqual(balance_reaction("H2 + O2 = H2O", symbols).render(), "2H2 + O2 -> 2H2O")

    def test_balance_history(self):
        first = sqlite_store.save_balance(
            self.connection, "H2 + O2 = H2O", balance_reaction("H2 + O2 = H2O")
        )
        second = sqlite_store.save_balance(
            self.connection,
            "Fe + O2 = Fe2O3",
            balance_reaction("Fe + O2 = Fe2O3"),
            created_utc="2024-01-01T00:00:00+00:00",
        )
        self.assertGreater(second, first)

        entries = sqlite_store.list_balances(self.connection)
        self.assertEqual([entry["id"] for entry in entries], [second, first])
        self.assertEqual(entries[0]["balanced"], "4Fe + 3O2 -> 2Fe2O3")
        self.assertEqual(entries[0]["coefficients"], [4, 3, 2])
        self.assertEqual(entries[0]["created_utc"], "2024-01-01T00:00:00+00:00")

        self.assertEqual(len(sqlite_store.list_balances(self.connection, limit=1)), 1)


if __name__ == '__main__':
    unittest.main()
