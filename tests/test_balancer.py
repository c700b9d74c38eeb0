import math
import unittest
from fractions import Fraction
from functools import reduce

from chembalance.balancer import balance, balance_reaction, fraction_gcd, solve_coefficients
from chembalance.errors import (
    Contradiction,
    MalformedReaction,
    NotBalanceable,
    Underdetermined,
    Unsolvable,
)
from chembalance.formula import parse_compound
from chembalance.reaction import parse_reaction

REACTIONS = {
    "H2 + O2 = H2O": "2H2 + O2 -> 2H2O",
    "Fe + O2 = Fe2O3": "4Fe + 3O2 -> 2Fe2O3",
    "C + O2 = CO2": "C + O2 -> CO2",
    "O = O2": "2O -> O2",
    "Ca(OH)2 + H3PO4 -> Ca3(PO4)2 + H2O": "3Ca(OH)2 + 2H3PO4 -> Ca3(PO4)2 + 6H2O",
    "KMnO4 + HCl = KCl + MnCl2 + H2O + Cl2": "2KMnO4 + 16HCl -> 2KCl + 2MnCl2 + 8H2O + 5Cl2",
    "C3H8 + O2 = CO2 + H2O": "C3H8 + 5O2 -> 3CO2 + 4H2O",
}


class TestFractionGcd(unittest.TestCase):
    def test_integers(self):
        self.assertEqual(fraction_gcd(Fraction(4), Fraction(6)), 2)

    def test_fractions(self):
        self.assertEqual(fraction_gcd(Fraction(2), Fraction(3, 2)), Fraction(1, 2))
        self.assertEqual(fraction_gcd(Fraction(2, 5), Fraction(16, 5)), Fraction(2, 5))

    def test_zero_is_identity(self):
        self.assertEqual(fraction_gcd(Fraction(0), Fraction(-3, 4)), Fraction(3, 4))


class TestBalance(unittest.TestCase):
    def test_known_reactions(self):
        for reaction, expected in REACTIONS.items():
            with self.subTest(reaction=reaction):
                self.assertEqual(balance_reaction(reaction).render(), expected)

    def test_balance_contract(self):
        parsed = parse_reaction("H2 + O2 = H2O")
        self.assertEqual(balance(parsed.matrix, parsed.lhs, parsed.rhs), "2H2 + O2 -> 2H2O")

    def test_element_totals_match(self):
        for reaction in REACTIONS:
            with self.subTest(reaction=reaction):
                result = balance_reaction(reaction)
                signs = [1] * len(result.lhs) + [-1] * len(result.rhs)
                net = {}
                for compound, coefficient, sign in zip(
                    result.lhs + result.rhs, result.coefficients, signs
                ):
                    for symbol, count in parse_compound(compound).items():
                        net[symbol] = net.get(symbol, 0) + sign * coefficient * count
                self.assertTrue(all(total == 0 for total in net.values()), net)

    def test_coefficients_are_minimal_positive_integers(self):
        for reaction in REACTIONS:
            with self.subTest(reaction=reaction):
                coefficients = balance_reaction(reaction).coefficients
                self.assertTrue(all(isinstance(c, int) and c > 0 for c in coefficients))
                self.assertEqual(reduce(math.gcd, coefficients), 1)

    def test_rebalancing_output_is_a_fixed_point(self):
        for reaction in REACTIONS:
            with self.subTest(reaction=reaction):
                rendered = balance_reaction(reaction).render()
                self.assertEqual(balance_reaction(rendered).render(), rendered)

    def test_as_dict(self):
        payload = balance_reaction("H2 + O2 = H2O").as_dict()
        self.assertEqual(payload["balanced"], "2H2 + O2 -> 2H2O")
        self.assertEqual(payload["products"], [{"compound": "H2O", "coefficient": 2}])

    def test_malformed_reaction(self):
        with self.assertRaises(MalformedReaction) as ctx:
            balance_reaction("H2 + O2 = H2O2 = H2O")
        self.assertIn("found 2", str(ctx.exception))

    def test_underdetermined(self):
        # One element equation, four unknowns
        with self.assertRaises(Underdetermined) as ctx:
            balance_reaction("H2 + H = H3 + H4")
        self.assertEqual(ctx.exception.equations, 1)
        self.assertEqual(ctx.exception.compounds, 4)

    def test_unsolvable(self):
        with self.assertRaises(Unsolvable) as ctx:
            balance_reaction("H2 + H2 = H2O")
        self.assertEqual(ctx.exception.column, 1)

    def test_contradiction(self):
        with self.assertRaises(Contradiction) as ctx:
            balance_reaction("NaCl = Na + Cl2O")
        self.assertEqual(ctx.exception.row, 2)

    def test_zero_coefficient(self):
        with self.assertRaises(NotBalanceable) as ctx:
            balance_reaction("H2 + He = H2")
        self.assertEqual(ctx.exception.compound, "He")

    def test_negative_coefficient(self):
        with self.assertRaises(NotBalanceable):
            balance_reaction("H2 = H2O + H2O2")

    def test_solve_does_not_mutate_matrix(self):
        parsed = parse_reaction("Fe + O2 = Fe2O3")
        before = parsed.matrix.cells.copy()
        self.assertEqual(solve_coefficients(parsed.matrix), (4, 3, 2))
        self.assertTrue((parsed.matrix.cells == before).all())


if __name__ == '__main__':
    unittest.main()
