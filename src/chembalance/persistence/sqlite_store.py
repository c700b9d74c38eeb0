"""SQLite persistence for the atom table and balance history."""

from __future__ import annotations

import json
import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable

from chembalance.models import BalancedReaction
from chembalance.periodic import ELEMENTS

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS atom (
  number INTEGER PRIMARY KEY,
  symbol TEXT NOT NULL UNIQUE
);
CREATE TABLE IF NOT EXISTS balance (
  id INTEGER PRIMARY KEY,
  reaction TEXT NOT NULL,
  balanced TEXT NOT NULL,
  coefficients JSON,
  created_utc TEXT
);
"""


def connect(database_file: str | Path) -> sqlite3.Connection:
    """Open (and create) a SQLite database file."""
    path = Path(database_file)
    path.parent.mkdir(parents=True, exist_ok=True)
    return sqlite3.connect(path)


def ensure_schema(connection: sqlite3.Connection) -> None:
    """Ensure the atom and balance tables exist."""
    connection.executescript(SCHEMA_SQL)
    connection.commit()


def seed_atoms(
    connection: sqlite3.Connection,
    elements: Iterable[tuple[str, int]] = ELEMENTS,
) -> int:
    """Insert (symbol, number) pairs, skipping ones already present.

    Returns the number of rows inserted.
    """
    before = connection.total_changes
    connection.executemany(
        "INSERT OR IGNORE INTO atom (symbol, number) VALUES (?, ?)",
        list(elements),
    )
    connection.commit()
    return connection.total_changes - before


def load_atoms(connection: sqlite3.Connection) -> list[tuple[str, int]]:
    rows = connection.execute("SELECT symbol, number FROM atom ORDER BY number").fetchall()
    return [(str(symbol), int(number)) for symbol, number in rows]


def load_symbols(connection: sqlite3.Connection) -> frozenset[str]:
    return frozenset(symbol for symbol, _ in load_atoms(connection))


def save_balance(
    connection: sqlite3.Connection,
    reaction: str,
    result: BalancedReaction,
    created_utc: str | None = None,
) -> int:
    """Record a successful balance and return its ID."""
    created_utc = created_utc or _utc_now()
    cursor = connection.execute(
        "INSERT INTO balance (reaction, balanced, coefficients, created_utc) VALUES (?, ?, ?, ?)",
        (reaction, result.render(), json.dumps(list(result.coefficients)), created_utc),
    )
    connection.commit()
    return int(cursor.lastrowid)


def list_balances(connection: sqlite3.Connection, limit: int = 20) -> list[dict[str, object]]:
    """Return the most recent balances, newest first."""
    rows = connection.execute(
        "SELECT id, reaction, balanced, coefficients, created_utc FROM balance"
        " ORDER BY id DESC LIMIT ?",
        (limit,),
    ).fetchall()
    return [
        {
            "id": row_id,
            "reaction": reaction,
            "balanced": balanced,
            "coefficients": json.loads(coefficients),
            "created_utc": created_utc,
        }
        for row_id, reaction, balanced, coefficients, created_utc in rows
    ]


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()
