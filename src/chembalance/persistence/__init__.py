"""Persistence helpers for chembalance."""

from chembalance.persistence.sqlite_store import (
    connect,
    ensure_schema,
    list_balances,
    load_atoms,
    load_symbols,
    save_balance,
    seed_atoms,
)

__all__ = [
    "connect",
    "ensure_schema",
    "list_balances",
    "load_atoms",
    "load_symbols",
    "save_balance",
    "seed_atoms",
]
