"""Command-line entrypoints for chembalance."""

from __future__ import annotations

import json
import logging
import sqlite3
from pathlib import Path
from typing import Annotated, Any, Dict, Optional

import typer

from chembalance.balancer import balance_reaction
from chembalance.errors import BalanceError
from chembalance.periodic import ELEMENTS
from chembalance.persistence import sqlite_store

app = typer.Typer(add_completion=False)

DATABASE_ENVVAR = "CHEMBALANCE_DATABASE_PATH"

DatabaseOption = Annotated[
    Optional[Path],
    typer.Option(
        "--database",
        envvar=DATABASE_ENVVAR,
        help="SQLite file with the atom table and balance history.",
    ),
]


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")] = False,
) -> None:
    """Balance chemical equations with exact rational arithmetic."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )


def _open_database(database: Path) -> sqlite3.Connection:
    connection = sqlite_store.connect(database)
    try:
        sqlite_store.ensure_schema(connection)
        if not sqlite_store.load_atoms(connection):
            sqlite_store.seed_atoms(connection)
    except sqlite3.Error:
        connection.close()
        raise
    return connection


def _balance_payload(
    reaction: str,
    symbols: frozenset[str] | None,
    connection: sqlite3.Connection | None,
) -> Dict[str, Any]:
    try:
        result = balance_reaction(reaction, symbols)
    except BalanceError as exc:
        return {"reaction": reaction, "error": str(exc)}

    if connection is not None:
        sqlite_store.save_balance(connection, reaction, result)
    return {"reaction": reaction, **result.as_dict()}


@app.command()
def balance(
    equation: Annotated[str, typer.Argument(help='Reaction such as "H2 + O2 = H2O".')],
    as_json: Annotated[bool, typer.Option("--json", help="Print a JSON payload.")] = False,
    database: DatabaseOption = None,
) -> None:
    """Balance a single reaction."""
    connection = _open_database(database) if database is not None else None
    try:
        symbols = sqlite_store.load_symbols(connection) if connection is not None else None
        payload = _balance_payload(equation, symbols, connection)
    finally:
        if connection is not None:
            connection.close()

    if as_json:
        if "error" in payload:
            typer.echo(json.dumps({"error": payload["error"]}))
        else:
            typer.echo(json.dumps({"balanced": payload["balanced"]}))
    elif "error" in payload:
        typer.echo(f"Error: {payload['error']}", err=True)
    else:
        typer.echo(payload["balanced"])

    if "error" in payload:
        raise typer.Exit(code=1)


@app.command()
def batch(
    reactions_file: Annotated[
        Path, typer.Argument(help="Text file with one reaction per line.")
    ],
    output: Annotated[
        Optional[Path], typer.Option(help="Path to save output JSON.")
    ] = None,
    database: DatabaseOption = None,
) -> None:
    """Balance every reaction in a file and emit a JSON list."""
    with open(reactions_file, "r", encoding="utf-8") as f:
        reactions = [
            line.strip() for line in f if line.strip() and not line.lstrip().startswith("#")
        ]

    connection = _open_database(database) if database is not None else None
    try:
        symbols = sqlite_store.load_symbols(connection) if connection is not None else None
        results = [_balance_payload(reaction, symbols, connection) for reaction in reactions]
    finally:
        if connection is not None:
            connection.close()

    json_output = json.dumps(results, indent=2)
    typer.echo(json_output)

    if output:
        with open(output, "w", encoding="utf-8") as f:
            f.write(json_output)


@app.command()
def atoms(database: DatabaseOption = None) -> None:
    """List the element symbols accepted by the parser."""
    if database is None:
        elements = list(ELEMENTS)
    else:
        connection = _open_database(database)
        try:
            elements = sqlite_store.load_atoms(connection)
        finally:
            connection.close()

    payload = {"atoms": [{"symbol": symbol, "number": number} for symbol, number in elements]}
    typer.echo(json.dumps(payload, indent=2))


@app.command("init-db")
def init_db(
    database: Annotated[Path, typer.Argument(help="SQLite file to create or update.")],
) -> None:
    """Create the schema and seed the atom table."""
    connection = sqlite_store.connect(database)
    try:
        sqlite_store.ensure_schema(connection)
        inserted = sqlite_store.seed_atoms(connection)
    finally:
        connection.close()
    typer.echo(f"Seeded {inserted} atoms into {database}")


@app.command()
def history(
    database: Annotated[
        Path,
        typer.Option("--database", envvar=DATABASE_ENVVAR, help="SQLite file with balance history."),
    ],
    limit: Annotated[int, typer.Option(help="Number of entries to show.")] = 20,
) -> None:
    """Show recently recorded balances."""
    connection = _open_database(database)
    try:
        entries = sqlite_store.list_balances(connection, limit=limit)
    finally:
        connection.close()
    typer.echo(json.dumps(entries, indent=2))
