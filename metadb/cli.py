"""CLI interface for reading and writing metadata entries."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from enum import Enum
from typing import Optional

import typer

from metadb.codec import ValueType, decode, encode
from metadb.config import MetaDBConfig, load_config
from metadb.database import connect
from metadb.errors import MetaDBError
from metadb.store import MetaStore

logger = logging.getLogger(__name__)

app = typer.Typer(help="metadb typed key-value metadata CLI")


class TypeChoice(str, Enum):
    BOOL = "bool"
    INT = "int"
    FLOAT = "float"
    STRING = "string"

    def value_type(self) -> ValueType:
        return {
            TypeChoice.BOOL: ValueType.BOOL,
            TypeChoice.INT: ValueType.INT,
            TypeChoice.FLOAT: ValueType.FLOAT,
            TypeChoice.STRING: ValueType.STRING,
        }[self]


def _fail(message: str) -> typer.Exit:
    logger.warning(message)
    typer.secho(f"❌ {message}", fg=typer.colors.RED, err=True)
    return typer.Exit(1)


@contextmanager
def _open_store(ctx: typer.Context) -> Iterator[MetaStore]:
    config: MetaDBConfig = ctx.obj
    connection = connect(config.db_path)
    try:
        yield MetaStore(connection)
    finally:
        connection.close()


@app.callback()
def main(
    ctx: typer.Context,
    db: Optional[str] = typer.Option(
        None, "--db", envvar="METADB_DB_PATH", help="SQLite database file"
    ),
    config_path: Optional[str] = typer.Option(None, "--config", help="Path to YAML config"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Typed key-value metadata stored in a single SQL table."""
    try:
        config = load_config(config_path) if config_path else MetaDBConfig()
    except FileNotFoundError as e:
        raise _fail(f"Config file not found: {e}")
    except ValueError as e:
        raise _fail(f"Invalid config: {e}")

    if db:
        config = config.model_copy(update={"db_path": db})

    logging.basicConfig(level=logging.DEBUG if verbose else config.log_level)
    ctx.obj = config


@app.command()
def get(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Entry name"),
    with_type: bool = typer.Option(False, "--with-type", help="Also print the stored type"),
) -> None:
    """Print the value stored under NAME."""
    try:
        with _open_store(ctx) as store:
            value = store.get(name)
    except MetaDBError as e:
        raise _fail(str(e))

    text, value_type = encode(value)
    if with_type:
        typer.echo(f"{text}\t{value_type.name.lower()}")
    else:
        typer.echo(text)


@app.command("set")
def set_entry(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Entry name"),
    value: str = typer.Argument(..., help="Value, parsed according to --type"),
    value_type: TypeChoice = typer.Option(
        TypeChoice.STRING, "--type", case_sensitive=False, help="Type of VALUE"
    ),
    force: bool = typer.Option(False, "--force", help="Allow changing the stored type"),
) -> None:
    """Store VALUE under NAME."""
    try:
        parsed = decode(value, value_type.value_type())
    except MetaDBError as e:
        raise _fail(str(e))

    try:
        with _open_store(ctx) as store:
            if force:
                store.force_set(name, parsed)
            else:
                store.set(name, parsed)
    except MetaDBError as e:
        raise _fail(str(e))

    typer.secho(f"✅ {name} = {value} ({value_type.value})", fg=typer.colors.GREEN)


@app.command()
def delete(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Entry name"),
) -> None:
    """Remove the entry NAME."""
    try:
        with _open_store(ctx) as store:
            store.delete(name)
    except MetaDBError as e:
        raise _fail(str(e))

    typer.secho(f"✅ Deleted {name}", fg=typer.colors.GREEN)


@app.command()
def exists(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Entry name"),
) -> None:
    """Exit with status 0 if NAME exists, 1 otherwise."""
    try:
        with _open_store(ctx) as store:
            found = store.exists(name)
    except MetaDBError as e:
        raise _fail(str(e))

    typer.echo("true" if found else "false")
    if not found:
        raise typer.Exit(1)
