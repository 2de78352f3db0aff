"""
Typed key-value store over the metadata table.

A ``MetaStore`` wraps one caller-owned DB-API connection (qmark paramstyle,
``sqlite3`` being the reference driver). It never opens or closes the
connection itself and keeps no module-level state, so any number of stores
can live side by side, each bound to its own connection.

Writes are read-compare-write sequences without a surrounding transaction:
two callers writing the same name concurrently can lose an update or see a
spurious ``TypeMismatchError``. Callers that need stronger guarantees must
serialize writes to a given name themselves.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any, ParamSpec, TypeVar

from .codec import Value, ValueType, decode, encode, to_value_type
from .database import TABLE_NAME, initialize_schema
from .errors import MustError, NoSuchEntryError, TypeMismatchError, UnknownTypeTagError


P = ParamSpec("P")
R = TypeVar("R")


@dataclass(frozen=True)
class Entry:
    """One row as stored; value and tag are kept raw until decoded."""

    name: str
    value: str | bytes
    type_tag: object

    @classmethod
    def from_row(cls, row: Sequence[object]) -> "Entry":
        return cls(
            name=_require_str(row[0], "Name"),
            value=_require_blob(row[1], "Value"),
            type_tag=row[2],
        )

    def decode(self) -> Value:
        return decode(self.value, self.type_tag)


def _require_str(value: object, field: str) -> str:
    if isinstance(value, str):
        return value
    if value is None:
        raise ValueError(f"{field} is required")
    return str(value)


def _require_blob(value: object, field: str) -> str | bytes:
    if isinstance(value, (str, bytes)):
        return value
    if value is None:
        raise ValueError(f"{field} is required")
    return str(value)


def must(operation: Callable[P, R], *args: P.args, **kwargs: P.kwargs) -> R:
    """Call ``operation`` and turn any exception it raises into a MustError."""
    try:
        return operation(*args, **kwargs)
    except Exception as exc:
        raise MustError(str(exc)) from exc


class MetaStore:
    def __init__(self, connection: Any) -> None:
        if connection is None:
            raise ValueError("MetaStore: got None database connection")
        self.connection: Any = connection
        initialize_schema(connection)

    def _execute(self, sql: str, params: tuple[object, ...]) -> int:
        cursor = self.connection.cursor()
        try:
            _ = cursor.execute(sql, params)
            rowcount: int = cursor.rowcount
        finally:
            cursor.close()
        self.connection.commit()
        return rowcount

    def _fetch_one(self, sql: str, name: str) -> Sequence[object] | None:
        cursor = self.connection.cursor()
        try:
            _ = cursor.execute(sql, (name,))
            return cursor.fetchone()
        finally:
            cursor.close()

    def _fetch_entry(self, name: str) -> Entry | None:
        row = self._fetch_one(
            f"SELECT Name, Value, ValueType FROM {TABLE_NAME} WHERE Name = ?", name
        )
        if row is None:
            return None
        return Entry.from_row(row)

    def _fetch_type_row(self, name: str) -> Sequence[object] | None:
        return self._fetch_one(f"SELECT ValueType FROM {TABLE_NAME} WHERE Name = ?", name)

    def exists(self, name: str) -> bool:
        """Return True if an entry named ``name`` exists."""
        row = self._fetch_one(f"SELECT Name FROM {TABLE_NAME} WHERE Name = ?", name)
        return row is not None

    def get(self, name: str) -> Value:
        """Return the decoded value stored under ``name``.

        Raises:
            NoSuchEntryError: If there is no such entry.
            ParseFailureError: If the stored text does not parse for its type.
            UnknownTypeTagError: If the stored type tag is not recognised.
        """
        entry = self._fetch_entry(name)
        if entry is None:
            raise NoSuchEntryError(name)
        return entry.decode()

    def type_of(self, name: str) -> ValueType:
        """Return the stored type of ``name``."""
        row = self._fetch_type_row(name)
        if row is None:
            raise NoSuchEntryError(name)
        return to_value_type(row[0])

    def _set(self, name: str, value: object, force: bool) -> None:
        text, value_type = encode(value)
        row = self._fetch_type_row(name)
        if row is None:
            _ = self._execute(
                f"INSERT INTO {TABLE_NAME} (Name, Value, ValueType) VALUES (?, ?, ?)",
                (name, text, int(value_type)),
            )
            return

        if not force:
            try:
                current_type = to_value_type(row[0])
            except UnknownTypeTagError:
                raise TypeMismatchError(name, row[0], int(value_type)) from None
            if current_type is not value_type:
                raise TypeMismatchError(name, current_type, int(value_type))

        _ = self._execute(
            f"UPDATE {TABLE_NAME} SET Value = ?, ValueType = ? WHERE Name = ?",
            (text, int(value_type), name),
        )

    def set(self, name: str, value: object) -> None:
        """Insert or update an entry without allowing its type to change.

        Raises:
            UnsupportedTypeError: If ``value`` is not a bool, int, float or str.
            TypeMismatchError: If the entry exists with a different type. The
                stored entry is left as it was.
        """
        self._set(name, value, force=False)

    def force_set(self, name: str, value: object) -> None:
        """Insert or update an entry, replacing its type if it differs."""
        self._set(name, value, force=True)

    def delete(self, name: str) -> None:
        """Remove the entry named ``name``.

        Raises NoSuchEntryError when nothing was deleted. Drivers that report a
        rowcount of -1 cannot tell how many rows went away; the delete is then
        treated as successful even if the entry never existed.
        """
        affected = self._execute(f"DELETE FROM {TABLE_NAME} WHERE Name = ?", (name,))
        if affected == 0:
            raise NoSuchEntryError(name)

    def must_get(self, name: str) -> Value:
        return must(self.get, name)

    def must_set(self, name: str, value: object) -> None:
        must(self.set, name, value)

    def must_force_set(self, name: str, value: object) -> None:
        must(self.force_set, name, value)

    def must_delete(self, name: str) -> None:
        must(self.delete, name)
