"""
metadb

Typed key-value metadata stored in a single relational table.

This package provides:
- A type-tagged text codec for bool, int, float and str values
- MetaStore, a strict/forced read-modify-write store over one DB-API connection
- A typer CLI for inspecting and editing the table
"""

from .codec import ValueType, decode, encode
from .errors import (
    ConnectivityError,
    MetaDBError,
    MustError,
    NoSuchEntryError,
    ParseFailureError,
    TypeMismatchError,
    UnknownTypeTagError,
    UnsupportedTypeError,
)
from .store import Entry, MetaStore, must

__version__ = "0.1.0"

__all__ = [
    "ConnectivityError",
    "Entry",
    "MetaDBError",
    "MetaStore",
    "MustError",
    "NoSuchEntryError",
    "ParseFailureError",
    "TypeMismatchError",
    "UnknownTypeTagError",
    "UnsupportedTypeError",
    "ValueType",
    "decode",
    "encode",
    "must",
]
