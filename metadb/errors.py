"""Exception types raised by the metadata store."""

from __future__ import annotations


class MetaDBError(Exception):
    """Base class for every error raised by metadb."""


class NoSuchEntryError(MetaDBError, KeyError):
    def __init__(self, name: str) -> None:
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"metadb: no entry for '{self.name}'"


class UnsupportedTypeError(MetaDBError, TypeError):
    def __init__(self, value: object, reason: str | None = None) -> None:
        super().__init__(value)
        self.value = value
        self.reason = reason

    def __str__(self) -> str:
        if self.reason:
            return f"metadb: value of type {type(self.value).__name__} is not allowed: {self.reason}"
        return (
            f"metadb: value of type {type(self.value).__name__} is not allowed "
            "(allowed: bool, int, float, str)"
        )


class ParseFailureError(MetaDBError, ValueError):
    """Stored text does not match the grammar of its type tag."""

    def __init__(self, text: str | bytes, type_tag: int, cause: Exception) -> None:
        super().__init__(text, type_tag, cause)
        self.text = text
        self.type_tag = type_tag
        self.cause = cause

    def __str__(self) -> str:
        return f"metadb: failed to parse value {self.text!r} for type {self.type_tag}: {self.cause}"


class UnknownTypeTagError(MetaDBError, ValueError):
    def __init__(self, type_tag: object) -> None:
        super().__init__(type_tag)
        self.type_tag = type_tag

    def __str__(self) -> str:
        return f"metadb: unrecognized value type {self.type_tag!r}"


class TypeMismatchError(MetaDBError):
    """A strict set tried to change the stored type of an entry."""

    def __init__(self, name: str, stored: object, requested: int) -> None:
        super().__init__(name, stored, requested)
        self.name = name
        self.stored = stored
        self.requested = requested

    def __str__(self) -> str:
        return (
            f"metadb: cannot change value for '{self.name}' to one of a different type "
            f"(stored {self.stored!r}, got {self.requested})"
        )


class ConnectivityError(MetaDBError):
    """The backing database could not be prepared for use."""


class MustError(RuntimeError):
    """Raised by the fail-fast ``must`` wrappers in place of a MetaDBError."""
