"""
Type-tagged text codec for stored values.

Every value is persisted as a text blob plus a small integer tag naming one of
four scalar kinds. ``encode`` produces the pair, ``decode`` reverses it.
"""

from __future__ import annotations

import math
import re
from enum import IntEnum
from typing import TypeAlias, cast

from .errors import ParseFailureError, UnknownTypeTagError, UnsupportedTypeError


Value: TypeAlias = bool | int | float | str


class ValueType(IntEnum):
    BOOL = 0
    INT = 1
    FLOAT = 2
    STRING = 3


_TRUE_LITERALS = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE_LITERALS = frozenset({"0", "f", "F", "FALSE", "false", "False"})

INT_MIN = -(2**63)
INT_MAX = 2**63 - 1

_INT_PATTERN = re.compile(r"[+-]?[0-9]+")
_FLOAT_PATTERN = re.compile(
    r"[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf|infinity|nan)",
    re.IGNORECASE,
)


def value_type_of(value: object) -> ValueType:
    """Return the tag for ``value`` or raise UnsupportedTypeError."""
    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        return ValueType.BOOL
    if isinstance(value, int):
        return ValueType.INT
    if isinstance(value, float):
        return ValueType.FLOAT
    if isinstance(value, str):
        return ValueType.STRING
    raise UnsupportedTypeError(value)


def to_value_type(type_tag: object) -> ValueType:
    """Return the ValueType named by a stored tag or raise UnknownTypeTagError."""
    if isinstance(type_tag, bool) or not isinstance(type_tag, int):
        raise UnknownTypeTagError(type_tag)
    try:
        return ValueType(type_tag)
    except ValueError:
        raise UnknownTypeTagError(type_tag) from None


def encode(value: object) -> tuple[str, ValueType]:
    """Serialize a scalar to its stored text and type tag.

    Integers must fit in a signed 64-bit range.
    """
    value_type = value_type_of(value)
    if value_type is ValueType.BOOL:
        return ("true" if value else "false"), value_type
    if value_type is ValueType.INT:
        number = int(cast(int, value))
        if not INT_MIN <= number <= INT_MAX:
            raise UnsupportedTypeError(value, "integer outside the signed 64-bit range")
        return str(number), value_type
    if value_type is ValueType.FLOAT:
        return repr(float(cast(float, value))), value_type
    return str(value), value_type


def _parse_bool(text: str) -> bool:
    if text in _TRUE_LITERALS:
        return True
    if text in _FALSE_LITERALS:
        return False
    raise ValueError(f"invalid boolean literal: {text!r}")


def _parse_int(text: str) -> int:
    if _INT_PATTERN.fullmatch(text) is None:
        raise ValueError(f"invalid integer literal: {text!r}")
    # 19 significant digits cover the 64-bit range; longer literals never reach int()
    if len(text.lstrip("+-").lstrip("0")) > 19:
        raise ValueError(f"integer literal out of range: {text!r}")
    result = int(text)
    if not INT_MIN <= result <= INT_MAX:
        raise ValueError(f"integer literal out of range: {text!r}")
    return result


def _parse_float(text: str) -> float:
    if _FLOAT_PATTERN.fullmatch(text) is None:
        raise ValueError(f"invalid float literal: {text!r}")
    result = float(text)
    if math.isinf(result) and "inf" not in text.lower():
        raise ValueError(f"float literal out of range: {text!r}")
    return result


def decode(text: str | bytes, type_tag: object) -> Value:
    """Parse stored text back into a value of the kind named by ``type_tag``.

    ``text`` may be bytes when the row was written as a blob; it must then be
    valid UTF-8.

    Raises:
        UnknownTypeTagError: If ``type_tag`` is not a known ValueType.
        ParseFailureError: If ``text`` does not fit the grammar of the tag.
    """
    value_type = to_value_type(type_tag)

    try:
        value = text.decode("utf-8") if isinstance(text, bytes) else text
        if value_type is ValueType.BOOL:
            return _parse_bool(value)
        if value_type is ValueType.INT:
            return _parse_int(value)
        if value_type is ValueType.FLOAT:
            return _parse_float(value)
    except ValueError as exc:
        raise ParseFailureError(text, int(value_type), exc) from exc
    return value
