# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""
Text to typed value coercion, and back.

Purpose
=======
Query strings carry text only. This module converts one textual value into a
typed scalar or an ordered list of scalars, and renders typed values back to
text. It knows nothing about HTTP or dataclasses: the binder calls it once per
field.

Supported kinds::

    +-----------------+-----------------------------+------------------------+
    | Kind            | Accepted text               | Rendered as            |
    +-----------------+-----------------------------+------------------------+
    | str             | anything                    | identity               |
    | int             | [+-]digits, int64 range     | decimal                |
    | UInt            | digits, uint64 range        | decimal                |
    | bool            | 1 t T TRUE true True        | "true" / "false"       |
    |                 | 0 f F FALSE false False     |                        |
    | float           | decimal, inf, nan           | shortest repr          |
    | list[K]         | comma separated K values    | comma joined           |
    | K | None        | as K                        | "" for None            |
    +-----------------+-----------------------------+------------------------+

Anything else (dataclasses, dict, nested lists, ...) raises
``UnsupportedKind``.

List encoding::

    "1,2,3"  --split(",")-->  ["1", "2", "3"]  --parse int-->  [1, 2, 3]

Commas inside list elements cannot be escaped. ``["a,b"]`` renders as
``"a,b"`` and parses back as ``["a", "b"]``.

Definition::

    UInt = NewType("UInt", int)

    def parse_value(kind: Any, text: str) -> Any
    def parse_scalar(kind: Any, text: str) -> Any
    def parse_list(elem_kind: Any, text: str) -> list[Any]
    def format_value(value: Any) -> str
    def zero_value(kind: Any) -> Any
    def is_supported(kind: Any) -> bool
    def kind_name(kind: Any) -> str

Example::

    from querybind.coercion import UInt, format_value, parse_value

    parse_value(int, "42")          # 42
    parse_value(list[int], "1,2")   # [1, 2]
    parse_value(UInt, "-1")         # raises InvalidNumber
    format_value([1.5, 2.0])        # "1.5,2"
"""

from __future__ import annotations

import re
import types
from typing import Any, NewType, Union, get_args, get_origin

from .exceptions import InvalidBoolean, InvalidNumber, UnsupportedKind

__all__ = [
    "UInt",
    "LIST_SEPARATOR",
    "SCALAR_KINDS",
    "parse_value",
    "parse_scalar",
    "parse_list",
    "format_value",
    "zero_value",
    "is_supported",
    "kind_name",
    "unwrap_optional",
]

UInt = NewType("UInt", int)
"""Unsigned integer marker. Annotate a field with ``UInt`` to reject negatives."""

LIST_SEPARATOR = ","

SCALAR_KINDS: tuple[Any, ...] = (str, int, UInt, bool, float)

INT_MIN = -(2**63)
INT_MAX = 2**63 - 1
UINT_MAX = 2**64 - 1

_INT_RE = re.compile(r"[+-]?[0-9]+")
_UINT_RE = re.compile(r"[0-9]+")

_TRUE = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE = frozenset({"0", "f", "F", "FALSE", "false", "False"})


def kind_name(kind: Any) -> str:
    """Readable name of a kind for diagnostics."""
    if kind is UInt:
        return "UInt"
    if isinstance(kind, str):
        # unresolved forward reference
        return kind
    if get_origin(kind) is not None:
        return repr(kind).replace("typing.", "")
    name = getattr(kind, "__name__", None)
    return name if name else repr(kind)


def unwrap_optional(kind: Any) -> tuple[Any, bool]:
    """
    Strip ``None`` from an optional kind.

    Returns:
        ``(inner_kind, True)`` for ``K | None`` / ``Optional[K]``, else
        ``(kind, False)``. Unions of several non-None kinds are returned
        untouched so they end up unsupported.
    """
    origin = get_origin(kind)
    if origin is Union or origin is types.UnionType:
        args = [arg for arg in get_args(kind) if arg is not type(None)]
        if len(args) == 1 and len(args) < len(get_args(kind)):
            return args[0], True
    return kind, False


def _list_element(kind: Any) -> Any | None:
    """Element kind of a list kind, or None if ``kind`` is not a list."""
    if kind is list:
        return str
    if get_origin(kind) is list:
        args = get_args(kind)
        return args[0] if args else str
    return None


def is_supported(kind: Any) -> bool:
    """True if values of ``kind`` can be parsed from text."""
    kind, _ = unwrap_optional(kind)
    elem = _list_element(kind)
    if elem is not None:
        return elem in SCALAR_KINDS
    return kind in SCALAR_KINDS


def zero_value(kind: Any) -> Any:
    """Value a field keeps when its parameter is absent."""
    kind, optional = unwrap_optional(kind)
    if optional:
        return None
    if _list_element(kind) is not None:
        return []
    if kind is str:
        return ""
    if kind is bool:
        return False
    if kind is float:
        return 0.0
    if kind is int or kind is UInt:
        return 0
    raise UnsupportedKind(kind_name(kind))


def _parse_int(text: str) -> int:
    if not _INT_RE.fullmatch(text):
        raise InvalidNumber(text, "int")
    value = int(text)
    if not INT_MIN <= value <= INT_MAX:
        raise InvalidNumber(text, "int")
    return value


def _parse_uint(text: str) -> int:
    if not _UINT_RE.fullmatch(text):
        raise InvalidNumber(text, "UInt")
    value = int(text)
    if value > UINT_MAX:
        raise InvalidNumber(text, "UInt")
    return value


def _parse_bool(text: str) -> bool:
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise InvalidBoolean(text)


def _parse_float(text: str) -> float:
    # float() tolerates surrounding spaces, "1_000" and non-ASCII digits
    if not text or not text.isascii() or "_" in text or text != text.strip():
        raise InvalidNumber(text, "float")
    try:
        return float(text)
    except ValueError as e:
        raise InvalidNumber(text, "float") from e


_SCALAR_PARSERS: dict[Any, Any] = {
    str: lambda text: text,
    int: _parse_int,
    UInt: _parse_uint,
    bool: _parse_bool,
    float: _parse_float,
}


def parse_scalar(kind: Any, text: str) -> Any:
    """
    Parse one scalar value.

    Args:
        kind: One of ``SCALAR_KINDS``.
        text: Raw text from the query string.

    Raises:
        InvalidNumber: Bad int/UInt/float text.
        InvalidBoolean: Bad bool text.
        UnsupportedKind: ``kind`` is not a scalar kind.
    """
    parser = _SCALAR_PARSERS.get(kind)
    if parser is None:
        raise UnsupportedKind(kind_name(kind))
    return parser(text)


def parse_list(elem_kind: Any, text: str) -> list[Any]:
    """
    Split ``text`` on commas and parse each segment as ``elem_kind``.

    Fails on the first bad segment with that segment's error. An empty
    ``text`` gives an empty list.
    """
    if elem_kind not in SCALAR_KINDS:
        raise UnsupportedKind(kind_name(elem_kind))
    if text == "":
        return []
    return [parse_scalar(elem_kind, segment) for segment in text.split(LIST_SEPARATOR)]


def parse_value(kind: Any, text: str) -> Any:
    """
    Parse ``text`` into a value of ``kind`` (scalar, list or optional).

    Example:
        >>> parse_value(list[float], "1.5,2")
        [1.5, 2.0]
        >>> parse_value(bool | None, "t")
        True
    """
    kind, _ = unwrap_optional(kind)
    elem = _list_element(kind)
    if elem is not None:
        return parse_list(elem, text)
    return parse_scalar(kind, text)


def _format_float(value: float) -> str:
    text = repr(value)
    if text.endswith(".0"):
        return text[:-2]
    return text


def format_value(value: Any) -> str:
    """
    Render a value as query text.

    Raises:
        UnsupportedKind: ``value`` (or a list element) has no text form.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return _format_float(value)
    if isinstance(value, str):
        return value
    if isinstance(value, list):
        parts = []
        for item in value:
            if isinstance(item, (list, type(None))):
                raise UnsupportedKind(f"list[{kind_name(type(item))}]")
            parts.append(format_value(item))
        return LIST_SEPARATOR.join(parts)
    raise UnsupportedKind(kind_name(type(value)))
