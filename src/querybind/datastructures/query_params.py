# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""
Ordered query parameter bag with multi-value support.

Purpose
=======
Query parameters are case-sensitive and may repeat. ``QueryParams`` keeps them
as an insertion-ordered ``dict[str, list[str]]``. Unlike a read-only request
view, the bag is mutable: the binder seeds it from one URL and then overlays
the live request parameters with ``update()``, which REPLACES the values of
keys present in both (it never appends).

This module provides:
- ``QueryParams``: the bag
- ``parse_query()``: strict parser that rejects malformed query strings
- ``query_params_from_scope()``: lenient bag from an ASGI scope

Parsing Schema::

    "name=john&tags=python&tags=web&empty="
                        |
            parse_query (strict) / parse_qsl (lenient)
                        |
    {"name": ["john"], "tags": ["python", "web"], "empty": [""]}

Overlay Schema::

    seed:  {"x": ["1"], "y": ["a"]}
    live:  {"x": ["2"]}
    seed.update(live)  ->  {"x": ["2"], "y": ["a"]}

Strict vs lenient::

    +----------------------+-------------------+------------------------+
    | Input                | parse_query       | QueryParams(str/bytes) |
    +----------------------+-------------------+------------------------+
    | "a=%zz"              | MalformedURL      | {"a": ["%zz"]}         |
    | "a=1;b=2"            | MalformedURL      | {"a": ["1;b=2"]}       |
    | "flag"               | {"flag": [""]}    | {"flag": [""]}         |
    +----------------------+-------------------+------------------------+

Example::

    from querybind.datastructures import QueryParams, parse_query

    bag = parse_query("x=1&y=a")
    bag.update(QueryParams("x=2"))
    bag.get("x")        # "2"
    bag.getlist("y")    # ["a"]
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from typing import Any, Iterator, Union
from urllib.parse import parse_qsl

from ..exceptions import MalformedURL

__all__ = ["QueryParams", "parse_query", "query_params_from_scope"]

_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")

QueryInput = Union[bytes, str, Mapping[str, Any], Iterable[tuple[str, str]], None]


class QueryParams:
    """
    Insertion-ordered multi-map of query parameter name to values.

    Example:
        >>> params = QueryParams("name=john&tags=python&tags=web")
        >>> params.get("name")
        'john'
        >>> params.getlist("tags")
        ['python', 'web']
        >>> params.set("name", "jane")
        >>> params.multi_items()
        [('name', 'jane'), ('tags', 'python'), ('tags', 'web')]
    """

    __slots__ = ("_params",)

    def __init__(self, source: QueryInput = None) -> None:
        """
        Initialize the bag.

        Args:
            source: A query string (bytes decoded as Latin-1, parsed leniently),
                a mapping of name to value or list of values, an iterable of
                (name, value) pairs, or None for an empty bag.
        """
        self._params: dict[str, list[str]] = {}
        if source is None:
            return
        if isinstance(source, bytes):
            source = source.decode("latin-1")
        if isinstance(source, str):
            pairs: Iterable[tuple[str, str]] = parse_qsl(source, keep_blank_values=True)
        elif isinstance(source, Mapping):
            pairs = _mapping_pairs(source)
        else:
            pairs = source
        for key, value in pairs:
            self.add(key, value)

    def get(self, key: str, default: str | None = None) -> str | None:
        """First value for ``key``, or ``default``."""
        values = self._params.get(key)
        if values:
            return values[0]
        return default

    def getlist(self, key: str) -> list[str]:
        """All values for ``key`` (a copy), empty list if absent."""
        return list(self._params.get(key, []))

    def add(self, key: str, value: str) -> None:
        """Append a value, keeping previous ones."""
        self._params.setdefault(key, []).append(value)

    def set(self, key: str, value: str) -> None:
        """Replace all values of ``key`` with a single value."""
        self._params[key] = [value]

    def setlist(self, key: str, values: Iterable[str]) -> None:
        """Replace all values of ``key``. An empty list removes the key."""
        values = list(values)
        if values:
            self._params[key] = values
        else:
            self._params.pop(key, None)

    def update(self, other: QueryParams) -> None:
        """
        Overlay ``other`` onto this bag.

        For every key of ``other`` the values here are replaced, not extended.
        Keys only present here are left untouched.
        """
        for key in other:
            self._params[key] = other.getlist(key)

    def keys(self) -> list[str]:
        return list(self._params.keys())

    def items(self) -> list[tuple[str, str]]:
        """(name, first value) pairs."""
        return [(k, v[0]) for k, v in self._params.items() if v]

    def multi_items(self) -> list[tuple[str, str]]:
        """All (name, value) pairs, including repeated names."""
        return [(key, value) for key, values in self._params.items() for value in values]

    def copy(self) -> QueryParams:
        return QueryParams(self.multi_items())

    def __getitem__(self, key: str) -> str:
        value = self.get(key)
        if value is None:
            raise KeyError(key)
        return value

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, str):
            return False
        return key in self._params

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._params))

    def __len__(self) -> int:
        return len(self._params)

    def __bool__(self) -> bool:
        return bool(self._params)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, QueryParams):
            return self._params == other._params
        return NotImplemented

    def __repr__(self) -> str:
        return f"QueryParams({self._params!r})"


def _mapping_pairs(source: Mapping[str, Any]) -> list[tuple[str, str]]:
    pairs: list[tuple[str, str]] = []
    for key, value in source.items():
        if isinstance(value, (list, tuple)):
            pairs.extend((key, v) for v in value)
        else:
            pairs.append((key, value))
    return pairs


def parse_query(query_string: bytes | str) -> QueryParams:
    """
    Strictly parse a query string into a bag.

    ``+`` decodes to a space and percent escapes are decoded. Pairs without
    ``=`` become empty values.

    Raises:
        MalformedURL: On an invalid percent escape or a ``;`` separator.
    """
    if isinstance(query_string, bytes):
        query_string = query_string.decode("latin-1")
    if ";" in query_string:
        raise MalformedURL(query_string, "invalid semicolon separator in query")
    bad = _BAD_ESCAPE.search(query_string)
    if bad is not None:
        escape = query_string[bad.start() : bad.start() + 3]
        raise MalformedURL(query_string, f"invalid URL escape {escape!r}")
    return QueryParams(parse_qsl(query_string, keep_blank_values=True))


def query_params_from_scope(scope: Mapping[str, Any]) -> QueryParams:
    """
    Lenient bag from the ``query_string`` of an ASGI scope.

    Example:
        >>> scope = {"type": "http", "query_string": b"page=1&limit=10"}
        >>> query_params_from_scope(scope).get("page")
        '1'
    """
    return QueryParams(scope.get("query_string", b""))
