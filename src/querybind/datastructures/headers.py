# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""
Request header lookup.

ASGI provides headers as ``list[tuple[bytes, bytes]]`` with Latin-1 encoding.
The binder reads two of them, ``Referer`` (to seed the query bag) and
``Host`` (fallback for the base URL), so ``Headers`` only answers
case-insensitive "first value of" lookups. Response headers live in
``Response``.

Example::

    from querybind.datastructures import headers_from_scope

    scope = {"headers": [(b"Referer", b"https://example.com/list?page=2")]}
    headers = headers_from_scope(scope)
    headers.get("referer")   # "https://example.com/list?page=2"
"""

from collections.abc import Mapping
from typing import Any

__all__ = ["Headers", "headers_from_scope"]


class Headers:
    """
    First value of each request header, keyed by lowercase name.

    Example:
        >>> headers = Headers([(b"Host", b"shop.example"), (b"host", b"other")])
        >>> headers.get("HOST")
        'shop.example'
    """

    __slots__ = ("_first",)

    def __init__(self, raw_headers: list[tuple[bytes, bytes]]) -> None:
        self._first: dict[str, str] = {}
        for name, value in raw_headers:
            self._first.setdefault(name.decode("latin-1").lower(), value.decode("latin-1"))

    def get(self, name: str, default: str | None = None) -> str | None:
        return self._first.get(name.lower(), default)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._first

    def __repr__(self) -> str:
        return f"Headers({self._first!r})"


def headers_from_scope(scope: Mapping[str, Any]) -> Headers:
    """Headers of an ASGI scope, empty if the scope has none."""
    return Headers(scope.get("headers", []))
