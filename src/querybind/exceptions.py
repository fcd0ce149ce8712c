# Copyright 2025 Softwell S.r.l.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Exception classes for querybind.

This module provides typed exceptions for the failures that can happen while
binding query parameters into a dataclass. They are raised synchronously by
``bind()`` and are never retried.

Module Structure
----------------
All binding errors derive from ``QueryBindError``, which itself derives from
``ValueError`` so generic handlers that already map ``ValueError`` to a
400 response keep working:

1. InvalidNumber - text is not a valid integer/unsigned/float
2. InvalidBoolean - text is not one of the accepted boolean spellings
3. UnsupportedKind - field type cannot be coerced from text
4. MalformedURL - referrer or request URL has an invalid query component

HTTPException and HTTPBadRequest are kept for the adapter layer: a bind error
can be turned into a 400 via ``QueryBindError.to_http()``.

Design Decisions
----------------
- No __slots__: exceptions are short-lived.
- ``key`` is None when the error is raised by the coercion engine directly and
  is filled by the binder with the binding key being processed.

Usage Pattern:
    >>> try:
    ...     filters = bind(Filters, ctx)
    ... except QueryBindError as e:
    ...     raise e.to_http()
"""

from __future__ import annotations

__all__ = [
    "QueryBindError",
    "InvalidNumber",
    "InvalidBoolean",
    "UnsupportedKind",
    "MalformedURL",
    "HTTPException",
    "HTTPBadRequest",
]


class HTTPException(Exception):
    """
    HTTP exception with status code and detail.

    Attributes:
        status_code: HTTP status code (expected 4xx or 5xx, not validated)
        detail: Error detail message
        headers: Response headers as list of tuples (supports duplicate names)

    Example:
        >>> raise HTTPException(404, detail="User not found")
    """

    def __init__(
        self,
        status_code: int,
        detail: str = "",
        headers: dict[str, str] | list[tuple[str, str]] | None = None,
    ) -> None:
        self.status_code = status_code
        self.detail = detail
        if headers is None:
            self.headers: list[tuple[str, str]] | None = None
        elif isinstance(headers, dict):
            self.headers = list(headers.items())
        else:
            self.headers = list(headers)
        super().__init__(detail)

    def __repr__(self) -> str:
        """Return detailed string representation."""
        return f"HTTPException(status_code={self.status_code}, detail={self.detail!r})"


class HTTPBadRequest(HTTPException):
    """HTTP 400 Bad Request exception."""

    def __init__(self, detail: str = "Bad request") -> None:
        super().__init__(400, detail=detail)


class QueryBindError(ValueError):
    """
    Base class for all binding errors.

    Attributes:
        key: Binding key of the field being processed, or None.
    """

    def __init__(self, message: str, key: str | None = None) -> None:
        self.message = message
        self.key = key
        super().__init__(message)

    def __str__(self) -> str:
        if self.key is None:
            return self.message
        return f"{self.key}: {self.message}"

    def to_http(self) -> HTTPBadRequest:
        """Convert to a 400 Bad Request exception."""
        return HTTPBadRequest(detail=str(self))


class InvalidNumber(QueryBindError):
    """
    Text is not a valid number for the target kind.

    Attributes:
        text: The rejected text.
        kind: Name of the target kind (e.g. "int", "UInt", "float").
    """

    def __init__(self, text: str, kind: str, key: str | None = None) -> None:
        self.text = text
        self.kind = kind
        super().__init__(f"invalid {kind} value {text!r}", key=key)

    def __repr__(self) -> str:
        return f"InvalidNumber(text={self.text!r}, kind={self.kind!r}, key={self.key!r})"


class InvalidBoolean(QueryBindError):
    """Text is not one of the accepted boolean spellings."""

    def __init__(self, text: str, key: str | None = None) -> None:
        self.text = text
        super().__init__(f"invalid bool value {self.text!r}", key=key)

    def __repr__(self) -> str:
        return f"InvalidBoolean(text={self.text!r}, key={self.key!r})"


class UnsupportedKind(QueryBindError):
    """
    Field kind cannot be coerced from or to text.

    Attributes:
        kind: Readable name of the unsupported kind (e.g. "dict[str, str]").
    """

    def __init__(self, kind: str, key: str | None = None) -> None:
        self.kind = kind
        super().__init__(f"unsupported kind {kind}", key=key)

    def __repr__(self) -> str:
        return f"UnsupportedKind(kind={self.kind!r}, key={self.key!r})"


class MalformedURL(QueryBindError):
    """
    URL or query string could not be parsed.

    Attributes:
        url: The offending URL or query string.
        reason: Short description of the syntax problem.
    """

    def __init__(self, url: str, reason: str) -> None:
        self.url = url
        self.reason = reason
        super().__init__(f"malformed URL {url!r}: {reason}")

    def __repr__(self) -> str:
        return f"MalformedURL(url={self.url!r}, reason={self.reason!r})"
