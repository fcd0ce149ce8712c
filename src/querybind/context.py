# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""HTTP context capability consumed by the binder.

The binder never parses headers or sockets itself. It talks to an
``HttpContext``, which any web framework can implement with a few lines of
glue. ``AsgiHttpContext`` is the implementation over this package's
``Request`` and ``Response``.

Capability::

    get_header(name) / set_header(name, value)   response headers
    original_url                                 full URL of the request
    referer                                      Referer header or ""
    base_url                                     scheme://host[:port]
    path                                         request path, percent-encoded
    overlay_query_params(bag)                    live params -> bag (replace)
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from .datastructures import QueryParams
from .request import Request
from .response import Response
from .types import Scope

__all__ = ["HttpContext", "AsgiHttpContext"]


class HttpContext(ABC):
    """Abstract HTTP capability used by ``bind`` and ``response_bind``."""

    @abstractmethod
    def get_header(self, name: str) -> str | None:
        """Value of a response header, or None."""

    @abstractmethod
    def set_header(self, name: str, value: str) -> None:
        """Set a response header, replacing any previous value."""

    @property
    @abstractmethod
    def original_url(self) -> str:
        """Full URL of the current request, query string included."""

    @property
    @abstractmethod
    def referer(self) -> str:
        """Referer request header, empty string when absent."""

    @property
    @abstractmethod
    def base_url(self) -> str:
        """``scheme://host[:port]`` of the current request."""

    @property
    @abstractmethod
    def path(self) -> str:
        """Percent-encoded path of the current request."""

    @abstractmethod
    def overlay_query_params(self, bag: QueryParams) -> None:
        """Write the live query parameters into ``bag``, replacing values."""


class AsgiHttpContext(HttpContext):
    """
    ``HttpContext`` over an ASGI request/response pair.

    Example:
        >>> ctx = AsgiHttpContext.from_scope(scope)
        >>> filters = bind(Filters, ctx)
        >>> response_bind(ctx, filters)
        >>> await ctx.response(scope, receive, send)
    """

    __slots__ = ("request", "response")

    def __init__(self, request: Request, response: Response) -> None:
        self.request = request
        self.response = response

    @classmethod
    def from_scope(cls, scope: Scope) -> AsgiHttpContext:
        """Context with a fresh, empty ``Response``."""
        return cls(Request(scope), Response())

    def get_header(self, name: str) -> str | None:
        return self.response.get_header(name)

    def set_header(self, name: str, value: str) -> None:
        self.response.set_header(name, value)

    @property
    def original_url(self) -> str:
        return str(self.request.url)

    @property
    def referer(self) -> str:
        return self.request.referer

    @property
    def base_url(self) -> str:
        return self.request.base_url

    @property
    def path(self) -> str:
        return self.request.raw_full_path

    def overlay_query_params(self, bag: QueryParams) -> None:
        bag.update(self.request.query_params)

    def __repr__(self) -> str:
        return f"AsgiHttpContext({self.request!r})"
