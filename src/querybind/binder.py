# Copyright 2025 Softwell S.r.l.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     https://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Query string <-> dataclass binding.

This module provides:

- **QueryBinder**: binds query parameters into a dataclass and writes the
  dataclass back as a push URL response header
- **bind / response_bind / push_url**: the same operations on a default
  binder built from environment configuration
- **encode_query**: form-urlencoding that keeps list commas readable

Bind Flow
=========
::

    referer set?  --yes-->  parse referer query   --+
         |                                           |
         no                                          v
         +-------------->  parse request URL query --> bag
                                                       |
                          live query params --replace--+
                                                       |
                     for each tagged field: bag[key] -> parse_value -> kwargs
                                                       |
                                                  cls(**kwargs)

Exactly one URL seeds the bag. A malformed URL raises ``MalformedURL`` before
any field is touched. The first field that fails coercion aborts the bind:
the caller never receives a partially bound instance.

Response Flow
=============
::

    Filters(q="shoes", sizes=[40, 41], page=0)
        -> [("q", "shoes"), ("sizes", "40,41"), ("page", "0")]
        -> "q=shoes&sizes=40,41&page=0"
        -> HX-Push-Url: https://shop.example/items?q=shoes&sizes=40,41&page=0

Pairs follow field declaration order. Empty renderings (empty strings, empty
lists, None) are left out. Fields of unsupported kinds are skipped and logged
at debug level: updating the browser URL must never break the response.

Example::

    @dataclass
    class Filters:
        q: str = query("q", default="")
        sizes: list[int] = query("sizes", default_factory=list)
        page: UInt = query("page", default=UInt(0))

    async def app(scope, receive, send):
        ctx = AsgiHttpContext.from_scope(scope)
        try:
            filters = bind(Filters, ctx)
        except QueryBindError as e:
            ctx.response.status_code = e.to_http().status_code
            ctx.response.set_body(str(e))
        else:
            response_bind(ctx, filters)
            ctx.response.set_body(render(filters), media_type="text/html")
        await ctx.response(scope, receive, send)
"""

from __future__ import annotations

import logging
from typing import Any, TypeVar
from urllib.parse import urlencode

from .coercion import format_value, parse_value
from .config import BinderConfig
from .context import HttpContext
from .datastructures import URL, QueryParams
from .exceptions import QueryBindError, UnsupportedKind
from .fields import schema_for

__all__ = [
    "QueryBinder",
    "bind",
    "response_bind",
    "push_url",
    "encode_query",
    "get_default_binder",
]

T = TypeVar("T")


def encode_query(pairs: list[tuple[str, str]]) -> str:
    """
    Form-urlencode ordered pairs, then turn ``%2C`` back into ``,``.

    Example:
        >>> encode_query([("a", "1"), ("b", "x,y"), ("q", "red shoes")])
        'a=1&b=x,y&q=red+shoes'
    """
    return urlencode(pairs).replace("%2C", ",")


class QueryBinder:
    """
    Binds query parameters to dataclasses and back.

    Attributes:
        config: Resolved ``BinderConfig``.
        logger: Logger named after ``config.logger_name``.
        url_sources: Context attributes tried in order to seed the bag.
            The first non-empty one is parsed, the others are ignored.
    """

    __slots__ = ("config", "logger")

    url_sources: tuple[str, ...] = ("referer", "original_url")

    def __init__(self, config: BinderConfig | None = None) -> None:
        self.config = config or BinderConfig()
        self.logger = logging.getLogger(self.config.logger_name)

    def query_bag(self, ctx: HttpContext) -> QueryParams:
        """
        Merged query parameters for ``ctx``.

        Raises:
            MalformedURL: If the seeding URL cannot be parsed.
        """
        bag = QueryParams()
        for source in self.url_sources:
            url = getattr(ctx, source)
            if url:
                bag = URL(url).query_params()
                self.logger.debug("Seeded query bag from %s: %s", source, url)
                break
        ctx.overlay_query_params(bag)
        return bag

    def bind(self, cls: type[T], ctx: HttpContext) -> T:
        """
        Build an instance of ``cls`` from the query parameters of ``ctx``.

        Absent or empty parameters leave the field at its declared default,
        or at the zero value of its kind when it has none.

        Raises:
            TypeError: If ``cls`` is not a dataclass.
            MalformedURL: If the seeding URL cannot be parsed.
            InvalidNumber, InvalidBoolean, UnsupportedKind: On the first field
                that fails coercion. ``error.key`` is its binding key.
        """
        schema = schema_for(cls)
        bag = self.query_bag(ctx)
        kwargs: dict[str, Any] = schema.untagged_defaults()
        for field in schema.fields:
            text = bag.get(field.key)
            if not text:
                kwargs[field.name] = field.default_value()
                continue
            try:
                kwargs[field.name] = parse_value(field.kind, text)
            except QueryBindError as e:
                e.key = field.key
                self.logger.debug("Bind of %s failed: %s", schema.cls.__name__, e)
                raise
        return schema.cls(**kwargs)  # type: ignore[no-any-return]

    def query_pairs(self, value: Any) -> list[tuple[str, str]]:
        """Ordered (key, text) pairs for the tagged, non-empty fields of ``value``."""
        schema = schema_for(type(value))
        pairs: list[tuple[str, str]] = []
        for field in schema.fields:
            if not field.supported:
                self.logger.debug(
                    "Skipping %s.%s: unsupported kind %s", schema.cls.__name__, field.name, field.kind_name
                )
                continue
            try:
                text = format_value(getattr(value, field.name))
            except UnsupportedKind as e:
                self.logger.debug("Skipping %s.%s: %s", schema.cls.__name__, field.name, e)
                continue
            if text:
                pairs.append((field.key, text))
        return pairs

    def push_url(self, ctx: HttpContext, value: Any, path: str | None = None) -> str:
        """``base_url + path + "?" + query`` for ``value``."""
        resolved_path = ctx.path if path is None else path
        return f"{ctx.base_url}{resolved_path}?{encode_query(self.query_pairs(value))}"

    def response_bind(
        self,
        ctx: HttpContext,
        value: Any,
        *,
        path: str | None = None,
        header: str | None = None,
    ) -> None:
        """
        Write the push URL of ``value`` into the response header.

        Args:
            ctx: HTTP context.
            value: Dataclass instance to serialize.
            path: Path override, defaults to the current request path.
            header: Header override, defaults to ``config.header``.
        """
        url = self.push_url(ctx, value, path=path)
        header_name = header or self.config.header
        ctx.set_header(header_name, url)
        self.logger.debug("%s: %s", header_name, url)

    def __repr__(self) -> str:
        return f"QueryBinder({self.config!r})"


_default_binder: QueryBinder | None = None


def get_default_binder() -> QueryBinder:
    """Binder shared by the module-level functions, created on first use."""
    global _default_binder
    if _default_binder is None:
        _default_binder = QueryBinder()
    return _default_binder


def bind(cls: type[T], ctx: HttpContext) -> T:
    """Bind query parameters of ``ctx`` into a new ``cls`` instance."""
    return get_default_binder().bind(cls, ctx)


def response_bind(
    ctx: HttpContext,
    value: Any,
    *,
    path: str | None = None,
    header: str | None = None,
) -> None:
    """Write the push URL of ``value`` into the response of ``ctx``."""
    get_default_binder().response_bind(ctx, value, path=path, header=header)


def push_url(ctx: HttpContext, value: Any, path: str | None = None) -> str:
    """Push URL of ``value`` without touching the response."""
    return get_default_binder().push_url(ctx, value, path=path)
