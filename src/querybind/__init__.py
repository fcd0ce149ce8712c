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

"""querybind - Query string binding for partial-page-update web UIs.

Main components:
    query: Declare a dataclass field bound to a query parameter
    bind: Query parameters -> dataclass instance
    response_bind: Dataclass instance -> HX-Push-Url response header
    QueryBinder: Configurable binder behind bind/response_bind

Coercion:
    parse_value, format_value: text <-> str/int/UInt/bool/float/list
    UInt: unsigned integer marker type

HTTP adapter:
    HttpContext: capability consumed by the binder
    AsgiHttpContext: HttpContext over an ASGI scope
    Request, Response: ASGI request view and response builder

Usage:
    from dataclasses import dataclass
    from querybind import AsgiHttpContext, bind, query, response_bind

    @dataclass
    class Filters:
        q: str = query("q", default="")
        tags: list[str] = query("tags", default_factory=list)

    ctx = AsgiHttpContext.from_scope(scope)
    filters = bind(Filters, ctx)
    response_bind(ctx, filters)
"""

__version__ = "0.1.0"

from .binder import (
    QueryBinder,
    bind,
    encode_query,
    get_default_binder,
    push_url,
    response_bind,
)
from .coercion import UInt, format_value, parse_value
from .config import PUSH_URL_HEADER, BinderConfig
from .context import AsgiHttpContext, HttpContext
from .datastructures import URL, Headers, QueryParams, parse_query
from .exceptions import (
    HTTPBadRequest,
    HTTPException,
    InvalidBoolean,
    InvalidNumber,
    MalformedURL,
    QueryBindError,
    UnsupportedKind,
)
from .fields import TAG, QueryField, Schema, query, schema_for
from .request import Request
from .response import Response

__all__ = [
    # Binding
    "QueryBinder",
    "bind",
    "response_bind",
    "push_url",
    "encode_query",
    "get_default_binder",
    # Fields
    "TAG",
    "query",
    "QueryField",
    "Schema",
    "schema_for",
    # Coercion
    "UInt",
    "parse_value",
    "format_value",
    # Configuration
    "BinderConfig",
    "PUSH_URL_HEADER",
    # HTTP adapter
    "HttpContext",
    "AsgiHttpContext",
    "Request",
    "Response",
    # Data structures
    "URL",
    "Headers",
    "QueryParams",
    "parse_query",
    # Exceptions
    "QueryBindError",
    "InvalidNumber",
    "InvalidBoolean",
    "UnsupportedKind",
    "MalformedURL",
    "HTTPException",
    "HTTPBadRequest",
]
