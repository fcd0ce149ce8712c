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
Read-only view of an ASGI HTTP request.

The binder only needs the request line and a few headers, so ``Request``
wraps the scope without touching ``receive``: the body is never read.

Every property is computed lazily from the scope::

    scope["scheme"], scope["server"]      ->  base_url
    scope["root_path"] + scope["path"]    ->  full_path (decoded)
    scope["raw_path"] or quote(full_path) ->  raw_full_path (as sent)
    + scope["query_string"]               ->  url
    scope["headers"]                      ->  headers, referer
    scope["query_string"]                 ->  query_params (lenient)

Example:
    request = Request(scope)
    request.url          # URL("http://localhost:8000/items?page=2")
    request.referer      # "" when the client sent no Referer
"""

from __future__ import annotations

from urllib.parse import quote

from .datastructures import (
    URL,
    Headers,
    QueryParams,
    headers_from_scope,
    query_params_from_scope,
)
from .types import Scope

__all__ = ["Request"]


class Request:
    """HTTP request adapter wrapping an ASGI scope."""

    __slots__ = ("_scope", "_headers", "_query", "_url")

    def __init__(self, scope: Scope) -> None:
        if scope.get("type") != "http":
            raise ValueError(f"Request expects an http scope, got {scope.get('type')!r}")
        self._scope = scope
        self._headers: Headers | None = None
        self._query: QueryParams | None = None
        self._url: URL | None = None

    @property
    def scope(self) -> Scope:
        """Raw ASGI scope dict."""
        return self._scope

    @property
    def method(self) -> str:
        return str(self._scope.get("method", "GET")).upper()

    @property
    def path(self) -> str:
        """Request path relative to the mount point."""
        return str(self._scope.get("path", "/"))

    @property
    def full_path(self) -> str:
        """``root_path`` + ``path``, percent-decoded."""
        return str(self._scope.get("root_path", "")) + self.path

    @property
    def raw_full_path(self) -> str:
        """
        ``full_path`` percent-encoded, as the client sent it.

        Uses ``scope["raw_path"]`` when the server provides it, otherwise
        quotes the decoded path. Safe to embed in a URL or a header.
        """
        root_path = quote(str(self._scope.get("root_path", "")))
        raw_path = self._scope.get("raw_path")
        if not raw_path:
            return root_path + quote(self.path)
        raw = raw_path.decode("latin-1")
        # some servers already include root_path in raw_path
        if root_path and raw.startswith(root_path):
            return raw
        return root_path + raw

    @property
    def scheme(self) -> str:
        """URL scheme: http or https."""
        return str(self._scope.get("scheme", "http"))

    @property
    def headers(self) -> Headers:
        """Request headers (case-insensitive)."""
        if self._headers is None:
            self._headers = headers_from_scope(self._scope)
        return self._headers

    @property
    def referer(self) -> str:
        """Referer header, empty string when absent."""
        return self.headers.get("referer", "") or ""

    @property
    def query_params(self) -> QueryParams:
        """Live query string parameters, parsed leniently."""
        if self._query is None:
            self._query = query_params_from_scope(self._scope)
        return self._query

    @property
    def base_url(self) -> str:
        """``scheme://host[:port]`` with default ports omitted."""
        scheme = self.scheme
        server = self._scope.get("server")
        if server:
            host, port = server
            if port is None or (scheme == "http" and port == 80) or (scheme == "https" and port == 443):
                netloc = host
            else:
                netloc = f"{host}:{port}"
        else:
            netloc = self.headers.get("host", "localhost") or "localhost"
        return f"{scheme}://{netloc}"

    @property
    def url(self) -> URL:
        """Full request URL, including the raw query string."""
        if self._url is None:
            url_str = self.base_url + self.raw_full_path
            query_string = self._scope.get("query_string", b"")
            if query_string:
                url_str += f"?{query_string.decode('latin-1')}"
            self._url = URL(url_str)
        return self._url

    def __repr__(self) -> str:
        return f"Request(method={self.method!r}, path={self.full_path!r})"
