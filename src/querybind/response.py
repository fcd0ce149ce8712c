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
HTTP Response builder for ASGI applications.

A handler creates a ``Response`` (usually empty), the binder writes the
push URL header into it, and the handler sets the body before sending::

    response = Response()
    response_bind(AsgiHttpContext(request, response), filters)
    response.set_body(render_fragment(filters), media_type="text/html")
    await response(scope, receive, send)

Header Methods
==============
set_header(name, value)
    Replace every header with the same name (case-insensitive).
add_header(name, value)
    Append a header, keeping duplicates (e.g. Set-Cookie).
get_header(name)
    First value of a header, or None.
"""

from __future__ import annotations

from collections.abc import Mapping

from .types import Receive, Scope, Send

__all__ = ["Response"]

HeadersInput = Mapping[str, str] | list[tuple[str, str]] | None


def _normalize_headers(headers: HeadersInput) -> list[tuple[str, str]]:
    """Headers as a list of (name, value) tuples."""
    if headers is None:
        return []
    if isinstance(headers, list):
        return list(headers)
    return list(headers.items())


class Response:
    """
    HTTP response with mutable headers.

    Attributes:
        body: Encoded response body.
        status_code: HTTP status code.
        media_type: Content-Type media type (None for no header).

    Example:
        >>> response = Response("Hello", media_type="text/plain")
        >>> response.set_header("HX-Push-Url", "/items?page=2")
        >>> response.get_header("hx-push-url")
        '/items?page=2'
    """

    __slots__ = ("body", "status_code", "media_type", "_headers")

    charset: str = "utf-8"

    def __init__(
        self,
        content: bytes | str | None = None,
        status_code: int = 200,
        headers: HeadersInput = None,
        media_type: str | None = None,
    ) -> None:
        self.status_code = status_code
        self.media_type = media_type
        self._headers: list[tuple[str, str]] = _normalize_headers(headers)
        self.body = self._encode_content(content)

    def _encode_content(self, content: bytes | str | None) -> bytes:
        if content is None:
            return b""
        if isinstance(content, bytes):
            return content
        return content.encode(self.charset)

    @property
    def headers(self) -> list[tuple[str, str]]:
        """Copy of the headers set so far."""
        return list(self._headers)

    def get_header(self, name: str) -> str | None:
        name_lower = name.lower()
        for key, value in self._headers:
            if key.lower() == name_lower:
                return value
        return None

    def set_header(self, name: str, value: str) -> None:
        """Set a header, replacing previous values with the same name."""
        name_lower = name.lower()
        self._headers = [(k, v) for k, v in self._headers if k.lower() != name_lower]
        self._headers.append((name, value))

    def add_header(self, name: str, value: str) -> None:
        self._headers.append((name, value))

    def set_body(self, content: bytes | str | None, media_type: str | None = None) -> None:
        self.body = self._encode_content(content)
        if media_type is not None:
            self.media_type = media_type

    def _content_type(self) -> str | None:
        if self.media_type is None:
            return None
        if self.media_type.startswith("text/") and "charset" not in self.media_type:
            return f"{self.media_type}; charset={self.charset}"
        return self.media_type

    def _build_headers(self) -> list[tuple[bytes, bytes]]:
        """ASGI headers: lowercase latin-1 names, content headers appended."""
        content_type = self._content_type()
        replaced = ("content-type", "content-length") if content_type else ("content-length",)
        headers = [(name, value) for name, value in self._headers if name.lower() not in replaced]
        if content_type:
            headers.append(("content-type", content_type))
        headers.append(("content-length", str(len(self.body))))
        return [
            (name.lower().encode("latin-1"), value.encode("latin-1"))
            for name, value in headers
        ]

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI interface: send http.response.start then http.response.body."""
        await send(
            {
                "type": "http.response.start",
                "status": self.status_code,
                "headers": self._build_headers(),
            }
        )
        await send({"type": "http.response.body", "body": self.body})

    def __repr__(self) -> str:
        return f"Response(status_code={self.status_code}, headers={self._headers!r})"
