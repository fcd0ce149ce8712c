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

"""Tests for HTTP Response class."""

from __future__ import annotations

from typing import Any

import pytest

from querybind import Response

# =============================================================================
# Test Fixtures
# =============================================================================


class MockSend:
    """Capture ASGI send messages for testing."""

    def __init__(self) -> None:
        self.messages: list[dict[str, Any]] = []

    async def __call__(self, message: dict[str, Any]) -> None:
        self.messages.append(message)

    @property
    def start_message(self) -> dict[str, Any]:
        """Get the http.response.start message."""
        return self.messages[0]

    @property
    def status(self) -> int:
        return self.start_message["status"]

    @property
    def headers(self) -> dict[bytes, bytes]:
        return dict(self.start_message["headers"])

    @property
    def body(self) -> bytes:
        return self.messages[1]["body"]


async def mock_receive() -> dict[str, Any]:
    return {"type": "http.request", "body": b"", "more_body": False}


SCOPE: dict[str, Any] = {"type": "http", "method": "GET", "path": "/"}


# =============================================================================
# Header management
# =============================================================================


class TestResponseHeaders:
    """Tests for get/set/add header."""

    def test_empty_by_default(self) -> None:
        response = Response()
        assert response.headers == []
        assert response.body == b""
        assert response.status_code == 200

    def test_get_header_case_insensitive(self) -> None:
        response = Response(headers={"HX-Push-Url": "/a"})
        assert response.get_header("hx-push-url") == "/a"
        assert response.get_header("missing") is None

    def test_set_header_replaces_any_case(self) -> None:
        response = Response(headers=[("hx-push-url", "/old"), ("X-Other", "1")])
        response.set_header("HX-Push-Url", "/new")
        assert response.headers == [("X-Other", "1"), ("HX-Push-Url", "/new")]

    def test_add_header_keeps_duplicates(self) -> None:
        response = Response()
        response.add_header("Set-Cookie", "a=1")
        response.add_header("Set-Cookie", "b=2")
        assert [v for k, v in response.headers if k == "Set-Cookie"] == ["a=1", "b=2"]

    def test_headers_property_is_a_copy(self) -> None:
        response = Response()
        response.headers.append(("X-Leak", "1"))
        assert response.get_header("X-Leak") is None


class TestResponseBody:
    def test_str_body_encoded_utf8(self) -> None:
        assert Response("caffè").body == "caffè".encode()

    def test_bytes_body_untouched(self) -> None:
        assert Response(b"\x00\x01").body == b"\x00\x01"

    def test_set_body_updates_media_type(self) -> None:
        response = Response()
        response.set_body("<p>hi</p>", media_type="text/html")
        assert response.body == b"<p>hi</p>"
        assert response.media_type == "text/html"

    def test_set_body_keeps_media_type_when_omitted(self) -> None:
        response = Response(media_type="application/json")
        response.set_body(b"{}")
        assert response.media_type == "application/json"


# =============================================================================
# ASGI send
# =============================================================================


class TestResponseSend:
    """Tests for the ASGI __call__."""

    @pytest.mark.asyncio
    async def test_sends_start_and_body(self) -> None:
        response = Response("hello", media_type="text/plain")
        send = MockSend()
        await response(SCOPE, mock_receive, send)

        assert send.status == 200
        assert send.headers[b"content-type"] == b"text/plain; charset=utf-8"
        assert send.headers[b"content-length"] == b"5"
        assert send.body == b"hello"

    @pytest.mark.asyncio
    async def test_push_url_header_sent_lowercase(self) -> None:
        response = Response()
        response.set_header("HX-Push-Url", "http://localhost:8000/foo?a=1&b=x,y")
        send = MockSend()
        await response(SCOPE, mock_receive, send)
        assert send.headers[b"hx-push-url"] == b"http://localhost:8000/foo?a=1&b=x,y"

    @pytest.mark.asyncio
    async def test_user_content_type_kept_without_media_type(self) -> None:
        response = Response(b"{}", headers={"Content-Type": "application/json"})
        send = MockSend()
        await response(SCOPE, mock_receive, send)
        assert send.headers[b"content-type"] == b"application/json"

    @pytest.mark.asyncio
    async def test_media_type_overrides_content_type_header(self) -> None:
        response = Response("x", headers={"Content-Type": "text/plain"}, media_type="text/html")
        send = MockSend()
        await response(SCOPE, mock_receive, send)
        content_types = [v for k, v in send.start_message["headers"] if k == b"content-type"]
        assert content_types == [b"text/html; charset=utf-8"]

    @pytest.mark.asyncio
    async def test_content_length_recomputed(self) -> None:
        response = Response(b"abc", headers={"Content-Length": "999"})
        send = MockSend()
        await response(SCOPE, mock_receive, send)
        assert send.headers[b"content-length"] == b"3"

    @pytest.mark.asyncio
    async def test_status_code(self) -> None:
        response = Response("bad", status_code=400)
        send = MockSend()
        await response(SCOPE, mock_receive, send)
        assert send.status == 400
