# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""
URL parser with component access.

Purpose
=======
Parses a URL string and gives access to its components. Wraps
``urllib.parse.urlsplit``. Unlike ``urlsplit`` the constructor rejects
control characters and malformed netlocs with ``MalformedURL``, so a bad
referrer fails before any field is bound.

URL Parsing Schema::

    https://example.com:8080/path/to/resource?query=1&b=2#section
    -----   ----------------^^^^^^^^^^^^^^^^^ ----------- -------
    scheme      netloc           path            query    fragment
    ------------------------
          base_url

Example::

    from querybind.datastructures import URL

    url = URL("https://example.com:8080/path?query=1#section")
    url.base_url          # "https://example.com:8080"
    url.path              # "/path"
    url.query_params()    # QueryParams({'query': ['1']})
"""

from __future__ import annotations

from urllib.parse import unquote, urlsplit

from ..exceptions import MalformedURL
from .query_params import QueryParams, parse_query

__all__ = ["URL"]


class URL:
    """
    Parsed URL.

    Attributes:
        scheme: The URL scheme (e.g., "https", "http").
        netloc: Network location including host and optional port.
        path: URL path, unquoted. Defaults to "/" if empty.
        query: Query string without the leading "?".
        fragment: Fragment identifier without the leading "#".
        base_url: ``scheme://netloc`` or "" for relative URLs.

    Example:
        >>> url = URL("https://example.com/list?page=2")
        >>> url.base_url
        'https://example.com'
        >>> str(url)
        'https://example.com/list?page=2'
    """

    __slots__ = ("_url", "_parsed")

    def __init__(self, url: str) -> None:
        """
        Parse ``url``.

        Raises:
            MalformedURL: On control characters, or if ``urlsplit`` rejects
                the netloc (e.g. an unbalanced IPv6 bracket or a bad port).
        """
        if any(ord(c) < 0x20 or ord(c) == 0x7F for c in url):
            raise MalformedURL(url, "invalid control character in URL")
        try:
            self._parsed = urlsplit(url)
            # port is only validated on access
            _ = self._parsed.port
        except ValueError as e:
            raise MalformedURL(url, str(e)) from e
        self._url = url

    @property
    def scheme(self) -> str:
        return self._parsed.scheme

    @property
    def netloc(self) -> str:
        return self._parsed.netloc

    @property
    def path(self) -> str:
        """URL path, unquoted. Returns '/' if path is empty."""
        return unquote(self._parsed.path) or "/"

    @property
    def raw_path(self) -> str:
        """URL path as written, possibly empty."""
        return self._parsed.path

    @property
    def query(self) -> str:
        return self._parsed.query

    @property
    def fragment(self) -> str:
        return self._parsed.fragment

    @property
    def hostname(self) -> str | None:
        return self._parsed.hostname

    @property
    def port(self) -> int | None:
        return self._parsed.port

    @property
    def base_url(self) -> str:
        """``scheme://netloc``, empty for relative URLs."""
        if not self._parsed.scheme or not self._parsed.netloc:
            return ""
        return f"{self._parsed.scheme}://{self._parsed.netloc}"

    def query_params(self) -> QueryParams:
        """
        Strictly parsed query component.

        Raises:
            MalformedURL: If the query string is malformed.
        """
        try:
            return parse_query(self._parsed.query)
        except MalformedURL as e:
            raise MalformedURL(self._url, e.reason) from e

    def __str__(self) -> str:
        return self._url

    def __repr__(self) -> str:
        return f"URL({self._url!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, URL):
            return self._url == other._url
        if isinstance(other, str):
            return self._url == other
        return False

    def __hash__(self) -> int:
        return hash(self._url)
