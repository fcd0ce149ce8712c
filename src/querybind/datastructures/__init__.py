# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""
Data structures used by the binder and the ASGI adapter.

Mapping from raw data to querybind classes::

    Raw Data                               querybind Classes
    ---------------------------------      -----------------------------
    scope["headers"] = [(b"...", b"...")]  ->  Headers (case-insensitive)
    scope["query_string"] = b"a=1&b=2"     ->  QueryParams (ordered bag)
    "https://example.com/path?q=1"         ->  URL (parsed, strict)

Public Exports
==============
::

    from querybind.datastructures import (
        URL,
        Headers,
        QueryParams,
        headers_from_scope,
        parse_query,
        query_params_from_scope,
    )
"""

from .headers import Headers, headers_from_scope
from .query_params import QueryParams, parse_query, query_params_from_scope
from .url import URL

__all__ = [
    "URL",
    "Headers",
    "QueryParams",
    "headers_from_scope",
    "parse_query",
    "query_params_from_scope",
]
