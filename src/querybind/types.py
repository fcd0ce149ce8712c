# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""ASGI type aliases used by the request/response adapter.

Scope : MutableMapping[str, Any]
    Connection metadata (type, method, path, headers, query_string, ...).

Message : MutableMapping[str, Any]
    A message exchanged with the server, identified by its "type" key.

Receive / Send : async callables exchanging Messages.
"""

from typing import Any, Awaitable, Callable, MutableMapping

__all__ = ["Scope", "Message", "Receive", "Send"]

Scope = MutableMapping[str, Any]

Message = MutableMapping[str, Any]

Receive = Callable[[], Awaitable[Message]]

Send = Callable[[Message], Awaitable[None]]
