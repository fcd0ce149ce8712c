# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""
Bindable dataclass fields and their cached schema.

A bindable structure is a plain dataclass whose fields carry a binding key in
their metadata. ``query()`` is a thin wrapper around ``dataclasses.field``
that stores the key under the ``"querybind"`` tag::

    @dataclass
    class Filters:
        search: str = query("q", default="")
        page: int = query("page", default=1)
        tags: list[str] = query("tags", default_factory=list)
        internal: str = ""            # no key: never read or written

``schema_for(Filters)`` walks the dataclass once and returns a ``Schema``
(cached per class) listing the tagged, settable fields in declaration order.
Fields declared with ``init=False`` are not settable and are skipped.
"""

from __future__ import annotations

import dataclasses
import sys
from functools import lru_cache
from typing import Any, get_type_hints

from .coercion import is_supported, kind_name, zero_value

__all__ = ["TAG", "query", "QueryField", "Schema", "schema_for"]

TAG = "querybind"


def query(key: str, **kwargs: Any) -> Any:
    """
    Declare a dataclass field bound to query parameter ``key``.

    Accepts every ``dataclasses.field`` keyword (default, default_factory,
    repr, compare, metadata, ...). Extra metadata is preserved.
    """
    if not key:
        raise ValueError("binding key must be a non-empty string")
    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata[TAG] = key
    return dataclasses.field(metadata=metadata, **kwargs)


def _fallback(kind: Any) -> Any:
    """Zero value for supported kinds, None otherwise."""
    return zero_value(kind) if is_supported(kind) else None


@dataclasses.dataclass(frozen=True)
class QueryField:
    """One tagged, settable field of a bindable dataclass."""

    name: str
    key: str
    kind: Any
    default: Any = dataclasses.MISSING
    default_factory: Any = dataclasses.MISSING

    @property
    def supported(self) -> bool:
        return is_supported(self.kind)

    @property
    def kind_name(self) -> str:
        return kind_name(self.kind)

    def default_value(self) -> Any:
        """Declared default, else the zero value of the field kind."""
        if self.default is not dataclasses.MISSING:
            return self.default
        if self.default_factory is not dataclasses.MISSING:
            return self.default_factory()
        return _fallback(self.kind)


@dataclasses.dataclass(frozen=True)
class Schema:
    """
    Binding schema of one dataclass.

    Attributes:
        cls: The dataclass.
        fields: Tagged settable fields, in declaration order.
        required: Untagged init fields without default, as (name, kind).
            The binder fills them with zero values so construction succeeds.
    """

    cls: type
    fields: tuple[QueryField, ...]
    required: tuple[tuple[str, Any], ...] = ()

    def keys(self) -> list[str]:
        return [f.key for f in self.fields]

    def untagged_defaults(self) -> dict[str, Any]:
        return {name: _fallback(kind) for name, kind in self.required}


def _has_default(f: dataclasses.Field[Any]) -> bool:
    return f.default is not dataclasses.MISSING or f.default_factory is not dataclasses.MISSING


def _resolve_hints(cls: type) -> dict[str, Any]:
    """
    Field annotations of ``cls``, evaluated.

    ``get_type_hints`` fails as a whole when one string annotation names a
    type it cannot see (e.g. a class local to a function). Fields are then
    resolved one by one and unresolvable annotations stay strings, which
    are reported as unsupported kinds.
    """
    try:
        return get_type_hints(cls)
    except NameError:
        pass
    module = sys.modules.get(cls.__module__)
    globalns = dict(vars(module)) if module is not None else {}
    hints: dict[str, Any] = {}
    for f in dataclasses.fields(cls):
        annotation = f.type
        if isinstance(annotation, str):
            try:
                annotation = eval(annotation, globalns, dict(vars(cls)))  # noqa: S307
            except NameError:
                pass
        hints[f.name] = annotation
    return hints


@lru_cache(maxsize=None)
def schema_for(cls: type) -> Schema:
    """
    Build (once) the binding schema of a dataclass.

    Raises:
        TypeError: If ``cls`` is not a dataclass type.
    """
    if not (isinstance(cls, type) and dataclasses.is_dataclass(cls)):
        raise TypeError(f"{cls!r} is not a dataclass type")

    hints = _resolve_hints(cls)
    tagged: list[QueryField] = []
    required: list[tuple[str, Any]] = []

    for f in dataclasses.fields(cls):
        if not f.init:
            continue
        kind = hints.get(f.name, f.type)
        key = f.metadata.get(TAG)
        if not key:
            if not _has_default(f):
                required.append((f.name, kind))
            continue
        tagged.append(
            QueryField(
                name=f.name,
                key=key,
                kind=kind,
                default=f.default,
                default_factory=f.default_factory,
            )
        )

    return Schema(cls=cls, fields=tuple(tagged), required=tuple(required))
