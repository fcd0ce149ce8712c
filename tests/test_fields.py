# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Tests for bindable fields and schema extraction."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from typing import Optional

import pytest

from querybind.coercion import UInt
from querybind.fields import TAG, QueryField, schema_for, query


@dataclass
class Listing:
    search: str = query("q", default="")
    page: UInt = query("page", default=UInt(1))
    tags: list[str] = query("tags", default_factory=list)
    internal: str = "untouched"
    computed: int = field(default=0, init=False, metadata={TAG: "computed"})
    limit: Optional[int] = query("limit", default=None)


@dataclass
class Required:
    name: str = query("name")
    count: int = query("count")
    ratio: float = query("ratio")
    active: bool = query("active")
    ids: list[int] = query("ids")
    maybe: Optional[str] = query("maybe")


@dataclass
class UntaggedRequired:
    label: str
    sizes: list[int]
    key: str = query("key", default="")


@dataclass
class DuplicateKeys:
    first: str = query("k", default="")
    second: str = query("k", default="")


class TestQueryHelper:
    """Tests for the query() field declaration."""

    def test_stores_key_in_metadata(self) -> None:
        meta = {f.name: f.metadata for f in dataclasses.fields(Listing)}
        assert meta["search"][TAG] == "q"
        assert TAG not in meta["internal"]

    def test_preserves_extra_metadata(self) -> None:
        f = query("x", default="", metadata={"doc": "free text"})
        assert f.metadata[TAG] == "x"
        assert f.metadata["doc"] == "free text"

    def test_forwards_field_options(self) -> None:
        f = query("x", default=3, repr=False)
        assert f.default == 3
        assert f.repr is False

    def test_empty_key_rejected(self) -> None:
        with pytest.raises(ValueError):
            query("")


class TestSchemaFor:
    """Tests for schema_for()."""

    def test_tagged_fields_in_declaration_order(self) -> None:
        schema = schema_for(Listing)
        assert [f.name for f in schema.fields] == ["search", "page", "tags", "limit"]
        assert schema.keys() == ["q", "page", "tags", "limit"]

    def test_untagged_and_init_false_fields_skipped(self) -> None:
        names = {f.name for f in schema_for(Listing).fields}
        assert "internal" not in names
        assert "computed" not in names

    def test_kinds_are_resolved_from_string_annotations(self) -> None:
        kinds = {f.name: f.kind for f in schema_for(Listing).fields}
        assert kinds["search"] is str
        assert kinds["page"] is UInt
        assert kinds["tags"] == list[str]
        assert kinds["limit"] == Optional[int]

    def test_schema_is_cached(self) -> None:
        assert schema_for(Listing) is schema_for(Listing)

    def test_duplicate_keys_allowed(self) -> None:
        assert schema_for(DuplicateKeys).keys() == ["k", "k"]

    def test_not_a_dataclass(self) -> None:
        class Plain:
            x: int = 0

        with pytest.raises(TypeError):
            schema_for(Plain)

    def test_instance_rejected(self) -> None:
        with pytest.raises(TypeError):
            schema_for(Listing())  # type: ignore[arg-type]

    def test_required_untagged_fields_recorded(self) -> None:
        schema = schema_for(UntaggedRequired)
        assert [name for name, _ in schema.required] == ["label", "sizes"]
        assert schema.untagged_defaults() == {"label": "", "sizes": []}


class TestQueryFieldDefaults:
    """Tests for QueryField.default_value()."""

    def test_declared_default(self) -> None:
        page = schema_for(Listing).fields[1]
        assert page.default_value() == 1

    def test_default_factory_called_each_time(self) -> None:
        tags = schema_for(Listing).fields[2]
        first = tags.default_value()
        assert first == []
        assert tags.default_value() is not first

    def test_zero_values_without_default(self) -> None:
        values = {f.name: f.default_value() for f in schema_for(Required).fields}
        assert values == {
            "name": "",
            "count": 0,
            "ratio": 0.0,
            "active": False,
            "ids": [],
            "maybe": None,
        }

    def test_unsupported_kind_falls_back_to_none(self) -> None:
        qf = QueryField(name="m", key="m", kind=dict[str, str])
        assert qf.supported is False
        assert qf.default_value() is None
        assert qf.kind_name == "dict[str, str]"


class TestLocalTypes:
    """Dataclasses declared inside functions referring to local types."""

    def test_unresolvable_annotation_is_unsupported(self) -> None:
        class Point:
            pass

        @dataclass
        class Local:
            name: str = query("name", default="")
            where: Optional[Point] = query("where", default=None)

        fields = {f.name: f for f in schema_for(Local).fields}
        assert fields["name"].kind is str
        assert fields["name"].supported
        assert fields["where"].supported is False
        assert fields["where"].default_value() is None

    def test_unresolvable_annotation_binds_as_unsupported_kind(self) -> None:
        from querybind import AsgiHttpContext, bind
        from querybind.exceptions import UnsupportedKind

        class Point:
            pass

        @dataclass
        class Local:
            where: Point = query("where", default=None)

        scope = {"type": "http", "path": "/", "query_string": b"where=1,2", "headers": []}
        with pytest.raises(UnsupportedKind) as exc_info:
            bind(Local, AsgiHttpContext.from_scope(scope))
        assert exc_info.value.kind == "Point"
        assert exc_info.value.key == "where"
