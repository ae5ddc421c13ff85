# Copyright 2026 TableTypes Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for tree walks over nested types."""

import pytest

from tabletypes.errors import DuplicateFieldIdError
from tabletypes.model import (
    ListType,
    LongType,
    MapType,
    NestedField,
    Schema,
    StringType,
    StructType,
    assign_fresh_ids,
    index_by_id,
    index_by_name,
    index_name_by_id,
    walk_fields,
)


def test_walk_fields_is_depth_first_pre_order(sample_schema: Schema) -> None:
    ids = [f.field_id for f in walk_fields(sample_schema.as_struct())]
    assert ids[:6] == [1, 2, 3, 8, 9, 4]
    assert ids[6:10] == [10, 11, 12, 13]
    assert len(ids) == 24


def test_walk_fields_of_primitive_is_empty() -> None:
    assert list(walk_fields(LongType.get())) == []


def test_index_by_id_on_a_list() -> None:
    list_type = ListType.of_optional(3, StructType.of(NestedField.required(4, "a", LongType.get())))
    index = index_by_id(list_type)
    assert set(index) == {3, 4}
    assert index[4].name == "a"


def test_index_by_id_rejects_repeated_ids() -> None:
    map_type = MapType.of_optional(1, 2, StringType.get(), StructType.of(NestedField.required(1, "a", LongType.get())))
    with pytest.raises(DuplicateFieldIdError):
        index_by_id(map_type)


def test_index_by_name_prefers_full_names() -> None:
    # "tags.element" is a real full name; no short alias may shadow it.
    struct = StructType.of(
        NestedField.optional(
            1,
            "tags",
            ListType.of_optional(2, StructType.of(NestedField.required(3, "element", LongType.get()))),
        )
    )
    names = index_by_name(struct)
    assert names["tags.element"] == 2
    assert names["tags.element.element"] == 3


def test_index_name_by_id_has_only_full_names(sample_schema: Schema) -> None:
    names = index_name_by_id(sample_schema.as_struct())
    assert names[13] == "locations.value.long"
    assert "locations.long" not in names.values()


def test_assign_fresh_ids_with_custom_start() -> None:
    fields = assign_fresh_ids(
        [
            NestedField.required(0, "a", LongType.get()),
            NestedField.optional(0, "b", ListType.of_required(0, StringType.get(), "element doc")),
        ],
        start=10,
    )
    assert [f.field_id for f in fields] == [10, 11]
    list_type = fields[1].field_type
    assert isinstance(list_type, ListType)
    assert list_type.element_id == 12
    assert not list_type.is_element_optional
    assert list_type.element_doc == "element doc"
