# Copyright 2026 TableTypes Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for copying and pickling types and schemas."""

import copy
import pickle

import pytest

from tabletypes.model import (
    DataType,
    DecimalType,
    FixedType,
    ListType,
    LongType,
    NestedField,
    Schema,
    StringType,
    StructType,
    TypeKind,
    primitive,
)

STATELESS_TYPES = [primitive(kind) for kind in TypeKind if kind.is_stateless]


@pytest.mark.parametrize("data_type", STATELESS_TYPES, ids=str)
def test_pickle_returns_canonical_instance(data_type: DataType) -> None:
    assert pickle.loads(pickle.dumps(data_type)) is data_type


@pytest.mark.parametrize("data_type", STATELESS_TYPES, ids=str)
def test_copy_returns_canonical_instance(data_type: DataType) -> None:
    assert copy.copy(data_type) is data_type
    assert copy.deepcopy(data_type) is data_type


@pytest.mark.parametrize("data_type", [DecimalType.of(9, 3), FixedType.of_length(34)], ids=str)
def test_pickle_parameterized_types(data_type: DataType) -> None:
    assert pickle.loads(pickle.dumps(data_type)) == data_type


def test_pickled_struct_keeps_lookups_and_identity() -> None:
    struct = StructType.of(
        NestedField.required(34, "Name!", StringType.get(), "max length 10"),
        NestedField.optional(35, "col", DecimalType.of(38, 2)),
    )
    restored = pickle.loads(pickle.dumps(struct))
    assert restored == struct
    assert restored.field_type("Name!") is StringType.get()
    assert restored.field(35).doc is None


def test_deepcopy_of_list_keeps_element_identity() -> None:
    list_type = ListType.of_optional(2, LongType.get(), "doc")
    copied = copy.deepcopy(list_type)
    assert copied == list_type
    assert copied.element_type is LongType.get()


def test_pickled_schema_keeps_indices(sample_schema: Schema) -> None:
    restored = pickle.loads(pickle.dumps(sample_schema))
    assert restored == sample_schema
    assert restored.find_field("points.x").field_id == 15
    assert restored.find_type("locations.key") is StringType.get()
