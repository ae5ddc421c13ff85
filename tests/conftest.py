# Copyright 2026 TableTypes Contributors
# SPDX-License-Identifier: Apache-2.0

"""Shared fixtures for the TableTypes test suite."""

import pytest

from tabletypes.model import (
    BooleanType,
    DoubleType,
    FloatType,
    IntegerType,
    ListType,
    LongType,
    MapType,
    NestedField,
    Schema,
    StringType,
    StructType,
)

required = NestedField.required
optional = NestedField.optional


def build_sample_schema() -> Schema:
    """A schema mixing scalars, a nested struct, maps and lists, with ids 1-24."""
    return Schema.of(
        required(1, "id", IntegerType.get()),
        optional(2, "data", StringType.get()),
        optional(
            3,
            "preferences",
            StructType.of(
                required(8, "feature1", BooleanType.get()),
                optional(9, "feature2", BooleanType.get()),
            ),
        ),
        required(
            4,
            "locations",
            MapType.of_required(
                10,
                11,
                StringType.get(),
                StructType.of(
                    required(12, "lat", FloatType.get()),
                    required(13, "long", FloatType.get()),
                ),
            ),
        ),
        optional(
            5,
            "points",
            ListType.of_optional(
                14,
                StructType.of(
                    required(15, "x", LongType.get()),
                    required(16, "y", LongType.get()),
                ),
            ),
        ),
        required(6, "doubles", ListType.of_required(17, DoubleType.get())),
        optional(7, "properties", MapType.of_optional(18, 19, StringType.get(), StringType.get())),
        required(
            20,
            "complex_key_map",
            MapType.of_optional(
                21,
                22,
                StructType.of(
                    required(23, "x", LongType.get()),
                    optional(24, "y", LongType.get()),
                ),
                StringType.get(),
            ),
        ),
    )


@pytest.fixture
def sample_schema() -> Schema:
    return build_sample_schema()


@pytest.fixture
def other_sample_schema() -> Schema:
    """An independently built copy of ``sample_schema``."""
    return build_sample_schema()
