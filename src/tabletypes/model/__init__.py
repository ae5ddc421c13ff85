# Copyright 2026 TableTypes Contributors
# SPDX-License-Identifier: Apache-2.0

"""Type and schema model for table columns."""

from tabletypes.model.indexing import assign_fresh_ids, index_by_id, index_by_name, index_name_by_id, walk_fields
from tabletypes.model.schema import Schema
from tabletypes.model.types import (
    BinaryType,
    BooleanType,
    DataType,
    DateType,
    DecimalType,
    DoubleType,
    FixedType,
    FloatType,
    IntegerType,
    ListType,
    LongType,
    MapType,
    NestedField,
    NestedType,
    PrimitiveType,
    StatelessType,
    StringType,
    StructType,
    TimestampType,
    TimeType,
    TypeKind,
    UUIDType,
    from_primitive_string,
    primitive,
)

__all__ = [
    # Types
    "TypeKind",
    "DataType",
    "PrimitiveType",
    "StatelessType",
    "BooleanType",
    "IntegerType",
    "LongType",
    "FloatType",
    "DoubleType",
    "DateType",
    "TimeType",
    "TimestampType",
    "StringType",
    "UUIDType",
    "BinaryType",
    "DecimalType",
    "FixedType",
    "NestedField",
    "NestedType",
    "StructType",
    "ListType",
    "MapType",
    "primitive",
    "from_primitive_string",
    # Schema
    "Schema",
    # Tree walks
    "walk_fields",
    "index_by_id",
    "index_by_name",
    "index_name_by_id",
    "assign_fresh_ids",
]
