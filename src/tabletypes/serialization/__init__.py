# Copyright 2026 TableTypes Contributors
# SPDX-License-Identifier: Apache-2.0

"""Persisted representations of types and schemas."""

from tabletypes.serialization.json_codec import (
    FORMAT_VERSION,
    SCHEMA_SUFFIX,
    deserialize,
    from_dict,
    read_schema,
    schema_from_dict,
    schema_to_dict,
    serialize,
    to_dict,
    type_from_dict,
    type_to_dict,
    write_schema,
)

__all__ = [
    "FORMAT_VERSION",
    "SCHEMA_SUFFIX",
    "serialize",
    "deserialize",
    "to_dict",
    "from_dict",
    "schema_to_dict",
    "schema_from_dict",
    "type_to_dict",
    "type_from_dict",
    "write_schema",
    "read_schema",
]
