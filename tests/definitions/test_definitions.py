# Copyright 2026 TableTypes Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for loading YAML schema definitions."""

from pathlib import Path

import pytest

from tabletypes.definitions import load_schema_definition, parse_schema_definition
from tabletypes.errors import SchemaDefinitionError
from tabletypes.model import (
    DecimalType,
    FloatType,
    ListType,
    LongType,
    MapType,
    NestedField,
    Schema,
    StringType,
    StructType,
    TimestampType,
)

# ###############
# Helpers
# ###############


def _write_definition(tmp_path: Path, content: str) -> Path:
    """Write a schema definition file and return its path."""
    path = tmp_path / "table.yaml"
    path.write_text(content, encoding="utf-8")
    return path


# ###############
# Normal Cases
# ###############


def test_explicit_ids(tmp_path: Path) -> None:
    """Columns with explicit ids are kept as written."""
    content = """\
schema-id: 4
columns:
  - id: 1
    name: id
    type: long
    required: true
    doc: Primary key
  - id: 2
    name: price
    type: decimal(10, 2)
"""
    schema = load_schema_definition(_write_definition(tmp_path, content))

    assert isinstance(schema, Schema)
    assert schema.schema_id == 4
    assert schema.columns == (
        NestedField.required(1, "id", LongType.get(), "Primary key"),
        NestedField.optional(2, "price", DecimalType.of(10, 2)),
    )
    assert schema.find_type("id") is LongType.get()


def test_assign_ids_numbers_the_whole_tree() -> None:
    """With assign-ids, ids are numbered from 1, top-level columns first."""
    content = """\
assign-ids: true
columns:
  - name: id
    type: long
    required: true
  - name: location
    type:
      type: struct
      fields:
        - {name: lat, type: float, required: true}
        - {name: long, type: float, required: true}
  - name: tags
    type: {type: list, element: string, element-doc: A tag}
  - name: attrs
    type: {type: map, key: string, value: timestamptz, value-required: true}
"""
    schema = parse_schema_definition(content)

    assert [c.field_id for c in schema.columns] == [1, 2, 3, 4]
    assert schema.find_field("location.lat").field_id == 5
    assert schema.find_field("location.long").field_id == 6
    assert schema.find_field("tags.element").field_id == 7
    assert schema.find_field("attrs.key").field_id == 8
    assert schema.find_field("attrs.value").field_id == 9

    location = schema.find_type("location")
    assert location == StructType.of(
        NestedField.required(5, "lat", FloatType.get()),
        NestedField.required(6, "long", FloatType.get()),
    )
    assert schema.find_type("tags") == ListType.of_optional(7, StringType.get(), "A tag")
    assert schema.find_type("attrs") == MapType.of_required(8, 9, StringType.get(), TimestampType.with_zone())


def test_defaults() -> None:
    """Fields default to optional, undocumented, and schema id 0."""
    schema = parse_schema_definition("columns:\n  - {id: 1, name: a, type: string}\n")
    column = schema.columns[0]
    assert column.is_optional
    assert column.doc is None
    assert schema.schema_id == 0


def test_empty_column_list() -> None:
    assert parse_schema_definition("columns: []\n").columns == ()


# ###############
# Error Cases
# ###############


def test_missing_file(tmp_path: Path) -> None:
    with pytest.raises(SchemaDefinitionError, match="not found"):
        load_schema_definition(tmp_path / "missing.yaml")


def test_invalid_yaml() -> None:
    with pytest.raises(SchemaDefinitionError, match="Invalid YAML"):
        parse_schema_definition("columns: [\n")


def test_top_level_must_be_mapping() -> None:
    with pytest.raises(SchemaDefinitionError, match="must be a YAML mapping"):
        parse_schema_definition("- a\n- b\n")


def test_columns_must_be_a_list() -> None:
    with pytest.raises(SchemaDefinitionError, match="'columns' must be a list"):
        parse_schema_definition("columns: nope\n")


def test_missing_id_without_assign_ids() -> None:
    with pytest.raises(SchemaDefinitionError, match="assign-ids"):
        parse_schema_definition("columns:\n  - {name: a, type: string}\n")


def test_missing_type() -> None:
    with pytest.raises(SchemaDefinitionError, match="'type'"):
        parse_schema_definition("columns:\n  - {id: 1, name: a}\n")


def test_wrong_value_type() -> None:
    with pytest.raises(SchemaDefinitionError, match="'required' must be of type bool"):
        parse_schema_definition("columns:\n  - {id: 1, name: a, type: string, required: maybe}\n")


def test_unknown_primitive_is_reported_with_source(tmp_path: Path) -> None:
    path = _write_definition(tmp_path, "columns:\n  - {id: 1, name: a, type: varchar}\n")
    with pytest.raises(SchemaDefinitionError, match="table.yaml"):
        load_schema_definition(path)


def test_unknown_nested_type() -> None:
    with pytest.raises(SchemaDefinitionError, match="unknown nested type"):
        parse_schema_definition("columns:\n  - {id: 1, name: a, type: {type: union}}\n")


def test_duplicate_ids() -> None:
    content = "columns:\n  - {id: 1, name: a, type: string}\n  - {id: 1, name: b, type: string}\n"
    with pytest.raises(SchemaDefinitionError, match="Duplicate field id 1"):
        parse_schema_definition(content)


def test_duplicate_names() -> None:
    content = "columns:\n  - {id: 1, name: a, type: string}\n  - {id: 2, name: a, type: string}\n"
    with pytest.raises(SchemaDefinitionError, match="Duplicate field name"):
        parse_schema_definition(content)


def test_invalid_decimal() -> None:
    with pytest.raises(SchemaDefinitionError):
        parse_schema_definition("columns:\n  - {id: 1, name: a, type: 'decimal(5, 6)'}\n")
