# Copyright 2026 TableTypes Contributors
# SPDX-License-Identifier: Apache-2.0

"""YAML parser for hand-written schema definition files.

A definition lists the top-level columns of a table. Types are written in
the same shapes as the JSON metadata, with friendlier defaults: ``required``
and ``element-required`` / ``value-required`` default to false, and field ids
may be omitted when ``assign-ids`` is true (any ids present are then
replaced, numbering the tree from 1)::

    schema-id: 0
    assign-ids: true
    columns:
      - name: id
        type: long
        required: true
      - name: tags
        type: {type: list, element: string}
      - name: location
        type:
          type: struct
          fields:
            - {name: lat, type: float, required: true}
            - {name: long, type: float, required: true}
"""

from __future__ import annotations

import itertools
import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from tabletypes.errors import SchemaDefinitionError, TableTypesError
from tabletypes.model.schema import Schema
from tabletypes.model.types import DataType, ListType, MapType, NestedField, StructType, from_primitive_string

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############


def load_schema_definition(path: Path) -> Schema:
    """Load and parse a YAML schema definition file.

    Args:
        path: Path to the definition file.

    Returns:
        The schema described by the file.

    Raises:
        SchemaDefinitionError: If the file cannot be read or the definition is invalid.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise SchemaDefinitionError(f"Schema definition file not found: {path}") from None
    except OSError as exc:
        raise SchemaDefinitionError(f"Cannot read schema definition file: {exc}") from exc

    return parse_schema_definition(text, source_label=str(path))


def parse_schema_definition(text: str, source_label: str = "<string>") -> Schema:
    """Parse YAML definition text into a Schema.

    Args:
        text: Raw YAML content.
        source_label: Human-readable label used in error messages (e.g. the file path).

    Raises:
        SchemaDefinitionError: If the YAML is invalid or does not describe a valid schema.
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise SchemaDefinitionError(f"Invalid YAML in {source_label}: {exc}") from exc

    if not isinstance(data, dict):
        raise SchemaDefinitionError(f"{source_label}: schema definition must be a YAML mapping")

    schema_id = _optional(data, "schema-id", int, source_label, 0)
    assign_ids = _optional(data, "assign-ids", bool, source_label, False)
    raw_columns = data.get("columns")
    if not isinstance(raw_columns, list):
        raise SchemaDefinitionError(f"{source_label}: 'columns' must be a list")

    parser = _DefinitionParser(assign_ids)
    try:
        columns = [
            parser.parse_field(entry, f"{source_label}: columns[{index}]") for index, entry in enumerate(raw_columns)
        ]
        schema = Schema.of(*columns, schema_id=schema_id, assign_ids=assign_ids)
    except SchemaDefinitionError:
        raise
    except (TableTypesError, ValidationError) as exc:
        raise SchemaDefinitionError(f"{source_label}: {exc}") from exc

    logger.debug("Parsed schema definition %s with %d column(s)", source_label, len(schema.columns))
    return schema


# ################
# Implementation
# ################


class _DefinitionParser:
    """Turns definition mappings into fields, handing out placeholder ids when assigning."""

    def __init__(self, assign_ids: bool) -> None:
        self._assign_ids = assign_ids
        self._placeholder_ids = itertools.count(1)

    def parse_field(self, entry: object, location: str) -> NestedField:
        if not isinstance(entry, dict):
            raise SchemaDefinitionError(f"{location} must be a YAML mapping")
        name = _require(entry, "name", str, location)
        field_id = self._field_id(entry, "id", f"{location} '{name}'")
        if "type" not in entry:
            raise SchemaDefinitionError(f"{location} '{name}': missing required field 'type'")
        field_type = self.parse_type(entry["type"], f"{location} '{name}'")
        required = _optional(entry, "required", bool, location, False)
        doc = _optional(entry, "doc", str, location, None)
        if required:
            return NestedField.required(field_id, name, field_type, doc)
        return NestedField.optional(field_id, name, field_type, doc)

    def parse_type(self, value: object, location: str) -> DataType:
        if isinstance(value, str):
            return from_primitive_string(value)
        if not isinstance(value, dict):
            raise SchemaDefinitionError(f"{location}: type must be a string or a YAML mapping")
        kind = _require(value, "type", str, location)
        if kind == "struct":
            raw_fields = value.get("fields", [])
            if not isinstance(raw_fields, list):
                raise SchemaDefinitionError(f"{location}: 'fields' must be a list")
            fields = [self.parse_field(f, f"{location}.fields[{index}]") for index, f in enumerate(raw_fields)]
            return StructType.of(*fields)
        if kind == "list":
            element_id = self._field_id(value, "element-id", location)
            element_type = self.parse_type(_require_present(value, "element", location), f"{location}.element")
            doc = _optional(value, "element-doc", str, location, None)
            if _optional(value, "element-required", bool, location, False):
                return ListType.of_required(element_id, element_type, doc)
            return ListType.of_optional(element_id, element_type, doc)
        if kind == "map":
            key_id = self._field_id(value, "key-id", location)
            value_id = self._field_id(value, "value-id", location)
            key_type = self.parse_type(_require_present(value, "key", location), f"{location}.key")
            value_type = self.parse_type(_require_present(value, "value", location), f"{location}.value")
            key_doc = _optional(value, "key-doc", str, location, None)
            value_doc = _optional(value, "value-doc", str, location, None)
            if _optional(value, "value-required", bool, location, False):
                return MapType.of_required(key_id, value_id, key_type, value_type, key_doc, value_doc)
            return MapType.of_optional(key_id, value_id, key_type, value_type, key_doc, value_doc)
        raise SchemaDefinitionError(f"{location}: unknown nested type '{kind}'")

    def _field_id(self, mapping: dict[str, Any], key: str, location: str) -> int:
        # Ids written in the file are replaced when the whole tree is renumbered.
        if self._assign_ids:
            return next(self._placeholder_ids)
        if key in mapping:
            return _require(mapping, key, int, location)
        raise SchemaDefinitionError(f"{location}: missing required field '{key}' (or set 'assign-ids: true')")


def _require_present(mapping: dict[str, Any], key: str, location: str) -> Any:
    if key not in mapping:
        raise SchemaDefinitionError(f"{location}: missing required field '{key}'")
    return mapping[key]


def _require(mapping: dict[str, Any], key: str, expected: type, location: str) -> Any:
    value = _require_present(mapping, key, location)
    if not _is_instance(value, expected):
        raise SchemaDefinitionError(f"{location}: '{key}' must be of type {expected.__name__}")
    return value


def _optional(mapping: dict[str, Any], key: str, expected: type, location: str, default: Any) -> Any:
    if key not in mapping or mapping[key] is None:
        return default
    value = mapping[key]
    if not _is_instance(value, expected):
        raise SchemaDefinitionError(f"{location}: '{key}' must be of type {expected.__name__}")
    return value


def _is_instance(value: Any, expected: type) -> bool:
    if expected is int and isinstance(value, bool):
        return False
    return isinstance(value, expected)
