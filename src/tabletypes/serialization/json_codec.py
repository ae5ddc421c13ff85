# Copyright 2026 TableTypes Contributors
# SPDX-License-Identifier: Apache-2.0

"""Serialization and deserialization of types and schemas as JSON metadata.

Types are encoded in the layout used by table metadata files:

* primitives are strings in their canonical form (``"long"``,
  ``"decimal(9, 3)"``, ``"fixed[16]"``);
* structs are ``{"type": "struct", "fields": [...]}`` where each field is
  ``{"id", "name", "required", "type"}`` plus ``"doc"`` when present;
* lists carry ``element-id``, ``element-required``, ``element`` and an
  optional ``element-doc``;
* maps carry ``key-id``, ``key``, ``value-id``, ``value-required``, ``value``
  and optional ``key-doc`` / ``value-doc``.

A schema is a struct with an extra ``schema-id``. Serialized documents are
wrapped in a small versioned envelope so future layout changes can be
detected. Deserialization resolves stateless primitives to their canonical
instances, so identity survives the round trip.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from tabletypes.errors import DeserializationError, TableTypesError
from tabletypes.model.schema import Schema
from tabletypes.model.types import (
    DataType,
    ListType,
    MapType,
    NestedField,
    PrimitiveType,
    StructType,
    from_primitive_string,
)

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############

FORMAT_VERSION = "1"
SCHEMA_SUFFIX = ".schema.json"


def serialize(value: DataType | Schema, indent: int | None = None) -> str:
    """Serialize a type or schema to a JSON string.

    Args:
        value: The type or schema to serialize.
        indent: Indentation for human-readable output; compact when None.
    """
    separators = (",", ":") if indent is None else None
    return json.dumps(to_dict(value), indent=indent, separators=separators)


def deserialize(data: str | bytes) -> DataType | Schema:
    """Deserialize a type or schema from a JSON string.

    Args:
        data: JSON text produced by :func:`serialize`.

    Returns:
        The reconstructed type or schema.

    Raises:
        DeserializationError: If the input is not valid JSON, uses an unknown
            format version, or does not describe a valid type or schema.
    """
    try:
        obj = json.loads(data)
    except (json.JSONDecodeError, UnicodeDecodeError, RecursionError) as exc:
        raise DeserializationError(f"Invalid JSON: {exc}") from exc
    return from_dict(obj)


def to_dict(value: DataType | Schema) -> dict[str, Any]:
    """Return the JSON-ready envelope for a type or schema."""
    if isinstance(value, Schema):
        return {"v": FORMAT_VERSION, "kind": "schema", "body": schema_to_dict(value)}
    if isinstance(value, DataType):
        return {"v": FORMAT_VERSION, "kind": "type", "body": type_to_dict(value)}
    raise TypeError(f"Cannot serialize {type(value).__name__}")


def from_dict(obj: Any) -> DataType | Schema:
    """Rebuild a type or schema from an envelope produced by :func:`to_dict`.

    Raises:
        DeserializationError: If the envelope or its body is invalid.
    """
    if not isinstance(obj, dict):
        raise DeserializationError("Serialized value must be a JSON object")
    version = obj.get("v")
    if version != FORMAT_VERSION:
        raise DeserializationError(f"Unsupported format version: {version!r}")
    kind = obj.get("kind")
    if "body" not in obj:
        raise DeserializationError("Serialized value has no body")
    if kind == "schema":
        return schema_from_dict(obj["body"])
    if kind == "type":
        return type_from_dict(obj["body"])
    raise DeserializationError(f"Unknown serialized kind: {kind!r}")


def schema_to_dict(schema: Schema) -> dict[str, Any]:
    d = _struct_to_dict(schema.struct)
    d["schema-id"] = schema.schema_id
    return d


def schema_from_dict(obj: Any) -> Schema:
    """Rebuild a schema from its metadata dict.

    Raises:
        DeserializationError: If the dict does not describe a valid schema.
    """
    with _wrap_errors("schema"):
        struct = _type_from_obj(obj, "schema")
        if not isinstance(struct, StructType):
            raise DeserializationError("schema: root type must be a struct")
        schema_id = _optional(obj, "schema-id", int, "schema")
        schema = Schema(struct=struct, schema_id=schema_id if schema_id is not None else 0)
    logger.debug("Deserialized schema %d with %d field(s)", schema.schema_id, len(schema.field_ids))
    return schema


def type_to_dict(data_type: DataType) -> str | dict[str, Any]:
    """Encode a type as a primitive string or a tagged dict."""
    if isinstance(data_type, PrimitiveType):
        return str(data_type)
    if isinstance(data_type, StructType):
        return _struct_to_dict(data_type)
    if isinstance(data_type, ListType):
        return _list_to_dict(data_type)
    if isinstance(data_type, MapType):
        return _map_to_dict(data_type)
    raise TypeError(f"Cannot serialize type {type(data_type).__name__}")


def type_from_dict(obj: Any) -> DataType:
    """Decode a type from the output of :func:`type_to_dict`.

    Raises:
        DeserializationError: If *obj* does not describe a valid type.
    """
    with _wrap_errors("type"):
        return _type_from_obj(obj, "type")


def write_schema(schema: Schema, path: Path) -> None:
    """Write *schema* as a metadata file, creating parent directories as needed."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(serialize(schema, indent=2), encoding="utf-8")
    logger.debug("Wrote schema %d to %s", schema.schema_id, path)


def read_schema(path: Path) -> Schema:
    """Read a schema metadata file written by :func:`write_schema`.

    Raises:
        DeserializationError: If the file does not contain a valid schema.
        OSError: If the file cannot be read.
    """
    value = deserialize(path.read_text(encoding="utf-8"))
    if not isinstance(value, Schema):
        raise DeserializationError(f"{path}: file contains a type, not a schema")
    return value


# ################
# Implementation
# ################


@contextmanager
def _wrap_errors(context: str) -> Iterator[None]:
    """Re-raise construction failures met while decoding as DeserializationError."""
    try:
        yield
    except DeserializationError:
        raise
    except (TableTypesError, ValidationError, RecursionError) as exc:
        raise DeserializationError(f"{context}: {exc}") from exc


def _struct_to_dict(struct: StructType) -> dict[str, Any]:
    return {"type": "struct", "fields": [_field_to_dict(f) for f in struct.fields]}


def _field_to_dict(f: NestedField) -> dict[str, Any]:
    d: dict[str, Any] = {
        "id": f.field_id,
        "name": f.name,
        "required": f.is_required,
        "type": type_to_dict(f.field_type),
    }
    if f.doc is not None:
        d["doc"] = f.doc
    return d


def _list_to_dict(list_type: ListType) -> dict[str, Any]:
    d: dict[str, Any] = {
        "type": "list",
        "element-id": list_type.element_id,
        "element-required": not list_type.is_element_optional,
        "element": type_to_dict(list_type.element_type),
    }
    if list_type.element_doc is not None:
        d["element-doc"] = list_type.element_doc
    return d


def _map_to_dict(map_type: MapType) -> dict[str, Any]:
    d: dict[str, Any] = {
        "type": "map",
        "key-id": map_type.key_id,
        "key": type_to_dict(map_type.key_type),
        "value-id": map_type.value_id,
        "value-required": not map_type.is_value_optional,
        "value": type_to_dict(map_type.value_type),
    }
    if map_type.key_doc is not None:
        d["key-doc"] = map_type.key_doc
    if map_type.value_doc is not None:
        d["value-doc"] = map_type.value_doc
    return d


def _type_from_obj(obj: Any, context: str) -> DataType:
    if isinstance(obj, str):
        return from_primitive_string(obj)
    if not isinstance(obj, dict):
        raise DeserializationError(f"{context}: expected a type string or object, got {type(obj).__name__}")
    kind = _require(obj, "type", str, context)
    if kind == "struct":
        return _struct_from_dict(obj, context)
    if kind == "list":
        return _list_from_dict(obj, context)
    if kind == "map":
        return _map_from_dict(obj, context)
    raise DeserializationError(f"{context}: unknown nested type {kind!r}")


def _struct_from_dict(obj: dict[str, Any], context: str) -> StructType:
    raw_fields = _require(obj, "fields", list, context)
    fields = [_field_from_dict(raw, f"{context}.fields[{index}]") for index, raw in enumerate(raw_fields)]
    return StructType.of(*fields)


def _field_from_dict(obj: Any, context: str) -> NestedField:
    if not isinstance(obj, dict):
        raise DeserializationError(f"{context}: field must be an object")
    field_id = _require(obj, "id", int, context)
    name = _require(obj, "name", str, context)
    required = _require(obj, "required", bool, context)
    field_type = _type_from_obj(_require_present(obj, "type", context), f"{context}.type")
    doc = _optional(obj, "doc", str, context)
    if required:
        return NestedField.required(field_id, name, field_type, doc)
    return NestedField.optional(field_id, name, field_type, doc)


def _list_from_dict(obj: dict[str, Any], context: str) -> ListType:
    element_id = _require(obj, "element-id", int, context)
    required = _require(obj, "element-required", bool, context)
    element_type = _type_from_obj(_require_present(obj, "element", context), f"{context}.element")
    doc = _optional(obj, "element-doc", str, context)
    if required:
        return ListType.of_required(element_id, element_type, doc)
    return ListType.of_optional(element_id, element_type, doc)


def _map_from_dict(obj: dict[str, Any], context: str) -> MapType:
    key_id = _require(obj, "key-id", int, context)
    value_id = _require(obj, "value-id", int, context)
    value_required = _require(obj, "value-required", bool, context)
    key_type = _type_from_obj(_require_present(obj, "key", context), f"{context}.key")
    value_type = _type_from_obj(_require_present(obj, "value", context), f"{context}.value")
    key_doc = _optional(obj, "key-doc", str, context)
    value_doc = _optional(obj, "value-doc", str, context)
    factory = MapType.of_required if value_required else MapType.of_optional
    return factory(key_id, value_id, key_type, value_type, key_doc, value_doc)


def _require_present(obj: dict[str, Any], key: str, context: str) -> Any:
    if key not in obj:
        raise DeserializationError(f"{context}: missing required key '{key}'")
    return obj[key]


def _require(obj: dict[str, Any], key: str, expected: type, context: str) -> Any:
    value = _require_present(obj, key, context)
    if not _is_instance(value, expected):
        raise DeserializationError(f"{context}: '{key}' must be of type {expected.__name__}")
    return value


def _optional(obj: dict[str, Any], key: str, expected: type, context: str) -> Any:
    value = obj.get(key)
    if value is None:
        return None
    if not _is_instance(value, expected):
        raise DeserializationError(f"{context}: '{key}' must be of type {expected.__name__}")
    return value


def _is_instance(value: Any, expected: type) -> bool:
    # JSON booleans are Python ints; keep them apart.
    if expected is int and isinstance(value, bool):
        return False
    return isinstance(value, expected)
