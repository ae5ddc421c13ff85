# Copyright 2026 TableTypes Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tree walks over nested types: id and name indices, and fresh id assignment.

Name indices use dotted paths. Children of lists and maps appear under the
synthetic names ``element``, ``key`` and ``value`` (``points.element.x``,
``locations.value.lat``). When a list element or map value is a struct, its
children are additionally reachable by a short name that omits that segment
(``points.x``, ``locations.lat``). Full names take precedence over short names.
"""

from __future__ import annotations

import itertools
from collections.abc import Callable, Iterable, Iterator

from tabletypes.errors import DuplicateFieldIdError, DuplicateFieldNameError
from tabletypes.model.types import (
    ELEMENT_NAME,
    KEY_NAME,
    VALUE_NAME,
    DataType,
    ListType,
    MapType,
    NestedField,
    StructType,
)

# ###############
# Public Interface
# ###############


def walk_fields(data_type: DataType) -> Iterator[NestedField]:
    """Yield every field below *data_type* in depth-first pre-order."""
    for f in _children(data_type):
        yield f
        yield from walk_fields(f.field_type)


def index_by_id(data_type: DataType) -> dict[int, NestedField]:
    """Map every field id in the tree to its field.

    Raises:
        DuplicateFieldIdError: If an id appears more than once at any depth.
    """
    index: dict[int, NestedField] = {}
    for f in walk_fields(data_type):
        if f.field_id in index:
            raise DuplicateFieldIdError(f.field_id, "schema")
        index[f.field_id] = f
    return index


def index_by_name(data_type: DataType) -> dict[str, int]:
    """Map full and short dotted names to field ids.

    Raises:
        DuplicateFieldNameError: If two fields share a full dotted name, as a
            column ``a.b`` does with child ``b`` of column ``a``.
    """
    full: dict[str, int] = {}
    short: dict[str, int] = {}
    _index_names(data_type, (), (), full, short)
    combined = dict(full)
    for name, field_id in short.items():
        combined.setdefault(name, field_id)
    return combined


def index_name_by_id(data_type: DataType) -> dict[int, str]:
    """Map field ids to their full dotted names."""
    full: dict[str, int] = {}
    _index_names(data_type, (), (), full, {})
    return {field_id: name for name, field_id in full.items()}


def assign_fresh_ids(fields: Iterable[NestedField], start: int = 1) -> tuple[NestedField, ...]:
    """Renumber every field id in *fields* and their subtrees, starting at *start*.

    Ids are assigned level by level: all fields of a struct receive ids before
    any of their children do. Names, types, optionality and docs are kept.
    """
    counter = itertools.count(start)
    return _reassign_fields(tuple(fields), lambda: next(counter))


# ################
# Implementation
# ################


def _children(data_type: DataType) -> tuple[NestedField, ...]:
    if isinstance(data_type, StructType | ListType | MapType):
        return data_type.fields
    return ()


def _index_names(
    data_type: DataType,
    full_prefix: tuple[str, ...],
    short_prefix: tuple[str, ...],
    full: dict[str, int],
    short: dict[str, int],
) -> None:
    if isinstance(data_type, StructType):
        for f in data_type.fields:
            _index_field(f, f.name, False, full_prefix, short_prefix, full, short)
    elif isinstance(data_type, ListType):
        skip = isinstance(data_type.element_type, StructType)
        _index_field(data_type.element_field, ELEMENT_NAME, skip, full_prefix, short_prefix, full, short)
    elif isinstance(data_type, MapType):
        _index_field(data_type.key_field, KEY_NAME, False, full_prefix, short_prefix, full, short)
        skip = isinstance(data_type.value_type, StructType)
        _index_field(data_type.value_field, VALUE_NAME, skip, full_prefix, short_prefix, full, short)


def _index_field(
    f: NestedField,
    name: str,
    skip_in_short: bool,
    full_prefix: tuple[str, ...],
    short_prefix: tuple[str, ...],
    full: dict[str, int],
    short: dict[str, int],
) -> None:
    full_path = (*full_prefix, name)
    full_name = ".".join(full_path)
    if full_name in full:
        raise DuplicateFieldNameError(full_name, "schema")
    full[full_name] = f.field_id
    if skip_in_short:
        short_path = short_prefix
    else:
        short_path = (*short_prefix, name)
        if short_path != full_path:
            short[".".join(short_path)] = f.field_id
    _index_names(f.field_type, full_path, short_path, full, short)


def _reassign_fields(fields: tuple[NestedField, ...], next_id: Callable[[], int]) -> tuple[NestedField, ...]:
    ids = [next_id() for _ in fields]
    return tuple(
        NestedField(
            field_id=field_id,
            name=f.name,
            field_type=_reassign_type(f.field_type, next_id),
            is_optional=f.is_optional,
            doc=f.doc,
        )
        for field_id, f in zip(ids, fields)
    )


def _reassign_type(data_type: DataType, next_id: Callable[[], int]) -> DataType:
    if isinstance(data_type, StructType):
        return StructType.of(*_reassign_fields(data_type.fields, next_id))
    if isinstance(data_type, ListType):
        element_id = next_id()
        element_type = _reassign_type(data_type.element_type, next_id)
        if data_type.is_element_optional:
            return ListType.of_optional(element_id, element_type, data_type.element_doc)
        return ListType.of_required(element_id, element_type, data_type.element_doc)
    if isinstance(data_type, MapType):
        key_id = next_id()
        value_id = next_id()
        key_type = _reassign_type(data_type.key_type, next_id)
        value_type = _reassign_type(data_type.value_type, next_id)
        factory = MapType.of_optional if data_type.is_value_optional else MapType.of_required
        return factory(key_id, value_id, key_type, value_type, data_type.key_doc, data_type.value_doc)
    return data_type
