# Copyright 2026 TableTypes Contributors
# SPDX-License-Identifier: Apache-2.0

"""The table schema: a root struct with tree-wide id and name indices."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, PrivateAttr, StrictInt
from pydantic import Field as _Field

from tabletypes.model.indexing import assign_fresh_ids, index_by_id, index_by_name, index_name_by_id
from tabletypes.model.types import DataType, NestedField, StructType

# ###############
# Public Interface
# ###############


class Schema(BaseModel):
    """The columns of a table, described as a root :class:`StructType`.

    Every field id in the tree must be unique. Lookups by id or dotted name
    are answered from indices built once at construction; a missing field is
    reported as ``None``.
    """

    model_config = ConfigDict(frozen=True)

    struct: StructType
    schema_id: StrictInt = _Field(default=0, ge=0)

    _id_to_field: dict[int, NestedField] = PrivateAttr(default_factory=dict)
    _name_to_id: dict[str, int] = PrivateAttr(default_factory=dict)
    _lower_name_to_id: dict[str, int] = PrivateAttr(default_factory=dict)
    _id_to_name: dict[int, str] = PrivateAttr(default_factory=dict)

    @classmethod
    def of(cls, *fields: NestedField, schema_id: int = 0, assign_ids: bool = False) -> Schema:
        """Build a schema from its top-level columns.

        Args:
            fields: The top-level columns, in order.
            schema_id: Identifier of this schema version within a table.
            assign_ids: When True, every id in the tree is replaced with a
                fresh one, numbered from 1 in construction order.

        Raises:
            DuplicateFieldIdError: If an id repeats anywhere in the tree.
            DuplicateFieldNameError: If two sibling columns share a name, or
                two fields share a full dotted name.
        """
        if assign_ids:
            fields = assign_fresh_ids(fields)
        return cls(struct=StructType.of(*fields), schema_id=schema_id)

    def model_post_init(self, __context: Any) -> None:
        self._id_to_field = index_by_id(self.struct)
        self._name_to_id = index_by_name(self.struct)
        lower: dict[str, int] = {}
        for name, field_id in self._name_to_id.items():
            lower.setdefault(name.lower(), field_id)
        self._lower_name_to_id = lower
        self._id_to_name = index_name_by_id(self.struct)

    @property
    def columns(self) -> tuple[NestedField, ...]:
        """Return the top-level columns."""
        return self.struct.fields

    @property
    def highest_field_id(self) -> int:
        """Return the largest id in the tree, or 0 for an empty schema."""
        return max(self._id_to_field, default=0)

    @property
    def field_ids(self) -> tuple[int, ...]:
        """Return every id in the tree in depth-first order."""
        return tuple(self._id_to_field)

    def as_struct(self) -> StructType:
        return self.struct

    def find_field(self, name_or_id: str | int, case_sensitive: bool = True) -> NestedField | None:
        """Return the field with the given id or dotted name, or None."""
        if isinstance(name_or_id, int) and not isinstance(name_or_id, bool):
            return self._id_to_field.get(name_or_id)
        if case_sensitive:
            field_id = self._name_to_id.get(name_or_id)
        else:
            field_id = self._lower_name_to_id.get(name_or_id.lower())
        return self._id_to_field.get(field_id) if field_id is not None else None

    def find_type(self, name_or_id: str | int, case_sensitive: bool = True) -> DataType | None:
        f = self.find_field(name_or_id, case_sensitive)
        return f.field_type if f is not None else None

    def find_column_name(self, field_id: int) -> str | None:
        """Return the full dotted name of the field with *field_id*, or None."""
        return self._id_to_name.get(field_id)

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if not isinstance(other, Schema):
            return NotImplemented
        return self.struct == other.struct

    def __hash__(self) -> int:
        return hash(self.struct)

    def __str__(self) -> str:
        lines = ["table {"]
        lines.extend(f"  {f}" for f in self.struct.fields)
        lines.append("}")
        return "\n".join(lines)
