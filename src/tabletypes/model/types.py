# Copyright 2026 TableTypes Contributors
# SPDX-License-Identifier: Apache-2.0

"""Logical data types for table columns.

The type system is a closed set of variants:

* **Stateless primitives** (``boolean``, ``int``, ``long``, ``float``,
  ``double``, ``date``, ``time``, ``timestamp``, ``timestamptz``, ``string``,
  ``uuid``, ``binary``). Each has exactly one canonical instance per process,
  held in a registry built at import time. Obtain them with :func:`primitive`
  or the per-class ``get()`` accessors; copying, pickling, or deserializing
  them always yields the canonical instance again.
* **Parameterized primitives** (``decimal(P, S)`` and ``fixed[L]``). These are
  plain values that compare equal when their parameters are equal.
* **Nested types** (:class:`StructType`, :class:`ListType`, :class:`MapType`),
  built from :class:`NestedField` children. Equality is structural and order
  sensitive.

All types are frozen pydantic models and can be shared freely.
"""

from __future__ import annotations

import re
from enum import Enum
from types import MappingProxyType
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, InstanceOf, PrivateAttr, StrictBool, StrictInt, StrictStr
from pydantic import Field as _Field

from tabletypes.errors import DuplicateFieldIdError, DuplicateFieldNameError, InvalidTypeParameterError

# ###############
# Public Interface
# ###############

MAX_FIELD_ID = 2**31 - 1
MAX_DECIMAL_PRECISION = 38

# Names of the synthetic child fields of lists and maps.
ELEMENT_NAME = "element"
KEY_NAME = "key"
VALUE_NAME = "value"


class TypeKind(Enum):
    """Discriminator for every logical type variant."""

    BOOLEAN = "boolean"
    INT = "int"
    LONG = "long"
    FLOAT = "float"
    DOUBLE = "double"
    DATE = "date"
    TIME = "time"
    TIMESTAMP = "timestamp"
    TIMESTAMPTZ = "timestamptz"
    STRING = "string"
    UUID = "uuid"
    BINARY = "binary"
    DECIMAL = "decimal"
    FIXED = "fixed"
    STRUCT = "struct"
    LIST = "list"
    MAP = "map"

    @property
    def is_stateless(self) -> bool:
        """Return True if this kind has a single canonical instance."""
        return self not in _PARAMETERIZED_KINDS and self not in _NESTED_KINDS

    @property
    def is_nested(self) -> bool:
        return self in _NESTED_KINDS


class DataType(BaseModel):
    """Base class of all logical types.

    Equality and hashing are variant aware: two types are equal when they are
    the same variant and carry equal parameters (or, for nested types, equal
    child fields in the same order).
    """

    model_config = ConfigDict(frozen=True)

    KIND: ClassVar[TypeKind]

    @property
    def kind(self) -> TypeKind:
        return self.KIND

    @property
    def is_primitive(self) -> bool:
        return not self.kind.is_nested

    @property
    def is_nested(self) -> bool:
        return self.kind.is_nested

    def _key(self) -> tuple[Any, ...]:
        """Return the values that distinguish this type from others of its variant."""
        return ()

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if not isinstance(other, DataType):
            return NotImplemented
        return type(self) is type(other) and self._key() == other._key()

    def __hash__(self) -> int:
        return hash((self.kind, self._key()))

    def __str__(self) -> str:
        return self.kind.value


class PrimitiveType(DataType):
    """A type without child fields."""


class StatelessType(PrimitiveType):
    """A primitive type with no parameters, represented by one canonical instance.

    Instances are created once, when this module is imported. Constructing
    another instance afterwards raises :class:`TypeError`.
    """

    @classmethod
    def get(cls) -> StatelessType:
        """Return the canonical instance of this type."""
        return primitive(cls.KIND)

    def model_post_init(self, __context: Any) -> None:
        if _REGISTRY_SEALED:
            raise TypeError(f"{type(self).__name__} is a canonical type; use {type(self).__name__}.get()")

    def __reduce__(self) -> tuple[Any, ...]:
        return (primitive, (self.kind,))

    def __copy__(self) -> StatelessType:
        return self

    def __deepcopy__(self, memo: dict[int, Any] | None = None) -> StatelessType:
        return self


class BooleanType(StatelessType):
    """True or false."""

    KIND: ClassVar[TypeKind] = TypeKind.BOOLEAN


class IntegerType(StatelessType):
    """32-bit signed integer."""

    KIND: ClassVar[TypeKind] = TypeKind.INT


class LongType(StatelessType):
    """64-bit signed integer."""

    KIND: ClassVar[TypeKind] = TypeKind.LONG


class FloatType(StatelessType):
    """32-bit IEEE 754 floating point."""

    KIND: ClassVar[TypeKind] = TypeKind.FLOAT


class DoubleType(StatelessType):
    """64-bit IEEE 754 floating point."""

    KIND: ClassVar[TypeKind] = TypeKind.DOUBLE


class DateType(StatelessType):
    """Calendar date without time of day or zone."""

    KIND: ClassVar[TypeKind] = TypeKind.DATE


class TimeType(StatelessType):
    """Time of day without date or zone."""

    KIND: ClassVar[TypeKind] = TypeKind.TIME


class TimestampType(StatelessType):
    """Date and time, either as a local wall-clock value or adjusted to UTC.

    The two flavours are distinct canonical instances; use :meth:`with_zone`
    and :meth:`without_zone` to obtain them.
    """

    KIND: ClassVar[TypeKind] = TypeKind.TIMESTAMP

    adjust_to_utc: StrictBool

    @classmethod
    def with_zone(cls) -> TimestampType:
        return _REGISTRY[TypeKind.TIMESTAMPTZ]  # type: ignore[return-value]

    @classmethod
    def without_zone(cls) -> TimestampType:
        return _REGISTRY[TypeKind.TIMESTAMP]  # type: ignore[return-value]

    @classmethod
    def get(cls) -> TimestampType:
        return cls.without_zone()

    @property
    def kind(self) -> TypeKind:
        return TypeKind.TIMESTAMPTZ if self.adjust_to_utc else TypeKind.TIMESTAMP

    def _key(self) -> tuple[Any, ...]:
        return (self.adjust_to_utc,)


class StringType(StatelessType):
    """Arbitrary-length UTF-8 character sequence."""

    KIND: ClassVar[TypeKind] = TypeKind.STRING


class UUIDType(StatelessType):
    """Universally unique identifier."""

    KIND: ClassVar[TypeKind] = TypeKind.UUID


class BinaryType(StatelessType):
    """Arbitrary-length byte array."""

    KIND: ClassVar[TypeKind] = TypeKind.BINARY


class DecimalType(PrimitiveType):
    """Fixed-point decimal with a precision of at most 38 digits."""

    KIND: ClassVar[TypeKind] = TypeKind.DECIMAL

    precision: StrictInt
    scale: StrictInt

    @classmethod
    def of(cls, precision: int, scale: int) -> DecimalType:
        """Return a decimal type, validating its parameters.

        Raises:
            InvalidTypeParameterError: If precision is outside ``[1, 38]`` or
                scale is outside ``[0, precision]``.
        """
        if isinstance(precision, bool) or not isinstance(precision, int):
            raise InvalidTypeParameterError(f"Decimal precision must be an integer, got {precision!r}")
        if isinstance(scale, bool) or not isinstance(scale, int):
            raise InvalidTypeParameterError(f"Decimal scale must be an integer, got {scale!r}")
        return cls(precision=precision, scale=scale)

    def model_post_init(self, __context: Any) -> None:
        if not 1 <= self.precision <= MAX_DECIMAL_PRECISION:
            raise InvalidTypeParameterError(
                f"Decimals with precision larger than {MAX_DECIMAL_PRECISION} or smaller than 1 "
                f"are not supported: {self.precision}"
            )
        if not 0 <= self.scale <= self.precision:
            raise InvalidTypeParameterError(f"Decimal scale must be between 0 and {self.precision}: {self.scale}")

    def _key(self) -> tuple[Any, ...]:
        return (self.precision, self.scale)

    def __str__(self) -> str:
        return f"decimal({self.precision}, {self.scale})"


class FixedType(PrimitiveType):
    """Byte array of a fixed length."""

    KIND: ClassVar[TypeKind] = TypeKind.FIXED

    length: StrictInt

    @classmethod
    def of_length(cls, length: int) -> FixedType:
        """Return a fixed type of *length* bytes.

        Raises:
            InvalidTypeParameterError: If *length* is negative.
        """
        if isinstance(length, bool) or not isinstance(length, int):
            raise InvalidTypeParameterError(f"Fixed length must be an integer, got {length!r}")
        return cls(length=length)

    def model_post_init(self, __context: Any) -> None:
        if self.length < 0:
            raise InvalidTypeParameterError(f"Fixed length must not be negative: {self.length}")

    def _key(self) -> tuple[Any, ...]:
        return (self.length,)

    def __str__(self) -> str:
        return f"fixed[{self.length}]"


def primitive(kind: TypeKind | str) -> StatelessType:
    """Return the canonical instance of a stateless primitive type.

    Args:
        kind: A :class:`TypeKind` member or its string value, e.g. ``"long"``.

    Raises:
        InvalidTypeParameterError: If *kind* is unknown or names a
            parameterized or nested type.
    """
    if isinstance(kind, str):
        try:
            kind = TypeKind(kind)
        except ValueError:
            raise InvalidTypeParameterError(f"Unknown type: {kind!r}") from None
    try:
        return _REGISTRY[kind]
    except KeyError:
        raise InvalidTypeParameterError(f"Type {kind.value!r} is not a stateless primitive") from None


def from_primitive_string(text: str) -> PrimitiveType:
    """Parse the canonical string form of a primitive type.

    Stateless kinds resolve to their canonical instances; ``decimal(P, S)``
    and ``fixed[L]`` are validated as if built with :meth:`DecimalType.of`
    and :meth:`FixedType.of_length`.

    Raises:
        InvalidTypeParameterError: If *text* is not a valid primitive type.
    """
    normalized = text.strip().lower()
    if normalized in _REGISTRY_BY_NAME:
        return _REGISTRY_BY_NAME[normalized]
    match = _DECIMAL_PATTERN.fullmatch(normalized)
    if match:
        return DecimalType.of(int(match.group(1)), int(match.group(2)))
    match = _FIXED_PATTERN.fullmatch(normalized)
    if match:
        return FixedType.of_length(int(match.group(1)))
    raise InvalidTypeParameterError(f"Cannot parse type string: {text!r}")


class NestedField(BaseModel):
    """A named, identified, documented binding of a child field to a type.

    The id is the stable identity of the field: it survives renames and is
    what readers and writers use to match columns.
    """

    model_config = ConfigDict(frozen=True)

    field_id: StrictInt = _Field(ge=0, le=MAX_FIELD_ID)
    name: StrictStr = _Field(min_length=1)
    field_type: InstanceOf[DataType]
    is_optional: StrictBool
    doc: StrictStr | None = None

    @classmethod
    def required(cls, field_id: int, name: str, field_type: DataType, doc: str | None = None) -> NestedField:
        return cls(field_id=field_id, name=name, field_type=field_type, is_optional=False, doc=doc)

    @classmethod
    def optional(cls, field_id: int, name: str, field_type: DataType, doc: str | None = None) -> NestedField:
        return cls(field_id=field_id, name=name, field_type=field_type, is_optional=True, doc=doc)

    @property
    def is_required(self) -> bool:
        return not self.is_optional

    def as_optional(self) -> NestedField:
        return self if self.is_optional else self._replace(is_optional=True)

    def as_required(self) -> NestedField:
        return self if self.is_required else self._replace(is_optional=False)

    def with_name(self, name: str) -> NestedField:
        return self._replace(name=name)

    def with_doc(self, doc: str | None) -> NestedField:
        return self._replace(doc=doc)

    def with_type(self, field_type: DataType) -> NestedField:
        return self._replace(field_type=field_type)

    def _replace(self, **changes: Any) -> NestedField:
        values: dict[str, Any] = {
            "field_id": self.field_id,
            "name": self.name,
            "field_type": self.field_type,
            "is_optional": self.is_optional,
            "doc": self.doc,
        }
        values.update(changes)
        return NestedField(**values)

    def _key(self) -> tuple[Any, ...]:
        return (self.field_id, self.name, self.is_optional, self.doc, self.field_type)

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if not isinstance(other, NestedField):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __str__(self) -> str:
        requirement = "optional" if self.is_optional else "required"
        text = f"{self.field_id}: {self.name}: {requirement} {self.field_type}"
        if self.doc is not None:
            text += f" ({self.doc})"
        return text


class NestedType(DataType):
    """A type composed of child :class:`NestedField` values.

    Every nested type exposes its direct children as ``fields``.
    """


class StructType(NestedType):
    """An ordered tuple of uniquely named, uniquely identified fields."""

    KIND: ClassVar[TypeKind] = TypeKind.STRUCT

    fields: tuple[NestedField, ...] = ()

    _fields_by_id: dict[int, NestedField] = PrivateAttr(default_factory=dict)
    _fields_by_name: dict[str, NestedField] = PrivateAttr(default_factory=dict)
    _fields_by_lower_name: dict[str, NestedField] = PrivateAttr(default_factory=dict)

    @classmethod
    def of(cls, *fields: NestedField) -> StructType:
        """Build a struct from *fields*, preserving their order.

        Raises:
            DuplicateFieldIdError: If two fields share an id.
            DuplicateFieldNameError: If two fields share a name.
        """
        return cls(fields=fields)

    def model_post_init(self, __context: Any) -> None:
        by_id: dict[int, NestedField] = {}
        by_name: dict[str, NestedField] = {}
        by_lower_name: dict[str, NestedField] = {}
        for f in self.fields:
            if f.field_id in by_id:
                raise DuplicateFieldIdError(f.field_id, "struct")
            if f.name in by_name:
                raise DuplicateFieldNameError(f.name, "struct")
            by_id[f.field_id] = f
            by_name[f.name] = f
            # The first field wins when names differ only by case.
            by_lower_name.setdefault(f.name.lower(), f)
        self._fields_by_id = by_id
        self._fields_by_name = by_name
        self._fields_by_lower_name = by_lower_name

    def field(self, name_or_id: str | int) -> NestedField | None:
        """Return the child field with the given id or name, or None."""
        if isinstance(name_or_id, int) and not isinstance(name_or_id, bool):
            return self.field_by_id(name_or_id)
        return self.field_by_name(name_or_id)

    def field_by_id(self, field_id: int) -> NestedField | None:
        return self._fields_by_id.get(field_id)

    def field_by_name(self, name: str, case_sensitive: bool = True) -> NestedField | None:
        if case_sensitive:
            return self._fields_by_name.get(name)
        return self._fields_by_lower_name.get(name.lower())

    def field_type(self, name: str) -> DataType | None:
        f = self.field_by_name(name)
        return f.field_type if f is not None else None

    def _key(self) -> tuple[Any, ...]:
        return self.fields

    def __str__(self) -> str:
        return "struct<" + ", ".join(str(f) for f in self.fields) + ">"


class ListType(NestedType):
    """A list whose elements are described by a single field named ``element``."""

    KIND: ClassVar[TypeKind] = TypeKind.LIST

    element_field: NestedField

    @classmethod
    def of_optional(cls, element_id: int, element_type: DataType, doc: str | None = None) -> ListType:
        _check_nested_id("element", element_id)
        return cls(element_field=NestedField.optional(element_id, ELEMENT_NAME, element_type, doc))

    @classmethod
    def of_required(cls, element_id: int, element_type: DataType, doc: str | None = None) -> ListType:
        _check_nested_id("element", element_id)
        return cls(element_field=NestedField.required(element_id, ELEMENT_NAME, element_type, doc))

    @property
    def fields(self) -> tuple[NestedField, ...]:
        return (self.element_field,)

    @property
    def element_id(self) -> int:
        return self.element_field.field_id

    @property
    def element_type(self) -> DataType:
        return self.element_field.field_type

    @property
    def element_doc(self) -> str | None:
        return self.element_field.doc

    @property
    def is_element_optional(self) -> bool:
        return self.element_field.is_optional

    def field(self, name_or_id: str | int) -> NestedField | None:
        if _matches(name_or_id, self.element_id, ELEMENT_NAME):
            return self.element_field
        return None

    def _key(self) -> tuple[Any, ...]:
        return (self.element_field,)

    def __str__(self) -> str:
        return f"list<{self.element_type}>"


class MapType(NestedType):
    """A map from a required ``key`` field to a ``value`` field."""

    KIND: ClassVar[TypeKind] = TypeKind.MAP

    key_field: NestedField
    value_field: NestedField

    @classmethod
    def of_optional(
        cls,
        key_id: int,
        value_id: int,
        key_type: DataType,
        value_type: DataType,
        key_doc: str | None = None,
        value_doc: str | None = None,
    ) -> MapType:
        """Return a map whose values may be null."""
        _check_nested_id("key", key_id)
        _check_nested_id("value", value_id)
        return cls(
            key_field=NestedField.required(key_id, KEY_NAME, key_type, key_doc),
            value_field=NestedField.optional(value_id, VALUE_NAME, value_type, value_doc),
        )

    @classmethod
    def of_required(
        cls,
        key_id: int,
        value_id: int,
        key_type: DataType,
        value_type: DataType,
        key_doc: str | None = None,
        value_doc: str | None = None,
    ) -> MapType:
        """Return a map whose values are never null."""
        _check_nested_id("key", key_id)
        _check_nested_id("value", value_id)
        return cls(
            key_field=NestedField.required(key_id, KEY_NAME, key_type, key_doc),
            value_field=NestedField.required(value_id, VALUE_NAME, value_type, value_doc),
        )

    def model_post_init(self, __context: Any) -> None:
        if self.key_field.is_optional:
            raise InvalidTypeParameterError(f"Map key field {self.key_field.field_id} must be required")
        if self.key_field.field_id == self.value_field.field_id:
            raise DuplicateFieldIdError(self.key_field.field_id, "map")

    @property
    def fields(self) -> tuple[NestedField, ...]:
        return (self.key_field, self.value_field)

    @property
    def key_id(self) -> int:
        return self.key_field.field_id

    @property
    def key_type(self) -> DataType:
        return self.key_field.field_type

    @property
    def key_doc(self) -> str | None:
        return self.key_field.doc

    @property
    def value_id(self) -> int:
        return self.value_field.field_id

    @property
    def value_type(self) -> DataType:
        return self.value_field.field_type

    @property
    def value_doc(self) -> str | None:
        return self.value_field.doc

    @property
    def is_value_optional(self) -> bool:
        return self.value_field.is_optional

    def field(self, name_or_id: str | int) -> NestedField | None:
        if _matches(name_or_id, self.key_id, KEY_NAME):
            return self.key_field
        if _matches(name_or_id, self.value_id, VALUE_NAME):
            return self.value_field
        return None

    def _key(self) -> tuple[Any, ...]:
        return (self.key_field, self.value_field)

    def __str__(self) -> str:
        return f"map<{self.key_type}, {self.value_type}>"


# ################
# Implementation
# ################

_PARAMETERIZED_KINDS = frozenset({TypeKind.DECIMAL, TypeKind.FIXED})
_NESTED_KINDS = frozenset({TypeKind.STRUCT, TypeKind.LIST, TypeKind.MAP})

_DECIMAL_PATTERN = re.compile(r"decimal\(\s*(\d+)\s*,\s*(\d+)\s*\)")
_FIXED_PATTERN = re.compile(r"fixed\[\s*(\d+)\s*\]")


def _check_nested_id(role: str, field_id: int) -> None:
    if isinstance(field_id, bool) or not isinstance(field_id, int):
        raise InvalidTypeParameterError(f"The {role} id must be an integer, got {field_id!r}")
    if not 0 <= field_id <= MAX_FIELD_ID:
        raise InvalidTypeParameterError(f"The {role} id must be between 0 and {MAX_FIELD_ID}: {field_id}")


def _matches(name_or_id: str | int, field_id: int, name: str) -> bool:
    if isinstance(name_or_id, bool):
        return False
    if isinstance(name_or_id, int):
        return name_or_id == field_id
    return name_or_id == name


_REGISTRY_SEALED = False

_REGISTRY: MappingProxyType[TypeKind, StatelessType] = MappingProxyType(
    {
        TypeKind.BOOLEAN: BooleanType(),
        TypeKind.INT: IntegerType(),
        TypeKind.LONG: LongType(),
        TypeKind.FLOAT: FloatType(),
        TypeKind.DOUBLE: DoubleType(),
        TypeKind.DATE: DateType(),
        TypeKind.TIME: TimeType(),
        TypeKind.TIMESTAMP: TimestampType(adjust_to_utc=False),
        TypeKind.TIMESTAMPTZ: TimestampType(adjust_to_utc=True),
        TypeKind.STRING: StringType(),
        TypeKind.UUID: UUIDType(),
        TypeKind.BINARY: BinaryType(),
    }
)

_REGISTRY_BY_NAME: MappingProxyType[str, StatelessType] = MappingProxyType(
    {kind.value: instance for kind, instance in _REGISTRY.items()}
)

_REGISTRY_SEALED = True
