# Copyright 2026 TableTypes Contributors
# SPDX-License-Identifier: Apache-2.0

"""Exception hierarchy for the TableTypes type and schema model."""

# ###############
# Public Interface
# ###############


class TableTypesError(Exception):
    """Base class for all errors raised by TableTypes."""

    def __init__(self, message: str) -> None:
        super().__init__(message)


class InvalidTypeParameterError(TableTypesError):
    """Raised when a type is constructed with out-of-range parameters.

    Covers decimal precision and scale, fixed lengths, negative list or map
    field ids, and primitive type strings that name no known type.
    """


class DuplicateFieldIdError(TableTypesError):
    """Raised when two fields of one struct, map, or schema share an id."""

    def __init__(self, field_id: int, context: str) -> None:
        super().__init__(f"Duplicate field id {field_id} in {context}")
        self.field_id = field_id


class DuplicateFieldNameError(TableTypesError):
    """Raised when two sibling fields of one struct, or two fields of a schema, share a name."""

    def __init__(self, name: str, context: str) -> None:
        super().__init__(f"Duplicate field name {name!r} in {context}")
        self.name = name


class DeserializationError(TableTypesError):
    """Raised when a persisted type or schema is malformed, truncated, or inconsistent."""


class SchemaDefinitionError(TableTypesError):
    """Raised when a YAML schema definition file is invalid or cannot be loaded."""
