# Copyright 2026 TableTypes Contributors
# SPDX-License-Identifier: Apache-2.0

"""Entry point for the TableTypes command-line interface."""

import argparse
import logging
import sys
from pathlib import Path

from tabletypes.definitions import load_schema_definition
from tabletypes.errors import DeserializationError, SchemaDefinitionError
from tabletypes.model.schema import Schema
from tabletypes.model.types import NestedField
from tabletypes.serialization.json_codec import SCHEMA_SUFFIX, read_schema, serialize, write_schema

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############


def main() -> None:
    """Run the TableTypes CLI."""
    parser = argparse.ArgumentParser(
        prog="tabletypes",
        description="TableTypes - table schema definition and metadata tool",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    # compile subcommand
    compile_parser = subparsers.add_parser(
        "compile",
        help="Compile a YAML schema definition to JSON metadata",
        description="Validate a YAML schema definition and write it as JSON schema metadata.",
    )
    compile_parser.add_argument("definition", help="Path to the YAML schema definition")
    compile_parser.add_argument(
        "-o",
        "--output",
        default=None,
        help=f"Metadata file to write (use '-' for stdout; default: definition name with '{SCHEMA_SUFFIX}')",
    )

    # show subcommand
    show_parser = subparsers.add_parser(
        "show",
        help="Print the column tree of a schema",
        description="Print every column of a schema, nested columns indented below their parent.",
    )
    show_parser.add_argument("file", help="JSON schema metadata or YAML schema definition")

    # find subcommand
    find_parser = subparsers.add_parser(
        "find",
        help="Look up a column by dotted name or field id",
        description="Resolve a column by its dotted name (e.g. 'points.x') or numeric field id.",
    )
    find_parser.add_argument("file", help="JSON schema metadata or YAML schema definition")
    find_parser.add_argument("column", help="Dotted column name or field id")
    find_parser.add_argument(
        "-i",
        "--ignore-case",
        action="store_true",
        help="Match column names case-insensitively",
    )

    args = parser.parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    if args.command is None:
        parser.print_help()
        sys.exit(0)

    sys.exit(_dispatch(args))


# ################
# Implementation
# ################

_DEFINITION_SUFFIXES = {".yaml", ".yml"}


def _dispatch(args: argparse.Namespace) -> int:
    """Dispatch to the appropriate subcommand handler."""
    if args.command == "compile":
        return _cmd_compile(args)
    if args.command == "show":
        return _cmd_show(args)
    if args.command == "find":
        return _cmd_find(args)
    return 0


def _load_schema(path: Path) -> Schema | None:
    """Load a schema from a definition or metadata file, reporting failures on stderr."""
    if not path.exists():
        print(f"Error: file '{path}' does not exist.", file=sys.stderr)
        return None
    try:
        if path.suffix in _DEFINITION_SUFFIXES:
            return load_schema_definition(path)
        return read_schema(path)
    except (SchemaDefinitionError, DeserializationError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return None
    except OSError as exc:
        print(f"Error: cannot read '{path}': {exc}", file=sys.stderr)
        return None


def _cmd_compile(args: argparse.Namespace) -> int:
    """Handle the compile subcommand."""
    definition = Path(args.definition)
    schema = _load_schema(definition)
    if schema is None:
        return 1

    if args.output == "-":
        print(serialize(schema, indent=2))
        return 0

    if args.output is None:
        output = definition.with_name(definition.name.split(".")[0] + SCHEMA_SUFFIX)
    else:
        output = Path(args.output)
    try:
        write_schema(schema, output)
    except OSError as exc:
        print(f"Error: cannot write '{output}': {exc}", file=sys.stderr)
        return 1

    print(f"Wrote schema with {len(schema.columns)} column(s) to '{output}'.")
    return 0


def _cmd_show(args: argparse.Namespace) -> int:
    """Handle the show subcommand."""
    schema = _load_schema(Path(args.file))
    if schema is None:
        return 1

    print(f"schema {schema.schema_id} (highest field id: {schema.highest_field_id})")
    for line in _render_fields(schema.columns, depth=1):
        print(line)
    return 0


def _cmd_find(args: argparse.Namespace) -> int:
    """Handle the find subcommand."""
    schema = _load_schema(Path(args.file))
    if schema is None:
        return 1

    column: str | int = int(args.column) if args.column.isdecimal() else args.column
    found = schema.find_field(column, case_sensitive=not args.ignore_case)
    if found is None:
        print(f"Error: no column '{args.column}' in schema.", file=sys.stderr)
        return 1

    logger.debug("Resolved %r to field id %d", args.column, found.field_id)
    print(f"id: {found.field_id}")
    print(f"name: {schema.find_column_name(found.field_id)}")
    print(f"required: {'yes' if found.is_required else 'no'}")
    print(f"type: {found.field_type}")
    if found.doc is not None:
        print(f"doc: {found.doc}")
    return 0


def _render_fields(fields: tuple[NestedField, ...], depth: int) -> list[str]:
    """Render fields one per line, nested children indented below their parent."""
    lines: list[str] = []
    indent = "  " * depth
    for f in fields:
        requirement = "optional" if f.is_optional else "required"
        field_type = f.field_type
        label = field_type.kind.value if field_type.is_nested else str(field_type)
        line = f"{indent}{f.field_id}: {f.name}: {requirement} {label}"
        if f.doc is not None:
            line += f" ({f.doc})"
        lines.append(line)
        if field_type.is_nested:
            lines.extend(_render_fields(field_type.fields, depth + 1))  # type: ignore[attr-defined]
    return lines
