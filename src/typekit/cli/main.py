# Copyright 2026 Typekit Contributors
# SPDX-License-Identifier: Apache-2.0

"""Entry point for the typekit command-line interface."""

import argparse
import logging
import sys
from pathlib import Path

from typekit.engine.typekit import InternalInconsistency, Typekit
from typekit.model.registry import NotFound
from typekit.workspace.config import ConfigError, load_project_config
from typekit.workspace.loader import LoaderError, TypekitLoader

# ###############
# Public Interface
# ###############


def main() -> None:
    """Run the typekit CLI."""
    parser = argparse.ArgumentParser(
        prog="typekit",
        description="Typekit metadata inspection tool",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Print debug messages while loading typekits",
    )
    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    # inspect subcommand
    inspect_parser = subparsers.add_parser(
        "inspect",
        help="Show the types and opaques of a typekit",
        description="List the types defined by a typekit and its opaque declarations.",
    )
    _add_typekit_arguments(inspect_parser)

    # intermediates subcommand
    intermediates_parser = subparsers.add_parser(
        "intermediates",
        help="Show the marshalling intermediates of a typekit",
        description="Print the intermediate type of every typekit type that contains opaques.",
    )
    _add_typekit_arguments(intermediates_parser)

    args = parser.parse_args()
    if args.command is None:
        parser.print_help()
        sys.exit(0)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    sys.exit(_dispatch(args))


# ################
# Implementation
# ################


def _add_typekit_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("config", help="Path to the typekits.yaml project configuration")
    parser.add_argument("name", help="Name of the typekit")


def _dispatch(args: argparse.Namespace) -> int:
    """Dispatch to the appropriate subcommand handler."""
    typekit = _load_typekit(Path(args.config), args.name)
    if typekit is None:
        return 1
    try:
        if args.command == "inspect":
            return _cmd_inspect(typekit)
        if args.command == "intermediates":
            return _cmd_intermediates(typekit)
    except (NotFound, InternalInconsistency) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


def _load_typekit(config_path: Path, name: str) -> Typekit | None:
    """Load typekit *name*, reporting failures on stderr."""
    try:
        config = load_project_config(config_path)
        return TypekitLoader(config, config_path.resolve().parent).load(name)
    except (ConfigError, LoaderError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return None


def _cmd_inspect(typekit: Typekit) -> int:
    """Handle the inspect subcommand."""
    print(f"Typekit {typekit.name}")
    if typekit.imported_typekits:
        print(f"  imports: {', '.join(sorted(typekit.imported_typekits))}")

    print(f"Types ({len(typekit.typelist)}):")
    for name in typekit.typelist:
        marker = "  (interface)" if typekit.is_interface_type(name) else ""
        print(f"  {name}{marker}")

    if typekit.opaques:
        print(f"Opaques ({len(typekit.opaques)}):")
        for opaque in typekit.opaques:
            print(f"  {opaque.base_type.name} -> {opaque.intermediate_name}")
            if opaque.include_dirs:
                print(f"    includes: {', '.join(opaque.include_dirs)}")
            if opaque.needs_copy:
                print("    needs copy")
    return 0


def _cmd_intermediates(typekit: Typekit) -> int:
    """Handle the intermediates subcommand."""
    found = False
    for type_ in typekit.self_types():
        if type_.contains_opaques:
            print(f"{type_.name} -> {typekit.intermediate_type_name_for(type_)}")
            found = True
    if not found:
        print(f"Typekit {typekit.name} has no types containing opaques.")
    return 0
