# Copyright 2026 wsdlgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Entry point for the wsdlgen command-line interface."""

import argparse
import logging
import sys
from pathlib import Path

from wsdlgen.compiler.artifact import DEFAULT_SNAPSHOT_NAME, SnapshotError, read_snapshot, write_snapshot
from wsdlgen.compiler.build import Generator
from wsdlgen.compiler.fetch import RetrievalError
from wsdlgen.compiler.ingest import IngestError
from wsdlgen.config.options import GATHER_MODES, ConfigurationError, GeneratorOptions, load_options

# ###############
# Public Interface
# ###############


def main() -> None:
    """Run the wsdlgen CLI."""
    parser = argparse.ArgumentParser(
        prog="wsdlgen",
        description="wsdlgen: WSDL and XSD model resolution for SOAP client generation",
    )
    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    # parse subcommand
    parse_parser = subparsers.add_parser(
        "parse",
        help="Resolve a WSDL into a model snapshot",
        description="Ingest a WSDL and its schemas, resolve the model, and write a snapshot.",
    )
    parse_parser.add_argument("origin", nargs="?", default=None, help="URL or path of the WSDL document")
    parse_parser.add_argument(
        "--destination",
        default=None,
        help="Directory the generated package is written to",
    )
    parse_parser.add_argument(
        "--config",
        default=None,
        help="YAML file with generator options",
    )
    parse_parser.add_argument(
        "--gather-methods",
        choices=GATHER_MODES,
        default=None,
        help="How operations are grouped into services",
    )
    parse_parser.add_argument(
        "--snapshot",
        default=None,
        help=f"Snapshot file to write (default: <destination>/{DEFAULT_SNAPSHOT_NAME})",
    )
    parse_parser.add_argument("--verbose", action="store_true", help="Enable debug logging")

    # inspect subcommand
    inspect_parser = subparsers.add_parser(
        "inspect",
        help="List the services and structs of a snapshot",
        description="Load a model snapshot and print its services, methods, and structs.",
    )
    inspect_parser.add_argument("snapshot", help="Snapshot file written by 'wsdlgen parse'")

    args = parser.parse_args()
    if args.command is None:
        parser.print_help()
        sys.exit(0)

    logging.basicConfig(
        level=logging.DEBUG if getattr(args, "verbose", False) else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    sys.exit(_dispatch(args))


# ################
# Implementation
# ################


def _dispatch(args: argparse.Namespace) -> int:
    """Dispatch to the appropriate subcommand handler."""
    if args.command == "parse":
        return _cmd_parse(args)
    if args.command == "inspect":
        return _cmd_inspect(args)
    return 0


def _cmd_parse(args: argparse.Namespace) -> int:
    """Handle the parse subcommand."""
    try:
        options = load_options(Path(args.config)) if args.config else GeneratorOptions()
        options = options.with_overrides(
            origin=args.origin,
            destination=args.destination,
            gather_methods=args.gather_methods,
        )
        generator = Generator(options).parse()
    except (ConfigurationError, RetrievalError, IngestError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    snapshot = Path(args.snapshot) if args.snapshot else Path(options.destination) / DEFAULT_SNAPSHOT_NAME
    try:
        write_snapshot(generator, snapshot)
    except OSError as exc:
        print(f"Error: cannot write snapshot: {exc}", file=sys.stderr)
        return 1

    virtual = len(generator.structs.virtual())
    print(
        f"Resolved {len(generator.structs) - virtual} struct(s) ({virtual} virtual) "
        f"and {len(generator.services)} service(s)."
    )
    print(f"Snapshot written to '{snapshot}'.")
    return 0


def _cmd_inspect(args: argparse.Namespace) -> int:
    """Handle the inspect subcommand."""
    try:
        generator = read_snapshot(Path(args.snapshot))
    except SnapshotError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    print(f"Services ({len(generator.services)}):")
    for service in generator.services:
        print(f"  {service.clean_name or service.name}")
        for method in service.methods:
            print(f"    {method.clean_name or method.name} ({method.name})")

    print(f"Structs ({len(generator.structs)}):")
    for struct in generator.structs:
        marker = " [virtual]" if struct.is_virtual else ""
        print(f"  {struct.clean_name or struct.name} ({struct.kind.value}){marker}")
    return 0
