"""Main CLI entry point for the xml-to-json command-line tool.

Reads one XML document from a file or standard input, converts it and prints
the resulting JSON text.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional, Union

from xml_to_json import __version__
from xml_to_json.api import XMLToJSONConverter
from xml_to_json.shared import (
    ConfigValidationError,
    ConversionError,
    ConverterConfig,
    DiagnosticSeverity,
    get_logger,
)

DEFAULT_INDENT = 2


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog="xml-to-json",
        description="Convert an XML document into JSON, tolerating malformed input"
    )

    parser.add_argument("--version", action="version", version=__version__)

    parser.add_argument(
        "path",
        nargs="?",
        type=Path,
        help="XML file to convert (default: read standard input)"
    )
    parser.add_argument(
        "--indent", "-i",
        type=int,
        default=DEFAULT_INDENT,
        help=f"Indentation of the JSON output (default: {DEFAULT_INDENT})"
    )
    parser.add_argument(
        "--compact",
        action="store_true",
        help="Print the JSON on a single line"
    )
    parser.add_argument(
        "--max-depth",
        type=int,
        help="Maximum element nesting depth before conversion fails"
    )
    parser.add_argument(
        "--no-trim",
        action="store_true",
        help="Keep surrounding and whitespace-only text"
    )
    parser.add_argument(
        "--output", "-o",
        type=Path,
        help="Output file (default: stdout)"
    )

    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output, including conversion diagnostics"
    )
    verbosity.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Quiet output"
    )

    return parser


def build_config(args: argparse.Namespace) -> ConverterConfig:
    """Translate command-line options into a converter configuration.

    Raises:
        ConfigValidationError: If an option value is out of range
    """
    overrides = {}
    if args.no_trim:
        overrides["reader__trim_text"] = False
    if args.max_depth is not None:
        overrides["tree__max_depth"] = args.max_depth
    return ConverterConfig(name="cli").override(**overrides)


def read_input(path: Optional[Path]) -> Union[str, bytes]:
    """Read the document from ``path``, or from standard input when None.

    Raises:
        OSError: If the file cannot be read
    """
    if path is not None:
        return path.read_bytes()
    stream = getattr(sys.stdin, "buffer", sys.stdin)
    return stream.read()


def format_output(value: object, args: argparse.Namespace) -> str:
    """Serialize the converted value as JSON text."""
    if args.compact:
        return json.dumps(value, ensure_ascii=False, separators=(",", ":"))
    return json.dumps(value, ensure_ascii=False, indent=args.indent)


def _report_diagnostics(result, quiet: bool) -> None:
    for diagnostic in result.diagnostics:
        if quiet and diagnostic.severity != DiagnosticSeverity.CRITICAL:
            continue
        position = diagnostic.position
        location = f"{position['line']}:{position['column']}: " if position else ""
        print(
            f"{diagnostic.severity.name.lower()}: {location}{diagnostic.message}",
            file=sys.stderr
        )


def cmd_convert(args: argparse.Namespace) -> int:
    """Convert one document and write its JSON."""
    logger = get_logger(__name__, None, "cli")

    try:
        config = build_config(args)
    except ConfigValidationError as e:
        print(f"Error: Invalid option: {e}", file=sys.stderr)
        return 1

    try:
        xml = read_input(args.path)
    except OSError as e:
        print(f"Error: Could not read input: {e}", file=sys.stderr)
        return 1

    result = XMLToJSONConverter(config).convert_with_result(xml)
    if args.verbose or not result.success:
        _report_diagnostics(result, args.quiet)

    if not result.success:
        logger.error("Conversion failed", extra={"error": str(result.error)})
        return 1

    try:
        output = format_output(result.value, args)
    except RecursionError:
        # json.dumps recurses once per nesting level
        print(
            f"Error: Converted value reaches depth {result.metrics.max_depth_reached}, "
            "too deep to serialize as JSON; lower --max-depth",
            file=sys.stderr
        )
        return 1

    if args.output:
        args.output.write_text(output + "\n", encoding="utf-8")
        if not args.quiet:
            print(f"JSON written to {args.output}", file=sys.stderr)
    else:
        print(output)

    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    # Set up logging verbosity
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)
    elif args.quiet:
        logging.basicConfig(level=logging.ERROR)

    try:
        return cmd_convert(args)
    except ConversionError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nOperation interrupted by user", file=sys.stderr)
        return 130  # Standard exit code for SIGINT


if __name__ == "__main__":
    sys.exit(main())
