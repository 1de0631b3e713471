"""``tfres`` command: parse a file of resource blocks and print the result.

Also usable as ``python -m tfres_core``.
"""

from __future__ import annotations

import sys
from argparse import ArgumentParser
from logging import DEBUG, INFO, Formatter, StreamHandler, getLogger
from typing import IO, Sequence

from .config import DEFAULT_MAX_DEPTH, MAX_DEPTH_LIMIT, ParserConfig
from .errors import ConfigError, ParseError
from .model import ParseResult, Resource, ResourcePropertyValue, VJson
from .reader import parse_resources
from .values import JArray, JObject, JsonValue, JStr


logger = getLogger(__name__)

EXIT_OK = 0
EXIT_PARSE_ERROR = 1
EXIT_IO_ERROR = 2


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------

def _fmt_json(value: JsonValue, indent: int = 0) -> str:
    """Pretty-print a JSON value, one container member per line."""
    pad = "  " * indent
    inner = "  " * (indent + 1)
    if isinstance(value, JObject):
        if not value.entries:
            return "{}"
        lines = ["{"]
        for k, v in value.entries.items():
            lines.append(f"{inner}{JStr(k)}: {_fmt_json(v, indent + 1)}")
        lines.append(pad + "}")
        return "\n".join(lines)
    if isinstance(value, JArray):
        if not value.items:
            return "[]"
        lines = ["["]
        for v in value.items:
            lines.append(inner + _fmt_json(v, indent + 1))
        lines.append(pad + "]")
        return "\n".join(lines)
    return str(value)


def _fmt_value(value: ResourcePropertyValue, indent: int = 0) -> str:
    if isinstance(value, VJson):
        return f"jsonencode({_fmt_json(value.value, indent)})"
    return str(value)


def _fmt_resource(resource: Resource) -> str:
    """Render a resource back in block form, keys aligned."""
    head = f'resource "{resource.res_type}" "{resource.res_name}"'
    if not resource.res_def:
        return head + " {}"
    width = max(len(p.key) for p in resource.res_def)
    lines = [head + " {"]
    for prop in resource.res_def:
        lines.append(f"  {prop.key:<{width}} = {_fmt_value(prop.value, 1)}")
    lines.append("}")
    return "\n".join(lines)


def _show_result(result: ParseResult, dest: IO[str], names_only: bool = False) -> None:
    if names_only:
        for resource in result.resources:
            print(resource.res_name, file=dest)
        return
    for resource in result.resources:
        print(_fmt_resource(resource), file=dest)
    print(f"remainder: {result.remainder!r}", file=dest)
    print(f"resources: {len(result.resources)}", file=dest)


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------

def set_up_logging(debug: bool = False) -> None:
    """Send log records to stderr, replacing any handlers already installed."""
    root_logger = getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    log_level = DEBUG if debug else INFO
    handler = StreamHandler(sys.stderr)
    handler.setLevel(log_level)
    handler.setFormatter(Formatter("%(levelname)s - %(message)s"))
    root_logger.addHandler(handler)
    root_logger.setLevel(log_level)


def create_argument_parser() -> ArgumentParser:
    parser = ArgumentParser(
        prog="tfres",
        description="Parse resource blocks from a Terraform-style file.",
    )
    parser.add_argument("path", help="File containing resource blocks")
    parser.add_argument(
        "--max-depth",
        type=int,
        default=None,
        help=(
            f"Maximum jsonencode nesting depth "
            f"(default: {DEFAULT_MAX_DEPTH}, at most {MAX_DEPTH_LIMIT})"
        ),
    )
    parser.add_argument(
        "--names", action="store_true", help="Print only the resource names"
    )
    parser.add_argument(
        "--debug", action="store_true", help="Enable DEBUG level logging"
    )
    return parser


def main(argv: Sequence[str] | None = None, dest: IO[str] | None = None) -> int:
    """Run the ``tfres`` command and return its exit code."""
    args = create_argument_parser().parse_args(argv)
    dest = dest or sys.stdout
    set_up_logging(args.debug)

    try:
        config = ParserConfig.from_mapping({"max_depth": args.max_depth})
    except ConfigError as exc:
        logger.error(str(exc))
        return EXIT_PARSE_ERROR

    try:
        with open(args.path, encoding="utf-8") as fh:
            source = fh.read()
    except (OSError, UnicodeDecodeError) as exc:
        logger.error(f"Error reading '{args.path}': {exc}")
        return EXIT_IO_ERROR
    logger.debug(f"Read {len(source)} characters from {args.path}")

    try:
        result = parse_resources(source, config)
    except ParseError as exc:
        logger.error(f"Parsing {args.path} failed: {exc}")
        return EXIT_PARSE_ERROR

    logger.debug(f"Parsed {len(result.resources)} resource(s) from {args.path}")
    if result.remainder.strip():
        logger.warning(
            f"Stopped collecting resources with {len(result.remainder)} "
            "characters left unparsed"
        )
    _show_result(result, dest, names_only=args.names)
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
