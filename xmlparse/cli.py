from __future__ import annotations

import argparse
import importlib.metadata as importlib_metadata
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any

from .config import Config, load_config
from .converter import convert_file
from .sink import OutputError
from .source import InputError
from .whitespace import mappings_line

PROG = "xmlparse"

_EXAMPLES = """\
Examples:
  xmlparse foo.xml
  xmlparse -m -c -l 2 foo.xml bar.xml

  Keep whitespace visible while text processing, then undo the mapping as
  the last step:

  $ MAPS="$(xmlparse --print-mappings)"
  $ xmlparse -m foo.xml | <your text processing> | sed "y/$MAPS/ \\t\\n/"
"""


def _xmlparse_version() -> str:
    try:
        return importlib_metadata.version("xmlparse")
    except importlib_metadata.PackageNotFoundError:
        return "0+unknown"


def _single_char(value: str) -> str:
    if len(value) != 1:
        raise argparse.ArgumentTypeError(
            f"expected a single character, got {value!r}"
        )
    return value


def _positive_int(value: str) -> int:
    try:
        level = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid level: {value!r}") from None
    if level < 1:
        raise argparse.ArgumentTypeError(f"level must be at least 1, got {level}")
    return level


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog=PROG,
        description=(
            "Convert XML documents to a line oriented format: one slash "
            "separated tag path per line, followed by attributes or text."
        ),
        epilog=_EXAMPLES,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    p.add_argument(
        "--version",
        action="version",
        version=f"{PROG} {_xmlparse_version()}",
    )
    p.add_argument(
        "-p",
        "--print-mappings",
        action="store_true",
        help=(
            "Print the characters used to visualize whitespace, in the order "
            "<SPACE><TAB><LF>, and exit."
        ),
    )
    p.add_argument(
        "-m",
        "--map-whitespace",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Transliterate whitespace characters to printable characters.",
    )
    p.add_argument(
        "-c",
        "--compress-whitespace",
        action=argparse.BooleanOptionalAction,
        default=None,
        help=(
            "Compress runs of consecutive spaces into a tab character "
            "according to the compression level."
        ),
    )
    p.add_argument(
        "-l",
        "--compress-level",
        type=_positive_int,
        default=None,
        metavar="LEVEL",
        help="Number of consecutive spaces compressed into one character "
        "(default: 4).",
    )
    p.add_argument(
        "-k",
        "--keep-all-whitespace",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Also print text nodes that contain only whitespace.",
    )
    p.add_argument(
        "--space-map",
        type=_single_char,
        default=None,
        metavar="CHAR",
        help="Character shown for a space (default: ·).",
    )
    p.add_argument(
        "--tab-map",
        type=_single_char,
        default=None,
        metavar="CHAR",
        help="Character shown for a tab (default: »).",
    )
    p.add_argument(
        "--newline-map",
        type=_single_char,
        default=None,
        metavar="CHAR",
        help="Character shown for a line feed (default: ↵).",
    )
    p.add_argument(
        "files",
        type=Path,
        nargs="*",
        metavar="FILE",
        help="XML files to read",
    )
    return p


def _resolve_config(cfg: Config, args: argparse.Namespace) -> Config:
    overrides: dict[str, Any] = {}
    for key in (
        "map_whitespace",
        "compress_whitespace",
        "compress_level",
        "keep_all_whitespace",
        "space_map",
        "tab_map",
        "newline_map",
    ):
        value = getattr(args, key)
        if value is not None:
            overrides[key] = value
    return replace(cfg, **overrides).validate()


def _report_error(name: str, error: Exception) -> None:
    print(f"{PROG}: {name}: {error}", file=sys.stderr)


def _report_warnings(name: str, warnings: list[str]) -> None:
    for msg in warnings:
        print(f"Warning: {name}: {msg}", file=sys.stderr)


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    raw_argv = list(sys.argv[1:] if argv is None else argv)
    if not raw_argv:
        parser.print_help()
        return

    args = parser.parse_args(raw_argv)

    try:
        cfg = _resolve_config(load_config(Path.cwd()), args)
    except (OSError, ValueError) as e:
        parser.error(f"invalid configuration: {e}")

    if args.print_mappings:
        print(mappings_line(cfg))
        return

    if not args.files:
        parser.error("the following arguments are required: FILE")

    failed = 0
    for path in args.files:
        try:
            result = convert_file(path, cfg, sys.stdout)
        except (InputError, OutputError) as e:
            _report_error(str(path), e)
            failed += 1
            continue
        _report_warnings(result.name, result.warnings)

    if failed:
        raise SystemExit(1)


if __name__ == "__main__":
    main()
