# SPDX-License-Identifier: AGPL-3.0-or-later
"""Command line interface for parsing and checking INI files."""

from __future__ import annotations

import argparse
import codecs
import logging
import sys
from pathlib import Path

from .errors import MicroIniError, raise_for_status
from .loader import collect
from .models import ParseReport
from .settings import MicroIniSettings, get_settings
from .status import MIN_LINE_LENGTH, ParserFlags
from .writer import printable, write_jsonl, write_text

EXIT_OK = 0
EXIT_SYNTAX_ERRORS = 1
EXIT_FATAL = 2


def _line_length(raw: str) -> int:
    try:
        value = int(raw)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid line length: {raw!r}") from exc
    if value < MIN_LINE_LENGTH:
        raise argparse.ArgumentTypeError(f"line length must be >= {MIN_LINE_LENGTH}")
    return value


def _encoding(raw: str) -> str:
    try:
        return codecs.lookup(raw).name
    except LookupError as exc:
        raise argparse.ArgumentTypeError(f"unknown encoding: {raw!r}") from exc


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Stream key/value pairs out of INI files")
    subparsers = parser.add_subparsers(dest="command", required=True)

    def _add_common(sub: argparse.ArgumentParser) -> None:
        sub.add_argument("paths", nargs="+", type=Path, help="INI files to read")
        sub.add_argument("--settings", type=Path, help="Settings YAML overriding the defaults")
        sub.add_argument(
            "--bom",
            action="store_true",
            default=None,
            help="Skip a UTF-8 byte-order marker at the start of each file",
        )
        sub.add_argument(
            "--multiline",
            action="store_true",
            default=None,
            help="Join lines ending in a backslash with the following line",
        )
        sub.add_argument(
            "--stop-on-first-error",
            action="store_true",
            default=None,
            help="Stop reading a file at its first malformed line",
        )
        sub.add_argument("--max-line-length", type=_line_length, help="Maximum physical line length")
        sub.add_argument("--encoding", type=_encoding, help="Text encoding of the input files")
        sub.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    parse_parser = subparsers.add_parser("parse", help="Print every key/value pair")
    _add_common(parse_parser)
    parse_parser.add_argument("--out", default="-", help="Destination file ('-' for stdout)")
    parse_parser.add_argument(
        "--format",
        choices=("jsonl", "text"),
        help="Output format (defaults to the configured output format)",
    )

    check_parser = subparsers.add_parser("check", help="Only report malformed lines")
    _add_common(check_parser)
    check_parser.add_argument(
        "--quiet",
        action="store_true",
        help="Do not print anything, only set the exit status",
    )

    return parser.parse_args(argv)


def _resolve_flags(args: argparse.Namespace, settings: MicroIniSettings) -> ParserFlags:
    options = settings.parser
    flags = ParserFlags.NONE
    if options.skip_bom if args.bom is None else args.bom:
        flags |= ParserFlags.BOM
    if options.multiline if args.multiline is None else args.multiline:
        flags |= ParserFlags.MULTILINE
    if options.stop_on_first_error if args.stop_on_first_error is None else args.stop_on_first_error:
        flags |= ParserFlags.STOP_ON_FIRST_ERROR
    return flags


def _read_reports(args: argparse.Namespace, settings: MicroIniSettings) -> list[tuple[Path, ParseReport]]:
    flags = _resolve_flags(args, settings)
    max_line_length = settings.parser.max_line_length if args.max_line_length is None else args.max_line_length
    encoding = settings.parser.encoding if args.encoding is None else args.encoding
    reports = []
    for path in args.paths:
        report = collect(path, flags, encoding=encoding, max_line_length=max_line_length)
        reports.append((path, report))
    return reports


def _report_problems(path: Path, report: ParseReport) -> int:
    for issue in report.issues:
        print(f"{path}:{issue.lineno}: syntax error: {printable(issue.line)}", file=sys.stderr)
    try:
        raise_for_status(report.result, str(path))
    except MicroIniError as exc:
        print(str(exc), file=sys.stderr)
        return EXIT_FATAL
    return EXIT_SYNTAX_ERRORS if report.issues else EXIT_OK


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    settings = get_settings(args.settings)
    reports = _read_reports(args, settings)

    if args.command == "parse":
        entries = [entry for _, report in reports for entry in report.entries]
        output_format = args.format or settings.output.format
        if output_format == "text":
            write_text(entries, args.out)
        else:
            write_jsonl(entries, args.out)

    exit_code = EXIT_OK
    for path, report in reports:
        if args.command == "check" and args.quiet:
            status = EXIT_FATAL if report.fatal else EXIT_SYNTAX_ERRORS if report.issues else EXIT_OK
        else:
            status = _report_problems(path, report)
        exit_code = max(exit_code, status)
    return exit_code


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
