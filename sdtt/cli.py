#!/usr/bin/env python3
"""Command line interface.

Usage:
  sdtt --url "https://example.com/article"
  sdtt --url <url> --presets "Twitter,Facebook"
  sdtt --file page.html --schemas "jsonld:Article"
  sdtt --presets        # list built-in presets
  sdtt --schemas        # list supported schemas

Exit status is 0 when every tested schema passes and 1 on a failed test or
an error (bad selection, unreadable input).
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import TextIO

from sdtt.config.settings import TesterConfig
from sdtt.config.url_policy import looks_like_url
from sdtt.engine.report import SchemaResult, TestReport
from sdtt.errors import ExtractionError, RegistryError, SelectionError
from sdtt.registry.builtin import Registries
from sdtt.registry.selection import split_tokens
from sdtt.runner import StructuredDataTester
from sdtt.telemetry.errors import configure_logging

_LIST = object()


def _package_version() -> str:
    try:
        return version("sdtt")
    except PackageNotFoundError:
        return "0.0.0"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sdtt",
        description="Test a URL or file for structured data and social media metatags.",
    )
    source = parser.add_mutually_exclusive_group()
    source.add_argument("-u", "--url", help="Inspect a URL")
    source.add_argument("-f", "--file", help="Inspect a file")
    parser.add_argument(
        "-p",
        "--presets",
        nargs="?",
        const=_LIST,
        help="Test for specific markup from a list of presets (no value: list presets)",
    )
    parser.add_argument(
        "-s",
        "--schemas",
        nargs="?",
        const=_LIST,
        help="Test for specific schemas, optionally as format:name (no value: list schemas)",
    )
    parser.add_argument("--json", action="store_true", help="Print the report as JSON")
    parser.add_argument("--log-level", default=None, help="Logging level (default: SDTT_LOG_LEVEL)")
    parser.add_argument("-v", "--version", action="version", version=_package_version())
    return parser


def print_presets(registries: Registries, out: TextIO) -> None:
    out.write("Presets:\n")
    for preset in registries.presets.list_all():
        refs = ", ".join(ref.label for ref in preset.schemas)
        out.write(f"  {preset.name:<14} {preset.description} [{refs}]\n")


def print_schemas(registries: Registries, out: TextIO) -> None:
    out.write("Schemas:\n")
    for fmt in registries.schemas.formats():
        names = [d.name for d in registries.schemas.list_all() if d.format == fmt]
        out.write(f"  {fmt:<10} {', '.join(names)}\n")


def _format_value(value: object, limit: int = 60) -> str:
    text = str(value)
    return text if len(text) <= limit else text[: limit - 3] + "..."


def _print_schema_result(result: SchemaResult, out: TextIO) -> None:
    mark = "PASS" if result.passed else "FAIL"
    out.write(f"\n[{mark}] {result.schema_id.label}")
    if result.selected_via and result.selected_via != result.schema_id.label:
        out.write(f" (via {result.selected_via})")
    out.write("\n")
    for field in result.fields:
        if field.present and field.type_valid is False:
            symbol, note = "!", f"invalid {field.expected_type.value}"
        elif field.present:
            symbol, note = "+", _format_value(field.value)
        else:
            symbol, note = "-", "missing"
        optional = "" if field.required else " (optional)"
        out.write(f"  {symbol} {field.key}{optional}: {note}\n")


def print_report(report: TestReport, out: TextIO) -> None:
    out.write(f"Structured data test: {report.input}\n")
    if not report.results:
        out.write("\nNo schemas tested.\n")
    for result in report.results:
        _print_schema_result(result, out)
    summary = report.summary
    status = "PASSED" if report.overall_passed else "FAILED"
    out.write(
        f"\n{status}: {summary.schemas_passed}/{summary.schemas_tested} schemas passed, "
        f"{summary.required_missing} required fields missing, "
        f"{summary.invalid_values} invalid values\n"
    )


def main(argv: list[str] | None = None, tester: StructuredDataTester | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    config = TesterConfig()
    configure_logging(args.log_level or config.log_level)

    out, err = sys.stdout, sys.stderr
    try:
        tester = tester or StructuredDataTester(config)
    except RegistryError as exc:
        err.write(f"Error: {exc}\n")
        return 1
    registries = tester.registries

    if args.presets is _LIST:
        print_presets(registries, out)
        return 0
    if args.schemas is _LIST:
        print_schemas(registries, out)
        return 0

    source = args.url or (Path(args.file) if args.file else None)
    if args.url and not looks_like_url(args.url):
        err.write(f"Error: '{args.url}' is not an absolute URL\n")
        return 1
    if not source:
        parser.print_usage(err)
        err.write("Error: Must provide either URL (-u/--url) or file (-f/--file) to test\n")
        return 1

    try:
        selections = tester.parse(
            split_tokens(args.presets or ""), split_tokens(args.schemas or "")
        )
    except SelectionError as exc:
        err.write(f"Error: {exc}\n")
        return 1

    try:
        outcome = asyncio.run(tester.test(source, selections))
    except ExtractionError as exc:
        err.write(f"Error: {exc}\n")
        return 1

    if args.json:
        out.write(outcome.report.model_dump_json(indent=2) + "\n")
    else:
        print_report(outcome.report, out)
    return 0 if outcome.passed else 1


if __name__ == "__main__":
    raise SystemExit(main())
