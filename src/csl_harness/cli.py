"""Command line interface for running citation style tests."""
from __future__ import annotations

import argparse
import json
import logging
import sys
from functools import partial
from pathlib import Path
from typing import Any, Dict, List

from rich.console import Console

from .bibliographer import FORMATTERS, Bibliographer
from .config import HarnessSettings, load_settings
from .errors import LoaderError
from .loaders import discover_specifications, load_references, load_specification
from .models import CaseResult, FailureRecord, FileOutcome
from .report import REPORT_THEME, print_report, render_report
from .runner import TestRunner

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_USAGE = 2


def _serialize_failure(failure: FailureRecord) -> Dict[str, Any]:
    return {
        "kind": failure.kind.value,
        "expected": failure.expected,
        "actual": failure.actual,
        "message": failure.message,
        "position": failure.position,
    }


def _serialize_case(case_result: CaseResult) -> Dict[str, Any]:
    return {
        "index": case_result.index,
        "name": case_result.case.name,
        "passed": case_result.passed,
        "citations": case_result.counts.citations.as_list(),
        "bibliography": case_result.counts.bibliography.as_list(),
        "failures": [_serialize_failure(f) for f in case_result.failures],
    }


def _build_result(outcomes: List[FileOutcome]) -> Dict[str, Any]:
    files = []
    for outcome in outcomes:
        entry: Dict[str, Any] = {
            "path": str(outcome.path),
            "passed": outcome.passed,
            "error": outcome.load_error,
            "cases": [],
        }
        if outcome.result is not None:
            counts = outcome.result.counts
            entry["citations"] = counts.citations.as_list()
            entry["bibliography"] = counts.bibliography.as_list()
            entry["cases"] = [_serialize_case(c) for c in outcome.result.cases]
        files.append(entry)
    return {"passed": all(o.passed for o in outcomes), "files": files}


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="csl-harness",
        description="Run citation style conformance tests",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    test = subparsers.add_parser("test", help="Run specification files against their styles")
    test.add_argument(
        "paths",
        nargs="+",
        help="Specification files (YAML or JSON) or directories containing them",
    )
    test.add_argument(
        "--references",
        type=Path,
        help="CSL-JSON reference file (default: $CSL_HARNESS_REFERENCES or references.json)",
    )
    test.add_argument("--lang", help="Locale used by cases that do not set one")
    test.add_argument(
        "--format",
        dest="output_format",
        choices=sorted(FORMATTERS),
        help="Output format the engine renders to",
    )
    test.add_argument(
        "--style-dir",
        action="append",
        type=Path,
        default=[],
        help="Additional directory to search for styles (can be repeated)",
    )
    test.add_argument(
        "--strict-citations",
        action="store_true",
        help="Fail cases whose number of citations differs from the expected number",
    )
    test.add_argument(
        "--json-output",
        type=Path,
        help="Write structured results to a JSON file",
    )
    test.add_argument("--no-color", action="store_true", help="Print a plain-text report")
    test.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def _apply_overrides(settings: HarnessSettings, args: argparse.Namespace) -> HarnessSettings:
    if args.references:
        settings.references = args.references
    if args.lang:
        settings.lang = args.lang
    if args.output_format:
        settings.output_format = args.output_format
    if args.style_dir:
        settings.style_dirs = list(args.style_dir) + settings.style_dirs
    if args.strict_citations:
        settings.strict_citations = True
    if args.verbose:
        settings.log_level = "DEBUG"
    return settings


def run_file(path: Path, references: List[Dict[str, Any]], settings: HarnessSettings) -> FileOutcome:
    try:
        specification = load_specification(path)
    except LoaderError as exc:
        logger.error("Skipping %s: %s", path, exc)
        return FileOutcome(path=path, load_error=str(exc))

    engine_factory = partial(
        Bibliographer,
        style_dirs=[path.parent, *settings.style_dirs],
        output_format=settings.output_format,
    )
    runner = TestRunner(
        engine_factory,
        default_lang=settings.lang,
        strict_citation_count=settings.strict_citations,
    )
    return FileOutcome(path=path, result=runner.run(specification, references))


def main(argv: List[str] | None = None) -> int:
    parser = create_parser()
    args = parser.parse_args(argv)
    settings = _apply_overrides(load_settings(), args)
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.WARNING),
        format="%(levelname)s %(name)s: %(message)s",
    )

    if settings.output_format not in FORMATTERS:
        print(f"Unsupported output format: {settings.output_format}", file=sys.stderr)
        return EXIT_USAGE

    try:
        references = load_references(settings.references)
    except LoaderError as exc:
        print(f"Cannot load references: {exc}", file=sys.stderr)
        return EXIT_USAGE

    references_path = settings.references.resolve()
    spec_paths = [
        path for path in discover_specifications(args.paths) if path.resolve() != references_path
    ]
    if not spec_paths:
        print("No specification files found", file=sys.stderr)
        return EXIT_USAGE

    outcomes = [run_file(path, references, settings) for path in spec_paths]

    if args.no_color:
        print(render_report(outcomes))
    else:
        print_report(outcomes, Console(theme=REPORT_THEME))

    if args.json_output:
        args.json_output.write_text(json.dumps(_build_result(outcomes), indent=2))

    return EXIT_OK if all(outcome.passed for outcome in outcomes) else EXIT_FAILED


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    raise SystemExit(main())
