"""Test run reporting utilities."""
from __future__ import annotations

from typing import List, Optional

from rich.console import Console
from rich.text import Text
from rich.theme import Theme

from .diffing import DELETE, INSERT, diff_text, render_inline_diff
from .models import CaseResult, FailureKind, FailureRecord, FileOutcome

REPORT_THEME = Theme({
    "pass": "bold green",
    "fail": "bold red",
    "error": "bold yellow",
    "file": "bold",
    "removed": "red strike",
    "added": "green underline",
    "muted": "dim",
})


def _case_summary(case_result: CaseResult) -> str:
    citations = case_result.counts.citations
    bibliography = case_result.counts.bibliography
    return (
        f"{case_result.label}: citations {citations.passed} passed, {citations.failed} failed; "
        f"bibliography {bibliography.passed} passed, {bibliography.failed} failed"
    )


def _failure_heading(failure: FailureRecord) -> str:
    if failure.kind is FailureKind.CITATION:
        return f"citation {failure.position + 1} does not match"
    if failure.kind is FailureKind.BIBLIOGRAPHY:
        return "bibliography does not match"
    return f"error: {failure.message}"


def _totals_line(outcomes: List[FileOutcome]) -> str:
    passed_files = sum(1 for outcome in outcomes if outcome.passed)
    return f"{passed_files} of {len(outcomes)} specification files passed"


def render_report(outcomes: List[FileOutcome]) -> str:
    """Return a plain-text report of every specification file that was run."""

    lines = ["Citation Style Test Report"]
    for outcome in outcomes:
        status = "PASS" if outcome.passed else "FAIL"
        lines.append(f"[{status}] {outcome.path}")
        if outcome.load_error:
            lines.append(f"  could not load specification: {outcome.load_error}")
            continue
        for case_result in outcome.result.cases:
            lines.append("  " + _case_summary(case_result))
            for failure in case_result.failures:
                lines.append("    " + _failure_heading(failure))
                if failure.kind is FailureKind.ERROR:
                    continue
                lines.append(_indent("expected: ", failure.expected))
                lines.append(_indent("actual:   ", failure.actual))
                lines.append(_indent("diff:     ", render_inline_diff(diff_text(failure.expected, failure.actual))))
    lines.append(_totals_line(outcomes))
    return "\n".join(lines)


def _indent(prefix: str, text: Optional[str]) -> str:
    pad = " " * (6 + len(prefix))
    body = (text or "").replace("\n", "\n" + pad)
    return " " * 6 + prefix + body


def diff_markup(expected: Optional[str], actual: Optional[str]) -> Text:
    """Build a rich Text marking removed and added character runs."""
    text = Text()
    for segment in diff_text(expected, actual):
        if segment.op == DELETE:
            text.append(segment.text, style="removed")
        elif segment.op == INSERT:
            text.append(segment.text, style="added")
        else:
            text.append(segment.text)
    return text


def print_report(outcomes: List[FileOutcome], console: Optional[Console] = None) -> None:
    """Print a colored report to the console."""

    console = console or Console(theme=REPORT_THEME)
    for outcome in outcomes:
        status = Text("PASS", style="pass") if outcome.passed else Text("FAIL", style="fail")
        console.print(Text.assemble(status, " ", (str(outcome.path), "file")))
        if outcome.load_error:
            console.print(Text(f"  could not load specification: {outcome.load_error}", style="error"))
            continue
        for case_result in outcome.result.cases:
            console.print(Text("  " + _case_summary(case_result), style="muted"))
            for failure in case_result.failures:
                style = "error" if failure.kind is FailureKind.ERROR else "fail"
                console.print(Text("    " + _failure_heading(failure), style=style))
                if failure.kind is FailureKind.ERROR:
                    continue
                console.print(Text("      expected: ") + Text(failure.expected or ""))
                console.print(Text("      actual:   ") + Text(failure.actual or ""))
                console.print(Text("      diff:     ") + diff_markup(failure.expected, failure.actual))
    console.print(_totals_line(outcomes), style="pass" if all(o.passed for o in outcomes) else "fail")
