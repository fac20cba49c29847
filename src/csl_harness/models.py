"""Data models for citation style test runs."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional

from .locators import LocatorKind


@dataclass(frozen=True)
class CitationItemRequest:
    """Represents one reference to cite, optionally pinned to a locator."""

    id: str
    label: Optional[LocatorKind] = None
    locator: Optional[str] = None

    def to_dict(self) -> Dict[str, str]:
        data = {"id": self.id}
        if self.label is not None and self.locator is not None:
            data["label"] = self.label.value
            data["locator"] = self.locator
        return data


@dataclass
class TestCase:
    """Represents a resolved, executable test case."""

    __test__ = False

    input: List[str] = field(default_factory=list)
    style: Optional[str] = None
    lang: Optional[str] = None
    citations: Optional[List[str]] = None
    bibliography: Optional[List[str]] = None
    name: Optional[str] = None

    def has_expectations(self) -> bool:
        return self.citations is not None or self.bibliography is not None


class FailureKind(str, Enum):
    ERROR = "error"
    CITATION = "citation"
    BIBLIOGRAPHY = "bibliography"


@dataclass
class FailureRecord:
    """Represents a single failed expectation or a case setup problem."""

    kind: FailureKind
    expected: Optional[str] = None
    actual: Optional[str] = None
    message: Optional[str] = None
    case_index: Optional[int] = None
    case_name: Optional[str] = None
    position: Optional[int] = None

    @classmethod
    def error(cls, message: str, **context: Any) -> "FailureRecord":
        return cls(kind=FailureKind.ERROR, message=message, **context)

    @classmethod
    def citation(
        cls, expected: Optional[str], actual: Optional[str], position: int, **context: Any
    ) -> "FailureRecord":
        return cls(
            kind=FailureKind.CITATION,
            expected=expected,
            actual=actual,
            position=position,
            **context,
        )

    @classmethod
    def bibliography(cls, expected: List[str], actual: List[str], **context: Any) -> "FailureRecord":
        return cls(
            kind=FailureKind.BIBLIOGRAPHY,
            expected=_bulleted(expected),
            actual=_bulleted(actual),
            **context,
        )


def _bulleted(entries: List[str]) -> str:
    return "\n".join(f"- {entry}" for entry in entries)


@dataclass
class Tally:
    passed: int = 0
    failed: int = 0

    def as_list(self) -> List[int]:
        return [self.passed, self.failed]


@dataclass
class RunCounts:
    """Pass/fail tallies for citations and bibliographies."""

    citations: Tally = field(default_factory=Tally)
    bibliography: Tally = field(default_factory=Tally)

    def merge(self, other: "RunCounts") -> None:
        self.citations.passed += other.citations.passed
        self.citations.failed += other.citations.failed
        self.bibliography.passed += other.bibliography.passed
        self.bibliography.failed += other.bibliography.failed


@dataclass
class CaseResult:
    """Outcome of a single test case."""

    index: int
    case: TestCase
    counts: RunCounts = field(default_factory=RunCounts)
    failures: List[FailureRecord] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return not self.failures

    @property
    def label(self) -> str:
        if self.case.name:
            return self.case.name
        return f"case {self.index + 1}"


@dataclass
class RunResult:
    """Outcome of running every case of a specification."""

    cases: List[CaseResult] = field(default_factory=list)

    @property
    def counts(self) -> RunCounts:
        totals = RunCounts()
        for case_result in self.cases:
            totals.merge(case_result.counts)
        return totals

    @property
    def failures(self) -> List[FailureRecord]:
        return [failure for case_result in self.cases for failure in case_result.failures]

    @property
    def passed(self) -> bool:
        return not self.failures


@dataclass
class FileOutcome:
    """Result of one specification file, or the reason it could not be run."""

    path: Path
    result: Optional[RunResult] = None
    load_error: Optional[str] = None

    @property
    def passed(self) -> bool:
        return self.load_error is None and self.result is not None and self.result.passed
