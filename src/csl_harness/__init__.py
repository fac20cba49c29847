"""Conformance test harness for citation styles."""

from .engine import CitationEngine, EngineError, EngineErrorKind
from .input_parser import parse_input
from .locators import LocatorKind
from .models import (
    CitationItemRequest,
    FailureKind,
    FailureRecord,
    RunCounts,
    RunResult,
    TestCase,
)
from .runner import TestRunner
from .specification import Specification, resolve_test_cases

__all__ = [
    "CitationEngine",
    "EngineError",
    "EngineErrorKind",
    "parse_input",
    "LocatorKind",
    "CitationItemRequest",
    "FailureKind",
    "FailureRecord",
    "RunCounts",
    "RunResult",
    "TestCase",
    "TestRunner",
    "Specification",
    "resolve_test_cases",
]
