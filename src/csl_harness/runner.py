"""High-level orchestrator for running specifications against an engine."""
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Mapping, Sequence, Union

from .engine import CitationEngine, EngineError, EngineErrorKind
from .input_parser import parse_input
from .models import CaseResult, FailureRecord, RunResult, TestCase
from .specification import Specification, resolve_test_cases

logger = logging.getLogger(__name__)

EngineFactory = Callable[[], CitationEngine]


class TestRunner:
    """Runs every case of a specification, one fresh engine per case."""

    __test__ = False

    def __init__(
        self,
        engine_factory: EngineFactory,
        default_lang: str = "en",
        strict_citation_count: bool = False,
    ):
        self.engine_factory = engine_factory
        self.default_lang = default_lang
        self.strict_citation_count = strict_citation_count

    def run(
        self,
        specification: Union[Specification, Mapping[str, Any]],
        references: Sequence[Dict[str, Any]],
    ) -> RunResult:
        if not isinstance(specification, Specification):
            specification = Specification.from_mapping(specification)
        result = RunResult()
        for index, case in enumerate(resolve_test_cases(specification)):
            result.cases.append(self.run_case(index, case, references))
        return result

    def run_case(
        self, index: int, case: TestCase, references: Sequence[Dict[str, Any]]
    ) -> CaseResult:
        outcome = CaseResult(index=index, case=case)
        context = {"case_index": index, "case_name": case.name}
        logger.debug("Running %s", outcome.label)

        if not case.style:
            self._fail(outcome, FailureRecord.error("No style specified for test case", **context))
            return outcome

        engine = self.engine_factory()
        try:
            engine.load_style(case.style, case.lang or self.default_lang)
        except EngineError as exc:
            if exc.kind is not EngineErrorKind.STYLE_NOT_FOUND:
                raise
            self._fail(outcome, FailureRecord.error(exc.message, **context))
            return outcome

        engine.register_items(references)

        if not case.has_expectations():
            self._fail(outcome, FailureRecord.error("No expected output specified", **context))
            return outcome

        for cluster in parse_input(case.input):
            try:
                engine.cite(cluster)
            except EngineError as exc:
                if exc.kind is not EngineErrorKind.UNREGISTERED_ITEM:
                    raise
                self._fail(
                    outcome,
                    FailureRecord.error(f"Item {exc.item_id} is not registered", **context),
                )

        if case.citations is not None:
            self._compare_citations(outcome, case.citations, engine.get_citations(), context)
        if case.bibliography is not None:
            self._compare_bibliography(outcome, case.bibliography, engine.get_bibliography(), context)

        logger.debug(
            "%s finished: citations %s, bibliography %s",
            outcome.label,
            outcome.counts.citations.as_list(),
            outcome.counts.bibliography.as_list(),
        )
        return outcome

    def _compare_citations(
        self,
        outcome: CaseResult,
        expected: List[str],
        actual: List[str],
        context: Dict[str, Any],
    ) -> None:
        # Only positions present on both sides are compared.
        for position, (want, got) in enumerate(zip(expected, actual)):
            if want == got:
                outcome.counts.citations.passed += 1
            else:
                outcome.counts.citations.failed += 1
                outcome.failures.append(FailureRecord.citation(want, got, position, **context))
        if self.strict_citation_count and len(expected) != len(actual):
            self._fail(
                outcome,
                FailureRecord.error(
                    f"Expected {len(expected)} citations but the engine produced {len(actual)}",
                    **context,
                ),
            )

    @staticmethod
    def _compare_bibliography(
        outcome: CaseResult,
        expected: List[str],
        actual: List[str],
        context: Dict[str, Any],
    ) -> None:
        if expected == actual:
            outcome.counts.bibliography.passed += 1
            return
        outcome.counts.bibliography.failed += 1
        outcome.failures.append(FailureRecord.bibliography(expected, actual, **context))

    @staticmethod
    def _fail(outcome: CaseResult, failure: FailureRecord) -> None:
        logger.warning("%s: %s", outcome.label, failure.message)
        outcome.failures.append(failure)
