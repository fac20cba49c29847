import pytest

from csl_harness.engine import EngineError, EngineErrorKind
from csl_harness.models import FailureKind, FailureRecord
from csl_harness.runner import TestRunner


def test_all_citations_matching(engine_factory, references):
    factory = engine_factory(citations=["Smith 2024a.", "Smith 2024b."])
    result = TestRunner(factory).run(
        {"style": "minimal.csl", "input": ["Book1", "Book2"], "citations": ["Smith 2024a.", "Smith 2024b."]},
        references,
    )

    assert result.passed
    assert result.failures == []
    assert result.counts.citations.as_list() == [2, 0]
    engine = factory.instances[0]
    assert len(engine.calls_named("cite")) == 2
    assert len(engine.calls_named("get_citations")) == 1
    assert engine.calls_named("get_bibliography") == []


def test_mismatched_citation_is_reported(engine_factory, references):
    factory = engine_factory(citations=["Smith 2012.", "Doe 1995."])
    result = TestRunner(factory).run(
        {"style": "minimal.csl", "input": ["Book1", "Book2"], "citations": ["Smith 2012.", "Smith 2015."]},
        references,
    )

    assert not result.passed
    assert len(result.failures) == 1
    failure = result.failures[0]
    assert failure.kind is FailureKind.CITATION
    assert (failure.expected, failure.actual) == ("Smith 2015.", "Doe 1995.")
    assert failure.position == 1
    assert result.counts.citations.as_list() == [1, 1]


def test_bibliography_mismatch_is_one_record(engine_factory, references):
    factory = engine_factory(bibliography=["Jane Doe, Article1, 1990.", "John Smith, Book1, 2024."])
    result = TestRunner(factory).run(
        {
            "style": "minimal.csl",
            "input": ["Book1; Article1"],
            "bibliography": ["John Smith, Book1, 2024.", "John Smith, Book1, 2024."],
        },
        references,
    )

    assert not result.passed
    assert [f.kind for f in result.failures] == [FailureKind.BIBLIOGRAPHY]
    assert result.failures[0].expected == "- John Smith, Book1, 2024.\n- John Smith, Book1, 2024."
    assert result.failures[0].actual == "- Jane Doe, Article1, 1990.\n- John Smith, Book1, 2024."
    assert result.counts.bibliography.as_list() == [0, 1]


def test_bibliography_length_mismatch_fails(engine_factory, references):
    factory = engine_factory(bibliography=["one"])
    result = TestRunner(factory).run(
        {"style": "s.csl", "input": ["Book1"], "bibliography": ["one", "two"]}, references
    )
    assert result.counts.bibliography.as_list() == [0, 1]
    assert len(result.failures) == 1


def test_matching_bibliography_passes(engine_factory, references):
    factory = engine_factory(bibliography=["one", "two"])
    result = TestRunner(factory).run(
        {"style": "s.csl", "input": ["Book1"], "bibliography": ["one", "two"]}, references
    )
    assert result.passed
    assert result.counts.bibliography.as_list() == [1, 0]


def test_case_without_expectations_makes_no_citation_calls(engine_factory, references):
    factory = engine_factory()
    result = TestRunner(factory).run({"style": "s.csl", "input": ["Book1", "Book2"]}, references)

    assert not result.passed
    assert len(result.failures) == 1
    assert result.failures[0].kind is FailureKind.ERROR
    assert result.failures[0].message == "No expected output specified"
    engine = factory.instances[0]
    assert engine.calls_named("cite") == []
    assert engine.calls_named("register_items") == [("register_items", 3)]


def test_missing_style_skips_engine(engine_factory, references):
    factory = engine_factory()
    result = TestRunner(factory).run({"input": ["Book1"], "citations": ["x"]}, references)

    assert [f.kind for f in result.failures] == [FailureKind.ERROR]
    assert "style" in result.failures[0].message.lower()
    assert factory.instances == []


def test_style_not_found_is_case_error(engine_factory, references):
    factory = engine_factory(missing_styles={"gone.csl"})
    result = TestRunner(factory).run(
        {
            "input": ["Book1"],
            "citations": ["Book1"],
            "tests": [{"style": "gone.csl"}, {"style": "present.csl"}],
        },
        references,
    )

    first, second = result.cases
    assert first.failures == [
        FailureRecord.error("Style not found: gone.csl", case_index=0, case_name=None)
    ]
    assert factory.instances[0].calls_named("register_items") == []
    assert second.passed
    assert second.counts.citations.as_list() == [1, 0]


def test_unexpected_load_failure_propagates(engine_factory, references):
    factory = engine_factory(load_error=RuntimeError("broken style"))
    with pytest.raises(RuntimeError):
        TestRunner(factory).run({"style": "s.csl", "input": ["Book1"], "citations": ["x"]}, references)


def test_other_engine_errors_from_load_propagate(engine_factory, references):
    factory = engine_factory(load_error=EngineError(EngineErrorKind.UNREGISTERED_ITEM, "odd"))
    with pytest.raises(EngineError):
        TestRunner(factory).run({"style": "s.csl", "input": ["Book1"], "citations": ["x"]}, references)


def test_unregistered_item_skips_only_that_cluster(engine_factory, references):
    factory = engine_factory()
    result = TestRunner(factory).run(
        {"style": "s.csl", "input": ["Book1", "Nope", "Book2"], "citations": ["Book1", "Book2"]},
        references,
    )

    engine = factory.instances[0]
    assert len(engine.calls_named("cite")) == 3
    assert [f.kind for f in result.failures] == [FailureKind.ERROR]
    assert "Nope" in result.failures[0].message
    assert result.counts.citations.as_list() == [2, 0]


def test_each_case_gets_a_fresh_engine(engine_factory, references):
    factory = engine_factory()
    result = TestRunner(factory).run(
        {
            "style": "s.csl",
            "tests": [
                {"input": ["Book1"], "citations": ["Book1"]},
                {"input": ["Book2"], "citations": ["Book2"]},
            ],
        },
        references,
    )

    assert result.passed
    assert len(factory.instances) == 2
    assert [len(engine.cited) for engine in factory.instances] == [1, 1]


def test_case_language_falls_back_to_default(engine_factory, references):
    factory = engine_factory()
    TestRunner(factory, default_lang="en-GB").run(
        {
            "style": "s.csl",
            "input": ["Book1"],
            "citations": ["Book1"],
            "tests": [{}, {"lang": "de-DE"}],
        },
        references,
    )
    assert [engine.calls_named("load_style")[0][2] for engine in factory.instances] == ["en-GB", "de-DE"]


def test_extra_citations_are_not_compared(engine_factory, references):
    factory = engine_factory(citations=["a", "b"])
    result = TestRunner(factory).run(
        {"style": "s.csl", "input": ["Book1", "Book2"], "citations": ["a", "b", "c"]}, references
    )
    assert result.passed
    assert result.counts.citations.as_list() == [2, 0]


def test_strict_citation_count_reports_length_mismatch(engine_factory, references):
    factory = engine_factory(citations=["a", "b"])
    result = TestRunner(factory, strict_citation_count=True).run(
        {"style": "s.csl", "input": ["Book1", "Book2"], "citations": ["a", "b", "c"]}, references
    )
    assert not result.passed
    assert result.counts.citations.as_list() == [2, 0]
    assert "Expected 3 citations" in result.failures[0].message


def test_counts_accumulate_across_cases(engine_factory, references):
    factory = engine_factory()
    result = TestRunner(factory).run(
        {
            "style": "s.csl",
            "tests": [
                {"input": ["Book1", "Book2"], "citations": ["Book1", "wrong"]},
                {"input": ["Article1"], "citations": ["Article1"]},
            ],
        },
        references,
    )
    assert result.counts.citations.as_list() == [2, 1]
    assert [case.counts.citations.as_list() for case in result.cases] == [[1, 1], [1, 0]]
    assert result.failures[0].case_index == 0


def test_runs_are_deterministic(engine_factory, references):
    spec = {
        "style": "s.csl",
        "tests": [
            {"input": ["Book1", "Nope"], "citations": ["Book1", "Nope"]},
            {"input": ["Book2"], "bibliography": ["x"]},
        ],
    }
    first = TestRunner(engine_factory()).run(spec, references)
    second = TestRunner(engine_factory()).run(spec, references)
    assert first.counts == second.counts
    assert first.failures == second.failures
