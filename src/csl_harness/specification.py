"""Test specification documents and their resolution into test cases."""
from __future__ import annotations

from typing import Any, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import SpecificationError
from .models import TestCase

# Fields a test case takes from the document root when it leaves them unset.
INHERITED_FIELDS = ("style", "lang", "input", "citations", "bibliography")


class TestCaseDocument(BaseModel):
    """One entry of a specification's ``tests`` list."""

    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = None
    style: Optional[str] = None
    lang: Optional[str] = None
    input: Optional[List[str]] = None
    citations: Optional[List[str]] = None
    bibliography: Optional[List[str]] = None

    @field_validator("input", "citations", "bibliography", mode="before")
    @classmethod
    def wrap_single_string(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [value]
        return value


class Specification(TestCaseDocument):
    """Root of a specification document."""

    tests: Optional[List[TestCaseDocument]] = Field(default=None)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "Specification":
        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise SpecificationError(_describe(exc)) from exc


def _describe(exc: ValidationError) -> str:
    problems = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"]) or "<root>"
        problems.append(f"{location}: {error['msg']}")
    return "invalid specification (" + "; ".join(problems) + ")"


def resolve_test_cases(spec: Specification) -> List[TestCase]:
    """Flatten a specification into executable test cases.

    A document without ``tests`` is its own single case. Otherwise every case
    uses its own value for each inherited field and falls back to the root's
    value when it has none. Lists are never merged.
    """
    documents = spec.tests if spec.tests is not None else [spec]
    return [_resolve_case(document, spec) for document in documents]


def _resolve_case(document: TestCaseDocument, root: Specification) -> TestCase:
    values = {}
    for name in INHERITED_FIELDS:
        own = getattr(document, name)
        values[name] = own if own is not None else getattr(root, name)
    if values["input"] is None:
        values["input"] = []
    return TestCase(name=document.name, **values)
