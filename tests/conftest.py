import json
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT / "src") not in sys.path:
    sys.path.insert(0, str(ROOT / "src"))

import pytest

from csl_harness.engine import EngineError


SAMPLE_REFERENCES = [
    {
        "id": "Book1",
        "type": "book",
        "author": [{"family": "Smith", "given": "John"}],
        "title": "Book1",
        "issued": {"date-parts": [[2024, 1, 1]]},
    },
    {
        "id": "Book2",
        "type": "book",
        "author": [{"family": "Smith", "given": "William"}],
        "title": "Book2",
        "issued": {"date-parts": [[2024, 1, 1]]},
    },
    {
        "id": "Article1",
        "type": "article-journal",
        "author": [{"family": "Doe", "given": "Jane"}],
        "title": "Article1",
        "issued": {"date-parts": [[1990, 12, 31]]},
    },
]


class FakeEngine:
    """Scripted engine that records every call made by the runner."""

    def __init__(self, citations=None, bibliography=None, missing_styles=(), load_error=None):
        self.scripted_citations = list(citations or [])
        self.scripted_bibliography = list(bibliography or [])
        self.missing_styles = set(missing_styles)
        self.load_error = load_error
        self.calls = []
        self.items = {}
        self.cited = []

    def load_style(self, style, lang="en"):
        self.calls.append(("load_style", style, lang))
        if self.load_error is not None:
            raise self.load_error
        if style in self.missing_styles:
            raise EngineError.style_not_found(style)

    def register_items(self, items):
        self.calls.append(("register_items", len(items)))
        for item in items:
            self.items[item["id"]] = item

    def cite(self, items):
        self.calls.append(("cite", [item.id for item in items]))
        for item in items:
            if item.id not in self.items:
                raise EngineError.unregistered_item(item.id)
        self.cited.append(list(items))

    def get_citations(self):
        self.calls.append(("get_citations",))
        if self.scripted_citations:
            return list(self.scripted_citations)
        return [" ".join(item.id for item in cluster) for cluster in self.cited]

    def get_bibliography(self):
        self.calls.append(("get_bibliography",))
        return list(self.scripted_bibliography)

    def calls_named(self, name):
        return [call for call in self.calls if call[0] == name]


class FakeEngineFactory:
    def __init__(self, **options):
        self.options = options
        self.instances = []

    def __call__(self):
        engine = FakeEngine(**self.options)
        self.instances.append(engine)
        return engine


@pytest.fixture()
def references():
    return [dict(item) for item in SAMPLE_REFERENCES]


@pytest.fixture()
def engine_factory():
    return FakeEngineFactory


@pytest.fixture()
def references_file(tmp_path: Path) -> Path:
    path = tmp_path / "references.json"
    path.write_text(json.dumps(SAMPLE_REFERENCES))
    return path
