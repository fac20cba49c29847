"""Citation engine adapter backed by citeproc-py."""
from __future__ import annotations

import copy
import io
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence

import citeproc
from citeproc import (
    Citation,
    CitationItem,
    CitationStylesBibliography,
    CitationStylesStyle,
    Locator,
    formatter,
)
from citeproc.source.json import CiteProcJSON

from .engine import EngineError
from .models import CitationItemRequest

logger = logging.getLogger(__name__)

BUNDLED_STYLES_DIR = Path(citeproc.__file__).resolve().parent / "data" / "styles"
CSL_NAMESPACE = "http://purl.org/net/xbiblio/csl"

FORMATTERS = {
    "html": formatter.html,
    "plain": formatter.plain,
}


class Bibliographer:
    """Renders citations and bibliographies for one test case.

    Each instance owns its reference table and citation history; create a new
    instance for every case so that disambiguation state does not leak.
    """

    def __init__(self, style_dirs: Iterable[Path] = (), output_format: str = "html"):
        if output_format not in FORMATTERS:
            raise ValueError(f"Unsupported output format: {output_format}")
        self.style_dirs = [Path(directory) for directory in style_dirs]
        self.formatter = FORMATTERS[output_format]
        self.items: Dict[str, Dict[str, Any]] = {}
        self.citations: List[str] = []
        self._style: Optional[CitationStylesStyle] = None
        self._bibliography: Optional[CitationStylesBibliography] = None

    def load_style(self, style: str, lang: str = "en") -> None:
        source = self._locate_style(style)
        logger.debug("Loading style %s (lang=%s)", style if len(style) < 80 else "<inline>", lang)
        self._style = CitationStylesStyle(source, locale=lang, validate=False)
        self._bibliography = None
        self.citations = []

    def _locate_style(self, style: str) -> Any:
        text = style.strip()
        if text.startswith("<"):
            return io.BytesIO(text.encode("utf-8"))
        candidates = [Path(text)]
        candidates.extend(directory / text for directory in self.style_dirs)
        if not text.endswith(".csl"):
            candidates.append(BUNDLED_STYLES_DIR / f"{text}.csl")
        for candidate in candidates:
            if candidate.is_file():
                return str(candidate)
        raise EngineError.style_not_found(style)

    def register_items(self, items: Sequence[Dict[str, Any]]) -> None:
        for item in items:
            self.items[str(item["id"])] = item
        if self._bibliography is not None:
            self._bibliography.source = self._build_source()

    def _build_source(self) -> CiteProcJSON:
        # Keys are always strings, matching the ids produced by the input parser.
        return CiteProcJSON([dict(copy.deepcopy(item), id=key) for key, item in self.items.items()])

    def _ensure_bibliography(self) -> CitationStylesBibliography:
        if self._style is None:
            raise RuntimeError("load_style() must be called before citing")
        if self._bibliography is None:
            self._bibliography = CitationStylesBibliography(
                self._style, self._build_source(), self.formatter
            )
        return self._bibliography

    def cite(self, items: Sequence[CitationItemRequest]) -> None:
        for item in items:
            if item.id not in self.items:
                raise EngineError.unregistered_item(item.id)
        bibliography = self._ensure_bibliography()
        citation = Citation([_to_citation_item(item) for item in items])
        bibliography.register(citation)
        rendered = bibliography.cite(citation, _warn_missing)
        self.citations.append(str(rendered))

    def get_citations(self) -> List[str]:
        return list(self.citations)

    def get_bibliography(self) -> List[str]:
        if self._bibliography is None or not self._has_bibliography():
            return []
        self._bibliography.sort()
        return [str(entry).strip() for entry in self._bibliography.bibliography()]

    def _has_bibliography(self) -> bool:
        return self._style.root.find(f"{{{CSL_NAMESPACE}}}bibliography") is not None


def _to_citation_item(item: CitationItemRequest) -> CitationItem:
    if item.label is not None and item.locator is not None:
        return CitationItem(item.id, locator=Locator(item.label.value, item.locator))
    return CitationItem(item.id)


def _warn_missing(citation_item: CitationItem) -> None:
    logger.warning("citeproc could not resolve item %s", citation_item.key)
