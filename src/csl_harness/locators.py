"""Vocabulary of citation locator labels."""
from __future__ import annotations

from enum import Enum
from typing import Dict, List, Optional


class LocatorKind(str, Enum):
    """Canonical CSL locator labels."""

    PAGE = "page"
    BOOK = "book"
    CHAPTER = "chapter"
    COLUMN = "column"
    FIGURE = "figure"
    FOLIO = "folio"
    NUMBER = "number"
    LINE = "line"
    NOTE = "note"
    OPUS = "opus"
    PARAGRAPH = "paragraph"
    PART = "part"
    SECTION = "section"
    SUB_VERBO = "sub verbo"
    VERSE = "verse"
    VOLUME = "volume"


ABBREVIATIONS: Dict[str, LocatorKind] = {
    "bk.": LocatorKind.BOOK,
    "bks.": LocatorKind.BOOK,
    "chap.": LocatorKind.CHAPTER,
    "chaps.": LocatorKind.CHAPTER,
    "col.": LocatorKind.COLUMN,
    "cols.": LocatorKind.COLUMN,
    "fig.": LocatorKind.FIGURE,
    "figs.": LocatorKind.FIGURE,
    "fol.": LocatorKind.FOLIO,
    "fols.": LocatorKind.FOLIO,
    "no.": LocatorKind.NUMBER,
    "Os.": LocatorKind.NUMBER,
    "l.": LocatorKind.LINE,
    "ll.": LocatorKind.LINE,
    "n.": LocatorKind.NOTE,
    "nn.": LocatorKind.NOTE,
    "op.": LocatorKind.OPUS,
    "opp.": LocatorKind.OPUS,
    "p": LocatorKind.PAGE,
    "p.": LocatorKind.PAGE,
    "pp.": LocatorKind.PAGE,
    "para.": LocatorKind.PARAGRAPH,
    "paras.": LocatorKind.PARAGRAPH,
    "¶": LocatorKind.PARAGRAPH,
    "¶¶": LocatorKind.PARAGRAPH,
    "§": LocatorKind.PARAGRAPH,
    "§§": LocatorKind.PARAGRAPH,
    "pt.": LocatorKind.PART,
    "pts.": LocatorKind.PART,
    "sec.": LocatorKind.SECTION,
    "secs.": LocatorKind.SECTION,
    "s.v.": LocatorKind.SUB_VERBO,
    "s.vv.": LocatorKind.SUB_VERBO,
    "v.": LocatorKind.VERSE,
    "vv.": LocatorKind.VERSE,
    "vol.": LocatorKind.VOLUME,
    "vols.": LocatorKind.VOLUME,
}

_KINDS_BY_NAME: Dict[str, LocatorKind] = {kind.value: kind for kind in LocatorKind}


def resolve_label(token: str) -> Optional[LocatorKind]:
    """Return the locator kind for an abbreviation or a full label name.

    Matching is exact and case-sensitive, so ``p.`` and ``page`` resolve while
    ``P.`` and ``Page`` do not.
    """
    if token in ABBREVIATIONS:
        return ABBREVIATIONS[token]
    return _KINDS_BY_NAME.get(token)


def abbreviations_for(kind: LocatorKind) -> List[str]:
    return [abbr for abbr, target in ABBREVIATIONS.items() if target is kind]
