"""Character-level diffs for presenting mismatched output."""
from __future__ import annotations

from dataclasses import dataclass
from difflib import SequenceMatcher
from typing import List, Optional

EQUAL = "equal"
DELETE = "delete"
INSERT = "insert"


@dataclass(frozen=True)
class DiffSegment:
    op: str
    text: str


def diff_text(expected: Optional[str], actual: Optional[str]) -> List[DiffSegment]:
    """Return the runs of text removed from ``expected`` and added in ``actual``."""
    expected = expected or ""
    actual = actual or ""
    matcher = SequenceMatcher(None, expected, actual, autojunk=False)
    segments: List[DiffSegment] = []
    for tag, i1, i2, j1, j2 in matcher.get_opcodes():
        if tag == "equal":
            segments.append(DiffSegment(EQUAL, expected[i1:i2]))
            continue
        if tag in ("delete", "replace"):
            segments.append(DiffSegment(DELETE, expected[i1:i2]))
        if tag in ("insert", "replace"):
            segments.append(DiffSegment(INSERT, actual[j1:j2]))
    return segments


def render_inline_diff(segments: List[DiffSegment]) -> str:
    """Render segments as ``[-removed-]{+added+}`` plain text."""
    parts = []
    for segment in segments:
        if segment.op == DELETE:
            parts.append(f"[-{segment.text}-]")
        elif segment.op == INSERT:
            parts.append(f"{{+{segment.text}+}}")
        else:
            parts.append(segment.text)
    return "".join(parts)
