"""Parser for the compact citation invocation syntax.

Each invocation string describes one citation cluster. Items within a cluster
are separated by ``;`` and each item reads ``<id> [<label> <locator>]``::

    "Book1 p. 103; Book2 chapter 2"
"""
from __future__ import annotations

from typing import Iterable, List

from .locators import resolve_label
from .models import CitationItemRequest

CLUSTER_SEPARATOR = ";"


def parse_input(raw_invocations: Iterable[str]) -> List[List[CitationItemRequest]]:
    """Turn raw invocation strings into citation clusters, preserving order."""
    return [parse_cluster(raw) for raw in raw_invocations]


def parse_cluster(raw: str) -> List[CitationItemRequest]:
    return [parse_item(segment) for segment in raw.split(CLUSTER_SEPARATOR)]


def parse_item(segment: str) -> CitationItemRequest:
    """Parse one ``id [label locator]`` segment.

    Unknown labels and dangling labels without a locator are dropped, leaving a
    bare item.
    """
    tokens = [token.strip() for token in segment.strip().split()]
    if not tokens:
        return CitationItemRequest(id="")
    item_id = tokens[0]
    if len(tokens) < 3:
        return CitationItemRequest(id=item_id)
    label = resolve_label(tokens[1])
    if label is None:
        return CitationItemRequest(id=item_id)
    return CitationItemRequest(id=item_id, label=label, locator=tokens[2])
