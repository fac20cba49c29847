"""Contract between the test runner and a citation formatting engine."""
from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional, Protocol, Sequence

from .models import CitationItemRequest


class EngineErrorKind(str, Enum):
    STYLE_NOT_FOUND = "style-not-found"
    UNREGISTERED_ITEM = "unregistered-item"


class EngineError(Exception):
    """Recoverable engine failure, tagged with the condition that caused it."""

    def __init__(self, kind: EngineErrorKind, message: str, item_id: Optional[str] = None):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.item_id = item_id

    @classmethod
    def style_not_found(cls, style: str) -> "EngineError":
        return cls(EngineErrorKind.STYLE_NOT_FOUND, f"Style not found: {style}")

    @classmethod
    def unregistered_item(cls, item_id: str) -> "EngineError":
        return cls(
            EngineErrorKind.UNREGISTERED_ITEM,
            f"Item {item_id} not registered. Pass it to register_items() first.",
            item_id=item_id,
        )


class CitationEngine(Protocol):
    """Stateful citation processor driven by the test runner.

    Citation history accumulates across ``cite`` calls, so the rendering of a
    cluster may depend on the clusters cited before it.
    """

    def load_style(self, style: str, lang: str = "en") -> None:
        """Load a style from a path or inline XML.

        Raises ``EngineError`` tagged ``STYLE_NOT_FOUND`` when the style does not
        exist.
        """
        ...

    def register_items(self, items: Sequence[Dict[str, Any]]) -> None:
        ...

    def cite(self, items: Sequence[CitationItemRequest]) -> None:
        """Render one cluster. Raises ``EngineError`` tagged ``UNREGISTERED_ITEM``."""
        ...

    def get_citations(self) -> List[str]:
        ...

    def get_bibliography(self) -> List[str]:
        ...
