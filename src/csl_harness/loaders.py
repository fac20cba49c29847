"""Loading of specification and reference files."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Iterable, List

import yaml

from .errors import LoaderError
from .specification import Specification

SPECIFICATION_SUFFIXES = (".yaml", ".yml", ".json")


def load_document(file_path: str | Path) -> Any:
    """Read a YAML or JSON file, choosing the parser from the file suffix."""
    path = Path(file_path)
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise LoaderError("file not found", path) from exc
    except OSError as exc:
        raise LoaderError(f"cannot read file ({exc.strerror})", path) from exc
    try:
        if path.suffix.lower() == ".json":
            return json.loads(text)
        return yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise LoaderError(f"cannot parse file: {exc}", path) from exc


def load_specification(file_path: str | Path) -> Specification:
    path = Path(file_path)
    data = load_document(path)
    if not isinstance(data, dict):
        raise LoaderError("specification must be a mapping", path)
    try:
        return Specification.from_mapping(data)
    except LoaderError as exc:
        raise type(exc)(str(exc), path) from exc


def load_references(file_path: str | Path) -> List[Dict[str, Any]]:
    """Load a CSL-JSON reference list and check that ids are present and unique."""
    path = Path(file_path)
    data = load_document(path)
    if not isinstance(data, list):
        raise LoaderError("references must be a list of CSL-JSON items", path)
    seen = set()
    for position, item in enumerate(data):
        if not isinstance(item, dict) or "id" not in item:
            raise LoaderError(f"reference #{position + 1} has no id", path)
        item_id = str(item["id"])
        if item_id in seen:
            raise LoaderError(f"duplicate reference id {item_id}", path)
        seen.add(item_id)
    return data


def discover_specifications(paths: Iterable[str | Path]) -> List[Path]:
    """Expand directories into the specification files they contain.

    Files named explicitly are kept even without a recognised suffix so that a
    typo surfaces as a load error instead of being skipped silently.
    """
    found: List[Path] = []
    for raw in paths:
        path = Path(raw)
        if path.is_dir():
            found.extend(
                sorted(
                    candidate
                    for candidate in path.rglob("*")
                    if candidate.is_file() and candidate.suffix.lower() in SPECIFICATION_SUFFIXES
                )
            )
        else:
            found.append(path)
    return found
