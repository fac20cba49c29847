"""Runtime settings read from the environment."""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Mapping, Optional

from dotenv import find_dotenv, load_dotenv

ENV_PREFIX = "CSL_HARNESS_"


@dataclass
class HarnessSettings:
    references: Path = Path("references.json")
    lang: str = "en"
    output_format: str = "html"
    style_dirs: List[Path] = field(default_factory=list)
    strict_citations: bool = False
    log_level: str = "WARNING"


def _as_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


def load_settings(environ: Optional[Mapping[str, str]] = None) -> HarnessSettings:
    """Build settings from ``CSL_HARNESS_*`` variables.

    A ``.env`` file in the working directory is loaded first when reading from
    the process environment; variables already set take precedence over it.
    """
    if environ is None:
        load_dotenv(find_dotenv(usecwd=True))
        environ = os.environ

    def get(name: str) -> Optional[str]:
        value = environ.get(ENV_PREFIX + name)
        return value if value else None

    settings = HarnessSettings()
    if get("REFERENCES"):
        settings.references = Path(get("REFERENCES"))
    if get("LANG"):
        settings.lang = get("LANG")
    if get("OUTPUT_FORMAT"):
        settings.output_format = get("OUTPUT_FORMAT").lower()
    if get("STYLE_DIRS"):
        settings.style_dirs = [Path(part) for part in get("STYLE_DIRS").split(os.pathsep) if part]
    if get("STRICT_CITATIONS"):
        settings.strict_citations = _as_bool(get("STRICT_CITATIONS"))
    if get("LOG_LEVEL"):
        settings.log_level = get("LOG_LEVEL").upper()
    return settings
