"""Errors raised while loading test inputs."""

from __future__ import annotations

from pathlib import Path
from typing import Optional


class LoaderError(ValueError):
    """Raised when a specification or reference file cannot be used."""

    def __init__(self, message: str, path: Optional[Path] = None):
        self.path = path
        if path is not None:
            message = f"{path}: {message}"
        super().__init__(message)


class SpecificationError(LoaderError):
    """Raised when a specification document does not match the expected schema."""
