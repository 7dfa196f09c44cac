"""
Exceptions raised by the advisory database generator.

GeneratorError (base)
  ├── NoSourcesError (no usable advisory sources, fatal)
  ├── SourceError (one advisory source cannot be read)
  ├── FetchError (external service failure)
  └── OutputError (output destination unwritable)
"""

from __future__ import annotations

from typing import Optional


class GeneratorError(Exception):
    """Base exception for all generator operations."""


class NoSourcesError(GeneratorError):
    """Raised when there is nothing to build the database from."""


class SourceError(GeneratorError):
    """Raised when an advisory source document cannot be loaded."""

    def __init__(self, message: str, source: Optional[str] = None) -> None:
        self.source = source
        super().__init__(message)

    def __str__(self) -> str:
        if self.source:
            return f"[{self.source}] {super().__str__()}"
        return super().__str__()


class FetchError(GeneratorError):
    """Raised when an external service request fails."""

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
    ) -> None:
        self.url = url
        self.status_code = status_code
        super().__init__(message)


class OutputError(GeneratorError):
    """Raised when the generated database cannot be written."""
