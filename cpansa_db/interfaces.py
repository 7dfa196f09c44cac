"""
Interfaces for external release data and previous-output readers.
"""

from __future__ import annotations

from typing import Dict, List, Protocol, Tuple


class ReleaseSource(Protocol):
    """Query release metadata for a distribution."""

    def fetch_releases(self, distribution: str) -> List[Dict]:
        """Return release records sorted by date, oldest first.

        Each record carries ``date``, ``version``, ``status`` and
        ``main_module``. Raises on transport or response errors.
        """
        ...


class StampReader(Protocol):
    """Recover the version stamp of a previously generated database."""

    def read_previous_stamp(self) -> Tuple[int, int]:
        """Return ``(date, serial)``, or ``(-1, 0)`` when none is found."""
        ...

