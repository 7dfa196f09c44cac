"""
Allocate the database version stamp.

The stamp is ``YYYYMMDD.NNN``: the generation date plus a serial that
starts at 1 each day and increments on every same-day run.
"""

from __future__ import annotations

import logging
import re
from datetime import date
from pathlib import Path
from typing import Optional, Tuple

from .interfaces import StampReader
from .models import VersionStamp
from .time_utils import date_stamp


logger = logging.getLogger(__name__)

STAMP_RE = re.compile(r"(?<!\d)(\d{8})\.(\d{3,})(?!\d)")
NO_STAMP = (-1, 0)


class PreviousOutputReader(StampReader):
    """Read the stamp from a previously written output file."""

    def __init__(self, path: Optional[Path]) -> None:
        self.path = Path(path) if path is not None else None

    def read_previous_stamp(self) -> Tuple[int, int]:
        if self.path is None:
            return NO_STAMP
        try:
            text = self.path.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            logger.debug("No previous output at %s: %s", self.path, e)
            return NO_STAMP
        match = STAMP_RE.search(text)
        if not match:
            return NO_STAMP
        return int(match.group(1)), int(match.group(2))


def next_stamp(previous: Tuple[int, int], today: str) -> VersionStamp:
    previous_date, previous_serial = previous
    if previous_date == int(today):
        return VersionStamp(date=today, serial=previous_serial + 1)
    return VersionStamp(date=today, serial=1)


def allocate_stamp(reader: StampReader, today: Optional[date] = None) -> VersionStamp:
    """Compute the stamp for a run happening ``today``."""
    previous = reader.read_previous_stamp()
    stamp = next_stamp(previous, date_stamp(today))
    logger.info("Database version %s (previous %s)", stamp, previous)
    return stamp
