"""
Shared date helpers.
"""

from __future__ import annotations

from datetime import date
from typing import Optional


def date_stamp(today: Optional[date] = None) -> str:
    """Return the local calendar date as ``YYYYMMDD``."""
    if today is None:
        today = date.today()
    return today.strftime("%Y%m%d")
