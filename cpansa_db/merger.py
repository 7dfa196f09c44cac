"""
Merge loaded advisories into per-distribution entries.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .models import DistributionEntry


logger = logging.getLogger(__name__)


class AdvisoryMerger:
    """Fold advisory records from many sources into one mapping.

    Merging is additive: a second source for the same distribution is
    reported and its records are appended after the earlier ones. No
    dedup by advisory id happens here.
    """

    def __init__(self, log: Optional[logging.Logger] = None) -> None:
        self.log = log or logger
        self.dists: Dict[str, DistributionEntry] = {}

    def add(self, distribution: str, records: List[Dict[str, Any]]) -> None:
        entry = self.dists.get(distribution)
        if entry is None:
            entry = self.dists[distribution] = DistributionEntry()
        else:
            self.log.warning("Already have advisories for %s", distribution)
        entry.advisories.extend(records)

    def merge(
        self, loaded: Iterable[Tuple[str, List[Dict[str, Any]]]]
    ) -> Dict[str, DistributionEntry]:
        for distribution, records in loaded:
            self.add(distribution, records)
        return self.dists
