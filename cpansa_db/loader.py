"""
Load per-distribution advisory files.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml

from .config import GeneratorConfig
from .exceptions import SourceError


logger = logging.getLogger(__name__)


def discover_sources(config: GeneratorConfig) -> List[Path]:
    """Return the default advisory files in a stable order."""
    return sorted(Path(config.source_root).glob(config.source_glob))


def _is_true(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes")
    return bool(value)


class AdvisoryLoader:
    """Turn advisory documents into stamped advisory records."""

    def __init__(
        self,
        config: GeneratorConfig,
        log: Optional[logging.Logger] = None,
    ) -> None:
        self.config = config
        self.log = log or logger

    def load_file(self, path: Path) -> Tuple[str, List[Dict[str, Any]]]:
        """Read one YAML advisory file."""
        path = Path(path)
        try:
            with open(path, "r", encoding="utf-8") as f:
                document = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise SourceError(f"Cannot load advisories: {e}", source=str(path)) from e
        return self.load_document(document, source=str(path))

    def load_document(
        self, document: Any, source: str = "<document>"
    ) -> Tuple[str, List[Dict[str, Any]]]:
        """Stamp the advisories of a parsed document with its metadata."""
        if document is None:
            document = {}
        if not isinstance(document, dict):
            raise SourceError("Advisory document is not a mapping", source=source)

        distribution = document.get("distribution")
        if distribution is None or distribution == "":
            self.log.warning("No distribution defined in %s", source)
            distribution = ""
        distribution = str(distribution)

        darkpan = _is_true(document.get("darkpan"))
        url = document.get("url")

        advisories = document.get("advisories") or []
        if not isinstance(advisories, list):
            raise SourceError("Advisories are not a list", source=source)

        records = []
        for raw in advisories:
            if not isinstance(raw, dict):
                raise SourceError("Advisory entry is not a mapping", source=source)
            record = dict(raw)
            record["distribution"] = distribution
            if darkpan:
                record["darkpan"] = True
            if url is not None:
                record["url"] = url
            for key in self.config.stripped_fields:
                record.pop(key, None)
            records.append(record)

        self.log.info("%d advisories found in %s", len(records), source)
        return distribution, records
