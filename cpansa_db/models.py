"""
Core data models for the advisory database.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class Release:
    """A distribution release with its release date."""

    date: str
    version: str

    def to_dict(self) -> Dict[str, str]:
        return {"date": self.date, "version": self.version}


@dataclass(frozen=True)
class ReleaseHistory:
    """Resolved release history of one distribution."""

    versions: List[Release]
    main_module: Optional[str]


@dataclass
class DistributionEntry:
    """Everything the database knows about one distribution."""

    advisories: List[Dict[str, Any]] = field(default_factory=list)
    versions: Optional[List[Release]] = None
    main_module: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"advisories": [dict(a) for a in self.advisories]}
        if self.versions is not None:
            data["versions"] = [release.to_dict() for release in self.versions]
        if self.main_module is not None:
            data["main_module"] = self.main_module
        return data


@dataclass
class Database:
    """The merged advisory database."""

    dists: Dict[str, DistributionEntry] = field(default_factory=dict)
    module2dist: Dict[str, str] = field(default_factory=dict)

    def lookup(self, name: str) -> Optional[DistributionEntry]:
        """Find a distribution by module or distribution name."""
        dist = self.module2dist.get(name, name)
        return self.dists.get(dist)

    def to_dict(self) -> Dict[str, Any]:
        """Return the database as plain dicts and lists."""
        return {
            "dists": {name: entry.to_dict() for name, entry in self.dists.items()},
            "module2dist": dict(self.module2dist),
        }


@dataclass(frozen=True)
class VersionStamp:
    """Database version: generation date plus a same-day serial."""

    date: str
    serial: int

    def __str__(self) -> str:
        return f"{self.date}.{self.serial:03d}"
