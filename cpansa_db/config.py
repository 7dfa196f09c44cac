"""
Generator configuration.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple

import requests


METACPAN_RELEASE_SEARCH_URL = "https://fastapi.metacpan.org/v1/release/_search"
PACKAGE_INDEX_URL = "https://www.cpan.org/modules/02packages.details.txt.gz"


@dataclass(frozen=True)
class GeneratorConfig:
    """Settings shared by every stage of a generation run."""

    source_root: Path = Path(".")
    source_glob: str = "cpansa/CPANSA-*.yml"
    metacpan_url: str = METACPAN_RELEASE_SEARCH_URL
    package_index_url: str = PACKAGE_INDEX_URL
    release_page_size: int = 5000
    max_attempts: int = 4
    backoff_step: float = 10.0
    request_timeout: float = 60.0
    stripped_fields: Tuple[str, ...] = ("github_security_advisory",)
    core_distribution: str = "perl"
    core_main_module: str = "perl"
    previous_output: Optional[Path] = None
    show_progress: bool = True


@dataclass
class HttpClient:
    """Owns the HTTP session used by the resolvers."""

    timeout: float = 60.0
    session: requests.Session = field(default_factory=requests.Session)

    @classmethod
    def from_config(cls, config: GeneratorConfig) -> "HttpClient":
        return cls(timeout=config.request_timeout)
