"""
Resolve release history and main module from MetaCPAN.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Dict, List, Optional

import requests

from .config import GeneratorConfig, HttpClient
from .exceptions import FetchError
from .interfaces import ReleaseSource
from .models import Release, ReleaseHistory
from .retry import attempt, linear_backoff


logger = logging.getLogger(__name__)

RELEASE_FIELDS = ["date", "version", "status", "main_module"]


def _unwrap(value: Any) -> Any:
    # the legacy "fields" response format wraps every value in a list
    if isinstance(value, list) and len(value) == 1:
        return value[0]
    return value


class MetacpanReleaseSource(ReleaseSource):
    """Query the MetaCPAN release search endpoint."""

    def __init__(self, config: GeneratorConfig, client: Optional[HttpClient] = None) -> None:
        self.config = config
        self.client = client or HttpClient.from_config(config)

    def build_query(self, distribution: str) -> Dict[str, Any]:
        return {
            "query": {"match": {"distribution": distribution}},
            "size": self.config.release_page_size,
            "_source": RELEASE_FIELDS,
            "sort": [{"date": "asc"}],
        }

    def fetch_releases(self, distribution: str) -> List[Dict]:
        url = self.config.metacpan_url
        try:
            with self.client.session.post(
                url, json=self.build_query(distribution), timeout=self.client.timeout
            ) as response:
                response.raise_for_status()
                data = response.json()
        except requests.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            raise FetchError(f"Release query for {distribution} failed: {e}", url=url, status_code=status) from e
        except requests.RequestException as e:
            raise FetchError(f"Release query for {distribution} failed: {e}", url=url) from e

        try:
            hits = data["hits"]["hits"]
        except (KeyError, TypeError) as e:
            raise ValueError(f"Malformed release response for {distribution}") from e
        if not isinstance(hits, list):
            raise ValueError(f"Malformed release response for {distribution}: hits is not a list")

        releases = []
        for hit in hits:
            if not isinstance(hit, dict):
                raise ValueError(f"Malformed release hit for {distribution}: {hit!r}")
            source = hit.get("_source") or hit.get("fields") or {}
            if not isinstance(source, dict):
                raise ValueError(f"Malformed release record for {distribution}: {source!r}")
            releases.append({key: _unwrap(source.get(key)) for key in RELEASE_FIELDS})
        return releases


def select_main_module(releases: List[Dict]) -> Optional[str]:
    """Main module of the ``latest`` release, else of the last release."""
    for release in releases:
        if release.get("status") == "latest":
            return release.get("main_module")
    if releases:
        return releases[-1].get("main_module")
    return None


class ReleaseHistoryResolver:
    """Resolve version history for distributions with retries."""

    def __init__(
        self,
        config: GeneratorConfig,
        source: Optional[ReleaseSource] = None,
        sleep: Callable[[float], None] = time.sleep,
        log: Optional[logging.Logger] = None,
    ) -> None:
        self.config = config
        self.source = source or MetacpanReleaseSource(config)
        self.sleep = sleep
        self.log = log or logger

    def query(self, distribution: str) -> List[Dict]:
        """Fetch releases, returning an empty list once retries run out."""
        result = attempt(
            lambda: self.source.fetch_releases(distribution),
            max_attempts=self.config.max_attempts,
            backoff=linear_backoff(self.config.backoff_step),
            retry_on=(FetchError, requests.RequestException, ValueError),
            sleep=self.sleep,
            log=self.log,
        )
        if result.exhausted:
            self.log.warning(
                "Giving up on release query for '%s' after %d attempts: %s",
                distribution, result.attempts, result.error,
            )
            return []
        return result.value or []

    def resolve(self, distribution: str) -> Optional[ReleaseHistory]:
        """Return the release history, or None when no releases exist."""
        self.log.debug("Fetching release history for %s", distribution)
        releases = self.query(distribution)
        if not releases:
            self.log.warning("no releases found on CPAN for '%s'", distribution)
            return None
        versions = [
            Release(date=release.get("date"), version=release.get("version"))
            for release in releases
        ]
        return ReleaseHistory(versions=versions, main_module=select_main_module(releases))
