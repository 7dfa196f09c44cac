"""
Build the module to distribution index from the CPAN package listing.
"""

from __future__ import annotations

import csv
import gzip
import logging
import tempfile
from pathlib import Path
from typing import Dict, Iterable, Optional, TextIO, Union

import pandas as pd
import requests
from tqdm import tqdm

from .config import GeneratorConfig, HttpClient
from .distname import DistInfo
from .exceptions import FetchError


logger = logging.getLogger(__name__)


def _skip_header(handle: TextIO) -> int:
    """Consume lines up to and including the first blank line."""
    count = 0
    while True:
        line = handle.readline()
        if not line:
            return count
        count += 1
        if not line.strip():
            return count


def _open_listing(path: Path) -> TextIO:
    with open(path, "rb") as f:
        magic = f.read(2)
    if magic == b"\x1f\x8b":
        return gzip.open(path, "rt", encoding="utf-8", errors="replace")
    return open(path, "r", encoding="utf-8", errors="replace")


class PackageIndexResolver:
    """Map module names to the distributions that own them."""

    def __init__(
        self,
        config: GeneratorConfig,
        client: Optional[HttpClient] = None,
        log: Optional[logging.Logger] = None,
    ) -> None:
        self.config = config
        self.client = client or HttpClient.from_config(config)
        self.log = log or logger

    def download(self, destination: Path) -> Path:
        """Stream the gzip listing to ``destination``."""
        url = self.config.package_index_url
        self.log.info("Downloading package index from %s", url)
        try:
            response = self.client.session.get(url, stream=True, timeout=self.client.timeout)
            response.raise_for_status()
        except requests.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            raise FetchError(f"Package index download failed: {e}", url=url, status_code=status) from e
        except requests.RequestException as e:
            raise FetchError(f"Package index download failed: {e}", url=url) from e

        total_size = int(response.headers.get("content-length", 0))
        with response, open(destination, "wb") as f:
            with tqdm(
                total=total_size,
                unit="B",
                unit_scale=True,
                desc="02packages",
                disable=not self.config.show_progress,
            ) as pbar:
                for chunk in response.iter_content(chunk_size=8192):
                    f.write(chunk)
                    pbar.update(len(chunk))
        return destination

    def fetch(self, dists: Iterable[str]) -> Dict[str, str]:
        """Download the listing and build the index for ``dists``.

        The downloaded file is removed whether or not parsing succeeds.
        """
        with tempfile.TemporaryDirectory(prefix="cpansa-db-") as tmpdir:
            listing = self.download(Path(tmpdir) / "02packages.details.txt.gz")
            return self.parse_file(listing, dists)

    def parse_file(self, path: Union[str, Path], dists: Iterable[str]) -> Dict[str, str]:
        with _open_listing(Path(path)) as handle:
            return self.parse(handle, dists)

    def parse(self, handle: TextIO, dists: Iterable[str]) -> Dict[str, str]:
        """Parse a listing positioned at its first line."""
        wanted = set(dists)
        header_lines = _skip_header(handle)
        self.log.debug("Skipped %d header lines", header_lines)

        frame = self._read_rows(handle)
        module2dist: Dict[str, str] = {}
        path_cache: Dict[str, Optional[str]] = {}
        for module, path in zip(frame["module"], frame["path"]):
            if not module or not path:
                continue
            if path not in path_cache:
                path_cache[path] = DistInfo.from_path(path).dist
            dist = path_cache[path]
            if not dist or dist not in wanted:
                continue
            module2dist[module] = dist

        self.log.info(
            "Indexed %d modules from %d package rows", len(module2dist), len(frame)
        )
        return module2dist

    @staticmethod
    def _read_rows(handle: TextIO) -> pd.DataFrame:
        columns = ["module", "version", "path"]
        try:
            frame = pd.read_csv(
                handle,
                sep=r"\s+",
                header=None,
                names=columns,
                dtype=str,
                keep_default_na=False,
                quoting=csv.QUOTE_NONE,
                on_bad_lines="skip",
            )
        except pd.errors.EmptyDataError:
            return pd.DataFrame(columns=columns)
        return frame.fillna("")
