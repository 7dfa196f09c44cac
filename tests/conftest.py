import gzip
from pathlib import Path

import pytest
import yaml


PACKAGES_HEADER = (
    "File:         02packages.details.txt\n"
    "URL:          http://www.perl.com/CPAN/modules/02packages.details.txt\n"
    "Line-Count:   5\n"
    "\n"
)


@pytest.fixture
def write_advisories(tmp_path: Path):
    """Write a CPANSA-style advisory file and return its path."""

    def _write(name: str, document: dict) -> Path:
        directory = tmp_path / "cpansa"
        directory.mkdir(exist_ok=True)
        path = directory / name
        path.write_text(yaml.safe_dump(document, sort_keys=False), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def write_package_index(tmp_path: Path):
    """Write a gzip package listing with a standard header."""

    def _write(rows: str, name: str = "02packages.details.txt.gz") -> Path:
        path = tmp_path / name
        with gzip.open(path, "wt", encoding="utf-8") as f:
            f.write(PACKAGES_HEADER + rows)
        return path

    return _write


class FakeReleaseSource:
    """Release source returning canned results or raising."""

    def __init__(self, releases=None, error=None):
        self.releases = releases or {}
        self.error = error
        self.calls = []

    def fetch_releases(self, distribution):
        self.calls.append(distribution)
        if self.error is not None:
            raise self.error
        return list(self.releases.get(distribution, []))


@pytest.fixture
def release_source():
    return FakeReleaseSource
