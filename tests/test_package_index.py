"""Tests for building module2dist from the package listing."""

import io
from pathlib import Path

import pytest

from cpansa_db.config import GeneratorConfig, HttpClient
from cpansa_db.exceptions import FetchError
from cpansa_db.package_index import PackageIndexResolver


ROWS = (
    "Foo::Bar                  1.00  A/AU/AUTHOR/Foo-Bar-1.00.tar.gz\n"
    "Foo::Bar::Util           undef  A/AU/AUTHOR/Foo-Bar-1.00.tar.gz\n"
    "Other::Module              2.0  B/BO/BOB/Other-Dist-2.0.tar.gz\n"
    "Broken::Row\n"
    "Weird::Module              1.0  X/XY/XYZ/README\n"
)


def _resolver(**kwargs):
    return PackageIndexResolver(GeneratorConfig(show_progress=False, **kwargs))


def test_index_restricted_to_known_distributions(write_package_index):
    path = write_package_index(ROWS)

    module2dist = _resolver().parse_file(path, {"Foo-Bar"})

    assert module2dist == {"Foo::Bar": "Foo-Bar", "Foo::Bar::Util": "Foo-Bar"}


def test_unknown_distribution_rows_are_skipped(write_package_index):
    path = write_package_index(ROWS)

    module2dist = _resolver().parse_file(path, {"Foo-Bar", "Other-Dist"})

    assert module2dist["Other::Module"] == "Other-Dist"
    assert "Weird::Module" not in module2dist
    assert "Broken::Row" not in module2dist


def test_plain_text_listing(tmp_path: Path):
    path = tmp_path / "02packages.details.txt"
    path.write_text("File: 02packages.details.txt\n\n" + ROWS, encoding="utf-8")

    assert _resolver().parse_file(path, {"Other-Dist"}) == {"Other::Module": "Other-Dist"}


def test_header_only_listing_is_empty():
    handle = io.StringIO("File: 02packages.details.txt\nLine-Count: 0\n\n")

    assert _resolver().parse(handle, {"Foo-Bar"}) == {}


class FakeResponse:
    def __init__(self, payload: bytes, status_code: int = 200):
        self.payload = payload
        self.status_code = status_code
        self.headers = {"content-length": str(len(payload))}

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def raise_for_status(self):
        if self.status_code >= 400:
            import requests
            raise requests.HTTPError(f"{self.status_code} Error", response=self)

    def iter_content(self, chunk_size=8192):
        for start in range(0, len(self.payload), chunk_size):
            yield self.payload[start:start + chunk_size]


class FakeSession:
    def __init__(self, response):
        self.response = response
        self.requested = []

    def get(self, url, stream=False, timeout=None):
        self.requested.append(url)
        return self.response


def test_fetch_downloads_parses_and_cleans_up(write_package_index, monkeypatch):
    payload = write_package_index(ROWS).read_bytes()
    session = FakeSession(FakeResponse(payload))
    resolver = PackageIndexResolver(
        GeneratorConfig(show_progress=False),
        client=HttpClient(session=session),
    )
    downloaded = []
    original_parse_file = resolver.parse_file

    def spy_parse_file(path, dists):
        downloaded.append(Path(path))
        return original_parse_file(path, dists)

    monkeypatch.setattr(resolver, "parse_file", spy_parse_file)

    module2dist = resolver.fetch({"Foo-Bar"})

    assert session.requested == [GeneratorConfig().package_index_url]
    assert module2dist["Foo::Bar"] == "Foo-Bar"
    assert not downloaded[0].exists()


def test_fetch_cleans_up_when_parsing_fails(write_package_index, monkeypatch):
    payload = write_package_index(ROWS).read_bytes()
    resolver = PackageIndexResolver(
        GeneratorConfig(show_progress=False),
        client=HttpClient(session=FakeSession(FakeResponse(payload))),
    )
    downloaded = []

    def failing_parse_file(path, dists):
        downloaded.append(Path(path))
        raise RuntimeError("parse failed")

    monkeypatch.setattr(resolver, "parse_file", failing_parse_file)

    with pytest.raises(RuntimeError):
        resolver.fetch({"Foo-Bar"})
    assert not downloaded[0].exists()


def test_download_http_error_raises_fetch_error():
    resolver = PackageIndexResolver(
        GeneratorConfig(show_progress=False),
        client=HttpClient(session=FakeSession(FakeResponse(b"", status_code=503))),
    )

    with pytest.raises(FetchError) as excinfo:
        resolver.fetch({"Foo-Bar"})
    assert excinfo.value.status_code == 503
