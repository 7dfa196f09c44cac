"""
Parse CPAN archive paths into distribution name and version.

Paths look like ``A/AU/AUTHOR/Foo-Bar-1.23.tar.gz``, optionally
prefixed with ``authors/id/``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional, Tuple


_AUTHOR_DIR_RE = re.compile(r"^(((.*?/)?authors/)?id/)?([A-Z])/(\4[A-Z])/(\5[-A-Z0-9]*)/")
_ARCHIVE_RE = re.compile(r"([^/]+)\.(tar\.(?:g?z|bz2)|zip|tgz)$", re.IGNORECASE)
_NAME_VERSION_RE = re.compile(
    r"""^
    (
      (?:
        [-+.]*
        (?:[A-Za-z0-9]+|(?<=\D)_|_(?=\D))*
        (?:
          [A-Za-z](?=[^A-Za-z]|$)
          |
          \d(?=-)
        )
        (?<![._-][vV])
      )+
    )
    (.*)
    $""",
    re.VERBOSE | re.DOTALL,
)
_PERL_RELEASE_RE = re.compile(r"^perl-?\d+\.(\d+)(?:\D(\d+))?(-(?:TRIAL|RC)\d+)?$")


def split_release(release: str) -> Tuple[str, Optional[str], bool]:
    """Split ``Foo-Bar-1.23`` into ``("Foo-Bar", "1.23", is_developer)``."""
    match = _NAME_VERSION_RE.match(release)
    if not match:
        return release, None, False
    dist, version = match.group(1), match.group(2)

    if dist.endswith("-undef") and not version:
        dist = dist[: -len("-undef")]

    if version.endswith("-withoutworldwriteables"):
        version = version[: -len("-withoutworldwriteables")]

    # Unicode-Collate-Standard-V3_1_1-0.1: the V3_1_1 belongs to the name
    m = re.match(r"^(-[Vv].*)-(\d.*)", version, re.DOTALL)
    if m:
        dist += m.group(1)
        version = m.group(2)

    # Task-Deprecations5_14-1.00: the 5_14 belongs to the name
    m = re.match(r"(.+_.*)-(\d.*)", version, re.DOTALL)
    if m:
        dist += m.group(1)
        version = m.group(2)

    # CGI.pm-3.10 style
    if dist.endswith(".pm"):
        dist = dist[:-3]

    if not version:
        m = re.search(r"-(\d+\w)$", dist)
        if m:
            version = m.group(1)
            dist = dist[: m.start()]

    if re.match(r"^\d+$", version):
        m = re.search(r"-(\w+)$", dist)
        if m:
            version = m.group(1) + version
            dist = dist[: m.start()]

    if re.search(r"\d\.\d", version):
        version = re.sub(r"^[-_.]+", "", version)
    else:
        version = re.sub(r"^[-_]+", "", version)

    if not version:
        return dist, None, False

    developer = False
    perl = _PERL_RELEASE_RE.match(release)
    if perl:
        minor = int(perl.group(1))
        patch = int(perl.group(2)) if perl.group(2) else 0
        developer = (minor > 6 and minor % 2 == 1) or patch >= 50 or bool(perl.group(3))
    elif re.search(r"\d\D\d+_\d", version) or "-TRIAL" in version:
        developer = True

    return dist, version, developer


@dataclass(frozen=True)
class DistInfo:
    """Information extracted from a CPAN archive path."""

    pathname: str
    filename: str
    cpanid: Optional[str]
    distvname: Optional[str]
    extension: Optional[str]
    dist: Optional[str]
    version: Optional[str]
    maturity: str

    @classmethod
    def from_path(cls, path: str) -> "DistInfo":
        pathname = re.sub(r"//+", "/", path)

        cpanid = None
        filename = pathname
        author = _AUTHOR_DIR_RE.match(pathname)
        if author:
            cpanid = author.group(6)
            filename = pathname[author.end():]

        distvname = extension = dist = version = None
        developer = False
        archive = _ARCHIVE_RE.search(pathname)
        if archive:
            distvname, extension = archive.group(1), archive.group(2)
            dist, version, developer = split_release(distvname)

        return cls(
            pathname=pathname,
            filename=filename,
            cpanid=cpanid,
            distvname=distvname,
            extension=extension,
            dist=dist,
            version=version,
            maturity="developer" if developer else "released",
        )
