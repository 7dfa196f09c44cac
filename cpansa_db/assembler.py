"""
Assemble the advisory database from its sources.
"""

from __future__ import annotations

import logging
from datetime import date
from pathlib import Path
from typing import Optional, Sequence, Tuple

from tqdm import tqdm

from .config import GeneratorConfig
from .exceptions import NoSourcesError
from .interfaces import StampReader
from .loader import AdvisoryLoader, discover_sources
from .merger import AdvisoryMerger
from .models import Database, VersionStamp
from .package_index import PackageIndexResolver
from .releases import ReleaseHistoryResolver
from .version_stamp import PreviousOutputReader, allocate_stamp


logger = logging.getLogger(__name__)


class DatabaseAssembler:
    """Run the load, merge and resolve stages in order."""

    def __init__(
        self,
        config: GeneratorConfig,
        loader: Optional[AdvisoryLoader] = None,
        index_resolver: Optional[PackageIndexResolver] = None,
        release_resolver: Optional[ReleaseHistoryResolver] = None,
        stamp_reader: Optional[StampReader] = None,
        log: Optional[logging.Logger] = None,
    ) -> None:
        self.config = config
        self.log = log or logger
        self.loader = loader or AdvisoryLoader(config, log=self.log)
        self.index_resolver = index_resolver or PackageIndexResolver(config, log=self.log)
        self.release_resolver = release_resolver or ReleaseHistoryResolver(config, log=self.log)
        self.stamp_reader = stamp_reader or PreviousOutputReader(config.previous_output)

    def merge_sources(self, sources: Sequence[Path]) -> Database:
        if not sources:
            sources = discover_sources(self.config)
        if not sources:
            raise NoSourcesError(
                f"No advisory files given and none match "
                f"{self.config.source_glob} under {self.config.source_root}"
            )
        merger = AdvisoryMerger(log=self.log)
        for path in sources:
            distribution, records = self.loader.load_file(path)
            merger.add(distribution, records)
        return Database(dists=merger.dists)

    def resolve_releases(self, database: Database) -> None:
        for distribution in tqdm(
            list(database.dists),
            desc="Release history",
            disable=not self.config.show_progress,
        ):
            history = self.release_resolver.resolve(distribution)
            if history is None:
                continue
            entry = database.dists[distribution]
            entry.versions = history.versions
            entry.main_module = history.main_module

    def resolve_modules(self, database: Database, package_index: Optional[Path] = None) -> None:
        if package_index is not None:
            self.log.info("Reading package index from %s", package_index)
            database.module2dist = self.index_resolver.parse_file(package_index, database.dists)
        else:
            database.module2dist = self.index_resolver.fetch(database.dists)

    def build(
        self,
        sources: Sequence[Path] = (),
        package_index: Optional[Path] = None,
        skip_releases: bool = False,
        today: Optional[date] = None,
    ) -> Tuple[Database, VersionStamp]:
        """Build the database and its version stamp."""
        database = self.merge_sources(sources)
        self.log.info("Merged advisories for %d distributions", len(database.dists))

        self.resolve_modules(database, package_index)
        if not skip_releases:
            self.resolve_releases(database)

        # MetaCPAN has no usable main_module for perl itself
        core = database.dists.get(self.config.core_distribution)
        if core is not None:
            core.main_module = self.config.core_main_module

        stamp = allocate_stamp(self.stamp_reader, today)
        return database, stamp
