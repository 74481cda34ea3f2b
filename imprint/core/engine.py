"""
Imprint Search Engine
======================

Orchestrates a complete fingerprint search: open the archive, stream its
class entries through the search driver, apply the cardinality policy,
and summarise the matched classes in a :class:`SearchReport`.

Search Pipeline:
    1. Open the archive and enumerate class entries
    2. Parse each entry (without bytecode unless configured)
    3. Match it against the patterns in order, first match wins
    4. Verify one-to-one cardinality (exact mode)
    5. Re-parse the matched entries to describe them

Errors are logged with their context and re-raised unchanged; the
engine never converts a failed search into a partial report.
"""

from __future__ import annotations

import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, Iterator, Sequence

from shared.config import ImprintConfig
from shared.logger import ImprintLogger

from imprint.core.errors import ImprintError
from imprint.core.models import MatchedClass, SearchMode, SearchReport
from imprint.core.patterns import ClassPat
from imprint.core.search import Match, search_many, verify_exact
from imprint.parsers.jar import JarArchive, JarEntry
from imprint.parsers.pattern_file import load_patterns


class ImprintEngine:
    """Runs pattern searches over JAR archives.

    Usage::

        engine = ImprintEngine()
        patterns = engine.load_patterns("patterns.toml")
        report = engine.search("app.jar", patterns)
        for match in report.matches:
            print(match.pattern_index, match.class_name)
    """

    def __init__(
        self,
        config: ImprintConfig | None = None,
        logger: ImprintLogger | None = None,
    ) -> None:
        """Initialise the engine.

        Args:
            config: Imprint configuration.  Defaults are used if not provided.
            logger: Logger instance.  A new one is created if not provided.
        """
        self._config: ImprintConfig = config or ImprintConfig()
        self._logger: ImprintLogger = logger or ImprintLogger("engine")

    # ------------------------------------------------------------------ #
    #  Entry points
    # ------------------------------------------------------------------ #

    def load_patterns(self, path: str | Path) -> list[ClassPat]:
        """Load patterns from a TOML pattern file."""
        with self._logger.operation("load_patterns"):
            try:
                patterns = load_patterns(path)
            except (ImprintError, OSError) as exc:
                self._logger.error("Cannot load patterns from %s: %s", path, exc)
                raise
            self._logger.info("Loaded %d pattern(s) from %s", len(patterns), path)
            return patterns

    def search(
        self,
        archive_path: str | Path,
        patterns: Sequence[ClassPat],
        exact: bool | None = None,
    ) -> SearchReport:
        """Search an archive on disk for *patterns*.

        Args:
            archive_path: Path of the JAR archive.
            patterns: Patterns in the order results should be reported.
            exact: Require exactly one match per pattern.  ``None`` uses
                the configured default.

        Returns:
            A :class:`SearchReport`; in exact mode its matches are ordered
            by pattern index.

        Raises:
            TooManyMatches, PatternNotFound: exact-mode cardinality failed.
            ClassFormatError, ArchiveError, OSError: the archive or one of
                its entries could not be read.
        """
        search_cfg = self._config.search
        mode = SearchMode.EXACT if (search_cfg.exact if exact is None else exact) else SearchMode.ALL
        report = SearchReport(
            archive=str(archive_path),
            mode=mode,
            pattern_count=len(patterns),
            started_at=datetime.now(timezone.utc),
        )

        with self._logger.operation("search"):
            self._logger.info(
                "Searching %s for %d pattern(s) [%s]",
                archive_path, len(patterns), mode.value,
            )
            start = time.perf_counter()
            try:
                with JarArchive(
                    archive_path,
                    class_suffix=search_cfg.class_suffix,
                    max_entry_size=search_cfg.max_entry_size,
                ) as jar:
                    matches = self._run(jar, patterns, report)
                if mode is SearchMode.EXACT:
                    matches = verify_exact(matches, len(patterns))
            except (ImprintError, OSError) as exc:
                self._logger.error("Search of %s failed: %s", archive_path, exc)
                raise

            report.matches = [self._describe(m, patterns) for m in matches]
            report.duration_seconds = time.perf_counter() - start
            self._logger.info(
                "Scanned %d class(es), %d match(es) in %.3f sec",
                report.candidates_scanned,
                len(report.matches),
                report.duration_seconds,
            )
        return report

    def search_entries(
        self,
        entries: Iterable[JarEntry],
        patterns: Sequence[ClassPat],
    ) -> list[Match]:
        """Bulk search over already materialised entries (no archive)."""
        return search_many(
            entries, patterns, parse_bytecode=self._config.search.parse_bytecode
        )

    # ------------------------------------------------------------------ #
    #  Internals
    # ------------------------------------------------------------------ #

    def _run(
        self,
        entries: Iterable[JarEntry],
        patterns: Sequence[ClassPat],
        report: SearchReport,
    ) -> list[Match]:
        matches = self.search_entries(self._counted(entries, report), patterns)
        for match in matches:
            self._logger.debug(
                "Pattern %d matched %s", match.pattern, match.entry.name,
                pattern=match.pattern, entry=match.entry.name,
            )
        return matches

    @staticmethod
    def _counted(entries: Iterable[JarEntry], report: SearchReport) -> Iterator[JarEntry]:
        for entry in entries:
            report.candidates_scanned += 1
            yield entry

    @staticmethod
    def _describe(match: Match, patterns: Sequence[ClassPat]) -> MatchedClass:
        class_file = match.entry.parse_without_bytecode()
        return MatchedClass(
            pattern_index=match.pattern,
            pattern_name=patterns[match.pattern].name,
            entry_name=match.entry.name,
            class_name=class_file.this_class,
            super_class=class_file.super_class,
            interfaces=list(class_file.interfaces),
            method_count=len(class_file.methods),
            field_count=len(class_file.fields),
        )
