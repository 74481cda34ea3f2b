"""Tests for the archive-level search engine."""

from __future__ import annotations

import json

import pytest

from shared.config import ImprintConfig
from shared.logger import ImprintLogger

from imprint.core.engine import ImprintEngine
from imprint.core.errors import ArchiveError, PatternError, PatternNotFound
from imprint.core.models import SearchMode
from imprint.parsers.jar import JarEntry

pytestmark = pytest.mark.search


@pytest.fixture
def engine() -> ImprintEngine:
    return ImprintEngine(
        config=ImprintConfig(),
        logger=ImprintLogger("test-engine", console_output=False),
    )


@pytest.fixture
def jar(make_jar, codec_classes):
    return make_jar({"META-INF/MANIFEST.MF": b"", **codec_classes})


class TestExactSearch:
    def test_report(self, engine, jar, patterns_file) -> None:
        """An exact search reports one class per pattern, in pattern order."""
        report = engine.search(jar, engine.load_patterns(patterns_file))
        assert report.mode is SearchMode.EXACT
        assert report.pattern_count == 2
        assert report.candidates_scanned == 3
        assert [(m.pattern_index, m.class_name) for m in report.matches] == [
            (0, "a/b"),
            (1, "a/c"),
        ]
        codec = report.matches[0]
        assert codec.pattern_name == "PacketCodec"
        assert codec.entry_name == "a/b.class"
        assert codec.super_class == "java/lang/Object"
        assert (codec.method_count, codec.field_count) == (2, 2)
        assert report.matches[1].interfaces == ["java/lang/Runnable"]
        assert report.unmatched_patterns == []
        assert report.duration_seconds >= 0

    def test_cardinality_failure_propagates(self, engine, make_jar, codec_classes, patterns_file) -> None:
        """A missing class aborts the exact search."""
        path = make_jar({"a/b.class": codec_classes["a/b.class"]}, name="partial.jar")
        with pytest.raises(PatternNotFound) as exc_info:
            engine.search(path, engine.load_patterns(patterns_file))
        assert exc_info.value.pattern == 1


class TestAllSearch:
    def test_unmatched_patterns_reported(self, engine, make_jar, codec_classes, patterns_file) -> None:
        """Bulk mode keeps partial results and lists unmatched patterns."""
        path = make_jar({"a/c.class": codec_classes["a/c.class"]}, name="partial.jar")
        report = engine.search(path, engine.load_patterns(patterns_file), exact=False)
        assert report.mode is SearchMode.ALL
        assert [m.pattern_index for m in report.matches] == [1]
        assert report.unmatched_patterns == [0]

    def test_configured_default(self, jar, patterns_file) -> None:
        """The configured mode applies when none is given."""
        config = ImprintConfig()
        config.search.exact = False
        engine = ImprintEngine(config=config, logger=ImprintLogger("t", console_output=False))
        report = engine.search(jar, engine.load_patterns(patterns_file))
        assert report.mode is SearchMode.ALL

    def test_search_entries(self, engine, codec_classes, patterns_file) -> None:
        """In-memory entries are searched without an archive."""
        entries = [JarEntry(name, data) for name, data in codec_classes.items()]
        matches = engine.search_entries(entries, engine.load_patterns(patterns_file))
        assert [(m.entry.name, m.pattern) for m in matches] == [("a/b.class", 0), ("a/c.class", 1)]


class TestFailures:
    def test_entry_size_limit(self, jar, patterns_file) -> None:
        """Configured archive limits are applied."""
        config = ImprintConfig()
        config.search.max_entry_size = 16
        engine = ImprintEngine(config=config, logger=ImprintLogger("t", console_output=False))
        with pytest.raises(ArchiveError):
            engine.search(jar, engine.load_patterns(patterns_file))

    def test_bad_pattern_file(self, engine, tmp_path) -> None:
        """Pattern errors are re-raised."""
        path = tmp_path / "p.toml"
        path.write_text('[[class]]\nflags = ["nope"]\n', encoding="utf-8")
        with pytest.raises(PatternError):
            engine.load_patterns(path)

    def test_failures_are_logged(self, tmp_path, make_jar, codec_classes, patterns_file) -> None:
        """The failure and the search context reach the JSON log."""
        log_file = tmp_path / "logs" / "imprint.jsonl"
        logger = ImprintLogger(
            "test-json", log_level="DEBUG", log_file=log_file, json_logs=True, console_output=False
        )
        engine = ImprintEngine(config=ImprintConfig(), logger=logger)
        path = make_jar({"a/b.class": codec_classes["a/b.class"]}, name="partial.jar")
        with pytest.raises(PatternNotFound):
            engine.search(path, engine.load_patterns(patterns_file))

        records = [json.loads(line) for line in log_file.read_text(encoding="utf-8").splitlines()]
        messages = [r["message"] for r in records]
        assert any(m.startswith("Loaded 2 pattern(s)") for m in messages)
        assert any(m.startswith("Searching") for m in messages)
        failure = records[-1]
        assert failure["level"] == "ERROR"
        assert failure["operation"] == "search"
        assert "pattern 1 not found" in failure["message"]
        matched = [r for r in records if r["message"].startswith("Pattern 0 matched")]
        assert matched[0]["extra"] == {"pattern": 0, "entry": "a/b.class"}
