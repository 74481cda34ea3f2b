"""Tests for the bulk and exact search drivers."""

from __future__ import annotations

import pytest

from imprint.core.dsl import field, method
from imprint.core.errors import ClassFormatError, PatternNotFound, TooManyMatches
from imprint.core.patterns import ClassPat
from imprint.core.search import Match, search_exact, search_many, verify_exact
from imprint.parsers.jar import JarArchive, JarEntry

pytestmark = pytest.mark.search

P_INT = ClassPat().with_member(field("int")).named("int holder")
P_LONG = ClassPat().with_member(field("long")).named("long holder")
P_RUN = ClassPat().with_member(method("() -> void")).named("runner")
P_DOUBLE = ClassPat().with_member(field("double")).named("double holder")


@pytest.fixture
def entries(make_class) -> dict[str, JarEntry]:
    def entry(name: str, **kw) -> JarEntry:
        return JarEntry(f"{name}.class", make_class(name, **kw))

    return {
        "int": entry("a", fields=[(0x0002, "a", "I")]),
        "int2": entry("b", fields=[(0x0001, "a", "I")]),
        "long": entry("c", fields=[(0x0002, "a", "J")]),
        "run": entry("d", methods=[(0x0001, "a", "()V")]),
        "other": entry("e", methods=[(0x0001, "a", "(I)V")]),
    }


class TestSearchMany:
    def test_every_match_reported(self, entries) -> None:
        """Bulk search reports each matching candidate."""
        candidates = [entries["int"], entries["long"], entries["int2"], entries["other"]]
        matches = search_many(candidates, [P_INT, P_LONG])
        assert [(m.entry.name, m.pattern) for m in matches] == [
            ("a.class", 0),
            ("c.class", 1),
            ("b.class", 0),
        ]

    def test_first_pattern_wins(self, entries) -> None:
        """A candidate is credited to the first pattern it satisfies."""
        any_field = ClassPat().with_member(field("*"))
        matches = search_many([entries["int"]], [any_field, P_INT])
        assert [m.pattern for m in matches] == [0]

    def test_no_patterns(self, entries) -> None:
        """Without patterns nothing matches."""
        assert search_many(entries.values(), []) == []

    def test_with_bytecode(self, entries) -> None:
        """Decoding bytecode does not change the outcome."""
        assert search_many([entries["run"]], [P_RUN], parse_bytecode=True) == [
            Match(entry=entries["run"], pattern=0)
        ]

    def test_lone_surrogate_constant(self, make_class) -> None:
        """Pool strings with unpaired surrogates still parse and match."""
        odd = JarEntry("f.class", make_class("f", fields=[(0x0002, "a", "I")], raw_utf8=b"\xed\xa0\x80"))
        assert search_many([odd], [P_INT]) == [Match(entry=odd, pattern=0)]

    def test_malformed_candidate_aborts(self, entries) -> None:
        """A bad candidate raises instead of being skipped."""
        with pytest.raises(ClassFormatError):
            search_many([entries["int"], JarEntry("bad.class", b"nope")], [P_INT])


class TestSearchExact:
    def test_results_ordered_by_pattern(self, entries) -> None:
        """Result *i* is the entry matched by pattern *i*."""
        candidates = [entries["other"], entries["run"], entries["long"], entries["int"]]
        found = search_exact(candidates, [P_INT, P_RUN, P_LONG])
        assert [e.name for e in found] == ["a.class", "d.class", "c.class"]

    def test_pattern_not_found(self, entries) -> None:
        """A pattern without a match is reported by index."""
        candidates = [entries["int"], entries["long"]]
        with pytest.raises(PatternNotFound, match="pattern 1 not found") as exc_info:
            search_exact(candidates, [P_INT, P_DOUBLE, P_LONG])
        assert exc_info.value.pattern == 1

    def test_trailing_pattern_not_found(self, entries) -> None:
        """A missing last pattern is reported too."""
        with pytest.raises(PatternNotFound) as exc_info:
            search_exact([entries["int"], entries["long"]], [P_INT, P_LONG, P_DOUBLE])
        assert exc_info.value.pattern == 2

    def test_too_many_matches(self, entries) -> None:
        """A pattern matched twice is reported by index."""
        candidates = [entries["int"], entries["int2"], entries["long"]]
        with pytest.raises(TooManyMatches, match="too many matches for pattern 0") as exc_info:
            search_exact(candidates, [P_INT, P_LONG])
        assert exc_info.value.pattern == 0

    def test_over_archive(self, make_jar, entries) -> None:
        """Archives can be searched directly."""
        path = make_jar({e.name: e.data for e in entries.values()})
        with JarArchive(path) as jar:
            found = search_exact(jar, [P_LONG, P_RUN])
        assert [e.name for e in found] == ["c.class", "d.class"]


class TestVerifyExact:
    @staticmethod
    def _matches(*indices: int) -> list[Match]:
        return [Match(entry=JarEntry(f"{n}.class", b""), pattern=i) for n, i in enumerate(indices)]

    def test_sorted_by_pattern(self) -> None:
        """A one-to-one set is returned in pattern order."""
        ordered = verify_exact(self._matches(2, 0, 1), 3)
        assert [m.pattern for m in ordered] == [0, 1, 2]

    def test_first_divergent_position_decides(self) -> None:
        """Missing pattern 0 is reported before the duplicate of pattern 1."""
        with pytest.raises(PatternNotFound) as exc_info:
            verify_exact(self._matches(1, 1), 2)
        assert exc_info.value.pattern == 0

    def test_duplicate_before_gap(self) -> None:
        """A duplicate at an earlier position wins over a later gap."""
        with pytest.raises(TooManyMatches) as exc_info:
            verify_exact(self._matches(0, 0, 2), 3)
        assert exc_info.value.pattern == 0

    def test_empty(self) -> None:
        """No patterns and no matches is a valid exact result."""
        assert verify_exact([], 0) == []
        with pytest.raises(PatternNotFound):
            verify_exact([], 1)
