"""
Search Driver
==============

Runs a set of class patterns over a sequence of archive entries.

Two cardinality policies are offered:

    - :func:`search_many` records, for every candidate, the first pattern
      it satisfies, and returns all such matches.
    - :func:`search_exact` requires exactly one match per pattern and
      returns the matched entries aligned with the pattern list.

A candidate that fails to parse aborts the search; nothing is skipped.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

from imprint.core.errors import PatternNotFound, TooManyMatches
from imprint.core.matcher import check_class
from imprint.core.patterns import ClassPat
from imprint.parsers.jar import JarEntry


@dataclass(frozen=True, slots=True)
class Match:
    """A candidate entry and the index of the first pattern it matched."""

    entry: JarEntry
    pattern: int


def search_many(
    entries: Iterable[JarEntry],
    patterns: Sequence[ClassPat],
    *,
    parse_bytecode: bool = False,
) -> list[Match]:
    """Match every entry against *patterns*, allowing several matches per pattern.

    Patterns are tried in the given order and only the first one that a
    class satisfies is recorded.

    Args:
        entries: Candidate class entries, e.g. a :class:`JarArchive`.
        patterns: Patterns to look for; their positions are the indices
            reported in each :class:`Match`.
        parse_bytecode: Decode method bodies while parsing candidates.

    Raises:
        ClassFormatError: A candidate is not a well-formed class file.
        ArchiveError: The entry source failed while reading.
    """
    results: list[Match] = []
    for entry in entries:
        class_file = entry.parse() if parse_bytecode else entry.parse_without_bytecode()
        for index, pattern in enumerate(patterns):
            if check_class(class_file, pattern):
                results.append(Match(entry=entry, pattern=index))
                break
    return results


def search_exact(
    entries: Iterable[JarEntry],
    patterns: Sequence[ClassPat],
    *,
    parse_bytecode: bool = False,
) -> list[JarEntry]:
    """Find exactly one entry per pattern.

    Returns:
        A list with one entry per pattern; position *i* holds the entry
        matched by ``patterns[i]``.

    Raises:
        TooManyMatches: A pattern matched more than one class.
        PatternNotFound: A pattern matched no class.
    """
    matches = search_many(entries, patterns, parse_bytecode=parse_bytecode)
    return [m.entry for m in verify_exact(matches, len(patterns))]


def verify_exact(matches: Sequence[Match], pattern_count: int) -> list[Match]:
    """Check that *matches* pair one-to-one with ``range(pattern_count)``.

    Matches are sorted by pattern index; the first position whose
    pattern index differs from the position decides the error.  An index
    larger than its position means that position's pattern never
    matched; a smaller one means its pattern matched again.

    Returns:
        The matches ordered by pattern index.
    """
    ordered = sorted(matches, key=lambda m: m.pattern)
    for position, match in enumerate(ordered):
        if match.pattern == position:
            continue
        if position > match.pattern:
            raise TooManyMatches(match.pattern)
        raise PatternNotFound(position)
    if len(ordered) < pattern_count:
        raise PatternNotFound(len(ordered))
    return ordered
