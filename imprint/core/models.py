"""
Imprint Data Models
====================

Pydantic models for the two kinds of data Imprint handles:

    - parsed class records produced by the class file parser and
      consumed by the match engine, and
    - search reports produced by the engine and rendered by the console
      and JSON outputs.

Access flags are kept as raw integers; the typed views in
:mod:`imprint.core.access` are applied when a pattern is checked.

References:
    - Oracle. (2022). The Java Virtual Machine Specification, Java SE 18
      Edition. §4.1 The ClassFile Structure.
"""

from __future__ import annotations

import enum
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from imprint.core.access import ClassAccess


# ---------------------------------------------------------------------------
# Parsed class records
# ---------------------------------------------------------------------------

class MemberInfo(BaseModel):
    """One ``field_info`` or ``method_info`` entry.

    Attributes:
        access_flags: Raw access flag bits.
        name: Member name (usually meaningless in obfuscated builds).
        descriptor: Raw descriptor text, parsed lazily by the matcher.
        code: Bytecode of the ``Code`` attribute, only when requested.
    """
    model_config = ConfigDict(frozen=True)

    access_flags: int = 0
    name: str = ""
    descriptor: str = ""
    code: Optional[bytes] = None


class ClassFile(BaseModel):
    """Structural view of a parsed class file.

    Attributes:
        version: ``(major, minor)`` class file version.
        access_flags: Raw class access flag bits.
        this_class: Binary name of the class.
        super_class: Binary name of the superclass, ``None`` only for
            ``java/lang/Object`` itself (and module descriptors).
        interfaces: Directly implemented interfaces in declaration order.
        fields: Fields in declaration order.
        methods: Methods in declaration order.
        source_file: ``SourceFile`` attribute value, when present.
    """
    model_config = ConfigDict(frozen=True)

    version: tuple[int, int] = (0, 0)
    access_flags: int = 0
    this_class: str = ""
    super_class: Optional[str] = None
    interfaces: tuple[str, ...] = ()
    fields: tuple[MemberInfo, ...] = ()
    methods: tuple[MemberInfo, ...] = ()
    source_file: Optional[str] = None

    @property
    def flags(self) -> ClassAccess:
        return ClassAccess(self.access_flags)


# ---------------------------------------------------------------------------
# Search reports
# ---------------------------------------------------------------------------

class SearchMode(str, enum.Enum):
    """Cardinality policy of a search."""
    EXACT = "exact"
    ALL = "all"


class MatchedClass(BaseModel):
    """One class that satisfied a pattern.

    Attributes:
        pattern_index: Position of the pattern in the input list.
        pattern_name: Display label of the pattern, if it has one.
        entry_name: Archive entry the class was read from.
        class_name: Binary name of the matched class.
        super_class: Its superclass, if any.
        interfaces: Its implemented interfaces.
        method_count: Number of declared methods.
        field_count: Number of declared fields.
    """
    pattern_index: int = Field(ge=0)
    pattern_name: str = ""
    entry_name: str = ""
    class_name: str = ""
    super_class: Optional[str] = None
    interfaces: list[str] = Field(default_factory=list)
    method_count: int = 0
    field_count: int = 0


class SearchReport(BaseModel):
    """Outcome of one search over an archive.

    Attributes:
        archive: Path of the searched archive.
        mode: Cardinality policy that was applied.
        pattern_count: Number of patterns searched for.
        candidates_scanned: Number of class entries examined.
        matches: Matched classes; in exact mode, ordered by pattern.
        started_at: UTC timestamp the search began.
        duration_seconds: Wall-clock duration of the search.
    """
    archive: str = ""
    mode: SearchMode = SearchMode.EXACT
    pattern_count: int = 0
    candidates_scanned: int = 0
    matches: list[MatchedClass] = Field(default_factory=list)
    started_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    duration_seconds: float = 0.0

    @property
    def unmatched_patterns(self) -> list[int]:
        found = {m.pattern_index for m in self.matches}
        return [i for i in range(self.pattern_count) if i not in found]
