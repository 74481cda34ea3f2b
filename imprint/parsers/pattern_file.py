"""
Pattern File Loader
====================

Reads class patterns from a TOML file so fingerprints can be kept next to
the build they target instead of in code.  Each ``[[class]]`` table is
one pattern; table order is pattern order::

    [[class]]
    name = "PacketCodec"
    flags = ["public", "final"]
    base = "*"
    implements = ["java.lang.Runnable"]
    members = [
        "field private int",
        "field private byte[]",
        "method public (String) -> void",
        "method public static (String) -> int",
    ]

``base`` is a type token; ``"*"`` accepts any superclass, and leaving it
out requires no explicit superclass.  Member lines use the shorthand of
:mod:`imprint.core.dsl`, prefixed with ``method`` or ``field``.
"""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from imprint.core.access import ClassAccess
from imprint.core.dsl import field, method, type_pat
from imprint.core.errors import PatternError
from imprint.core.patterns import ClassPat

_CLASS_FLAGS: dict[str, ClassAccess] = {
    f.name.lower(): f for f in ClassAccess  # type: ignore[union-attr]
}


class ClassPatternSpec(BaseModel):
    """Schema of one ``[[class]]`` table."""
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    name: str = ""
    flags: list[str] = Field(default_factory=list)
    base: Optional[str] = None
    implements: list[str] = Field(default_factory=list)
    members: list[str] = Field(default_factory=list)

    @field_validator("flags")
    @classmethod
    def _known_flags(cls, value: list[str]) -> list[str]:
        unknown = [flag for flag in value if flag.lower() not in _CLASS_FLAGS]
        if unknown:
            raise ValueError(f"unknown class flags: {', '.join(unknown)}")
        return [flag.lower() for flag in value]

    def to_pattern(self) -> ClassPat:
        pattern = ClassPat().named(self.name)
        for flag in self.flags:
            pattern = pattern.with_flags(_CLASS_FLAGS[flag])
        if self.base is not None:
            pattern = pattern.with_base(type_pat(self.base))
        for interface in self.implements:
            pattern = pattern.with_impl(type_pat(interface))
        for line in self.members:
            kind, _, shorthand = line.strip().partition(" ")
            if kind == "method":
                pattern = pattern.with_member(method(shorthand))
            elif kind == "field":
                pattern = pattern.with_member(field(shorthand))
            else:
                raise PatternError(
                    f"member must start with 'method' or 'field': {line!r}"
                )
        return pattern


class PatternFileSpec(BaseModel):
    """Schema of a whole pattern file."""
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    classes: list[ClassPatternSpec] = Field(default_factory=list, alias="class")


def parse_patterns(raw: dict[str, Any], source: str = "<patterns>") -> list[ClassPat]:
    """Build patterns from an already-decoded TOML document.

    Raises:
        PatternError: The document does not follow the schema, or a
            table contains an invalid flag, type or member shorthand.
    """
    try:
        spec = PatternFileSpec.model_validate(raw)
    except ValidationError as exc:
        raise PatternError(f"{source}: {exc}") from exc

    patterns: list[ClassPat] = []
    for index, table in enumerate(spec.classes):
        try:
            patterns.append(table.to_pattern())
        except PatternError as exc:
            raise PatternError(f"{source}: class[{index}]: {exc}") from exc
    return patterns


def load_patterns(path: str | Path) -> list[ClassPat]:
    """Load the patterns of a TOML pattern file.

    Raises:
        OSError: The file cannot be read.
        PatternError: The file is not valid TOML or not a valid pattern file.
    """
    file_path = Path(path)
    with open(file_path, "rb") as fh:
        try:
            raw = tomllib.load(fh)
        except tomllib.TOMLDecodeError as exc:
            raise PatternError(f"{file_path}: {exc}") from exc
    return parse_patterns(raw, source=str(file_path))
