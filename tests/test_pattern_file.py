"""Tests for the TOML pattern file loader."""

from __future__ import annotations

import pytest

from imprint.core.access import ClassAccess
from imprint.core.dsl import field, method, type_pat
from imprint.core.errors import PatternError
from imprint.core.patterns import ANY
from imprint.parsers.pattern_file import load_patterns, parse_patterns

pytestmark = pytest.mark.parsing


class TestLoadPatterns:
    def test_tables_become_patterns(self, patterns_file) -> None:
        """Each ``[[class]]`` table is one pattern, in file order."""
        codec, worker = load_patterns(patterns_file)
        assert codec.name == "PacketCodec"
        assert codec.flags == ClassAccess.PUBLIC | ClassAccess.FINAL
        assert codec.base is None
        assert codec.members == (
            field("private int"),
            field("private byte[]"),
            method("public () -> void"),
            method("public static (String) -> int"),
        )
        assert worker.name == "Worker"
        assert worker.impls == (type_pat("Runnable"),)

    def test_missing_file(self, tmp_path) -> None:
        """A missing file is an I/O error."""
        with pytest.raises(FileNotFoundError):
            load_patterns(tmp_path / "missing.toml")

    def test_invalid_toml(self, tmp_path) -> None:
        """TOML syntax errors become PatternError."""
        path = tmp_path / "bad.toml"
        path.write_text("[[class]\nname = ", encoding="utf-8")
        with pytest.raises(PatternError, match="bad.toml"):
            load_patterns(path)


class TestParsePatterns:
    def test_empty_document(self) -> None:
        """A file without tables holds no patterns."""
        assert parse_patterns({}) == []

    def test_base_wildcard(self) -> None:
        """``base = "*"`` accepts any superclass."""
        (pat,) = parse_patterns({"class": [{"base": "*"}]})
        assert pat.base == ANY

    def test_flag_names_are_case_insensitive(self) -> None:
        """Flags are matched by lower-cased name."""
        (pat,) = parse_patterns({"class": [{"flags": ["Public", "ABSTRACT"]}]})
        assert pat.flags == ClassAccess.PUBLIC | ClassAccess.ABSTRACT

    def test_unknown_flag(self) -> None:
        """Unknown class flags fail validation."""
        with pytest.raises(PatternError, match="unknown class flags: static"):
            parse_patterns({"class": [{"flags": ["public", "static"]}]})

    def test_unknown_key(self) -> None:
        """Unexpected keys fail validation."""
        with pytest.raises(PatternError):
            parse_patterns({"class": [{"fields": []}]})

    def test_bad_member_names_table(self) -> None:
        """Member errors name the offending table index."""
        raw = {
            "class": [
                {"members": ["method () -> void"]},
                {"members": ["ctor () -> void"]},
            ]
        }
        with pytest.raises(PatternError, match=r"class\[1\]"):
            parse_patterns(raw, source="p.toml")

    def test_bad_shorthand(self) -> None:
        """Shorthand errors surface as PatternError."""
        with pytest.raises(PatternError, match=r"class\[0\]"):
            parse_patterns({"class": [{"members": ["field private void"]}]})

    def test_bad_base(self) -> None:
        """Unresolvable type tokens are reported."""
        with pytest.raises(PatternError):
            parse_patterns({"class": [{"base": "Map<K, V>"}]})
