"""Shared fixtures: a class file assembler and a JAR builder."""

from __future__ import annotations

import struct
import zipfile
from pathlib import Path
from typing import Callable, Iterable, Mapping, Sequence

import pytest

from imprint.core.access import ClassAccess


class ClassAssembler:
    """Assemble minimal but well-formed class file bytes.

    Members are ``(access, name, descriptor)`` tuples; methods may carry a
    fourth item with the bytecode of a ``Code`` attribute.
    """

    def __init__(self) -> None:
        self._slots: list[bytes | None] = []
        self._utf8: dict[str, int] = {}
        self._classes: dict[str, int] = {}

    def utf8(self, text: str) -> int:
        if text not in self._utf8:
            raw = text.encode("utf-8")
            self._slots.append(struct.pack(">BH", 1, len(raw)) + raw)
            self._utf8[text] = len(self._slots)
        return self._utf8[text]

    def raw_utf8(self, raw: bytes) -> int:
        """Add a Utf8 constant holding *raw* modified UTF-8 bytes."""
        self._slots.append(struct.pack(">BH", 1, len(raw)) + raw)
        return len(self._slots)

    def class_ref(self, name: str) -> int:
        if name not in self._classes:
            name_index = self.utf8(name)
            self._slots.append(struct.pack(">BH", 7, name_index))
            self._classes[name] = len(self._slots)
        return self._classes[name]

    def long_constant(self, value: int) -> int:
        self._slots.append(struct.pack(">Bq", 5, value))
        index = len(self._slots)
        self._slots.append(None)
        return index

    def integer_constant(self, value: int) -> int:
        self._slots.append(struct.pack(">Bi", 3, value))
        return len(self._slots)

    def member(self, access: int, name: str, descriptor: str, code: bytes | None = None) -> bytes:
        out = struct.pack(">HHH", access, self.utf8(name), self.utf8(descriptor))
        if code is None:
            return out + struct.pack(">H", 0)
        body = struct.pack(">HHI", 2, 1, len(code)) + code + struct.pack(">HH", 0, 0)
        return out + struct.pack(">HHI", 1, self.utf8("Code"), len(body)) + body

    def build(
        self,
        name: str,
        *,
        super_name: str | None,
        access: int,
        interfaces: Sequence[str],
        fields: Sequence[tuple],
        methods: Sequence[tuple],
        source_file: str | None,
        major: int = 52,
    ) -> bytes:
        this_index = self.class_ref(name)
        super_index = self.class_ref(super_name) if super_name is not None else 0
        interface_indices = [self.class_ref(i) for i in interfaces]
        field_bytes = b"".join(self.member(*f) for f in fields)
        method_bytes = b"".join(self.member(*m) for m in methods)

        attributes = b""
        attribute_count = 0
        if source_file is not None:
            attributes = struct.pack(
                ">HIH", self.utf8("SourceFile"), 2, self.utf8(source_file)
            )
            attribute_count = 1

        pool = b"".join(slot for slot in self._slots if slot is not None)
        return (
            struct.pack(">IHH", 0xCAFEBABE, 0, major)
            + struct.pack(">H", len(self._slots) + 1)
            + pool
            + struct.pack(">HHH", access, this_index, super_index)
            + struct.pack(">H", len(interface_indices))
            + b"".join(struct.pack(">H", i) for i in interface_indices)
            + struct.pack(">H", len(fields)) + field_bytes
            + struct.pack(">H", len(methods)) + method_bytes
            + struct.pack(">H", attribute_count) + attributes
        )


def build_class(
    name: str = "a",
    *,
    super_name: str | None = "java/lang/Object",
    access: int = ClassAccess.PUBLIC | ClassAccess.SUPER,
    interfaces: Iterable[str] = (),
    fields: Iterable[tuple] = (),
    methods: Iterable[tuple] = (),
    source_file: str | None = None,
    long_constant: int | None = None,
    raw_utf8: bytes | None = None,
) -> bytes:
    """Return class file bytes with the given structure."""
    assembler = ClassAssembler()
    if long_constant is not None:
        assembler.integer_constant(7)
        assembler.long_constant(long_constant)
    if raw_utf8 is not None:
        assembler.raw_utf8(raw_utf8)
    return assembler.build(
        name,
        super_name=super_name,
        access=int(access),
        interfaces=list(interfaces),
        fields=list(fields),
        methods=list(methods),
        source_file=source_file,
    )


@pytest.fixture
def make_class() -> Callable[..., bytes]:
    """Factory fixture producing class file bytes."""
    return build_class


@pytest.fixture
def make_jar(tmp_path: Path) -> Callable[..., Path]:
    """Factory fixture writing a JAR from ``{entry name: bytes}``."""

    def _make(entries: Mapping[str, bytes], name: str = "app.jar") -> Path:
        path = tmp_path / name
        with zipfile.ZipFile(path, "w", compression=zipfile.ZIP_DEFLATED) as zf:
            for entry_name, data in entries.items():
                zf.writestr(entry_name, data)
        return path

    return _make


@pytest.fixture
def codec_classes() -> dict[str, bytes]:
    """Three obfuscated classes with distinct shapes, plus one look-alike base."""
    return {
        # Packet codec: two fields, constructor and a static hash method
        "a/b.class": build_class(
            "a/b",
            access=ClassAccess.PUBLIC | ClassAccess.FINAL | ClassAccess.SUPER,
            fields=[(0x0002, "a", "I"), (0x0002, "b", "[B")],
            methods=[
                (0x0001, "<init>", "()V"),
                (0x0009, "a", "(Ljava/lang/String;)I"),
            ],
        ),
        # Worker: implements Runnable, one method
        "a/c.class": build_class(
            "a/c",
            interfaces=["java/lang/Runnable"],
            methods=[(0x0001, "<init>", "()V"), (0x0001, "run", "()V")],
        ),
        # Abstract base with a protected long field
        "a/d.class": build_class(
            "a/d",
            access=ClassAccess.PUBLIC | ClassAccess.ABSTRACT | ClassAccess.SUPER,
            fields=[(0x0004, "a", "J")],
            methods=[(0x0401, "a", "(J)Z")],
        ),
    }


PATTERNS_TOML = """
[[class]]
name = "PacketCodec"
flags = ["public", "final"]
members = [
    "field private int",
    "field private byte[]",
    "method public () -> void",
    "method public static (String) -> int",
]

[[class]]
name = "Worker"
implements = ["Runnable"]
members = [
    "method public () -> void",
    "method public () -> void",
]
"""


@pytest.fixture
def patterns_file(tmp_path: Path) -> Path:
    """Pattern file matching ``a/b`` (index 0) and ``a/c`` (index 1)."""
    path = tmp_path / "patterns.toml"
    path.write_text(PATTERNS_TOML, encoding="utf-8")
    return path


@pytest.fixture
def quiet_config(tmp_path: Path) -> Path:
    """Configuration file that keeps log output off the console."""
    path = tmp_path / "imprint.toml"
    path.write_text('[global]\nlog_level = "ERROR"\n', encoding="utf-8")
    return path
