"""
JVM Class File Parser
======================

Manual struct-based parser for the ``.class`` format.  It extracts the
structural surface the match engine needs (access flags, this/super
class, interfaces, and the ordered field and method tables with their
raw descriptors) and skips everything else by length.

All parsing is performed using :mod:`struct` without external libraries.

The parser reads:
    - Header (magic, minor/major version)
    - Constant pool, including the two-slot ``Long`` / ``Double`` entries
    - Class access flags, this class, super class, interfaces
    - Field and method tables
    - ``Code`` attribute bodies (optional) and the ``SourceFile`` attribute

References:
    - Oracle. (2022). The Java Virtual Machine Specification, Java SE 18
      Edition. Chapter 4: The class File Format.
      https://docs.oracle.com/javase/specs/jvms/se18/html/jvms-4.html
"""

from __future__ import annotations

import struct
from typing import Optional

from imprint.core.errors import ClassFormatError
from imprint.core.models import ClassFile, MemberInfo


# ---------------------------------------------------------------------------
# Class File Constants
# ---------------------------------------------------------------------------

CLASS_MAGIC: int = 0xCAFEBABE

# Constant pool tags
CONSTANT_UTF8: int = 1
CONSTANT_INTEGER: int = 3
CONSTANT_FLOAT: int = 4
CONSTANT_LONG: int = 5
CONSTANT_DOUBLE: int = 6
CONSTANT_CLASS: int = 7
CONSTANT_STRING: int = 8
CONSTANT_FIELDREF: int = 9
CONSTANT_METHODREF: int = 10
CONSTANT_INTERFACE_METHODREF: int = 11
CONSTANT_NAME_AND_TYPE: int = 12
CONSTANT_METHOD_HANDLE: int = 15
CONSTANT_METHOD_TYPE: int = 16
CONSTANT_DYNAMIC: int = 17
CONSTANT_INVOKE_DYNAMIC: int = 18
CONSTANT_MODULE: int = 19
CONSTANT_PACKAGE: int = 20

# Payload size of every constant the parser does not need to decode
_SKIPPED_CONSTANT_SIZES: dict[int, int] = {
    CONSTANT_INTEGER: 4,
    CONSTANT_FLOAT: 4,
    CONSTANT_LONG: 8,
    CONSTANT_DOUBLE: 8,
    CONSTANT_STRING: 2,
    CONSTANT_FIELDREF: 4,
    CONSTANT_METHODREF: 4,
    CONSTANT_INTERFACE_METHODREF: 4,
    CONSTANT_NAME_AND_TYPE: 4,
    CONSTANT_METHOD_HANDLE: 3,
    CONSTANT_METHOD_TYPE: 2,
    CONSTANT_DYNAMIC: 4,
    CONSTANT_INVOKE_DYNAMIC: 4,
    CONSTANT_MODULE: 2,
    CONSTANT_PACKAGE: 2,
}

_U2 = struct.Struct(">H")
_U4 = struct.Struct(">I")


def _decode_modified_utf8(raw: bytes) -> str:
    """Decode the JVM's modified UTF-8 (``C0 80`` NUL, CESU-8 surrogates)."""
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError:
        pass
    text = raw.replace(b"\xc0\x80", b"\x00").decode("utf-8", errors="surrogatepass")
    # Pairs are joined; unpaired surrogates stay as they are
    return text.encode("utf-16-le", errors="surrogatepass").decode(
        "utf-16-le", errors="surrogatepass"
    )


# ---------------------------------------------------------------------------
# Class File Parser
# ---------------------------------------------------------------------------

class ClassFileParser:
    """Manual struct-based JVM class file parser.

    Parsing is idempotent: every call to :meth:`parse` starts from the
    beginning of the buffer, which is never modified.

    Usage::

        parser = ClassFileParser(raw_bytes)
        class_file = parser.parse(parse_bytecode=False)
        print(class_file.this_class, len(class_file.methods))
    """

    def __init__(self, data: bytes) -> None:
        """Initialise the parser with raw class file data.

        Args:
            data: Complete class file contents as bytes.
        """
        self._data: bytes = data
        self._pos: int = 0
        self._pool: list[Optional[tuple[int, object]]] = []

    # ------------------------------------------------------------------ #
    #  Public interface
    # ------------------------------------------------------------------ #

    def parse(self, parse_bytecode: bool = True) -> ClassFile:
        """Parse the class file.

        Args:
            parse_bytecode: Keep each method's ``Code`` attribute bytes.
                Matching never needs them; skipping them is faster.

        Returns:
            The parsed :class:`ClassFile` record.

        Raises:
            ClassFormatError: The data is not a well-formed class file.
        """
        self._pos = 0
        self._pool = [None]  # 1-indexed
        try:
            return self._parse_class(parse_bytecode)
        except (struct.error, IndexError, ValueError) as exc:
            raise ClassFormatError(f"malformed class file: {exc}") from exc

    # ------------------------------------------------------------------ #
    #  Primitive readers
    # ------------------------------------------------------------------ #

    def _read_u1(self) -> int:
        val = self._data[self._pos]
        self._pos += 1
        return val

    def _read_u2(self) -> int:
        val = _U2.unpack_from(self._data, self._pos)[0]
        self._pos += 2
        return val

    def _read_u4(self) -> int:
        val = _U4.unpack_from(self._data, self._pos)[0]
        self._pos += 4
        return val

    def _read_bytes(self, length: int) -> bytes:
        end = self._pos + length
        if end > len(self._data):
            raise ClassFormatError(
                f"truncated class file: need {length} bytes at offset {self._pos}"
            )
        val = self._data[self._pos:end]
        self._pos = end
        return val

    # ------------------------------------------------------------------ #
    #  Structure parsing
    # ------------------------------------------------------------------ #

    def _parse_class(self, parse_bytecode: bool) -> ClassFile:
        magic = self._read_u4()
        if magic != CLASS_MAGIC:
            raise ClassFormatError(f"invalid class file magic: {magic:#010x}")
        minor = self._read_u2()
        major = self._read_u2()

        self._parse_constant_pool()

        access_flags = self._read_u2()
        this_class = self._class_name(self._read_u2())
        super_index = self._read_u2()
        super_class = self._class_name(super_index) if super_index else None

        interfaces = tuple(
            self._class_name(self._read_u2()) for _ in range(self._read_u2())
        )
        fields = tuple(
            self._parse_member(False) for _ in range(self._read_u2())
        )
        methods = tuple(
            self._parse_member(parse_bytecode) for _ in range(self._read_u2())
        )
        attributes = self._parse_attributes(False)

        source_file = None
        if "SourceFile" in attributes:
            source_file = self._utf8(_U2.unpack_from(attributes["SourceFile"])[0])

        return ClassFile(
            version=(major, minor),
            access_flags=access_flags,
            this_class=this_class,
            super_class=super_class,
            interfaces=interfaces,
            fields=fields,
            methods=methods,
            source_file=source_file,
        )

    def _parse_constant_pool(self) -> None:
        count = self._read_u2()
        index = 1
        while index < count:
            tag = self._read_u1()
            if tag == CONSTANT_UTF8:
                length = self._read_u2()
                self._pool.append((tag, _decode_modified_utf8(self._read_bytes(length))))
            elif tag == CONSTANT_CLASS:
                self._pool.append((tag, self._read_u2()))
            elif tag in _SKIPPED_CONSTANT_SIZES:
                self._read_bytes(_SKIPPED_CONSTANT_SIZES[tag])
                self._pool.append((tag, None))
            else:
                raise ClassFormatError(
                    f"unknown constant pool tag {tag} at index {index}"
                )

            # Long and Double occupy two slots
            if tag in (CONSTANT_LONG, CONSTANT_DOUBLE):
                self._pool.append(None)
                index += 2
            else:
                index += 1

    def _parse_member(self, keep_code: bool) -> MemberInfo:
        access_flags = self._read_u2()
        name = self._utf8(self._read_u2())
        descriptor = self._utf8(self._read_u2())
        attributes = self._parse_attributes(keep_code)

        code = None
        if keep_code and "Code" in attributes:
            body = attributes["Code"]
            code_length = _U4.unpack_from(body, 4)[0]
            code = body[8:8 + code_length]
            if len(code) != code_length:
                raise ClassFormatError(f"truncated Code attribute of {name}")

        return MemberInfo(
            access_flags=access_flags,
            name=name,
            descriptor=descriptor,
            code=code,
        )

    def _parse_attributes(self, keep_code: bool) -> dict[str, bytes]:
        """Read an attribute table, keeping only the bodies Imprint uses."""
        wanted = {"SourceFile", "Code"} if keep_code else {"SourceFile"}
        attributes: dict[str, bytes] = {}
        for _ in range(self._read_u2()):
            name = self._utf8(self._read_u2())
            body = self._read_bytes(self._read_u4())
            if name in wanted:
                attributes[name] = body
        return attributes

    # ------------------------------------------------------------------ #
    #  Constant pool lookups
    # ------------------------------------------------------------------ #

    def _entry(self, index: int, tag: int) -> object:
        entry = self._pool[index] if 0 < index < len(self._pool) else None
        if entry is None or entry[0] != tag:
            raise ClassFormatError(
                f"constant pool index {index} is not of tag {tag}"
            )
        return entry[1]

    def _utf8(self, index: int) -> str:
        return self._entry(index, CONSTANT_UTF8)  # type: ignore[return-value]

    def _class_name(self, index: int) -> str:
        return self._utf8(self._entry(index, CONSTANT_CLASS))  # type: ignore[arg-type]


def parse_class(data: bytes, parse_bytecode: bool = True) -> ClassFile:
    """Parse *data* as a class file; see :meth:`ClassFileParser.parse`."""
    return ClassFileParser(data).parse(parse_bytecode=parse_bytecode)
