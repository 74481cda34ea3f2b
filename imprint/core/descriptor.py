"""
JVM Type Descriptor Grammar
============================

Recursive-descent parser for the compact type encodings stored in class
files: field descriptors (``I``, ``[B``, ``Ljava/lang/String;``), method
descriptors (``([BLjava/lang/String;)V``) and the parametrized subset of
generic signatures (``Ljava/util/Map<Ljava/lang/Integer;[B>;``).

Grammar (single-character lookahead)::

    descriptor  := "[" descriptor
                 | "Z" | "B" | "S" | "I" | "J" | "F" | "D" | "C"
                 | "L" name ";"
    signature   := "L" name "<" signature* ">;"
                 | descriptor
    method      := "(" descriptor* ")" ( "V" | descriptor )

Parsed values are immutable and compare structurally, so a descriptor
parsed from a class file can be compared directly against one held in a
pattern.  Trailing text after a complete production is not examined.

References:
    - Oracle. (2022). The Java Virtual Machine Specification, Java SE 18
      Edition. §4.3.2 Field Descriptors, §4.3.3 Method Descriptors,
      §4.7.9.1 Signatures.
"""

from __future__ import annotations

import enum
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from imprint.core.errors import EndOfInput, InvalidPrefix, MismatchedChar


# ---------------------------------------------------------------------------
# Descriptor variants
# ---------------------------------------------------------------------------

class BaseType(str, enum.Enum):
    """Primitive field types, valued by their descriptor letter."""
    BOOLEAN = "Z"
    BYTE = "B"
    SHORT = "S"
    INTEGER = "I"
    LONG = "J"
    FLOAT = "F"
    DOUBLE = "D"
    CHAR = "C"

    @property
    def descriptor(self) -> str:
        return self.value

    @property
    def java_name(self) -> str:
        return _JAVA_NAMES[self]


_JAVA_NAMES: dict[BaseType, str] = {
    BaseType.BOOLEAN: "boolean",
    BaseType.BYTE: "byte",
    BaseType.SHORT: "short",
    BaseType.INTEGER: "int",
    BaseType.LONG: "long",
    BaseType.FLOAT: "float",
    BaseType.DOUBLE: "double",
    BaseType.CHAR: "char",
}

_BASE_TYPES: dict[str, BaseType] = {t.value: t for t in BaseType}


class ArrayType(BaseModel):
    """An array of *element*; nesting depth is structural."""
    model_config = ConfigDict(frozen=True)

    element: Descriptor

    @property
    def descriptor(self) -> str:
        return "[" + self.element.descriptor

    @property
    def java_name(self) -> str:
        return self.element.java_name + "[]"


class ObjectType(BaseModel):
    """A class or interface reference by binary name (``java/lang/String``)."""
    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)

    @property
    def descriptor(self) -> str:
        return f"L{self.name};"

    @property
    def java_name(self) -> str:
        return self.name.replace("/", ".")


Descriptor = Union[BaseType, ArrayType, ObjectType]


class ParametrizedType(BaseModel):
    """A generic class type with its (possibly empty) type argument list."""
    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    arguments: tuple[Signature, ...] = ()

    @property
    def descriptor(self) -> str:
        inner = "".join(arg.descriptor for arg in self.arguments)
        return f"L{self.name}<{inner}>;"

    @property
    def java_name(self) -> str:
        inner = ", ".join(arg.java_name for arg in self.arguments)
        return f"{self.name.replace('/', '.')}<{inner}>"


Signature = Union[BaseType, ArrayType, ObjectType, ParametrizedType]

ArrayType.model_rebuild()
ParametrizedType.model_rebuild()


# ---------------------------------------------------------------------------
# Reader
# ---------------------------------------------------------------------------

class _DescriptorReader:
    """Cursor over descriptor text with single-character lookahead."""

    __slots__ = ("_text", "_pos")

    def __init__(self, text: str) -> None:
        self._text = text
        self._pos = 0

    def peek(self) -> str | None:
        if self._pos < len(self._text):
            return self._text[self._pos]
        return None

    def expect(self, literal: str, reported: str) -> None:
        """Consume *literal* or fail with ``MismatchedChar(reported)``."""
        if not self._text.startswith(literal, self._pos):
            raise MismatchedChar(reported)
        self._pos += len(literal)

    def read_descriptor(self) -> Descriptor:
        dimensions = 0
        while True:
            char = self.peek()
            if char is None:
                raise EndOfInput()
            # Descriptor prefixes are ASCII even where class names are not
            if not char.isascii():
                raise InvalidPrefix()
            self._pos += 1
            if char != "[":
                break
            dimensions += 1

        descriptor: Descriptor
        if char == "L":
            descriptor = ObjectType(name=self._read_name(";"))
        elif char in _BASE_TYPES:
            descriptor = _BASE_TYPES[char]
        else:
            raise InvalidPrefix()

        for _ in range(dimensions):
            descriptor = ArrayType(element=descriptor)
        return descriptor

    def read_signature(self) -> Signature:
        if self.peek() == "L" and self._opens_type_arguments():
            self._pos += 1
            name = self._read_name("<")
            arguments: list[Signature] = []
            while self.peek() != ">":
                arguments.append(self.read_signature())
            self.expect(">;", ">")
            return ParametrizedType(name=name, arguments=tuple(arguments))
        return self.read_descriptor()

    def _opens_type_arguments(self) -> bool:
        """True if the class name at the cursor is followed by ``<`` before ``;``."""
        angle = self._text.find("<", self._pos + 1)
        if angle == -1:
            return False
        semi = self._text.find(";", self._pos + 1)
        return semi == -1 or angle < semi

    def _read_name(self, terminator: str) -> str:
        end = self._text.find(terminator, self._pos)
        if end == -1:
            raise MismatchedChar(terminator)
        name = self._text[self._pos:end]
        if not name:
            raise InvalidPrefix()
        self._pos = end + 1
        return name


# ---------------------------------------------------------------------------
# Public parsing API
# ---------------------------------------------------------------------------

def parse_descriptor(text: str) -> Descriptor:
    """Parse a single field type descriptor.

    Raises:
        EndOfInput: *text* ends before the descriptor is complete.
        MismatchedChar: an object type has no terminating ``;``.
        InvalidPrefix: the leading character starts no descriptor.
    """
    return _DescriptorReader(text).read_descriptor()


def parse_signature(text: str) -> Signature:
    """Parse a type signature, a superset of :func:`parse_descriptor`.

    ``Lname<...>;`` yields a :class:`ParametrizedType` whose arguments are
    parsed recursively; anything else is parsed as a plain descriptor.

    Raises:
        MismatchedChar: the argument list is not closed by ``>;``
            (reported as ``>``), or an object type lacks its ``;``.
    """
    return _DescriptorReader(text).read_signature()


class MethodDescriptor(BaseModel):
    """Parameter types and return type of a method.

    Attributes:
        return_type: The returned type, or ``None`` for ``void``.
        param_types: Parameter types in declaration order.
    """
    model_config = ConfigDict(frozen=True)

    return_type: Optional[Descriptor] = None
    param_types: tuple[Descriptor, ...] = ()

    @classmethod
    def parse(cls, text: str) -> MethodDescriptor:
        """Parse ``(params)ret`` where *ret* is ``V`` or a field descriptor.

        Raises:
            MismatchedChar: *text* does not start with ``(``.
            EndOfInput: the parameter list or return type is truncated.
            InvalidPrefix: a parameter or return type has a bad prefix.
        """
        reader = _DescriptorReader(text)
        reader.expect("(", "(")
        params: list[Descriptor] = []
        while reader.peek() != ")":
            params.append(reader.read_descriptor())
        reader.expect(")", ")")

        return_type: Descriptor | None = None
        if reader.peek() != "V":
            return_type = reader.read_descriptor()
        return cls(return_type=return_type, param_types=tuple(params))

    @property
    def descriptor(self) -> str:
        params = "".join(p.descriptor for p in self.param_types)
        ret = self.return_type.descriptor if self.return_type is not None else "V"
        return f"({params}){ret}"
