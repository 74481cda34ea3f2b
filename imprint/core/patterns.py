"""
Structural Pattern Model
=========================

Patterns describe an obfuscated class by shape rather than by name:
access flags, superclass, implemented interfaces, and the complete,
ordered list of its methods and fields.

A :class:`ClassPat` is assembled with a builder chain.  Every builder
method returns a new pattern and leaves the receiver untouched, so a
finished pattern can be shared by reference across a whole search::

    pat = (
        ClassPat()
        .public()
        .abstract()
        .with_member(method("public (String) -> void"))
        .with_member(method("public static (String) -> int"))
    )

Member patterns must be appended in the order the members are declared
in the target class; that order is part of the fingerprint.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, replace
from typing import Optional, Union

from imprint.core.access import ClassAccess, FieldAccess, MethodAccess
from imprint.core.descriptor import Descriptor, ObjectType


# ---------------------------------------------------------------------------
# Type patterns
# ---------------------------------------------------------------------------

class TypePatKind(str, enum.Enum):
    """How a :class:`TypePat` treats the type at its position."""
    ANY = "any"
    VOID = "void"
    MATCH = "match"


@dataclass(frozen=True, slots=True)
class TypePat:
    """Match rule for one type position.

    ``ANY`` accepts every descriptor, ``VOID`` accepts only a missing
    return type, and ``MATCH`` requires structural equality with
    :attr:`descriptor`, including array depth and object name.
    """

    kind: TypePatKind
    descriptor: Optional[Descriptor] = None

    @classmethod
    def any(cls) -> TypePat:
        return cls(TypePatKind.ANY)

    @classmethod
    def void(cls) -> TypePat:
        return cls(TypePatKind.VOID)

    @classmethod
    def match(cls, descriptor: Descriptor) -> TypePat:
        return cls(TypePatKind.MATCH, descriptor)

    def class_name(self) -> str | None:
        """Binary class name of a ``MATCH`` on an object type, else ``None``.

        Superclass and interface names in a class file are plain names,
        not encoded descriptors, and are compared against this.
        """
        if self.kind is TypePatKind.MATCH and isinstance(self.descriptor, ObjectType):
            return self.descriptor.name
        return None

    def matches(self, descriptor: Descriptor) -> bool:
        if self.kind is TypePatKind.ANY:
            return True
        if self.kind is TypePatKind.MATCH:
            return self.descriptor == descriptor
        return False

    def __str__(self) -> str:
        if self.kind is TypePatKind.ANY:
            return "*"
        if self.kind is TypePatKind.VOID:
            return "void"
        return self.descriptor.java_name  # type: ignore[union-attr]


ANY = TypePat.any()
VOID = TypePat.void()


# ---------------------------------------------------------------------------
# Member patterns
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class MethodPat:
    """Required flags, exact parameter list and return type of one method."""

    flags: MethodAccess = MethodAccess(0)
    param_types: tuple[TypePat, ...] = ()
    return_type: TypePat = VOID

    def __str__(self) -> str:
        params = ", ".join(str(p) for p in self.param_types)
        return f"{_modifiers(self.flags)}({params}) -> {self.return_type}"


@dataclass(frozen=True, slots=True)
class FieldPat:
    """Required flags and type of one field."""

    flags: FieldAccess = FieldAccess(0)
    field_type: TypePat = ANY

    def __str__(self) -> str:
        return f"{_modifiers(self.flags)}{self.field_type}"


MemberPat = Union[MethodPat, FieldPat]


def _modifiers(flags: enum.IntFlag) -> str:
    names = [member.name.lower() for member in type(flags) if member in flags]
    return "".join(f"{name} " for name in names)


# ---------------------------------------------------------------------------
# Class patterns
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ClassPat:
    """Structural fingerprint of one class.

    The default value matches any class with no explicit superclass
    other than ``java/lang/Object`` and no members at all.

    Attributes:
        flags:   Class access bits that must be present.
        members: Member patterns in declaration order.
        base:    Superclass constraint; ``None`` means "no explicit
                 superclass", :data:`ANY` means "any superclass".
        impls:   Leading interfaces, in declaration order. :data:`ANY`
                 in impls accepts whichever interface is at that
                 position.
        name:    Display label used in reports only.
    """

    flags: ClassAccess = ClassAccess(0)
    members: tuple[MemberPat, ...] = ()
    base: Optional[TypePat] = None
    impls: tuple[TypePat, ...] = ()
    name: str = ""

    def public(self) -> ClassPat:
        return self.with_flags(ClassAccess.PUBLIC)

    def final(self) -> ClassPat:
        return self.with_flags(ClassAccess.FINAL)

    def abstract(self) -> ClassPat:
        return self.with_flags(ClassAccess.ABSTRACT)

    def interface(self) -> ClassPat:
        return self.with_flags(ClassAccess.INTERFACE)

    def with_flags(self, flags: ClassAccess) -> ClassPat:
        return replace(self, flags=self.flags | flags)

    def with_base(self, base: TypePat) -> ClassPat:
        return replace(self, base=base)

    def with_impl(self, interface: TypePat) -> ClassPat:
        return replace(self, impls=self.impls + (interface,))

    def with_member(self, member: MemberPat) -> ClassPat:
        """Append *member*; calls must follow the target's declaration order."""
        return replace(self, members=self.members + (member,))

    def named(self, name: str) -> ClassPat:
        return replace(self, name=name)

    @property
    def methods(self) -> tuple[MethodPat, ...]:
        return tuple(m for m in self.members if isinstance(m, MethodPat))

    @property
    def fields(self) -> tuple[FieldPat, ...]:
        return tuple(m for m in self.members if isinstance(m, FieldPat))
