"""
Structural Match Engine
========================

Decides whether one parsed class satisfies one :class:`ClassPat`.  The
check short-circuits at the first failing constraint:

    1. Required class flags are a subset of the class's flags.
    2. Superclass: no constraint means no explicit superclass (or
       ``java/lang/Object``); ``ANY`` means any present superclass; a
       named type means that exact superclass.
    3. Interfaces: the pattern's interfaces are a positional prefix of
       the class's interfaces.
    4. Members: methods and fields are consumed as two independent
       ordered sequences, one member pattern at a time.
    5. Both sequences must be exhausted afterwards; undeclared extra
       members fail the match.

A member whose descriptor text does not parse cannot satisfy any
pattern and is treated as a mismatch.
"""

from __future__ import annotations

from imprint.core.access import contains
from imprint.core.descriptor import Descriptor, MethodDescriptor, parse_descriptor
from imprint.core.errors import DescriptorError
from imprint.core.models import ClassFile, MemberInfo
from imprint.core.patterns import ClassPat, FieldPat, MethodPat, TypePat, TypePatKind

IMPLICIT_BASE = "java/lang/Object"


def check_type(descriptor: Descriptor, pattern: TypePat) -> bool:
    """Structural type check; ``VOID`` never matches a present type."""
    return pattern.matches(descriptor)


def check_class(class_file: ClassFile, pattern: ClassPat) -> bool:
    """Return ``True`` if *class_file* satisfies every part of *pattern*."""
    if not contains(class_file.access_flags, pattern.flags):
        return False
    if not _check_base(class_file.super_class, pattern.base):
        return False
    if not _check_interfaces(class_file.interfaces, pattern.impls):
        return False
    return _check_members(class_file, pattern)


def _check_base(super_class: str | None, base: TypePat | None) -> bool:
    if base is None:
        return super_class is None or super_class == IMPLICIT_BASE
    if super_class is None:
        return False
    if base.kind is TypePatKind.ANY:
        return True
    name = base.class_name()
    return name is not None and name == super_class


def _check_interfaces(interfaces: tuple[str, ...], impls: tuple[TypePat, ...]) -> bool:
    if len(impls) > len(interfaces):
        return False
    for actual, expected in zip(interfaces, impls):
        if expected.kind is TypePatKind.ANY:
            continue
        if expected.class_name() != actual:
            return False
    return True


def _check_members(class_file: ClassFile, pattern: ClassPat) -> bool:
    methods = class_file.methods
    fields = class_file.fields
    method_pos = 0
    field_pos = 0

    for member in pattern.members:
        if isinstance(member, MethodPat):
            if method_pos >= len(methods):
                return False
            if not _check_method(methods[method_pos], member):
                return False
            method_pos += 1
        else:
            if field_pos >= len(fields):
                return False
            if not _check_field(fields[field_pos], member):
                return False
            field_pos += 1

    return method_pos == len(methods) and field_pos == len(fields)


def _check_method(info: MemberInfo, pattern: MethodPat) -> bool:
    if not contains(info.access_flags, pattern.flags):
        return False
    try:
        descriptor = MethodDescriptor.parse(info.descriptor)
    except DescriptorError:
        return False
    if len(descriptor.param_types) != len(pattern.param_types):
        return False

    if descriptor.return_type is None:
        if pattern.return_type.kind is not TypePatKind.VOID:
            return False
    elif not check_type(descriptor.return_type, pattern.return_type):
        return False

    return all(
        check_type(param, expected)
        for param, expected in zip(descriptor.param_types, pattern.param_types)
    )


def _check_field(info: MemberInfo, pattern: FieldPat) -> bool:
    if not contains(info.access_flags, pattern.flags):
        return False
    try:
        descriptor = parse_descriptor(info.descriptor)
    except DescriptorError:
        return False
    return check_type(descriptor, pattern.field_type)
