"""
JVM Access Flags
=================

Bit sets for the ``access_flags`` items of classes, fields and methods.
A pattern's flags are a subset requirement: every required bit must be
present, extra bits on the candidate are allowed.

References:
    - Oracle. (2022). The Java Virtual Machine Specification, Java SE 18
      Edition. Table 4.1-B, Table 4.5-A, Table 4.6-A.
"""

from __future__ import annotations

import enum


class ClassAccess(enum.IntFlag):
    """Class access and property modifiers."""
    PUBLIC = 0x0001
    FINAL = 0x0010
    SUPER = 0x0020
    INTERFACE = 0x0200
    ABSTRACT = 0x0400
    SYNTHETIC = 0x1000
    ANNOTATION = 0x2000
    ENUM = 0x4000
    MODULE = 0x8000


class FieldAccess(enum.IntFlag):
    """Field access and property flags."""
    PUBLIC = 0x0001
    PRIVATE = 0x0002
    PROTECTED = 0x0004
    STATIC = 0x0008
    FINAL = 0x0010
    VOLATILE = 0x0040
    TRANSIENT = 0x0080
    SYNTHETIC = 0x1000
    ENUM = 0x4000


class MethodAccess(enum.IntFlag):
    """Method access and property flags."""
    PUBLIC = 0x0001
    PRIVATE = 0x0002
    PROTECTED = 0x0004
    STATIC = 0x0008
    FINAL = 0x0010
    SYNCHRONIZED = 0x0020
    BRIDGE = 0x0040
    VARARGS = 0x0080
    NATIVE = 0x0100
    ABSTRACT = 0x0400
    STRICT = 0x0800
    SYNTHETIC = 0x1000


def contains(actual: int, required: int) -> bool:
    """True if every bit of *required* is set in *actual*."""
    return int(actual) & int(required) == int(required)
