"""
Member Pattern Shorthand
=========================

A compact textual notation for member patterns, so fingerprints can be
written the way the members read in Java source::

    method("public static (String, int[]) -> int")
    method("private (*, Object) -> void")
    field("private static final long")

Type tokens are resolved through an explicit registry of known names
(Java primitives and their short aliases, ``String`` and the common
``java.lang`` / ``java.util`` types, ``void`` and the ``*`` wildcard).
Anything else is read as a raw descriptor (``Lfoo/Bar;``, ``[I``) or as
a binary class name (``java.util.Map``, ``aBi``).  Each trailing ``[]``
adds one array dimension.
"""

from __future__ import annotations

import re

from imprint.core.access import FieldAccess, MethodAccess
from imprint.core.descriptor import ArrayType, BaseType, ObjectType, parse_descriptor
from imprint.core.errors import DescriptorError, PatternError
from imprint.core.patterns import ANY, VOID, FieldPat, MethodPat, TypePat


# ---------------------------------------------------------------------------
# Type registry
# ---------------------------------------------------------------------------

def _object(name: str) -> TypePat:
    return TypePat.match(ObjectType(name=name))


_DEFAULT_TYPES: dict[str, TypePat] = {
    # Wildcards
    "*": ANY,
    "Any": ANY,
    "void": VOID,
    "()": VOID,
    # Primitives
    "boolean": TypePat.match(BaseType.BOOLEAN),
    "byte": TypePat.match(BaseType.BYTE),
    "short": TypePat.match(BaseType.SHORT),
    "int": TypePat.match(BaseType.INTEGER),
    "long": TypePat.match(BaseType.LONG),
    "float": TypePat.match(BaseType.FLOAT),
    "double": TypePat.match(BaseType.DOUBLE),
    "char": TypePat.match(BaseType.CHAR),
    "bool": TypePat.match(BaseType.BOOLEAN),
    "i8": TypePat.match(BaseType.BYTE),
    "i16": TypePat.match(BaseType.SHORT),
    "i32": TypePat.match(BaseType.INTEGER),
    "i64": TypePat.match(BaseType.LONG),
    "f32": TypePat.match(BaseType.FLOAT),
    "f64": TypePat.match(BaseType.DOUBLE),
    # java.lang
    "String": _object("java/lang/String"),
    "Boolean": _object("java/lang/Boolean"),
    "Byte": _object("java/lang/Byte"),
    "Short": _object("java/lang/Short"),
    "Integer": _object("java/lang/Integer"),
    "Long": _object("java/lang/Long"),
    "Float": _object("java/lang/Float"),
    "Double": _object("java/lang/Double"),
    "Character": _object("java/lang/Character"),
    "Iterable": _object("java/lang/Iterable"),
    "Runnable": _object("java/lang/Runnable"),
    "Object": _object("java/lang/Object"),
    "Throwable": _object("java/lang/Throwable"),
    "Thread": _object("java/lang/Thread"),
    # java.util
    "List": _object("java/util/List"),
    "Collection": _object("java/util/Collection"),
}

_registry: dict[str, TypePat] = dict(_DEFAULT_TYPES)


def register_type(alias: str, pattern: TypePat) -> None:
    """Make *alias* resolve to *pattern* in every later shorthand."""
    if not alias or alias != alias.strip() or "," in alias or "[]" in alias:
        raise PatternError(f"invalid type alias: {alias!r}")
    _registry[alias] = pattern


def unregister_type(alias: str) -> None:
    """Remove a caller-registered alias; built-in names are restored."""
    if alias in _DEFAULT_TYPES:
        _registry[alias] = _DEFAULT_TYPES[alias]
    else:
        _registry.pop(alias, None)


def registered_types() -> dict[str, TypePat]:
    return dict(_registry)


# ---------------------------------------------------------------------------
# Token resolution
# ---------------------------------------------------------------------------

_CLASS_NAME = re.compile(r"^[^\s()<>;,\[\]]+$")


def type_pat(token: str) -> TypePat:
    """Resolve one type token to a :class:`TypePat`.

    Raises:
        PatternError: the token names no type, or puts ``void`` / ``*``
            inside an array.
    """
    text = token.strip()
    if not text:
        raise PatternError("empty type")

    dimensions = 0
    while text.endswith("[]"):
        text = text[:-2].rstrip()
        dimensions += 1

    pattern = _resolve_element(text, token)
    if dimensions == 0:
        return pattern
    if pattern.descriptor is None:
        raise PatternError(f"{pattern} cannot be an array element: {token!r}")

    descriptor = pattern.descriptor
    for _ in range(dimensions):
        descriptor = ArrayType(element=descriptor)
    return TypePat.match(descriptor)


def _resolve_element(text: str, token: str) -> TypePat:
    if text in _registry:
        return _registry[text]
    if text.startswith("[") or (text.startswith("L") and text.endswith(";")):
        try:
            return TypePat.match(parse_descriptor(text))
        except DescriptorError as exc:
            raise PatternError(f"bad descriptor {token!r}: {exc}") from exc
    if _CLASS_NAME.match(text):
        return _object(text.replace(".", "/"))
    raise PatternError(f"unknown type: {token!r}")


# ---------------------------------------------------------------------------
# Member shorthand
# ---------------------------------------------------------------------------

_METHOD_RE = re.compile(
    r"^\s*(?P<mods>(?:[a-z]+\s+)*)\((?P<params>[^()]*)\)\s*->\s*(?P<ret>.+?)\s*$"
)

_METHOD_MODIFIERS: dict[str, MethodAccess] = {
    m.name.lower(): m for m in MethodAccess  # type: ignore[union-attr]
}
_FIELD_MODIFIERS: dict[str, FieldAccess] = {
    f.name.lower(): f for f in FieldAccess  # type: ignore[union-attr]
}


def _flags(words: list[str], table: dict, kind: str, text: str):
    flags = 0
    for word in words:
        if word not in table:
            raise PatternError(f"unknown {kind} modifier {word!r} in {text!r}")
        flags |= table[word]
    return flags


def method(text: str) -> MethodPat:
    """Build a :class:`MethodPat` from ``modifiers (params) -> return``."""
    m = _METHOD_RE.match(text)
    if m is None:
        raise PatternError(f"malformed method shorthand: {text!r}")

    flags = _flags(m.group("mods").split(), _METHOD_MODIFIERS, "method", text)
    params_text = m.group("params").strip()
    params = (
        tuple(type_pat(p) for p in params_text.split(","))
        if params_text
        else ()
    )
    ret = m.group("ret")
    # Allow the unit spelling ``-> ()`` for void
    return_type = VOID if ret.replace(" ", "") == "()" else type_pat(ret)

    for param in params:
        if param == VOID:
            raise PatternError(f"void parameter in {text!r}")
    return MethodPat(
        flags=MethodAccess(flags),
        param_types=params,
        return_type=return_type,
    )


def field(text: str) -> FieldPat:
    """Build a :class:`FieldPat` from ``modifiers type``."""
    words = text.split()
    if not words:
        raise PatternError("empty field shorthand")

    *mods, type_token = words
    flags = _flags(mods, _FIELD_MODIFIERS, "field", text)
    field_type = type_pat(type_token)
    if field_type == VOID:
        raise PatternError(f"void field in {text!r}")
    return FieldPat(flags=FieldAccess(flags), field_type=field_type)
