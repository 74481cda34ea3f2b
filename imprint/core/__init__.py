"""
Imprint Core
=============

Descriptor grammar, pattern model, match engine and search drivers.
"""

from imprint.core.access import ClassAccess, FieldAccess, MethodAccess
from imprint.core.descriptor import (
    ArrayType,
    BaseType,
    Descriptor,
    MethodDescriptor,
    ObjectType,
    ParametrizedType,
    Signature,
    parse_descriptor,
    parse_signature,
)
from imprint.core.dsl import field, method, register_type, type_pat
from imprint.core.errors import (
    ArchiveError,
    CardinalityError,
    ClassFormatError,
    DescriptorError,
    EndOfInput,
    ImprintError,
    InvalidPrefix,
    MismatchedChar,
    PatternError,
    PatternNotFound,
    TooManyMatches,
)
from imprint.core.matcher import check_class, check_type
from imprint.core.patterns import ANY, VOID, ClassPat, FieldPat, MemberPat, MethodPat, TypePat
from imprint.core.search import Match, search_exact, search_many

__all__ = [
    "ANY",
    "VOID",
    "ArchiveError",
    "ArrayType",
    "BaseType",
    "CardinalityError",
    "ClassAccess",
    "ClassFormatError",
    "ClassPat",
    "Descriptor",
    "DescriptorError",
    "EndOfInput",
    "FieldAccess",
    "FieldPat",
    "ImprintError",
    "InvalidPrefix",
    "Match",
    "MemberPat",
    "MethodAccess",
    "MethodDescriptor",
    "MethodPat",
    "MismatchedChar",
    "ObjectType",
    "ParametrizedType",
    "PatternError",
    "PatternNotFound",
    "Signature",
    "TooManyMatches",
    "TypePat",
    "check_class",
    "check_type",
    "field",
    "method",
    "parse_descriptor",
    "parse_signature",
    "register_type",
    "search_exact",
    "search_many",
    "type_pat",
]
