"""
Imprint -- Structural Class Finder
===================================

Imprint locates classes inside an obfuscated JAR archive by matching
each class's *structure* -- access flags, superclass, implemented
interfaces, and the ordered signatures of its methods and fields --
against declarative patterns, rather than by name.  As long as member
order and signatures survive obfuscation, a renamed class is recovered
deterministically across builds.

Modules:
    core.descriptor  -- Type descriptor / signature grammar
    core.patterns    -- Type, member, and class pattern model
    core.dsl         -- Member pattern shorthand and type registry
    core.matcher     -- Structural match engine
    core.search      -- Bulk and exact search drivers
    core.engine      -- Archive-level orchestration with logging
    parsers          -- Class file, JAR, and pattern file readers
    output           -- Console and JSON report output
    cli              -- Click-based command-line interface

References:
    - Oracle. (2022). The Java Virtual Machine Specification, Java SE 18
      Edition. Chapter 4: The class File Format.
"""

from imprint.core import (
    ANY,
    VOID,
    ArrayType,
    BaseType,
    ClassAccess,
    ClassPat,
    FieldAccess,
    FieldPat,
    ImprintError,
    Match,
    MethodAccess,
    MethodDescriptor,
    MethodPat,
    ObjectType,
    ParametrizedType,
    TypePat,
    check_class,
    field,
    method,
    parse_descriptor,
    parse_signature,
    register_type,
    search_exact,
    search_many,
    type_pat,
)
from imprint.core.engine import ImprintEngine
from imprint.parsers import JarArchive, JarEntry, load_patterns, parse_class

__version__ = "1.0.0"
__all__ = [
    "ANY",
    "VOID",
    "ArrayType",
    "BaseType",
    "ClassAccess",
    "ClassPat",
    "FieldAccess",
    "FieldPat",
    "ImprintEngine",
    "ImprintError",
    "JarArchive",
    "JarEntry",
    "Match",
    "MethodAccess",
    "MethodDescriptor",
    "MethodPat",
    "ObjectType",
    "ParametrizedType",
    "TypePat",
    "check_class",
    "field",
    "load_patterns",
    "method",
    "parse_class",
    "parse_descriptor",
    "parse_signature",
    "register_type",
    "search_exact",
    "search_many",
    "type_pat",
]
