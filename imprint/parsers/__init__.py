"""
Imprint Parsers
================

Readers for the inputs of a search.

Modules:
    class_parser  -- Struct-based JVM class file parser
    jar           -- JAR archive class enumeration
    pattern_file  -- TOML pattern file loader
"""

from imprint.parsers.class_parser import ClassFileParser, parse_class
from imprint.parsers.jar import JarArchive, JarEntry
from imprint.parsers.pattern_file import load_patterns, parse_patterns

__all__ = [
    "ClassFileParser",
    "JarArchive",
    "JarEntry",
    "load_patterns",
    "parse_class",
    "parse_patterns",
]
