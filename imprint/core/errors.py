"""
Imprint Exceptions
===================

Every failure the toolkit reports derives from :class:`ImprintError`.
Failures are never retried or skipped: they propagate to the immediate
caller, and a single bad candidate aborts the whole search.

Builtin :class:`OSError` subclasses raised by the byte source are not
wrapped.
"""

from __future__ import annotations


class ImprintError(Exception):
    """Base class for all Imprint errors."""


# ---------------------------------------------------------------------------
# Grammar errors
# ---------------------------------------------------------------------------

class DescriptorError(ImprintError):
    """A type descriptor, signature or method descriptor failed to parse."""


class EndOfInput(DescriptorError):
    """The input ended before a required character."""

    def __init__(self) -> None:
        super().__init__("unexpected end of input")


class MismatchedChar(DescriptorError):
    """An expected character was missing."""

    def __init__(self, char: str) -> None:
        self.char = char
        super().__init__(f"expected char {char}")


class InvalidPrefix(DescriptorError):
    """The leading character does not start any descriptor."""

    def __init__(self) -> None:
        super().__init__("invalid descriptor prefix character")


# ---------------------------------------------------------------------------
# Collaborator errors
# ---------------------------------------------------------------------------

class ClassFormatError(ImprintError):
    """The bytes of an archive entry are not a well-formed class file."""


class ArchiveError(ImprintError):
    """The archive container is malformed or one of its entries is unreadable."""


class PatternError(ImprintError):
    """A member shorthand or a pattern file could not be turned into a pattern."""


# ---------------------------------------------------------------------------
# Cardinality errors (exact search)
# ---------------------------------------------------------------------------

class CardinalityError(ImprintError):
    """An exact search did not find exactly one class per pattern."""

    def __init__(self, pattern: int, message: str) -> None:
        self.pattern = pattern
        super().__init__(message)


class TooManyMatches(CardinalityError):
    def __init__(self, pattern: int) -> None:
        super().__init__(pattern, f"too many matches for pattern {pattern}")


class PatternNotFound(CardinalityError):
    def __init__(self, pattern: int) -> None:
        super().__init__(pattern, f"pattern {pattern} not found")
