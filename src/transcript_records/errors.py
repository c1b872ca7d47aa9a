from __future__ import annotations


class TranscriptError(Exception):
    """Base class for every failure while turning a transcript into records."""


class DocumentError(TranscriptError):
    """The PDF could not be opened or its content streams could not be decoded."""


class StructuralMismatch(TranscriptError):
    """A positional or marker assumption about the transcript layout failed.

    The layout is reverse engineered, so these are never recovered from:
    continuing would risk silently wrong records.
    """


class OptionalSectionAbsent(StructuralMismatch):
    """The transfer section is missing but the caller required it."""
