"""
Error taxonomy for corpus parsing.

Structural problems found while parsing are fatal to the parse call and carry
the block index and offending line so the source file can be inspected.
Reference-count validation failures are a separate, assertion-style error.
"""

from typing import Optional


class CorpusError(ValueError):
    """Base class for errors raised while parsing a review corpus."""

    def __init__(
        self,
        message: str,
        block_index: Optional[int] = None,
        line: Optional[str] = None
    ):
        self.block_index = block_index
        self.line = line

        details = []
        if block_index is not None:
            details.append(f"block {block_index}")
        if line is not None:
            details.append(f"line {line!r}")

        if details:
            message = f"{message} ({', '.join(details)})"
        super().__init__(message)


class MalformedCorpusError(CorpusError):
    """Wrong total line count, or a block whose required value is empty."""


class MissingFieldError(CorpusError):
    """A required field tag does not appear in a block."""

    def __init__(self, tag: str, block_index: Optional[int] = None):
        self.tag = tag
        super().__init__(f"Missing required field '{tag}'", block_index=block_index)


class FieldParseError(CorpusError):
    """A field value could not be parsed into its expected type."""


class StatsMismatchError(AssertionError):
    """
    Corpus statistics differ from the reference counts supplied by the caller.

    Kept apart from CorpusError: the parser has no notion of the right totals,
    so this is raised only by caller-side validation.
    """

    def __init__(self, mismatches: dict):
        self.mismatches = mismatches
        parts = [
            f"{name}: expected {expected}, got {actual}"
            for name, (expected, actual) in mismatches.items()
        ]
        super().__init__("Corpus statistics mismatch - " + "; ".join(parts))
