"""
Review records: the raw line block, the parsed review and corpus statistics.

RawRecordBlock is what the parser reads; ParsedReview is what it produces.
Both are immutable once built.
"""

from dataclasses import dataclass, asdict
from typing import Any, Dict, List, Optional, Tuple

from .fields import ReviewField


@dataclass(frozen=True)
class RawRecordBlock:
    """
    A fixed-size run of consecutive corpus lines describing one review.

    Fields are located by tag prefix, so the order of lines inside the block
    does not matter.
    """
    index: int  # Zero-based position of the block in the corpus
    lines: Tuple[str, ...]

    def find_lines(self, field: ReviewField) -> List[str]:
        """All lines holding the given field, in block order."""
        return [line for line in self.lines if field.matches(line)]

    def find_line(self, field: ReviewField) -> Optional[str]:
        """
        Find the first line holding the given field.

        Args:
            field: Field whose tag should prefix the line

        Returns:
            The matching line, or None if the tag is absent
        """
        matches = self.find_lines(field)
        return matches[0] if matches else None

    def __len__(self) -> int:
        return len(self.lines)


@dataclass(frozen=True)
class ParsedReview:
    """
    A validated review derived from exactly one RawRecordBlock.
    """
    product_id: str
    user_id: str
    helpful_votes: int  # "Found helpful" votes
    total_votes: int  # All votes cast on the review
    text: str  # Trimmed, NFC-normalized review body
    helpfulness_ratio: float  # helpful_votes / total_votes, in [0, 1]

    def __post_init__(self):
        if self.helpful_votes < 0 or self.total_votes < 0:
            raise ValueError(
                f"Vote counts must be non-negative: "
                f"{self.helpful_votes}/{self.total_votes}")
        if self.helpful_votes > self.total_votes:
            raise ValueError(
                f"Helpful votes exceed total votes: "
                f"{self.helpful_votes}/{self.total_votes}")
        if not (0.0 <= self.helpfulness_ratio <= 1.0):
            raise ValueError(
                f"Invalid helpfulness ratio: {self.helpfulness_ratio}. "
                "Must be within [0, 1]")

    @property
    def has_votes(self) -> bool:
        """Whether anyone voted on this review."""
        return self.total_votes > 0

    def to_dict(self) -> Dict[str, Any]:
        """Convert the review to a dictionary for serialization."""
        return asdict(self)

    def to_lines(self) -> Tuple[str, ...]:
        """
        Emit one canonical line per required field.

        Returns:
            Tuple of ``tag: value`` lines, in REQUIRED_FIELDS order
        """
        return (
            ReviewField.PRODUCT_ID.format_line(self.product_id),
            ReviewField.USER_ID.format_line(self.user_id),
            ReviewField.HELPFULNESS.format_line(
                f"{self.helpful_votes}/{self.total_votes}"),
            ReviewField.TEXT.format_line(self.text),
        )

    def __len__(self) -> int:
        """Return the length of the review text."""
        return len(self.text)


@dataclass(frozen=True)
class CorpusStats:
    """Aggregate counts over a collection of parsed reviews."""
    num_products: int
    num_users: int
    num_reviews: int

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)
