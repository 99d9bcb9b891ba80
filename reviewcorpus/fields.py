"""
Field tags recognised in the line-oriented review corpus.

Each line of a record holds one field, introduced by a literal tag such as
``review/text:``. Only the tags in REQUIRED_FIELDS are extracted; the others
are known so they can be emitted again but are otherwise ignored.
"""

from enum import Enum
from typing import Tuple


class ReviewField(str, Enum):
    """Literal tag prefixes, one per field line."""

    PRODUCT_ID = "product/productId:"
    PRODUCT_TITLE = "product/title:"
    PRODUCT_PRICE = "product/price:"
    USER_ID = "review/userId:"
    PROFILE_NAME = "review/profileName:"
    HELPFULNESS = "review/helpfulness:"
    SCORE = "review/score:"
    TIME = "review/time:"
    SUMMARY = "review/summary:"
    TEXT = "review/text:"

    @property
    def tag(self) -> str:
        return self.value

    def matches(self, line: str) -> bool:
        """Whether the line starts with this field's tag."""
        return line.lstrip().startswith(self.value)

    def strip_tag(self, line: str) -> str:
        """Return the raw value that follows the tag (untrimmed)."""
        return line.lstrip()[len(self.value):]

    def format_line(self, value: str) -> str:
        """Emit a canonical ``tag: value`` line."""
        return f"{self.value} {value}"


# Fields every block must provide, in the order they are looked up
REQUIRED_FIELDS: Tuple[ReviewField, ...] = (
    ReviewField.PRODUCT_ID,
    ReviewField.USER_ID,
    ReviewField.HELPFULNESS,
    ReviewField.TEXT,
)
