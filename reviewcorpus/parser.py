"""
Review Corpus Parser: turns raw corpus lines into ParsedReview records.

The corpus is a flat sequence of lines in which every ``block_size``
consecutive lines describe one review. Parsing is a single pass that either
returns every record or raises at the first structural violation.
"""

import logging
import re
import unicodedata
from enum import Enum
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple

from tqdm import autonotebook

from . import settings
from .errors import FieldParseError, MalformedCorpusError, MissingFieldError
from .fields import REQUIRED_FIELDS, ReviewField
from .review import CorpusStats, ParsedReview, RawRecordBlock

logger = logging.getLogger(__name__)

HELPFULNESS_PATTERN = re.compile(r'^\s*([0-9]+)\s*/\s*([0-9]+)\s*$')


class ZeroVotePolicy(str, Enum):
    """What to do with reviews whose helpfulness reads ``0/0``."""

    EXCLUDE = "exclude"  # Drop the review; its ratio is undefined
    KEEP = "keep"  # Keep it with a sentinel ratio


class InvertedVotePolicy(str, Enum):
    """What to do with reviews whose helpful votes exceed their total votes."""

    RAISE = "raise"  # Fail with FieldParseError
    EXCLUDE = "exclude"  # Drop the review; its ratio would exceed 1


def iter_blocks(
    lines: Sequence[str],
    block_size: int = settings.BLOCK_SIZE
) -> Iterator[RawRecordBlock]:
    """
    Partition corpus lines into consecutive fixed-size blocks.

    The line count is checked up front, so a malformed corpus fails before
    any block is yielded.

    Args:
        lines: Corpus lines in file order
        block_size: Number of lines per review

    Yields:
        RawRecordBlock objects in corpus order

    Raises:
        MalformedCorpusError: If the line count is not a multiple of block_size
    """
    if block_size < 1:
        raise ValueError(f"Invalid block size: {block_size}. Must be >= 1")

    n_lines = len(lines)
    if n_lines % block_size != 0:
        raise MalformedCorpusError(
            f"Expected a line count that is a multiple of {block_size}, "
            f"got {n_lines} lines ({n_lines % block_size} trailing)"
        )

    return _generate_blocks(lines, block_size)


def _generate_blocks(lines: Sequence[str], block_size: int) -> Iterator[RawRecordBlock]:
    for index, start in enumerate(range(0, len(lines), block_size)):
        yield RawRecordBlock(index=index, lines=tuple(lines[start:start + block_size]))


def normalize_text(value: str) -> str:
    """Normalize to Unicode NFC and trim surrounding whitespace."""
    return unicodedata.normalize('NFC', value).strip()


def parse_helpfulness(value: str, block_index: Optional[int] = None) -> Tuple[int, int]:
    """
    Parse a ``<numerator>/<denominator>`` helpfulness fraction.

    Args:
        value: The field value with its tag already removed
        block_index: Block position, for error context

    Returns:
        Tuple of (helpful_votes, total_votes)

    Raises:
        FieldParseError: If the value is not two non-negative integers
            separated by '/'
    """
    match = HELPFULNESS_PATTERN.match(value)
    if match is None:
        raise FieldParseError(
            "Helpfulness must have the form '<int>/<int>'",
            block_index=block_index, line=value)

    return int(match.group(1)), int(match.group(2))


def _required_value(block: RawRecordBlock, field: ReviewField) -> str:
    lines = block.find_lines(field)
    if not lines:
        raise MissingFieldError(field.tag, block_index=block.index)
    if len(lines) > 1:
        raise MalformedCorpusError(
            f"Duplicate required field '{field.tag}' ({len(lines)} lines)",
            block_index=block.index, line=lines[1])
    return field.strip_tag(lines[0])


def block_ids(block: RawRecordBlock) -> Tuple[str, str]:
    """
    Read the normalized (product_id, user_id) pair of a block.

    Raises:
        MissingFieldError: If either tag is absent
        MalformedCorpusError: If either tag is duplicated
    """
    return (normalize_text(_required_value(block, ReviewField.PRODUCT_ID)),
            normalize_text(_required_value(block, ReviewField.USER_ID)))


def parse_block(
    block: RawRecordBlock,
    zero_vote_policy: ZeroVotePolicy = ZeroVotePolicy.EXCLUDE,
    zero_vote_ratio: float = settings.ZERO_VOTE_RATIO,
    inverted_vote_policy: InvertedVotePolicy = InvertedVotePolicy.RAISE
) -> Optional[ParsedReview]:
    """
    Build a ParsedReview from one block.

    Args:
        block: The raw record block
        zero_vote_policy: Handling of reviews with no votes
        zero_vote_ratio: Ratio assigned to kept zero-vote reviews
        inverted_vote_policy: Handling of reviews with more helpful votes
            than total votes

    Returns:
        The parsed review, or None if excluded by a vote policy

    Raises:
        MissingFieldError: If a required tag is absent
        MalformedCorpusError: If a required tag is duplicated, or a required
            value is empty after trimming
        FieldParseError: If the helpfulness fraction is invalid, or inverted
            under InvertedVotePolicy.RAISE
    """
    values = {field: _required_value(block, field) for field in REQUIRED_FIELDS}

    for field in (ReviewField.PRODUCT_ID, ReviewField.USER_ID, ReviewField.TEXT):
        values[field] = normalize_text(values[field])
        if not values[field]:
            raise MalformedCorpusError(
                f"Empty value for required field '{field.tag}'",
                block_index=block.index, line=block.find_line(field))

    helpful, total = parse_helpfulness(
        values[ReviewField.HELPFULNESS], block_index=block.index)

    if helpful > total:
        if inverted_vote_policy == InvertedVotePolicy.EXCLUDE:
            logger.debug(f"Excluding block {block.index}: "
                         f"{helpful} helpful of {total} votes")
            return None
        raise FieldParseError(
            f"Helpful votes ({helpful}) exceed total votes ({total})",
            block_index=block.index,
            line=block.find_line(ReviewField.HELPFULNESS))

    if total == 0:
        if zero_vote_policy == ZeroVotePolicy.EXCLUDE:
            logger.debug(f"Excluding block {block.index}: no helpfulness votes")
            return None
        ratio = zero_vote_ratio
    else:
        ratio = helpful / total

    return ParsedReview(
        product_id=values[ReviewField.PRODUCT_ID],
        user_id=values[ReviewField.USER_ID],
        helpful_votes=helpful,
        total_votes=total,
        text=values[ReviewField.TEXT],
        helpfulness_ratio=ratio,
    )


def parse(
    lines: Sequence[str],
    block_size: int = settings.BLOCK_SIZE,
    zero_vote_policy: ZeroVotePolicy = ZeroVotePolicy.EXCLUDE,
    zero_vote_ratio: float = settings.ZERO_VOTE_RATIO,
    inverted_vote_policy: InvertedVotePolicy = InvertedVotePolicy.RAISE,
    show_progress: bool = False,
    excluded: Optional[List[RawRecordBlock]] = None
) -> List[ParsedReview]:
    """
    Parse corpus lines into reviews, preserving block order.

    Args:
        lines: Corpus lines in file order
        block_size: Number of lines per review
        zero_vote_policy: EXCLUDE (default) drops ``0/0`` reviews,
            KEEP retains them with zero_vote_ratio
        zero_vote_ratio: Sentinel ratio for kept zero-vote reviews, in [0, 1]
        inverted_vote_policy: RAISE (default) fails on fractions such as
            ``3/1``, EXCLUDE drops those reviews
        show_progress: Whether to show a progress bar
        excluded: Optional list that receives the blocks dropped by a vote
            policy, in block order

    Returns:
        List of ParsedReview objects, one per block minus excluded ones

    Raises:
        MalformedCorpusError: Wrong line count, duplicated required tag, or
            empty required value
        MissingFieldError: A required tag is missing from a block
        FieldParseError: A helpfulness fraction cannot be parsed, or is
            inverted under InvertedVotePolicy.RAISE
    """
    zero_vote_policy = ZeroVotePolicy(zero_vote_policy)
    inverted_vote_policy = InvertedVotePolicy(inverted_vote_policy)
    if not (0.0 <= zero_vote_ratio <= 1.0):
        raise ValueError(
            f"Invalid zero-vote ratio: {zero_vote_ratio}. Must be within [0, 1]")

    blocks: Iterable[RawRecordBlock] = iter_blocks(lines, block_size)
    n_blocks = len(lines) // block_size
    if show_progress:
        blocks = autonotebook.tqdm(blocks, total=n_blocks, desc="Parsing reviews")

    reviews = []
    for block in blocks:
        review = parse_block(block, zero_vote_policy, zero_vote_ratio,
                             inverted_vote_policy)
        if review is not None:
            reviews.append(review)
        elif excluded is not None:
            excluded.append(block)

    logger.info(f"Parsed {len(reviews)} reviews from {n_blocks} blocks "
                f"({n_blocks - len(reviews)} excluded by vote policy)")
    return reviews


def filter_by_min_votes(
    reviews: Sequence[ParsedReview],
    min_votes: int
) -> List[ParsedReview]:
    """
    Keep reviews with at least min_votes total votes.

    Args:
        reviews: Parsed reviews
        min_votes: Minimum number of total votes

    Returns:
        New list preserving the input order
    """
    if min_votes < 0:
        raise ValueError(f"Invalid min_votes: {min_votes}. Must be >= 0")

    filtered = [review for review in reviews if review.total_votes >= min_votes]
    logger.debug(f"Kept {len(filtered)}/{len(reviews)} reviews "
                 f"with >= {min_votes} votes")
    return filtered


def compute_stats(
    reviews: Iterable[ParsedReview],
    excluded_blocks: Iterable[RawRecordBlock] = ()
) -> CorpusStats:
    """
    Count distinct products, distinct users and reviews in one pass.

    Args:
        reviews: Parsed reviews
        excluded_blocks: Blocks dropped by a vote policy that should still
            count toward the statistics

    Returns:
        CorpusStats for the collection
    """
    products = set()
    users = set()
    n_reviews = 0

    for review in reviews:
        products.add(review.product_id)
        users.add(review.user_id)
        n_reviews += 1

    for block in excluded_blocks:
        product_id, user_id = block_ids(block)
        products.add(product_id)
        users.add(user_id)
        n_reviews += 1

    return CorpusStats(
        num_products=len(products),
        num_users=len(users),
        num_reviews=n_reviews,
    )
