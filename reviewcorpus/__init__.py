"""
Review Helpfulness Corpus toolkit

Parses a line-oriented product review corpus into validated records with a
helpfulness ratio label, and prepares (text, label) pairs for a regression
model.
"""

from .errors import (
    CorpusError,
    MalformedCorpusError,
    MissingFieldError,
    FieldParseError,
    StatsMismatchError,
)
from .fields import ReviewField, REQUIRED_FIELDS
from .review import RawRecordBlock, ParsedReview, CorpusStats
from .parser import (
    ZeroVotePolicy,
    InvertedVotePolicy,
    parse,
    parse_block,
    iter_blocks,
    filter_by_min_votes,
    compute_stats,
)
from .preprocessing import PreprocessingPipeline, clean_text
from .reader import CorpusReader
from .dataset import (
    TrainingConfig,
    validate_stats,
    feature_label_pairs,
    train_validation_split,
)
from .persistence import PersistenceManager

__version__ = "1.0.0"
__all__ = [
    "CorpusError",
    "MalformedCorpusError",
    "MissingFieldError",
    "FieldParseError",
    "StatsMismatchError",
    "ReviewField",
    "REQUIRED_FIELDS",
    "RawRecordBlock",
    "ParsedReview",
    "CorpusStats",
    "ZeroVotePolicy",
    "InvertedVotePolicy",
    "parse",
    "parse_block",
    "iter_blocks",
    "filter_by_min_votes",
    "compute_stats",
    "PreprocessingPipeline",
    "clean_text",
    "CorpusReader",
    "TrainingConfig",
    "validate_stats",
    "feature_label_pairs",
    "train_validation_split",
    "PersistenceManager",
]
