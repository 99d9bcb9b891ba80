"""
Dataset helpers that sit between the parser and an external model.

Handles reference-count validation, (text, label) extraction, the
train/validation split and the hyperparameters handed to the tokenizer and
training loop.
"""

import logging
from dataclasses import dataclass, asdict, fields
from typing import Any, Dict, List, Optional, Sequence, Tuple

import numpy as np
from sklearn.model_selection import train_test_split

from . import settings
from .errors import StatsMismatchError
from .preprocessing import PreprocessingPipeline, clean_text
from .review import CorpusStats, ParsedReview

logger = logging.getLogger(__name__)

OPTIMIZERS = ('adam', 'sgd', 'rmsprop', 'adagrad')


def validate_stats(
    stats: CorpusStats,
    expected_reviews: Optional[int] = None,
    expected_products: Optional[int] = None,
    expected_users: Optional[int] = None
) -> None:
    """
    Compare corpus statistics against reference counts.

    Counts left as None are not checked.

    Args:
        stats: Statistics computed over the parsed reviews
        expected_reviews: Reference number of reviews
        expected_products: Reference number of distinct products
        expected_users: Reference number of distinct users

    Raises:
        StatsMismatchError: If any supplied count differs
    """
    checks = {
        'num_reviews': (expected_reviews, stats.num_reviews),
        'num_products': (expected_products, stats.num_products),
        'num_users': (expected_users, stats.num_users),
    }
    mismatches = {
        name: (expected, actual)
        for name, (expected, actual) in checks.items()
        if expected is not None and expected != actual
    }

    if mismatches:
        raise StatsMismatchError(mismatches)

    logger.info(f"Corpus statistics match reference counts: {stats.to_dict()}")


def feature_label_pairs(
    reviews: Sequence[ParsedReview],
    clean: bool = True,
    pipeline: Optional[PreprocessingPipeline] = None
) -> Tuple[List[str], np.ndarray]:
    """
    Extract review texts aligned 1:1 with their helpfulness ratios.

    Args:
        reviews: Parsed reviews
        clean: Whether to clean the text (ignored when pipeline is given)
        pipeline: Optional pipeline used instead of clean_text

    Returns:
        Tuple of (texts, labels) where labels is a float32 array
    """
    if pipeline is not None:
        texts = [pipeline.process(review.text) for review in reviews]
    elif clean:
        texts = [clean_text(review.text) for review in reviews]
    else:
        texts = [review.text for review in reviews]

    labels = np.array([review.helpfulness_ratio for review in reviews],
                      dtype=np.float32)
    return texts, labels


def train_validation_split(
    texts: Sequence[str],
    labels: Sequence[float],
    validation_size: float = settings.DEFAULT_VALIDATION_SIZE,
    random_seed: int = settings.RANDOM_SEED
) -> Tuple[List[str], List[str], np.ndarray, np.ndarray]:
    """
    Shuffle and split texts and labels into training and validation sets.

    Args:
        texts: Input texts
        labels: Labels aligned with texts
        validation_size: Proportion of data for validation (0-1, exclusive)
        random_seed: Random seed for reproducibility

    Returns:
        Tuple of (train_texts, val_texts, train_labels, val_labels)
    """
    if len(texts) != len(labels):
        raise ValueError(
            f"texts and labels differ in length: {len(texts)} vs {len(labels)}")
    if not (0.0 < validation_size < 1.0):
        raise ValueError(
            f"Invalid validation_size: {validation_size}. Must be within (0, 1)")

    train_texts, val_texts, train_labels, val_labels = train_test_split(
        list(texts),
        np.asarray(labels, dtype=np.float32),
        test_size=validation_size,
        random_state=random_seed,
        shuffle=True,
    )

    logger.info(f"Split created: {len(train_texts)} train, {len(val_texts)} validation")
    return train_texts, val_texts, train_labels, val_labels


@dataclass
class TrainingConfig:
    """
    Hyperparameters for the tokenizer and regression model.

    The tokenizer keeps the vocab_size most frequent words and pads or
    truncates sequences to max_sequence_length.
    """
    vocab_size: int = 10000  # >= 1
    max_sequence_length: int = 100  # >= 1
    embedding_dim: int = 50  # >= 1
    batch_size: int = 128  # >= 1
    epochs: int = 10  # >= 1
    optimizer: str = 'adam'  # One of OPTIMIZERS
    learning_rate: float = 1e-3  # > 0
    early_stopping_patience: int = 3  # >= 0
    reduce_lr_patience: int = 2  # >= 0
    validation_size: float = settings.DEFAULT_VALIDATION_SIZE  # (0, 1)
    min_votes: int = settings.DEFAULT_MIN_VOTES  # >= 0

    def __post_init__(self):
        for name in ('vocab_size', 'max_sequence_length', 'embedding_dim',
                     'batch_size', 'epochs'):
            if getattr(self, name) < 1:
                raise ValueError(f"Invalid {name}: {getattr(self, name)}. Must be >= 1")

        for name in ('early_stopping_patience', 'reduce_lr_patience', 'min_votes'):
            if getattr(self, name) < 0:
                raise ValueError(f"Invalid {name}: {getattr(self, name)}. Must be >= 0")

        if self.optimizer not in OPTIMIZERS:
            raise ValueError(
                f"Unknown optimizer: {self.optimizer}. Use one of {OPTIMIZERS}")
        if self.learning_rate <= 0:
            raise ValueError(f"Invalid learning_rate: {self.learning_rate}. Must be > 0")
        if not (0.0 < self.validation_size < 1.0):
            raise ValueError(
                f"Invalid validation_size: {self.validation_size}. Must be within (0, 1)")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TrainingConfig":
        """Create a config from a dict, rejecting unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown training config keys: {sorted(unknown)}")
        return cls(**data)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
