"""
Unit tests for the dataset helpers.
"""

import numpy as np
import pytest

from reviewcorpus import (
    CorpusError,
    CorpusStats,
    PreprocessingPipeline,
    StatsMismatchError,
    TrainingConfig,
    feature_label_pairs,
    parse,
    train_validation_split,
    validate_stats,
)


def test_validate_stats_match():
    """Test matching counts pass silently."""
    stats = CorpusStats(num_products=2, num_users=3, num_reviews=3)
    validate_stats(stats, expected_reviews=3, expected_products=2, expected_users=3)


def test_validate_stats_skips_unset_counts():
    stats = CorpusStats(num_products=2, num_users=3, num_reviews=3)
    validate_stats(stats, expected_reviews=3)


def test_validate_stats_mismatch():
    """Test every mismatch is reported as an assertion failure."""
    stats = CorpusStats(num_products=2, num_users=3, num_reviews=3)

    with pytest.raises(StatsMismatchError) as exc_info:
        validate_stats(stats, expected_reviews=568454, expected_users=3,
                       expected_products=74258)

    error = exc_info.value
    assert isinstance(error, AssertionError)
    assert not isinstance(error, CorpusError)
    assert set(error.mismatches) == {"num_reviews", "num_products"}
    assert "568454" in str(error)


def test_feature_label_pairs(sample_lines):
    """Test texts align with float32 ratio labels."""
    reviews = parse(sample_lines)

    texts, labels = feature_label_pairs(reviews)

    assert len(texts) == len(labels) == 3
    assert labels.dtype == np.float32
    np.testing.assert_allclose(labels, [1.0, 0.0, 0.3], rtol=1e-6)
    assert texts[1] == "product arrived labeled as jumbo salted peanuts"


def test_feature_label_pairs_raw_text(sample_lines):
    reviews = parse(sample_lines)
    texts, _ = feature_label_pairs(reviews, clean=False)
    assert texts == [r.text for r in reviews]


def test_feature_label_pairs_with_pipeline(sample_lines):
    reviews = parse(sample_lines)
    texts, _ = feature_label_pairs(reviews, pipeline=PreprocessingPipeline(['lowercase']))
    assert texts[1] == "product arrived labeled as jumbo salted peanuts..."


def test_train_validation_split():
    """Test split sizes and that pairs stay aligned."""
    texts = [f"review {i}" for i in range(10)]
    labels = np.arange(10, dtype=np.float32) / 10

    train_texts, val_texts, train_labels, val_labels = train_validation_split(
        texts, labels, validation_size=0.2, random_seed=42)

    assert len(train_texts) == 8
    assert len(val_texts) == 2
    assert sorted(train_texts + val_texts) == sorted(texts)
    for text, label in zip(train_texts + val_texts,
                           np.concatenate([train_labels, val_labels])):
        assert label == pytest.approx(int(text.split()[1]) / 10)


def test_train_validation_split_reproducible():
    texts = [f"review {i}" for i in range(20)]
    labels = np.zeros(20)

    first = train_validation_split(texts, labels, random_seed=7)
    second = train_validation_split(texts, labels, random_seed=7)

    assert first[0] == second[0]
    assert first[1] == second[1]


def test_train_validation_split_length_mismatch():
    with pytest.raises(ValueError):
        train_validation_split(["a", "b"], [0.1])


@pytest.mark.parametrize("validation_size", [0.0, 1.0, -0.5])
def test_train_validation_split_invalid_size(validation_size):
    with pytest.raises(ValueError):
        train_validation_split(["a", "b"], [0.1, 0.2], validation_size=validation_size)


def test_training_config_defaults():
    """Test the documented defaults."""
    config = TrainingConfig()

    assert config.vocab_size == 10000
    assert config.max_sequence_length == 100
    assert config.optimizer == "adam"
    assert config.min_votes == 10
    assert config.validation_size == 0.2


@pytest.mark.parametrize("overrides", [
    {"vocab_size": 0},
    {"max_sequence_length": -1},
    {"batch_size": 0},
    {"epochs": 0},
    {"optimizer": "lbfgs"},
    {"learning_rate": 0.0},
    {"early_stopping_patience": -1},
    {"validation_size": 1.0},
    {"min_votes": -5},
])
def test_training_config_invalid(overrides):
    """Test out-of-range hyperparameters are rejected."""
    with pytest.raises(ValueError):
        TrainingConfig(**overrides)


def test_training_config_from_dict():
    config = TrainingConfig.from_dict({"vocab_size": 5000, "optimizer": "sgd"})

    assert config.vocab_size == 5000
    assert config.to_dict()["optimizer"] == "sgd"

    with pytest.raises(ValueError):
        TrainingConfig.from_dict({"dropout": 0.5})
