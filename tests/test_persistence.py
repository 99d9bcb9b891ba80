"""
Unit tests for PersistenceManager.
"""

import numpy as np
import pytest

from reviewcorpus import PersistenceManager, parse


def test_directories_created(tmp_path):
    manager = PersistenceManager(tmp_path / "out")

    assert manager.processed_dir.is_dir()
    assert manager.splits_dir.is_dir()


@pytest.mark.parametrize("format, filename", [("csv", "reviews.csv"),
                                              ("parquet", "reviews.parquet")])
def test_save_and_load_reviews(tmp_path, sample_lines, format, filename):
    """Test reviews survive a save/load cycle."""
    reviews = parse(sample_lines)
    manager = PersistenceManager(tmp_path)

    path = manager.save_reviews(reviews, filename=filename, format=format)
    loaded = manager.load_reviews(filename)

    assert path.exists()
    assert len(loaded) == len(reviews)
    for original, restored in zip(reviews, loaded):
        assert restored.product_id == original.product_id
        assert restored.user_id == original.user_id
        assert restored.text == original.text
        assert restored.total_votes == original.total_votes
        assert restored.helpfulness_ratio == pytest.approx(original.helpfulness_ratio)


def test_numeric_looking_ids_stay_strings(tmp_path, make_block):
    """Test ids made of digits are not read back as integers."""
    reviews = parse(make_block(product_id="0001234567", user_id="42"))
    manager = PersistenceManager(tmp_path)

    manager.save_reviews(reviews)
    loaded = manager.load_reviews()

    assert loaded[0].product_id == "0001234567"
    assert loaded[0].user_id == "42"


def test_text_with_commas_and_quotes(tmp_path, make_block):
    reviews = parse(make_block(text='He said "yum", twice, then left.'))
    manager = PersistenceManager(tmp_path)

    manager.save_reviews(reviews)

    assert manager.load_reviews()[0].text == 'He said "yum", twice, then left.'


def test_save_empty_reviews(tmp_path):
    manager = PersistenceManager(tmp_path)
    manager.save_reviews([])
    assert manager.load_reviews() == []


def test_unknown_format(tmp_path):
    with pytest.raises(ValueError):
        PersistenceManager(tmp_path).save_reviews([], format="xlsx")


def test_save_split(tmp_path):
    """Test a split is stored as one table with a set column."""
    manager = PersistenceManager(tmp_path)

    manager.save_split(["a b", "c d", "e"], np.array([0.1, 0.2, 0.3], dtype=np.float32),
                       ["f"], np.array([1.0], dtype=np.float32))
    df = manager.load_split()

    assert df.height == 4
    assert df["set"].to_list() == ["train", "train", "train", "validation"]
    assert df["text"].to_list() == ["a b", "c d", "e", "f"]
    assert df["label"].to_list() == pytest.approx([0.1, 0.2, 0.3, 1.0], rel=1e-6)


def test_default_filename_follows_format(tmp_path, sample_lines):
    """Test a Parquet save without a filename can be loaded back by name."""
    reviews = parse(sample_lines)
    manager = PersistenceManager(tmp_path)

    path = manager.save_reviews(reviews, format="parquet")

    assert path.name == "reviews.parquet"
    assert len(manager.load_reviews("reviews.parquet")) == len(reviews)


@pytest.mark.parametrize("format, filename", [("parquet", "reviews.csv"),
                                              ("csv", "reviews.parquet")])
def test_filename_format_mismatch(tmp_path, format, filename):
    """Test a suffix that disagrees with the format is refused before writing."""
    manager = PersistenceManager(tmp_path)

    with pytest.raises(ValueError):
        manager.save_reviews([], filename=filename, format=format)

    assert not (manager.processed_dir / filename).exists()


def test_save_split_parquet_default_filename(tmp_path):
    manager = PersistenceManager(tmp_path)

    path = manager.save_split(["a", "b"], np.array([0.5, 1.0]), ["c"], np.array([0.0]),
                              format="parquet")

    assert path.name == "split.parquet"
    assert manager.load_split("split.parquet").height == 3

    with pytest.raises(ValueError):
        manager.save_split(["a"], np.array([0.5]), [], np.array([]),
                           filename="split.csv", format="parquet")
