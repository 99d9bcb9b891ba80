"""
PersistenceManager: Manages saving and loading of parsed reviews and splits.

Tabular artifacts are written with Polars as CSV or Parquet.
"""

import logging
from pathlib import Path
from typing import List, Optional, Sequence, Union

import numpy as np
import polars as pl

from .review import ParsedReview

logger = logging.getLogger(__name__)

REVIEW_SCHEMA = {
    'product_id': pl.Utf8,
    'user_id': pl.Utf8,
    'helpful_votes': pl.Int64,
    'total_votes': pl.Int64,
    'text': pl.Utf8,
    'helpfulness_ratio': pl.Float64,
}

FORMATS = ('csv', 'parquet')


class PersistenceManager:
    """
    Manages storage and retrieval of corpus artifacts.

    Layout under base_path:
    - processed_data/ for parsed reviews
    - data_splits/ for train/validation splits
    """

    def __init__(self, base_path: Union[str, Path]):
        """
        Initialize persistence manager.

        Args:
            base_path: Root directory for data storage
        """
        self.base_path = Path(base_path)

        self.processed_dir = self.base_path / "processed_data"
        self.splits_dir = self.base_path / "data_splits"

        for dir_path in [self.processed_dir, self.splits_dir]:
            dir_path.mkdir(parents=True, exist_ok=True)

    @staticmethod
    def _check_format(format: str):
        if format not in FORMATS:
            raise ValueError(f"Unknown format: {format}. Use one of {FORMATS}")

    @staticmethod
    def _write(df: pl.DataFrame, path: Path, format: str):
        if format == 'csv':
            df.write_csv(path)
        else:
            df.write_parquet(path)

    @staticmethod
    def _resolve_filename(filename: Optional[str], stem: str, format: str) -> str:
        """Default to ``<stem>.<format>``; reject names whose suffix disagrees."""
        if filename is None:
            return f"{stem}.{format}"
        # Loaders pick the reader from the suffix
        is_parquet = Path(filename).suffix == '.parquet'
        if is_parquet != (format == 'parquet'):
            raise ValueError(
                f"Filename {filename!r} does not match format {format!r}")
        return filename

    def save_reviews(
        self,
        reviews: Sequence[ParsedReview],
        filename: Optional[str] = None,
        format: str = 'csv'
    ) -> Path:
        """
        Save parsed reviews to a single file in processed_dir.

        Args:
            reviews: Reviews to save
            filename: Output filename, ``<name>.<format>`` by default
            format: Either 'csv' or 'parquet'

        Returns:
            Path of the written file

        Raises:
            ValueError: Unknown format, or a filename suffix that disagrees with it
        """
        self._check_format(format)
        filename = self._resolve_filename(filename, "reviews", format)

        df = pl.DataFrame([review.to_dict() for review in reviews],
                          schema=REVIEW_SCHEMA)
        output_path = self.processed_dir / filename
        self._write(df, output_path, format)

        logger.info(f"Saved {len(reviews)} reviews to {output_path}")
        return output_path

    def load_reviews(self, filename: str = "reviews.csv") -> List[ParsedReview]:
        """
        Load parsed reviews saved by save_reviews.

        The format is taken from the file suffix (.parquet or anything else
        for CSV).

        Args:
            filename: File to load from processed_dir

        Returns:
            List of ParsedReview objects in file order
        """
        file_path = self.processed_dir / filename
        if file_path.suffix == '.parquet':
            df = pl.read_parquet(file_path)
        else:
            df = pl.read_csv(file_path, schema_overrides=REVIEW_SCHEMA)

        reviews = [ParsedReview(**row) for row in df.iter_rows(named=True)]
        logger.info(f"Loaded {len(reviews)} reviews from {file_path}")
        return reviews

    def save_split(
        self,
        train_texts: Sequence[str],
        train_labels: np.ndarray,
        val_texts: Sequence[str],
        val_labels: np.ndarray,
        filename: Optional[str] = None,
        format: str = 'csv'
    ) -> Path:
        """
        Save a train/validation split as one table with a ``set`` column.

        Args:
            train_texts: Training texts
            train_labels: Training labels
            val_texts: Validation texts
            val_labels: Validation labels
            filename: Output filename, ``<name>.<format>`` by default
            format: Either 'csv' or 'parquet'

        Returns:
            Path of the written file

        Raises:
            ValueError: Unknown format, or a filename suffix that disagrees with it
        """
        self._check_format(format)
        filename = self._resolve_filename(filename, "split", format)

        df = pl.DataFrame({
            'text': list(train_texts) + list(val_texts),
            'label': np.concatenate([
                np.asarray(train_labels, dtype=np.float64),
                np.asarray(val_labels, dtype=np.float64),
            ]),
            'set': ['train'] * len(train_texts) + ['validation'] * len(val_texts),
        }, schema={'text': pl.Utf8, 'label': pl.Float64, 'set': pl.Utf8})

        output_path = self.splits_dir / filename
        self._write(df, output_path, format)

        logger.info(f"Saved data split to {output_path}")
        return output_path

    def load_split(self, filename: str = "split.csv") -> pl.DataFrame:
        """
        Load a split saved by save_split.

        Returns:
            Polars DataFrame with text, label and set columns
        """
        file_path = self.splits_dir / filename
        if file_path.suffix == '.parquet':
            return pl.read_parquet(file_path)
        return pl.read_csv(file_path, schema_overrides={'text': pl.Utf8})
