"""
CorpusReader: Handles loading of raw corpus lines from the file system.

This module abstracts away compression and text encoding so the parser only
ever sees an ordered sequence of decoded lines.
"""

import gzip
import logging
from pathlib import Path
from typing import BinaryIO, Iterator, List, Union

from tqdm import autonotebook

from . import settings

logger = logging.getLogger(__name__)


class CorpusReader:
    """
    Reads a line-oriented review corpus from disk.

    Supports plain text and gzip files (detected by the ``.gz`` suffix).
    Lines that do not decode with the primary encoding are decoded with the
    fallback encoding instead, so a mostly-UTF-8 file with stray Latin-1
    bytes still loads.
    """

    def __init__(
        self,
        corpus_path: Union[str, Path],
        encoding: str = settings.DEFAULT_ENCODING,
        fallback_encoding: str = settings.FALLBACK_ENCODING,
        skip_blank_lines: bool = True
    ):
        """
        Initialize the corpus reader.

        Args:
            corpus_path: Path to the corpus file (optionally gzipped)
            encoding: Encoding tried first for every line
            fallback_encoding: Encoding used when the first one fails
            skip_blank_lines: Whether to drop empty record separator lines
        """
        self.corpus_path = Path(corpus_path)
        self.encoding = encoding
        self.fallback_encoding = fallback_encoding
        self.skip_blank_lines = skip_blank_lines
        self.fallback_count = 0

        if not self.corpus_path.is_file():
            raise FileNotFoundError(f"Corpus file not found: {self.corpus_path}")

    def _open(self) -> BinaryIO:
        if self.corpus_path.suffix == '.gz':
            return gzip.open(self.corpus_path, 'rb')
        return open(self.corpus_path, 'rb')

    def _decode(self, raw: bytes) -> str:
        try:
            return raw.decode(self.encoding)
        except UnicodeDecodeError:
            self.fallback_count += 1
            return raw.decode(self.fallback_encoding)

    def stream_lines(self, show_progress: bool = False) -> Iterator[str]:
        """
        Generator that yields decoded corpus lines one by one.

        Trailing newline characters are removed; nothing else is altered.

        Args:
            show_progress: Whether to show a progress bar

        Yields:
            Decoded lines in file order
        """
        with self._open() as f:
            raw_lines = f
            if show_progress:
                raw_lines = autonotebook.tqdm(f, desc="Reading corpus", unit=" lines")

            for raw in raw_lines:
                line = self._decode(raw).rstrip('\r\n')
                if self.skip_blank_lines and not line.strip():
                    continue
                yield line

    def read_lines(self, show_progress: bool = False) -> List[str]:
        """
        Load every corpus line into memory.

        Returns:
            List of decoded lines
        """
        self.fallback_count = 0
        lines = list(self.stream_lines(show_progress=show_progress))

        if self.fallback_count:
            logger.warning(f"Decoded {self.fallback_count} lines with "
                           f"{self.fallback_encoding} instead of {self.encoding}")
        logger.info(f"Read {len(lines)} lines from {self.corpus_path}")
        return lines

    def count_lines(self) -> int:
        """
        Count corpus lines, honouring skip_blank_lines.

        Returns:
            Number of lines stream_lines would yield
        """
        count = 0
        for _ in self.stream_lines():
            count += 1
        return count

    def __repr__(self) -> str:
        return f"CorpusReader(path={self.corpus_path}, encoding={self.encoding})"
