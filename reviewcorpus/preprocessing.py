"""
PreprocessingPipeline: Text cleaning applied before tokenization.

Parsing keeps review text as written; cleaning is a separate, optional
transform needed only before the text is fed to an embedding or tokenizer.
"""

import re
import string
from abc import ABC, abstractmethod
from typing import Callable, Dict, Iterable, List, Optional

import nltk
from nltk.stem import PorterStemmer, SnowballStemmer
from nltk.tokenize import word_tokenize

# Runs of punctuation and/or whitespace collapse to a single space
_PUNCT_WS_PATTERN = re.compile(
    r'[\s' + re.escape(string.punctuation) + r']+')


def _ensure_nltk_data(resource: str, package: str):
    try:
        nltk.data.find(resource)
    except LookupError:
        nltk.download(package, quiet=True)


def clean_text(text: str) -> str:
    """
    Lower-case text and collapse punctuation/whitespace runs into one space.

    Args:
        text: Review text

    Returns:
        Cleaned, trimmed text
    """
    return _PUNCT_WS_PATTERN.sub(' ', text.lower()).strip()


class PreprocessingStep(ABC):
    """Abstract base class for preprocessing steps."""

    @abstractmethod
    def process(self, text: str) -> str:
        """Process the text and return the result."""
        pass


class HtmlTagRemover(PreprocessingStep):
    """Replaces HTML tags such as ``<br />`` with a space."""

    def __init__(self):
        self.html_pattern = re.compile(r'<[^>]+>')

    def process(self, text: str) -> str:
        return self.html_pattern.sub(' ', text)


class LowercaseConverter(PreprocessingStep):

    def process(self, text: str) -> str:
        return text.lower()


class UrlRemover(PreprocessingStep):
    """Removes URLs from text."""

    def __init__(self):
        self.url_pattern = re.compile(r'(?:https?://|www\.)\S+')

    def process(self, text: str) -> str:
        return self.url_pattern.sub(' ', text)


class NumberRemover(PreprocessingStep):
    """Removes or replaces numbers in text."""

    def __init__(self, replace_with: str = ' '):
        self.replace_with = replace_with
        self.number_pattern = re.compile(r'\d+')

    def process(self, text: str) -> str:
        return self.number_pattern.sub(self.replace_with, text)


class PunctuationCollapser(PreprocessingStep):
    """Collapses runs of punctuation and whitespace into a single space."""

    def process(self, text: str) -> str:
        return _PUNCT_WS_PATTERN.sub(' ', text)


class ExtraWhitespaceRemover(PreprocessingStep):
    """Removes extra whitespace from text."""

    def process(self, text: str) -> str:
        # Replace multiple spaces with single space
        text = re.sub(r'\s+', ' ', text)
        return text.strip()


class StopwordRemover(PreprocessingStep):
    """Removes English stopwords, keeping negations."""

    NEGATIONS = {'not', 'no', 'nor', 'never', 'neither', 'hardly', 'scarcely', 'barely'}

    def __init__(
        self,
        language: str = 'english',
        custom_stopwords: Optional[List[str]] = None,
        stopwords: Optional[Iterable[str]] = None,
        tokenizer: Optional[Callable[[str], List[str]]] = None
    ):
        """
        Initialize stopword remover.

        NLTK data is downloaded on first use, only for the parts that were
        not supplied.

        Args:
            language: Language for NLTK stopwords
            custom_stopwords: Additional stopwords to remove
            stopwords: Base stopword list, replacing the NLTK one
            tokenizer: Callable splitting text into tokens,
                nltk.word_tokenize by default
        """
        if stopwords is None:
            _ensure_nltk_data('corpora/stopwords', 'stopwords')
            from nltk.corpus import stopwords as nltk_stopwords
            stopwords = nltk_stopwords.words(language)

        if tokenizer is None:
            _ensure_nltk_data('tokenizers/punkt_tab', 'punkt_tab')
            tokenizer = word_tokenize

        self.stopwords = set(word.lower() for word in stopwords) - self.NEGATIONS
        if custom_stopwords:
            self.stopwords.update(word.lower() for word in custom_stopwords)
        self.tokenizer = tokenizer

    def process(self, text: str) -> str:
        tokens = self.tokenizer(text)
        return ' '.join(
            word for word in tokens if word.lower() not in self.stopwords)


class Stemmer(PreprocessingStep):
    """Applies stemming to reduce words to their root form."""

    def __init__(self, algorithm: str = 'porter'):
        """
        Initialize stemmer.

        Args:
            algorithm: Either 'porter' or 'snowball'
        """
        if algorithm == 'porter':
            self.stemmer = PorterStemmer()
        elif algorithm == 'snowball':
            self.stemmer = SnowballStemmer('english')
        else:
            raise ValueError(f"Unknown stemming algorithm: {algorithm}")

    def process(self, text: str) -> str:
        return ' '.join(self.stemmer.stem(word) for word in text.split())


class PreprocessingPipeline:
    """
    Manages and applies a series of text preprocessing operations.

    Steps are looked up by name in STEP_REGISTRY and applied in order.
    """

    STEP_REGISTRY: Dict[str, Callable[[], PreprocessingStep]] = {
        'remove_html': lambda: HtmlTagRemover(),
        'lowercase': lambda: LowercaseConverter(),
        'remove_urls': lambda: UrlRemover(),
        'remove_numbers': lambda: NumberRemover(),
        'collapse_punctuation': lambda: PunctuationCollapser(),
        'remove_extra_whitespace': lambda: ExtraWhitespaceRemover(),
        'remove_stopwords': lambda: StopwordRemover(),
        'stem': lambda: Stemmer(algorithm='porter'),
        'stem_snowball': lambda: Stemmer(algorithm='snowball'),
    }

    DEFAULT_STEPS = [
        'remove_html',
        'remove_urls',
        'lowercase',
        'collapse_punctuation',
        'remove_extra_whitespace',
    ]

    def __init__(self, steps: Optional[List[str]] = None):
        """
        Initialize preprocessing pipeline.

        Args:
            steps: List of step names to execute in order.
                   If None, uses DEFAULT_STEPS.
        """
        if steps is None:
            steps = self.DEFAULT_STEPS

        self.step_names: List[str] = []
        self.steps: List[PreprocessingStep] = []

        for step_name in steps:
            self.add_step(step_name)

    def process(self, text: str) -> str:
        """
        Execute the configured pipeline on the given text.

        Args:
            text: Raw input text

        Returns:
            Processed text after applying all steps
        """
        for step in self.steps:
            text = step.process(text)
        return text

    def __call__(self, text: str) -> str:
        return self.process(text)

    def add_step(self, step_name: str, position: Optional[int] = None):
        """
        Add a preprocessing step to the pipeline.

        Args:
            step_name: Name of the step to add
            position: Position to insert (None = append to end)
        """
        if step_name not in self.STEP_REGISTRY:
            raise ValueError(f"Unknown preprocessing step: {step_name}")

        step = self.STEP_REGISTRY[step_name]()

        if position is None:
            self.steps.append(step)
            self.step_names.append(step_name)
        else:
            self.steps.insert(position, step)
            self.step_names.insert(position, step_name)

    def remove_step(self, step_name: str):
        """Remove a preprocessing step from the pipeline."""
        if step_name in self.step_names:
            idx = self.step_names.index(step_name)
            del self.steps[idx]
            del self.step_names[idx]

    def __repr__(self) -> str:
        return f"PreprocessingPipeline(steps={self.step_names})"
