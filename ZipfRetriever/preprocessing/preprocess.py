from abc import ABC, abstractmethod
import json
import logging
import os
from typing import Iterable, List, Optional

from .tokenizer import RegexMatchTokenizer, Token, Tokenizer

log = logging.getLogger(__name__)

MIN_TOKEN_LENGTH = 3

SPANISH_STOP_WORDS = frozenset([
    "el", "la", "los", "las", "un", "una", "uno", "unos", "unas",
    "de", "del", "da", "en", "a", "al", "ante", "bajo", "con", "contra",
    "desde", "durante", "entre", "hacia", "hasta", "para", "por", "según",
    "sin", "sobre", "tras", "y", "e", "o", "u", "pero", "sino", "aunque",
    "porque", "que", "si", "como", "yo", "tú", "él", "ella", "nosotros",
    "vosotros", "ellos", "ellas", "me", "te", "se", "nos", "os", "le",
    "les", "lo", "mi", "tu", "su", "nuestro", "vuestro", "es",
    "son", "está", "están", "ser", "estar", "tener", "haber", "hacer",
    "no", "sí", "más", "menos", "muy", "mucho", "poco", "bastante",
    "demasiado", "ya", "aún", "todavía", "siempre", "nunca", "también",
    "tampoco", "este", "esta", "estos", "estas", "ese", "esa", "esos",
    "esas", "aquel", "aquella", "aquellos", "aquellas",
])


class TokenPreprocessor(ABC):
    @abstractmethod
    def preprocess(self, token: Token, document: str) -> Token:
        raise NotImplementedError()

    def preprocess_all(self, tokens: List[Token], document: str) -> List[Token]:
        return [self.preprocess(token, document) for token in tokens]


class LowercasePreprocessor(TokenPreprocessor):
    def preprocess(self, token: Token, document: str) -> Token:
        token.processed_form = token.processed_form.lower()
        return token


class MinLengthPreprocessor(TokenPreprocessor):
    """Drops tokens shorter than `min_word_length` characters."""

    def __init__(self, min_word_length: int = MIN_TOKEN_LENGTH):
        self.min_word_length = min_word_length

    def preprocess(self, token: Token, document: str) -> Token:
        if len(token.processed_form) < self.min_word_length:
            token.processed_form = ""
        return token


class StopWordsPreprocessor(TokenPreprocessor):
    """Preprocessor for removing stop words."""

    def __init__(self, stop_words: Optional[Iterable[str]] = None, stop_words_file: Optional[str] = None):
        """
        Initialize preprocessor for removing stop words.

        Args:
            stop_words: Extra stop words added to the built-in Spanish set
            stop_words_file: Optional JSON file with a list of additional stop words
        """
        self.stop_words = set(SPANISH_STOP_WORDS)
        if stop_words:
            self.stop_words.update(word.lower() for word in stop_words)

        if stop_words_file:
            if os.path.exists(stop_words_file):
                with open(stop_words_file, 'r', encoding='utf-8') as f:
                    self.stop_words.update(word.lower() for word in json.load(f))
            else:
                log.warning("Stop words file %s not found, using the built-in list", stop_words_file)

    def preprocess(self, token: Token, document: str) -> Token:
        if token.processed_form in self.stop_words:
            token.processed_form = ""
        return token


class PreprocessingPipeline:
    """Pipeline of token preprocessors."""

    def __init__(self, preprocessors, name="Default Pipeline"):
        self.preprocessors = preprocessors
        self.name = name

    def preprocess(self, tokens: List[Token], document: str) -> List[Token]:
        for preprocessor in self.preprocessors:
            preprocessor.preprocess_all(tokens, document)

        return tokens


def create_pipeline(min_token_length: int = MIN_TOKEN_LENGTH,
                    extra_stop_words: Optional[Iterable[str]] = None) -> PreprocessingPipeline:
    """Lowercase, then length filter, then stop-word removal."""
    return PreprocessingPipeline(
        [
            LowercasePreprocessor(),
            MinLengthPreprocessor(min_word_length=min_token_length),
            StopWordsPreprocessor(stop_words=extra_stop_words),
        ],
        name=f"Lowercase+MinLength({min_token_length})+StopWords",
    )


class TextProcessor:
    """
    Turns raw text into the normalized token sequence used for indexing and
    querying. The result is a fully materialized list.
    """

    def __init__(self, tokenizer: Tokenizer = None, pipeline: PreprocessingPipeline = None):
        self.tokenizer = tokenizer or RegexMatchTokenizer()
        self.pipeline = pipeline or create_pipeline()

    def tokenize(self, text: str) -> List[str]:
        if not text or not text.strip():
            return []

        tokens = self.tokenizer.tokenize(text)
        self.pipeline.preprocess(tokens, text)
        return [token.processed_form for token in tokens if token.processed_form]

    def __call__(self, text: str) -> List[str]:
        return self.tokenize(text)
