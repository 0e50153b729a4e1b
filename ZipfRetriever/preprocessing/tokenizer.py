import re
from abc import ABC, abstractmethod
from typing import List


class Token:
    """
    A single token extracted from a text.

    `text` keeps the surface form as found in the text; preprocessors rewrite
    `processed_form`, and an empty processed form means the token was dropped.
    """

    def __init__(self, text: str, position: int):
        self.text = text
        self.position = position
        self.processed_form = text

    def __repr__(self) -> str:
        return f"Token({self.text!r}@{self.position} -> {self.processed_form!r})"


class Tokenizer(ABC):
    @abstractmethod
    def tokenize(self, document: str) -> List[Token]:
        raise NotImplementedError()


class RegexMatchTokenizer(Tokenizer):
    """Extracts maximal runs of Latin letters, including Spanish accented ones."""

    WORD_PATTERN = re.compile(r"[a-záéíóúüñ]+", re.IGNORECASE)

    def __init__(self, pattern=None):
        self.pattern = pattern or self.WORD_PATTERN

    def tokenize(self, document: str) -> List[Token]:
        if not document:
            return []
        return [Token(match.group(0), match.start()) for match in self.pattern.finditer(document)]
