import os
from collections import Counter
from typing import Dict, Iterable, List, NamedTuple, Tuple

from ..structures import CircularDoublyLinkedList


class DocumentStatistics(NamedTuple):
    document_id: int
    file_name: str
    unique_terms: int
    total_tokens: int
    most_frequent_term: str
    max_frequency: int


class Document:
    """
    Represents a document of the corpus.
    Stores the raw text and the per-term frequencies computed from its tokens.
    """

    def __init__(self, id: int, raw_text: str = "", source_path: str = "", tokens_cache: str = ""):
        """
        Initialize a document.

        Args:
            id: Sequential identifier, unique within an index
            raw_text: Full text of the source file
            source_path: Path of the file the document was read from
            tokens_cache: Optional cached token string (persisted, usually empty)
        """
        self.id = id
        self.raw_text = raw_text or ""
        self.source_path = source_path or ""
        self.tokens_cache = tokens_cache or ""
        # token -> count, in first-seen order
        self.term_frequencies: Dict[str, int] = {}

    @property
    def file_name(self) -> str:
        return os.path.basename(self.source_path)

    def compute_frequencies(self, tokens: Iterable[str]) -> 'Document':
        """
        Count token occurrences in a single pass.

        Args:
            tokens: Normalized tokens of the document

        Returns:
            Self for chaining operations
        """
        counts = Counter(token.lower() for token in tokens if token and token.strip())
        self.term_frequencies = dict(counts)
        return self

    def set_frequency(self, token: str, count: int) -> None:
        self.term_frequencies[token] = count

    def get_frequency(self, token: str) -> int:
        if not token:
            return 0
        return self.term_frequencies.get(token.lower(), 0)

    def contains_term(self, token: str) -> bool:
        return self.get_frequency(token) > 0

    def most_frequent_terms(self, count: int = 10) -> List[Tuple[str, int]]:
        """Top `count` (token, frequency) pairs, ties in first-seen order."""
        ranked = CircularDoublyLinkedList(self.term_frequencies.items())
        ranked.sort_descending(lambda item: item[1])
        return ranked.to_list()[:count]

    def statistics(self) -> DocumentStatistics:
        most_frequent, max_frequency = "", 0
        for token, frequency in self.term_frequencies.items():
            if frequency > max_frequency:
                most_frequent, max_frequency = token, frequency

        return DocumentStatistics(
            document_id=self.id,
            file_name=self.file_name,
            unique_terms=len(self.term_frequencies),
            total_tokens=sum(self.term_frequencies.values()),
            most_frequent_term=most_frequent,
            max_frequency=max_frequency,
        )

    def __eq__(self, other) -> bool:
        return isinstance(other, Document) and self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def __repr__(self) -> str:
        return f"Document(id={self.id}, file={self.file_name!r}, terms={len(self.term_frequencies)})"
