import functools
import math
from typing import Dict, List, NamedTuple, Optional

from ..errors import PreconditionError
from ..preprocessing.document import Document


class TermStatistics(NamedTuple):
    word: str
    document_frequency: int
    average_frequency: float
    max_frequency: int
    min_frequency: int
    idf: float


class Posting:
    """Occurrence of a term in one document, with its cached TF-IDF weight."""

    def __init__(self, document: Document, term_frequency: int, tf_idf: float = 0.0):
        self.document = document
        self.term_frequency = term_frequency
        self.tf_idf = tf_idf

    def update_tf_idf(self, idf: float) -> None:
        self.tf_idf = self.term_frequency * idf

    def __repr__(self) -> str:
        return f"Posting(doc={self.document.id}, tf={self.term_frequency}, tf_idf={self.tf_idf:.3f})"


@functools.total_ordering
class Term:
    """
    A vocabulary entry: the word, its IDF and the documents it occurs in.

    Terms compare and hash by word only, which is the order the term vector
    of the index relies on.
    """

    def __init__(self, word: str, idf: float = 0.0):
        if not word:
            raise PreconditionError("A term needs a non-empty word")
        self.word = word.lower()
        self.idf = idf
        self.postings: List[Posting] = []
        self._by_document: Dict[int, Posting] = {}

    @property
    def document_frequency(self) -> int:
        return len(self.postings)

    def add_document(self, document: Document, frequency: int, tf_idf: Optional[float] = None) -> bool:
        """
        Record that the term occurs `frequency` times in `document`.

        Adding a document that is already present is a no-op.

        Returns:
            True if a new posting was created
        """
        if document is None:
            raise PreconditionError("Cannot add a None document to a term")
        if document.id in self._by_document:
            return False

        if tf_idf is None:
            tf_idf = frequency * self.idf
        posting = Posting(document, frequency, tf_idf)
        self.postings.append(posting)
        self._by_document[document.id] = posting
        return True

    def remove_document(self, document_id: int) -> bool:
        posting = self._by_document.pop(document_id, None)
        if posting is None:
            return False
        self.postings.remove(posting)
        return True

    def has_document(self, document_id: int) -> bool:
        return document_id in self._by_document

    def get_posting(self, document_id: int) -> Optional[Posting]:
        return self._by_document.get(document_id)

    def tf_idf_for(self, document_id: int) -> float:
        posting = self._by_document.get(document_id)
        return posting.tf_idf if posting else 0.0

    def compute_idf(self, total_documents: int) -> float:
        """
        Set idf = log10(N / DF) and refresh every posting's TF-IDF.

        Degenerate inputs (no documents, DF of zero or above N) give 0.
        """
        df = self.document_frequency
        if total_documents <= 0 or df == 0 or df > total_documents:
            idf = 0.0
        else:
            idf = math.log10(total_documents / df)
            if math.isnan(idf) or math.isinf(idf):
                idf = 0.0

        self.idf = idf
        for posting in self.postings:
            posting.update_tf_idf(idf)
        return idf

    def statistics(self) -> TermStatistics:
        frequencies = [posting.term_frequency for posting in self.postings]
        return TermStatistics(
            word=self.word,
            document_frequency=len(frequencies),
            average_frequency=sum(frequencies) / len(frequencies) if frequencies else 0.0,
            max_frequency=max(frequencies, default=0),
            min_frequency=min(frequencies, default=0),
            idf=self.idf,
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, Term):
            return NotImplemented
        return self.word == other.word

    def __lt__(self, other) -> bool:
        if not isinstance(other, Term):
            return NotImplemented
        return self.word < other.word

    def __hash__(self) -> int:
        return hash(self.word)

    def __repr__(self) -> str:
        return f"Term({self.word!r}, docs={self.document_frequency}, idf={self.idf:.3f})"
