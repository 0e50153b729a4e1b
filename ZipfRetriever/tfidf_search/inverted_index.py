import glob
import logging
import os
from operator import attrgetter
from typing import Dict, List, NamedTuple, Optional

from ..errors import ConfigurationError, IndexIOError
from ..persistence import binary_serializer
from ..preprocessing.document import Document
from ..preprocessing.preprocess import TextProcessor
from ..structures import CircularDoublyLinkedList, SortedVector
from ..structures.sorted_vector import INITIAL_CAPACITY
from ..zipf.strategies import StrategyKind, apply_zipf
from .term import Term
from .vector_space import (
    SIMILARITY_THRESHOLD,
    SearchResult,
    build_document_vector,
    build_query_vector,
    compute_cosine_similarity,
    has_significant_values,
)

log = logging.getLogger(__name__)

MIN_PERCENTILE = 1
MAX_PERCENTILE = 30
DEFAULT_PERCENTILE = 15


class IndexStatistics(NamedTuple):
    document_count: int
    term_count: int
    zipf_applied: bool
    percentile: int
    strategy: Optional[str]
    is_sorted: bool
    average_terms_per_document: float
    estimated_memory_kb: int


class InvertedIndex:
    """
    Inverted index mapping terms to the documents they occur in.

    Terms live in a SortedVector ordered by word; documents in a plain list
    in load order. The index owns both; postings only reference documents.
    """

    def __init__(self, text_processor: TextProcessor = None,
                 serializer: "binary_serializer.BinarySerializer" = None,
                 similarity_threshold: float = SIMILARITY_THRESHOLD,
                 min_percentile: int = MIN_PERCENTILE, max_percentile: int = MAX_PERCENTILE,
                 extension: str = ".txt", encoding: str = "utf-8",
                 initial_capacity: int = INITIAL_CAPACITY):
        self.text_processor = text_processor or TextProcessor()
        self.serializer = serializer or binary_serializer.BinarySerializer()
        self.similarity_threshold = similarity_threshold
        self.min_percentile = min_percentile
        self.max_percentile = max_percentile
        self.extension = extension
        self.encoding = encoding
        self.initial_capacity = initial_capacity

        self.terms = self._new_term_vector()
        self.documents: List[Document] = []
        self._document_counter = 0
        self.zipf_applied = False
        self.percentile = 0
        self.strategy: Optional[StrategyKind] = None

    def _new_term_vector(self) -> SortedVector:
        return SortedVector(self.initial_capacity, key=attrgetter("word"))

    @property
    def document_count(self) -> int:
        return len(self.documents)

    @property
    def term_count(self) -> int:
        return len(self.terms)

    def clear(self) -> None:
        self.terms.clear()
        self.documents = []
        self._document_counter = 0
        self.zipf_applied = False
        self.percentile = 0
        self.strategy = None

    def clamp_percentile(self, percentile) -> int:
        if isinstance(percentile, bool) or not isinstance(percentile, (int, float)):
            raise ConfigurationError(f"Zipf percentile must be a number, got {percentile!r}")
        return int(min(max(percentile, self.min_percentile), self.max_percentile))

    def build_from_directory(self, path: str, zipf_percentile: int = DEFAULT_PERCENTILE,
                             strategy=StrategyKind.CONSERVATIVE) -> None:
        """
        Rebuild the whole index from the text files in `path`.

        Phases: load and tokenize every file, radix-sort the vocabulary,
        apply Zipf pruning, compute IDF, sort again. Invalid arguments are
        rejected before the current index is touched; any later failure
        leaves the index empty.

        Args:
            path: Corpus directory
            zipf_percentile: Pruning percentile, clamped into [min_percentile, max_percentile]
            strategy: StrategyKind (or its name) of the pruning strategy
        """
        kind = StrategyKind.parse(strategy)
        percentile = self.clamp_percentile(zipf_percentile)
        if percentile != zipf_percentile:
            log.info("Zipf percentile %s clamped to %d", zipf_percentile, percentile)
        self.clear()

        try:
            self.load_directory(path)
            log.info("Documents loaded: %d, unique terms: %d", self.document_count, self.term_count)

            log.info("Radix sorting %d terms...", self.term_count)
            self.terms.radix_sort()

            self.apply_zipf(percentile, kind)
            self.compute_idf()
            self.terms.radix_sort()
        except Exception:
            self.clear()
            raise

        log.info("Index built: %d documents, %d terms", self.document_count, self.term_count)

    def load_directory(self, path: str) -> None:
        """Tokenize every corpus file in `path` and accumulate its terms."""
        if not os.path.isdir(path):
            raise IndexIOError(f"Directory not found: {path}")

        files = sorted(p for p in glob.glob(os.path.join(glob.escape(path), "*" + self.extension)) if os.path.isfile(p))
        if not files:
            raise IndexIOError(f"No input files (*{self.extension}) found in {path}")

        log.info("Processing %d file(s) from %s", len(files), path)
        terms_by_word: Dict[str, Term] = {term.word: term for term in self.terms}
        for file_path in files:
            self._add_document_file(file_path, terms_by_word)

    def _add_document_file(self, file_path: str, terms_by_word: Dict[str, Term]) -> Optional[Document]:
        try:
            with open(file_path, 'r', encoding=self.encoding) as f:
                text = f.read()
        except (OSError, UnicodeDecodeError) as e:
            log.warning("Could not read %s, skipping: %s", file_path, e)
            return None

        tokens = self.text_processor.tokenize(text)
        if not tokens:
            log.warning("No valid tokens in %s, skipping", os.path.basename(file_path))
            return None

        self._document_counter += 1
        document = Document(self._document_counter, text, file_path).compute_frequencies(tokens)
        self.documents.append(document)

        for token, frequency in document.term_frequencies.items():
            term = terms_by_word.get(token)
            if term is None:
                term = Term(token)
                terms_by_word[token] = term
                self.terms.add_unordered(term)
            term.add_document(document, frequency)

        log.debug("%s: %d tokens, %d unique", document.file_name, len(tokens), len(document.term_frequencies))
        return document

    def find_term(self, word: str) -> Optional[Term]:
        """Look a term up by word: binary search when sorted, linear scan otherwise."""
        if not word:
            return None
        word = word.lower()

        if self.terms.is_sorted:
            return self.terms.binary_search(word)
        for term in self.terms:
            if term.word == word:
                return term
        return None

    def apply_zipf(self, percentile: int, strategy=StrategyKind.CONSERVATIVE) -> int:
        """
        Prune the vocabulary with a Zipf strategy.

        The terms are moved into a linked list, pruned there and added back
        unsorted, so the caller has to sort the vector again.

        Returns:
            Number of removed terms
        """
        kind = StrategyKind.parse(strategy)
        if self.term_count == 0:
            log.warning("Index has no terms, skipping Zipf pruning")
            return 0

        working = CircularDoublyLinkedList(self.terms)
        removed = apply_zipf(kind, working, percentile, self.document_count)

        self.terms.clear()
        for term in working:
            self.terms.add_unordered(term)

        self.zipf_applied = True
        self.percentile = percentile
        self.strategy = kind
        return removed

    def compute_idf(self) -> None:
        """Recompute IDF (and cached TF-IDF) for every term."""
        total_documents = self.document_count
        log.info("Computing IDF for %d terms over %d documents", self.term_count, total_documents)
        for term in self.terms:
            term.compute_idf(total_documents)

    def search(self, query: str) -> List[SearchResult]:
        """
        Rank documents against `query` by cosine similarity of TF-IDF vectors.

        Args:
            query: Free-text query

        Returns:
            SearchResult list, most similar first; documents at or below the
            similarity threshold are left out
        """
        tokens = self.text_processor.tokenize(query)
        if not tokens or self.term_count == 0:
            return []

        query_vector = build_query_vector(self.terms, tokens)
        if not has_significant_values(query_vector):
            log.info("No query term is in the vocabulary: %r", query)
            return []

        results = CircularDoublyLinkedList()
        for document in self.documents:
            document_vector = build_document_vector(self.terms, document)
            if not has_significant_values(document_vector):
                continue

            similarity = compute_cosine_similarity(query_vector, document_vector)
            if similarity > self.similarity_threshold:
                results.add(SearchResult(document, similarity))

        results.sort_descending(attrgetter("similarity"))
        log.info("Query %r: %d of %d documents matched", query, len(results), self.document_count)
        return results.to_list()

    def save(self, path: str) -> None:
        self.serializer.save(path, self.terms, self.documents)

    def load(self, path: str) -> None:
        """
        Replace the index with the one stored in `path`.

        The current index is kept if reading fails.
        """
        terms, documents = self.serializer.load(path)

        vector = self._new_term_vector()
        for term in terms:
            vector.add_unordered(term)
        vector.radix_sort()

        self.terms = vector
        self.documents = documents
        self._document_counter = max((document.id for document in documents), default=0)
        # The file format does not record how the vocabulary was pruned
        self.zipf_applied = False
        self.percentile = 0
        self.strategy = None

    def statistics(self) -> IndexStatistics:
        documents, terms = self.document_count, self.term_count
        return IndexStatistics(
            document_count=documents,
            term_count=terms,
            zipf_applied=self.zipf_applied,
            percentile=self.percentile,
            strategy=self.strategy.value if self.strategy else None,
            is_sorted=self.terms.is_sorted,
            average_terms_per_document=terms / documents if documents else 0.0,
            estimated_memory_kb=(terms * 128 + documents * 256) // 1024,
        )
