import logging
from typing import Any, Dict, List, NamedTuple, Optional

from .config import get_setting, load_config
from .errors import RetrieverError
from .preprocessing.preprocess import TextProcessor, create_pipeline
from .tfidf_search.inverted_index import IndexStatistics, InvertedIndex
from .tfidf_search.vector_space import SearchResult

log = logging.getLogger(__name__)


class ValidationResult(NamedTuple):
    is_valid: bool
    index_not_empty: bool
    vector_sorted: bool
    structures_consistent: bool
    message: str


class IndexManager:
    """
    Front-end interface to a single InvertedIndex.

    Operations report success as True/False instead of raising; the message
    of the last failure is kept in `last_error`.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        self.config = config if config is not None else load_config()
        self.index = self._create_index()
        self.current_directory = ""
        self.last_error: Optional[str] = None

    def _create_index(self) -> InvertedIndex:
        pipeline = create_pipeline(
            min_token_length=get_setting(self.config, "preprocessing.min_token_length"),
            extra_stop_words=get_setting(self.config, "preprocessing.extra_stop_words"),
        )
        return InvertedIndex(
            text_processor=TextProcessor(pipeline=pipeline),
            similarity_threshold=get_setting(self.config, "search.similarity_threshold"),
            min_percentile=get_setting(self.config, "zipf.min_percentile"),
            max_percentile=get_setting(self.config, "zipf.max_percentile"),
            extension=get_setting(self.config, "corpus.extension"),
            encoding=get_setting(self.config, "corpus.encoding"),
            initial_capacity=get_setting(self.config, "index.initial_capacity"),
        )

    def _fail(self, action: str, error: Exception) -> bool:
        self.last_error = str(error)
        log.error("%s: %s", action, error)
        return False

    def build_index(self, directory: str, percentile: Optional[int] = None, strategy=None) -> bool:
        """
        Build the index from a corpus directory.

        Args:
            directory: Directory with the corpus text files
            percentile: Zipf percentile; the configured default when None
            strategy: Strategy kind; the configured default when None

        Returns:
            bool: True if the index was built, False otherwise
        """
        if percentile is None:
            percentile = get_setting(self.config, "zipf.default_percentile")
        if strategy is None:
            strategy = get_setting(self.config, "zipf.default_strategy")

        try:
            self.index.build_from_directory(directory, percentile, strategy)
        except (RetrieverError, OSError) as e:
            return self._fail("Error building index", e)

        self.current_directory = directory
        self.last_error = None
        return True

    def rebuild(self, directory: Optional[str] = None, percentile: Optional[int] = None, strategy=None) -> bool:
        """Rebuild from `directory`, or from the directory of the last successful build."""
        directory = directory or self.current_directory
        if not directory:
            self.last_error = "No corpus directory to rebuild from"
            log.error(self.last_error)
            return False
        return self.build_index(directory, percentile, strategy)

    def search(self, query: str, max_results: Optional[int] = None) -> List[SearchResult]:
        """
        Rank documents against a free-text query.

        Args:
            query: Free-text query
            max_results: Keep only the first N results; all of them when None

        Returns:
            List of SearchResult, most similar first
        """
        if not query or not query.strip():
            return []

        results = self.index.search(query)
        if max_results is not None:
            results = results[:max_results]
        return results

    def save(self, path: Optional[str] = None) -> bool:
        path = path or get_setting(self.config, "index.default_file")
        try:
            self.index.save(path)
        except (RetrieverError, OSError) as e:
            return self._fail("Error saving index", e)

        self.last_error = None
        return True

    def load(self, path: Optional[str] = None) -> bool:
        """
        Replace the in-memory index with one read from disk.

        On failure the current index is kept.
        """
        path = path or get_setting(self.config, "index.default_file")
        try:
            self.index.load(path)
        except (RetrieverError, OSError) as e:
            return self._fail("Error loading index", e)

        self.current_directory = ""
        self.last_error = None
        return True

    def stats(self) -> IndexStatistics:
        return self.index.statistics()

    def clear(self) -> None:
        self.index.clear()
        self.current_directory = ""
        self.last_error = None
        log.info("Index cleared")

    def is_empty(self) -> bool:
        return self.index.document_count == 0

    def validate(self) -> ValidationResult:
        """Check that the index is non-empty, sorted and internally consistent."""
        index_not_empty = not self.is_empty() and self.index.term_count > 0
        vector_sorted = self.index.terms.is_sorted
        structures_consistent = self._structures_consistent()

        problems = []
        if not index_not_empty:
            problems.append("index is empty")
        if not vector_sorted:
            problems.append("term vector is not sorted")
        if not structures_consistent:
            problems.append("inconsistent structures")

        is_valid = not problems
        message = "Index is valid" if is_valid else "Problems found: " + ", ".join(problems)
        return ValidationResult(is_valid, index_not_empty, vector_sorted, structures_consistent, message)

    def _structures_consistent(self) -> bool:
        document_ids = {document.id for document in self.index.documents}
        if len(document_ids) != len(self.index.documents):
            return False

        previous = None
        for term in self.index.terms:
            if term.document_frequency == 0:
                return False
            if previous is not None and previous == term.word:
                return False
            for posting in term.postings:
                if posting.document.id not in document_ids:
                    return False
            previous = term.word
        return True
