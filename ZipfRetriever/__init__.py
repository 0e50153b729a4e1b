"""
ZipfRetriever - TF-IDF vector-space search over plain-text corpora with
Zipf's-law vocabulary pruning.
"""
from .errors import RetrieverError, PreconditionError, ConfigurationError, IndexIOError, FormatError
from .tfidf_search import InvertedIndex, SearchResult
from .zipf import StrategyKind
from .index_manager import IndexManager, ValidationResult

__version__ = "1.0.0"
