"""
TF-IDF search module: inverted index construction and ranking of documents
by cosine similarity between TF-IDF vectors.
"""
from .term import Term, Posting, TermStatistics
from .vector_space import SearchResult, compute_cosine_similarity
from .inverted_index import InvertedIndex, IndexStatistics
