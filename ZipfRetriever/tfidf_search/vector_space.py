"""
Vector-space model helpers: TF-IDF vectors over the sorted vocabulary and
cosine similarity between them.
"""
import math
from collections import Counter
from typing import Iterable, List, NamedTuple

from ..preprocessing.document import Document
from ..structures import SortedVector

SIMILARITY_THRESHOLD = 0.001


class SearchResult(NamedTuple):
    document: Document
    similarity: float


def find_term_index(terms: SortedVector, word: str) -> int:
    """
    Position of `word` in the term vector, or -1.

    Uses binary search while the vector is sorted, a linear scan otherwise.
    """
    if terms.is_sorted:
        return terms.binary_search_index(word)
    for i, term in enumerate(terms):
        if term.word == word:
            return i
    return -1


def build_query_vector(terms: SortedVector, query_tokens: Iterable[str]) -> List[float]:
    """
    Build the query vector: one dimension per indexed term, in vector order.

    Args:
        terms: Term vector of the index
        query_tokens: Normalized query tokens

    Returns:
        List with query_tf * idf for terms present in the query, 0 elsewhere
    """
    vector = [0.0] * len(terms)
    for token, frequency in Counter(query_tokens).items():
        index = find_term_index(terms, token)
        if index != -1:
            vector[index] = frequency * terms[index].idf
    return vector


def build_document_vector(terms: SortedVector, document: Document) -> List[float]:
    """
    Build a document vector with the same dimensions as the query vector.

    Args:
        terms: Term vector of the index
        document: Document to vectorize

    Returns:
        List with the cached TF-IDF of each term for this document, 0 if absent
    """
    vector = [0.0] * len(terms)
    for token in document.term_frequencies:
        index = find_term_index(terms, token)
        if index != -1:
            vector[index] = terms[index].tf_idf_for(document.id)
    return vector


def has_significant_values(vector: List[float]) -> bool:
    return any(value != 0.0 for value in vector)


def compute_cosine_similarity(vec1: List[float], vec2: List[float]) -> float:
    """
    Compute cosine similarity between two vectors of equal dimension.

    Args:
        vec1: First vector
        vec2: Second vector

    Returns:
        Cosine similarity clamped into [0, 1]; 0 when either vector is all zeros
    """
    if len(vec1) != len(vec2):
        raise ValueError(f"Vector dimensions differ: {len(vec1)} != {len(vec2)}")

    dot_product = sum(a * b for a, b in zip(vec1, vec2))

    magnitude1 = math.sqrt(sum(a * a for a in vec1))
    magnitude2 = math.sqrt(sum(b * b for b in vec2))

    # Avoid division by zero
    if magnitude1 == 0 or magnitude2 == 0:
        return 0.0

    similarity = dot_product / (magnitude1 * magnitude2)
    return min(1.0, max(0.0, similarity))
