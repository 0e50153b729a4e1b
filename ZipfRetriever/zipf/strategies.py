"""
Zipf pruning strategies.

Each strategy removes terms from a CircularDoublyLinkedList of Term objects
according to their document-frequency rank. The list is mutated in place;
the index rebuilds its sorted vector from whatever survives.
"""
from abc import ABC, abstractmethod
from enum import Enum
import logging
from typing import Callable, List, Tuple, Union

from ..errors import ConfigurationError, PreconditionError
from ..structures import CircularDoublyLinkedList

log = logging.getLogger(__name__)

CONSERVATIVE_DF_RATIO = 0.85
CONSERVATIVE_CAP_PERCENTILE = 20


class StrategyKind(str, Enum):
    FREQUENT = "frequent"
    RARE = "rare"
    HYBRID = "hybrid"
    CONSERVATIVE = "conservative"

    @classmethod
    def parse(cls, value: Union[str, 'StrategyKind']) -> 'StrategyKind':
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            choices = ", ".join(kind.value for kind in cls)
            raise ConfigurationError(f"Unknown strategy kind {value!r} (expected one of: {choices})") from None


def validate_percentile(percentile) -> None:
    if not 0 < percentile < 100:
        raise ConfigurationError(f"Invalid percentile {percentile}: must be in (0, 100)")


def _document_frequency(term) -> int:
    return term.document_frequency


def _without_top_ranked(terms: CircularDoublyLinkedList, key: Callable, count: int) -> CircularDoublyLinkedList:
    """
    Drop the first `count` terms of a descending ranking by `key`.

    The ranking is a stable bubble sort of a copy, so ties go in list order.
    Survivors keep the order of `terms`.
    """
    ranked = CircularDoublyLinkedList(terms)
    ranked.sort_descending(key)

    removed = set()
    for term in ranked:
        if len(removed) >= count:
            break
        log.debug("Removing '%s' (%d docs)", term.word, term.document_frequency)
        removed.add(id(term))

    return CircularDoublyLinkedList(term for term in terms if id(term) not in removed)


def _value_at_rank(terms: CircularDoublyLinkedList, key: Callable, percentile: int):
    """Key value at rank min(n * p / 100, n - 1) of a descending ranking by `key`."""
    ranking = CircularDoublyLinkedList(key(term) for term in terms)
    ranking.sort_descending(lambda value: value)

    rank = min(len(ranking) * percentile // 100, len(ranking) - 1)
    for position, value in enumerate(ranking):
        if position == rank:
            return value


def _without_frequent_cutoff(terms: CircularDoublyLinkedList, percentile: int) -> CircularDoublyLinkedList:
    """Remove every term whose document frequency is at or above the percentile cutoff."""
    if len(terms) == 0:
        return terms
    cutoff = _value_at_rank(terms, _document_frequency, percentile)
    log.debug("Frequent cutoff at %d%%: document frequency %d", percentile, cutoff)
    return CircularDoublyLinkedList(term for term in terms if term.document_frequency < cutoff)


def _without_rare_cutoff(terms: CircularDoublyLinkedList, percentile: int) -> CircularDoublyLinkedList:
    """Remove every term whose document frequency is at or below the percentile cutoff."""
    if len(terms) == 0:
        return terms
    cutoff = -_value_at_rank(terms, lambda term: -term.document_frequency, percentile)
    log.debug("Rare cutoff at %d%%: document frequency %d", percentile, cutoff)
    return CircularDoublyLinkedList(term for term in terms if term.document_frequency > cutoff)


class PruningStrategy(ABC):
    name = ""
    description = ""

    def __init__(self, terms: CircularDoublyLinkedList):
        if terms is None:
            raise PreconditionError("A pruning strategy needs a term list")
        self.terms = terms

    def apply(self, percentile: int) -> int:
        """
        Prune the term list in place.

        Args:
            percentile: Pruning percentile, exclusive range (0, 100)

        Returns:
            Number of terms removed
        """
        validate_percentile(percentile)
        before = len(self.terms)
        if before == 0:
            return 0

        survivors = self._select_survivors(percentile)

        self.terms.clear()
        for term in survivors:
            self.terms.add(term)

        removed = before - len(self.terms)
        log.info("%s (%d%%): removed %d of %d terms, kept %d",
                 self.name, percentile, removed, before, len(self.terms))
        return removed

    @abstractmethod
    def _select_survivors(self, percentile: int) -> CircularDoublyLinkedList:
        raise NotImplementedError()


class FrequentTermsStrategy(PruningStrategy):
    """Removes the floor(n * p / 100) terms with the highest document frequency."""

    name = "Remove frequent terms"
    description = "Removes terms that occur in many documents (very common words)"

    def _select_survivors(self, percentile: int) -> CircularDoublyLinkedList:
        cutoff = len(self.terms) * percentile // 100
        return _without_top_ranked(self.terms, _document_frequency, cutoff)


class RareTermsStrategy(PruningStrategy):
    """Removes the floor(n * p / 100) terms with the lowest document frequency."""

    name = "Remove rare terms"
    description = "Removes terms that occur in few documents (noise)"

    def _select_survivors(self, percentile: int) -> CircularDoublyLinkedList:
        cutoff = len(self.terms) * percentile // 100
        return _without_top_ranked(self.terms, lambda term: -term.document_frequency, cutoff)


class HybridStrategy(PruningStrategy):
    """
    Half the percentile on frequent terms, the rest on rare ones.

    Both halves cut by value: the document frequency found at the percentile
    rank becomes the cutoff, and every term tied with it goes too.
    """

    name = "Hybrid"
    description = "Removes both very frequent and very rare terms, keeping the middle range"

    def _select_survivors(self, percentile: int) -> CircularDoublyLinkedList:
        frequent_share = percentile // 2
        rare_share = percentile - frequent_share

        working = CircularDoublyLinkedList(self.terms)
        if frequent_share > 0:
            working = _without_frequent_cutoff(working, frequent_share)
        if rare_share > 0:
            working = _without_rare_cutoff(working, rare_share)
        return working


class ConservativeStrategy(PruningStrategy):
    """
    Removes terms present in more than 85% of the documents.

    The number of removals is capped at n * min(p, 20) / 100. When the
    threshold would remove more than that, the terms are re-ranked by
    descending document frequency and only the top `cap` are removed.
    """

    name = "Conservative Zipf"
    description = "Removes only terms present in more than 85% of the documents"

    def __init__(self, terms: CircularDoublyLinkedList, total_documents: int):
        super().__init__(terms)
        self.total_documents = total_documents

    def _select_survivors(self, percentile: int) -> CircularDoublyLinkedList:
        if self.total_documents <= 0:
            return CircularDoublyLinkedList(self.terms)

        threshold = int(self.total_documents * CONSERVATIVE_DF_RATIO)
        log.info("Removing terms present in more than %d of %d documents", threshold, self.total_documents)

        survivors = CircularDoublyLinkedList()
        removed = 0
        for term in self.terms:
            if term.document_frequency <= threshold:
                survivors.add(term)
            else:
                log.debug("Removing very frequent term '%s' (%d docs)", term.word, term.document_frequency)
                removed += 1

        cap = len(self.terms) * min(percentile, CONSERVATIVE_CAP_PERCENTILE) // 100
        if removed > cap:
            log.warning("Safety cap reached: removing at most %d terms instead of %d", cap, removed)
            survivors = _without_top_ranked(self.terms, _document_frequency, cap)
        return survivors


_STRATEGIES = {
    StrategyKind.FREQUENT: FrequentTermsStrategy,
    StrategyKind.RARE: RareTermsStrategy,
    StrategyKind.HYBRID: HybridStrategy,
    StrategyKind.CONSERVATIVE: ConservativeStrategy,
}


def create_strategy(kind, terms: CircularDoublyLinkedList, total_documents: int = 0) -> PruningStrategy:
    """
    Create the pruning strategy for `kind`.

    Args:
        kind: StrategyKind or its string value
        terms: Term list the strategy will mutate
        total_documents: Corpus size, used by the conservative strategy

    Returns:
        PruningStrategy instance
    """
    kind = StrategyKind.parse(kind)
    if kind is StrategyKind.CONSERVATIVE:
        return ConservativeStrategy(terms, total_documents)
    return _STRATEGIES[kind](terms)


def apply_zipf(kind, terms: CircularDoublyLinkedList, percentile: int, total_documents: int = 0) -> int:
    """Validate, build and apply a strategy. Returns the number of removed terms."""
    strategy = create_strategy(kind, terms, total_documents)
    validate_percentile(percentile)
    log.info("Applying %s (%d%%): %s", strategy.name, percentile, strategy.description)
    return strategy.apply(percentile)


def strategy_descriptions() -> List[Tuple[str, str, str]]:
    """(kind, display name, description) for every available strategy."""
    return [(kind.value, cls.name, cls.description) for kind, cls in _STRATEGIES.items()]
