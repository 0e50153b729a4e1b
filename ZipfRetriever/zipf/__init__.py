"""
Zipf's-law vocabulary pruning: interchangeable strategies that drop terms by
document-frequency rank before weighting.
"""
from .strategies import (
    StrategyKind,
    PruningStrategy,
    FrequentTermsStrategy,
    RareTermsStrategy,
    HybridStrategy,
    ConservativeStrategy,
    create_strategy,
    apply_zipf,
    strategy_descriptions,
)
