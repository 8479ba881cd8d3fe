"""
ClearSeller
===========

Winning-product scoring for dropshipping: turns scraped marketplace signals
(reviews, rating, orders, supplier price) into a 0-100 score, a potential
tier, human-readable reasons and a suggested resale price.

Quick Start:
    from clearseller import ProductScoringEngine, normalize_signal

    signal = normalize_signal(scraped_payload)
    analysis = ProductScoringEngine().analyze(signal)
    print(analysis.total_score, analysis.potential.value)
"""

from .signals import ProductSignal, Source, normalize_signal, normalize_signals
from .scoring import (
    ProductScoringEngine,
    ProductAnalysis,
    Potential,
    ScoringConfig,
    DEFAULT_CONFIG,
    estimate_price,
)

__version__ = "1.0.0"

__all__ = [
    "ProductSignal",
    "Source",
    "normalize_signal",
    "normalize_signals",
    "ProductScoringEngine",
    "ProductAnalysis",
    "Potential",
    "ScoringConfig",
    "DEFAULT_CONFIG",
    "estimate_price",
]
