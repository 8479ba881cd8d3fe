"""
ClearSeller Scoring Module
==========================

Scoring déterministe des "winning products" pour le dropshipping.

Components:
    - ProductScoringEngine: Moteur de scoring (100% déterministe, sans I/O)
    - ScoringConfig: Pondérations, seuils et markups injectés dans le moteur
    - pricing: Prix de revente suggéré (arrondi psychologique) et rentabilité

PHILOSOPHIE:
    score = Σ(sous_score × poids), sans normalisation ni bornage.
    La configuration est une valeur passée au moteur, jamais un global.

Usage:
    from clearseller.scoring import ProductScoringEngine

    engine = ProductScoringEngine()
    analysis = engine.analyze(signal)

    print(analysis.total_score)
    print(analysis.to_product_record())  # viralScore / viralPotential / viralReasons
"""

from .product_scorer import (
    ProductScoringEngine,
    ProductAnalysis,
    SubScores,
    Potential,
    ScanResult,
    analyze_product,
    meets_minimum_criteria,
    format_count,
)
from .scoring_config import (
    ScoringConfig,
    ScoringConfigError,
    ScoreWeights,
    PotentialBands,
    SubScoreLadders,
    ReasoningConfig,
    MinimumCriteria,
    DEFAULT_CONFIG,
)
from .subscores import (
    review_score,
    rating_score,
    order_score,
    profit_score,
)
from .pricing import (
    estimate_price,
    psychological_price,
    markup_multiplier,
    suggest_listing_price,
    calculate_profit,
    ProfitResult,
    PricingError,
)

__all__ = [
    # Engine
    "ProductScoringEngine",
    "ProductAnalysis",
    "SubScores",
    "Potential",
    "ScanResult",
    "analyze_product",
    "meets_minimum_criteria",
    "format_count",
    # Configuration
    "ScoringConfig",
    "ScoringConfigError",
    "ScoreWeights",
    "PotentialBands",
    "SubScoreLadders",
    "ReasoningConfig",
    "MinimumCriteria",
    "DEFAULT_CONFIG",
    # Sub-scores
    "review_score",
    "rating_score",
    "order_score",
    "profit_score",
    # Pricing
    "estimate_price",
    "psychological_price",
    "markup_multiplier",
    "suggest_listing_price",
    "calculate_profit",
    "ProfitResult",
    "PricingError",
]
