"""
ClearSeller Product Scorer - Détecteur déterministe de "winning products".

Ce module convertit les signaux bruts d'une annonce (reviews, note, commandes,
prix fournisseur) en un score 0-100, un niveau de potentiel, des raisons et
avertissements lisibles, et un prix de revente suggéré.

PHILOSOPHIE:
- Pas de ML, pas d'aléatoire, pas d'horloge
- Chaque score est REPRODUCTIBLE avec les mêmes inputs
- Chaque score est EXPLICABLE (sous-scores + raisons ordonnées)
- Aucun I/O, aucun état partagé: appelable en parallèle sans verrou

PIPELINE:
    signal → sous-scores → agrégat pondéré → verdict → raisons/avertissements
           → prix suggéré

UTILISATION:
    from clearseller.scoring import ProductScoringEngine

    engine = ProductScoringEngine()
    analysis = engine.analyze(signal)

    print(analysis.total_score)
    print(analysis.is_winner)
    print(analysis.get_explanation())
"""

import logging
import math
import numbers
from dataclasses import dataclass, field
from decimal import Decimal, ROUND_HALF_UP, localcontext
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .pricing import estimate_price, source_key
from .scoring_config import ScoringConfig, DEFAULT_CONFIG
from .subscores import as_number, order_score, profit_score, rating_score, review_score
from ..signals.signal_models import ProductSignal

logger = logging.getLogger(__name__)


class Potential(Enum):
    """Niveau de potentiel "viral" du produit."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


# Verdicts ajoutés EN TÊTE des raisons
WINNER_REASON = "🏆 WINNER: Strong potential across all metrics!"
MODERATE_REASON = "📊 MODERATE: Has potential but requires validation"

LOW_REVIEWS_REASON = "⚠️ Low review count may indicate untested product"
LOW_RATING_REASON = "⚠️ Below-average rating could hurt conversions"
HIGH_COST_REASON = "⚠️ Higher supplier cost reduces profit margins"

LOW_RATING_WARNING = "Low rating despite reviews - check quality issues"
HIGH_PRICE_WARNING = "High supplier price - difficult to achieve good margins"
LIMITED_IMAGES_WARNING = "Limited images - may need better product photography"
UNPROVEN_WARNING = "Unproven product - no validation from market"


def to_fixed(value: Any, digits: int = 0) -> str:
    """Formate un nombre avec `digits` décimales, arrondi au demi supérieur."""
    exact = Decimal(value)
    if not exact.is_finite():
        return str(value)
    with localcontext() as ctx:
        # Assez de chiffres pour un entier arbitrairement grand
        ctx.prec = max(ctx.prec, exact.adjusted() + digits + 2)
        return str(exact.quantize(Decimal(1).scaleb(-digits), rounding=ROUND_HALF_UP))


def _scale_down(num: Any, exponent: int) -> Any:
    """num / 10**exponent; en Decimal exact si le quotient dépasse les float."""
    try:
        return num / 10 ** exponent
    except OverflowError:
        exact = Decimal(num)
        with localcontext() as ctx:
            ctx.prec = max(ctx.prec, len(exact.as_tuple().digits))
            return exact.scaleb(-exponent)


def format_count(num: Any) -> str:
    """
    Compacte un compteur pour l'affichage.

    0 → "0", 1 000 → "1.0K", 12 000 → "12.0K", 1 000 000 → "1.0M", 850 → "850".
    """
    num = as_number(num)
    if not num:
        return "0"
    if num >= 1_000_000:
        return to_fixed(_scale_down(num, 6), 1) + "M"
    if num >= 1_000:
        return to_fixed(_scale_down(num, 3), 1) + "K"
    return str(int(num)) if float(num).is_integer() else str(num)


def format_rating(rating: Any) -> str:
    """4.8 → "4.8", 5.0 → "5"."""
    rating = as_number(rating)
    if isinstance(rating, numbers.Integral) or float(rating).is_integer():
        return str(int(rating))
    return str(float(rating))


@dataclass(frozen=True)
class SubScores:
    """Les 4 sous-scores (0-100) d'un produit."""
    review_score: int
    rating_score: int
    order_score: int
    profit_score: int

    def to_dict(self) -> Dict[str, int]:
        return {
            "reviewScore": self.review_score,
            "ratingScore": self.rating_score,
            "orderScore": self.order_score,
            "profitScore": self.profit_score,
        }


@dataclass(frozen=True)
class ProductAnalysis:
    """
    Résultat complet de l'analyse d'un produit.

    Contient tout ce qu'il faut pour:
    1. Décider (is_winner, total_score, potential)
    2. Comprendre (breakdown, reasons, warnings)
    3. Publier (suggested_price)

    total_score_raw est l'agrégat AVANT arrondi: is_winner et potential
    sont évalués dessus, pas sur total_score.
    """
    total_score: int
    total_score_raw: float
    breakdown: SubScores
    is_winner: bool
    potential: Potential
    reasons: Tuple[str, ...] = ()
    warnings: Tuple[str, ...] = ()
    suggested_price: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        """Format de l'analyse tel que le consomment le badge et l'API d'import."""
        return {
            "totalScore": self.total_score,
            "breakdown": self.breakdown.to_dict(),
            "isWinner": self.is_winner,
            "potential": self.potential.value,
            "reasons": list(self.reasons),
            "warnings": list(self.warnings),
            "suggestedPrice": self.suggested_price,
        }

    def to_product_record(self) -> Dict[str, Any]:
        """Champs recopiés tels quels sur l'enregistrement produit persisté."""
        return {
            "viralScore": self.total_score,
            "viralPotential": self.potential.value,
            "viralReasons": list(self.reasons),
        }

    def get_explanation(self) -> str:
        """Génère l'explication complète du scoring."""
        lines = [
            "=== CLEARSELLER WINNING SCORE ===",
            f"Score: {self.total_score}/100 (raw {self.total_score_raw:.2f})",
            f"Potential: {self.potential.value.upper()}",
            f"Winner: {'YES' if self.is_winner else 'NO'}",
            f"Suggested price: ${self.suggested_price:.2f}",
            "",
            "--- BREAKDOWN ---",
        ]
        for name, score in self.breakdown.to_dict().items():
            lines.append(f"  {name:12} {score:>3}/100")

        if self.reasons:
            lines.append("")
            lines.append("--- REASONS ---")
            lines.extend(f"  {reason}" for reason in self.reasons)

        if self.warnings:
            lines.append("")
            lines.append("--- WARNINGS ---")
            lines.extend(f"  {warning}" for warning in self.warnings)

        return "\n".join(lines)


@dataclass
class ScanResult:
    """
    Résultat d'un scan de liste (page de recherche, import en masse).

    results est trié: winners d'abord, puis score brut décroissant.
    """
    results: List[Tuple[ProductSignal, ProductAnalysis]] = field(default_factory=list)
    scanned: int = 0
    filtered_out: int = 0

    @property
    def winners(self) -> List[Tuple[ProductSignal, ProductAnalysis]]:
        return [(signal, analysis) for signal, analysis in self.results if analysis.is_winner]

    @property
    def winner_count(self) -> int:
        return len(self.winners)


class ProductScoringEngine:
    """
    Scorer de produits dropshipping - 100% déterministe.

    Évalue un produit selon 4 sous-scores pondérés:
    - REVIEWS (30%): Preuve sociale
    - RATING (20%): Qualité perçue
    - ORDERS (25%): Demande prouvée
    - PROFIT (25%): Potentiel de marge (échelle inversée sur le prix fournisseur)

    La configuration est injectée et jamais modifiée. Elle n'est pas validée
    ici: voir ScoringConfig.validate().
    """

    def __init__(self, config: Optional[ScoringConfig] = None):
        """
        Initialise le scorer avec une configuration.

        Args:
            config: Configuration de scoring. Si None, utilise DEFAULT_CONFIG.
        """
        self.config = config or DEFAULT_CONFIG

    # =========================================================================
    # MÉTHODE PRINCIPALE
    # =========================================================================

    def analyze(self, signal: ProductSignal) -> ProductAnalysis:
        """
        Analyse complète d'un produit.

        Ne lève jamais d'exception sur un signal mal formé: les valeurs
        invalides sont traitées comme "aucun signal".
        """
        breakdown = self.sub_scores(signal)
        total_score_raw = self.aggregate(breakdown)
        is_winner, potential = self.verdict(total_score_raw)

        supplier_price = as_number(signal.supplier_price)
        suggested_price = estimate_price(supplier_price, signal.source, self.config) if supplier_price > 0 else 0.0

        analysis = ProductAnalysis(
            total_score=int(math.floor(total_score_raw + 0.5)),
            total_score_raw=total_score_raw,
            breakdown=breakdown,
            is_winner=is_winner,
            potential=potential,
            reasons=tuple(self.generate_reasons(signal, breakdown, total_score_raw)),
            warnings=tuple(self.generate_warnings(signal, breakdown)),
            suggested_price=suggested_price,
        )

        logger.debug(
            "Analyzed %r: score=%d potential=%s winner=%s",
            signal.title, analysis.total_score, potential.value, is_winner,
            extra={
                "score": analysis.total_score,
                "potential": potential.value,
                "title": signal.title,
                "source": source_key(signal.source),
            },
        )
        return analysis

    # =========================================================================
    # SOUS-SCORES ET AGRÉGAT
    # =========================================================================

    def sub_scores(self, signal: ProductSignal) -> SubScores:
        """Calcule les 4 sous-scores avec les échelles de la configuration."""
        ladders = self.config.ladders
        return SubScores(
            review_score=review_score(signal.review_count, ladders),
            rating_score=rating_score(signal.rating, ladders),
            order_score=order_score(signal.order_count, ladders),
            profit_score=profit_score(signal.supplier_price, ladders),
        )

    def aggregate(self, breakdown: SubScores) -> float:
        """
        Agrégat pondéré Σ(sous_score × poids).

        Ni normalisation ni bornage: des poids dont la somme ≠ 1.0 donnent
        volontairement un score hors [0, 100].
        """
        weights = self.config.weights
        return (
            breakdown.review_score * weights.reviews +
            breakdown.rating_score * weights.rating +
            breakdown.order_score * weights.orders +
            breakdown.profit_score * weights.profit
        )

    def verdict(self, total_score_raw: float) -> Tuple[bool, Potential]:
        """(is_winner, potential) à partir du score brut, avant arrondi."""
        is_winner = total_score_raw >= self.config.winner_threshold
        return is_winner, self.categorize_potential(total_score_raw)

    def categorize_potential(self, total_score_raw: float) -> Potential:
        bands = self.config.potential_bands
        if total_score_raw >= bands.high:
            return Potential.HIGH
        if total_score_raw >= bands.medium:
            return Potential.MEDIUM
        return Potential.LOW

    # =========================================================================
    # RAISONS ET AVERTISSEMENTS
    # =========================================================================

    def generate_reasons(self, signal: ProductSignal, breakdown: SubScores, total_score_raw: float) -> List[str]:
        """
        Raisons lisibles, dans un ordre FIXE:
        verdict (si any) → positifs reviews/rating/orders/profit
        → négatifs reviews/rating/prix.
        """
        cfg = self.config.reasoning
        supplier_price = as_number(signal.supplier_price)
        reasons = []

        # Signaux positifs
        if breakdown.review_score >= cfg.positive_cutoff:
            reasons.append(f"🔥 High social proof with {format_count(signal.review_count)} reviews")

        if breakdown.rating_score >= cfg.positive_cutoff:
            reasons.append(f"⭐ Excellent {format_rating(signal.rating)}/5 star rating shows quality")

        if breakdown.order_score >= cfg.positive_cutoff:
            reasons.append(f"📦 Proven demand with {format_count(signal.order_count)} orders")

        selling_price = 0.0
        if breakdown.profit_score >= cfg.positive_cutoff:
            selling_price = estimate_price(supplier_price, signal.source, self.config)
        # 0.0: prix hors plage, aucune estimation
        if selling_price:
            profit = selling_price - supplier_price - cfg.estimated_fees
            margin = profit / selling_price * 100
            reasons.append(
                f"💰 Great profit potential: ${to_fixed(profit)} ({to_fixed(margin)}% margin)"
            )

        # Signaux négatifs
        if breakdown.review_score < cfg.low_review_cutoff:
            reasons.append(LOW_REVIEWS_REASON)

        if breakdown.rating_score < cfg.low_rating_cutoff:
            reasons.append(LOW_RATING_REASON)

        if supplier_price > cfg.high_cost_price:
            reasons.append(HIGH_COST_REASON)

        # Verdict global en tête
        bands = self.config.potential_bands
        if total_score_raw >= bands.high:
            reasons.insert(0, WINNER_REASON)
        elif total_score_raw >= bands.medium:
            reasons.insert(0, MODERATE_REASON)

        return reasons

    def generate_warnings(self, signal: ProductSignal, breakdown: SubScores) -> List[str]:
        """Avertissements indépendants des raisons, ordre fixe."""
        cfg = self.config.reasoning
        warnings = []

        if as_number(signal.review_count) > 0 and as_number(signal.rating) < cfg.warning_rating:
            warnings.append(LOW_RATING_WARNING)

        if as_number(signal.supplier_price) > cfg.warning_supplier_price:
            warnings.append(HIGH_PRICE_WARNING)

        if as_number(signal.image_count) < cfg.min_images:
            warnings.append(LIMITED_IMAGES_WARNING)

        if breakdown.review_score < cfg.unproven_cutoff and breakdown.order_score < cfg.unproven_cutoff:
            warnings.append(UNPROVEN_WARNING)

        return warnings

    # =========================================================================
    # PRÉ-FILTRE ET BATCH
    # =========================================================================

    def meets_minimum_criteria(self, signal: ProductSignal) -> bool:
        """
        Filtre rapide, indépendant du score pondéré.

        reviews >= min_reviews ET note >= min_rating ET prix fournisseur <= max_price.
        """
        criteria = self.config.minimum_criteria
        return (
            as_number(signal.review_count) >= criteria.min_reviews and
            as_number(signal.rating) >= criteria.min_rating and
            as_number(signal.supplier_price) <= criteria.max_price
        )

    def analyze_batch(self, signals: Iterable[ProductSignal]) -> List[ProductAnalysis]:
        """Analyse une liste de produits, dans l'ordre d'entrée."""
        return [self.analyze(signal) for signal in signals]

    def scan(
        self,
        signals: Iterable[ProductSignal],
        prefilter: bool = True,
        limit: Optional[int] = None,
        min_score: Optional[int] = None,
    ) -> ScanResult:
        """
        Scanne une liste de produits et retourne les meilleurs.

        Args:
            signals: Produits à scanner
            prefilter: Écarte d'abord les produits sous les critères minimum
            limit: Nombre max de résultats (>= 0)
            min_score: Score arrondi minimum requis

        Returns:
            ScanResult trié (winners d'abord, puis score brut décroissant)

        Raises:
            ValueError: limit négatif
        """
        if limit is not None and limit < 0:
            raise ValueError(f"limit must be >= 0, got: {limit}")

        scored = []
        scanned = 0
        filtered_out = 0

        for signal in signals:
            scanned += 1
            if prefilter and not self.meets_minimum_criteria(signal):
                filtered_out += 1
                continue
            analysis = self.analyze(signal)
            if min_score is not None and analysis.total_score < min_score:
                continue
            scored.append((signal, analysis))

        scored.sort(key=lambda pair: (pair[1].is_winner, pair[1].total_score_raw), reverse=True)
        if limit is not None:
            scored = scored[:limit]

        result = ScanResult(results=scored, scanned=scanned, filtered_out=filtered_out)
        logger.info(
            "Scan complete: %d scanned, %d filtered out, %d kept, %d winners",
            scanned, filtered_out, len(result.results), result.winner_count,
            extra={"count": scanned},
        )
        return result


def analyze_product(signal: ProductSignal, config: Optional[ScoringConfig] = None) -> ProductAnalysis:
    """Raccourci fonctionnel: ProductScoringEngine(config).analyze(signal)."""
    return ProductScoringEngine(config).analyze(signal)


def meets_minimum_criteria(signal: ProductSignal, config: Optional[ScoringConfig] = None) -> bool:
    """Raccourci fonctionnel du pré-filtre."""
    return ProductScoringEngine(config).meets_minimum_criteria(signal)
