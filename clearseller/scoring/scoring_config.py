"""
Configuration des seuils et pondérations pour le scoring ClearSeller.

Ce fichier centralise TOUS les paramètres du détecteur de "winning products".
Calibré pour le dropshipping depuis AliExpress / Amazon / Temu.

PHILOSOPHIE:
- Tous les seuils sont explicites et documentés
- Aucun "magic number" dans le code principal
- La configuration est une VALEUR injectée dans le scorer, jamais un global
- Le scorer ne valide pas la configuration: validate() est optionnel

PONDÉRATIONS:
Les poids ne sont PAS normalisés. Le score agrégé vaut Σ(sous_score × poids).
Avec les poids par défaut (somme = 1.0) il reste dans [0, 100]; un jeu de
poids dont la somme diffère de 1.0 produit volontairement un score hors
bornes. C'est la responsabilité de l'appelant.
"""

import logging
import math
import numbers
from dataclasses import dataclass, field, replace
from typing import Dict, Tuple

logger = logging.getLogger(__name__)


class ScoringConfigError(ValueError):
    """Configuration de scoring incohérente (levée par validate())."""


@dataclass(frozen=True)
class ScoreWeights:
    """
    Pondération des 4 sous-scores dans le score agrégé.

    Défauts: reviews 30%, rating 20%, orders 25%, profit 25%.
    """
    reviews: float = 0.30
    rating: float = 0.20
    orders: float = 0.25
    profit: float = 0.25

    @property
    def total(self) -> float:
        """Somme des poids (1.0 avec les défauts)."""
        return self.reviews + self.rating + self.orders + self.profit

    def as_dict(self) -> Dict[str, float]:
        return {
            "reviews": self.reviews,
            "rating": self.rating,
            "orders": self.orders,
            "profit": self.profit,
        }


@dataclass(frozen=True)
class PotentialBands:
    """
    Bandes de potentiel sur le score brut (avant arrondi).

    - score >= high   → "high"
    - score >= medium → "medium"
    - sinon           → "low"

    Les mêmes seuils déclenchent le verdict WINNER / MODERATE des raisons.
    """
    high: float = 75
    medium: float = 50


@dataclass(frozen=True)
class SubScoreLadders:
    """
    Échelles de seuils des 4 sous-scores (0-100).

    ÉCHELLES ASCENDANTES (reviews, rating, orders):
    Parcourues dans l'ordre, borne inférieure incluse: la première entrée
    telle que valeur < seuil gagne. Au-dessus de tous les seuils → top_points.

    ÉCHELLE PROFIT (inversée):
    Parcourue avec des comparaisons `>` DESCENDANTES. Plus le prix fournisseur
    est bas, plus le potentiel de marge est élevé. L'ordre des branches fixe
    le comportement aux bornes exactes 50/30/20/10: ne pas le réordonner.
    """
    review_thresholds: Tuple[Tuple[float, int], ...] = (
        (100, 10),     # <100 reviews (ou inconnu) = 10
        (500, 30),     # 100-499 = 30
        (1_000, 50),   # 500-999 = 50
        (5_000, 70),   # 1K-5K = 70
        (10_000, 85),  # 5K-10K = 85
    )
    review_top_points: int = 100  # 10K+ reviews

    rating_thresholds: Tuple[Tuple[float, int], ...] = (
        (3.5, 0),    # <3.5 (ou aucune note) = 0
        (4.0, 30),   # 3.5-3.99 = 30
        (4.3, 50),   # 4.0-4.29 = 50
        (4.5, 70),   # 4.3-4.49 = 70
        (4.7, 85),   # 4.5-4.69 = 85
    )
    rating_top_points: int = 100  # 4.7+

    order_thresholds: Tuple[Tuple[float, int], ...] = (
        (500, 10),      # <500 commandes (ou inconnu) = 10
        (1_000, 30),    # 500-999 = 30
        (5_000, 50),    # 1K-5K = 50
        (10_000, 70),   # 5K-10K = 70
        (50_000, 85),   # 10K-50K = 85
    )
    order_top_points: int = 100  # 50K+ commandes

    profit_thresholds: Tuple[Tuple[float, int], ...] = (
        (50, 20),  # >$50 = 20 (difficile à marger)
        (30, 40),  # >$30 = 40
        (20, 60),  # >$20 = 60
        (10, 80),  # >$10 = 80
    )
    profit_floor_points: int = 100   # ≤$10 = 100 (très bon marché)
    profit_unknown_points: int = 50  # Prix inconnu → on suppose moyen


@dataclass(frozen=True)
class ReasoningConfig:
    """
    Seuils de génération des raisons et avertissements.

    RAISONS POSITIVES: sous-score >= positive_cutoff.
    RAISONS NÉGATIVES: reviews < low_review_cutoff, rating < low_rating_cutoff,
    prix fournisseur > high_cost_price.
    """
    positive_cutoff: int = 70
    low_review_cutoff: int = 30
    low_rating_cutoff: int = 50
    high_cost_price: float = 40.0

    # Frais + shipping forfaitaires retirés du prix estimé (raison profit)
    estimated_fees: float = 9.0

    # Avertissements
    warning_rating: float = 4.0
    warning_supplier_price: float = 50.0
    min_images: int = 3
    unproven_cutoff: int = 30


@dataclass(frozen=True)
class MinimumCriteria:
    """
    Pré-filtre rapide avant scoring complet (scan de listes de produits).

    Seuls min_reviews, min_rating et max_price participent au filtre.
    min_orders et min_profit_margin sont exposés pour les appelants.
    """
    min_reviews: int = 500
    min_rating: float = 4.3
    max_price: float = 50.0
    min_orders: int = 1_000
    min_profit_margin: float = 30.0


def _default_markups() -> Dict[str, float]:
    return {
        "aliexpress": 2.5,
        "amazon": 1.8,   # Prix de base déjà élevé → markup plus faible
        "temu": 3.0,     # Prix de base très bas → markup plus fort
    }


@dataclass(frozen=True)
class ScoringConfig:
    """
    Configuration globale du scoring ClearSeller.

    Agrège toutes les configurations de composantes.
    Point d'entrée unique pour la calibration, passé explicitement au scorer.
    """
    weights: ScoreWeights = field(default_factory=ScoreWeights)
    winner_threshold: float = 70
    potential_bands: PotentialBands = field(default_factory=PotentialBands)
    ladders: SubScoreLadders = field(default_factory=SubScoreLadders)
    reasoning: ReasoningConfig = field(default_factory=ReasoningConfig)
    minimum_criteria: MinimumCriteria = field(default_factory=MinimumCriteria)

    # Multiplicateurs de markup par plateforme source
    platform_markup_multipliers: Dict[str, float] = field(default_factory=_default_markups)
    default_markup_multiplier: float = 2.5

    # Tolérance sur la somme des poids (validate() ne fait qu'avertir)
    weight_sum_tolerance: float = 0.01

    def markup_for(self, source_key: str) -> float:
        """Multiplicateur pour une plateforme; défaut si plateforme inconnue."""
        return self.platform_markup_multipliers.get(source_key, self.default_markup_multiplier)

    def with_overrides(self, **changes) -> "ScoringConfig":
        """Retourne une nouvelle configuration avec les champs modifiés."""
        return replace(self, **changes)

    def validate(self) -> bool:
        """
        Vérifie la cohérence de la configuration.

        Optionnel: le scorer ne l'appelle JAMAIS, pour ne pas changer
        l'arithmétique documentée. Ne normalise rien.

        Raises:
            ScoringConfigError: poids ou multiplicateur invalide, bandes
                inversées, échelle de seuils mal ordonnée
        """
        for name, value in self.weights.as_dict().items():
            _check_non_negative(f"weights.{name}", value)

        _check_non_negative("winner_threshold", self.winner_threshold)
        _check_non_negative("potential_bands.high", self.potential_bands.high)
        _check_non_negative("potential_bands.medium", self.potential_bands.medium)
        if self.potential_bands.medium > self.potential_bands.high:
            raise ScoringConfigError(
                f"potential_bands.medium ({self.potential_bands.medium}) > "
                f"potential_bands.high ({self.potential_bands.high})"
            )

        for platform, multiplier in self.platform_markup_multipliers.items():
            _check_non_negative(f"platform_markup_multipliers.{platform}", multiplier)
        _check_non_negative("default_markup_multiplier", self.default_markup_multiplier)

        ladders = self.ladders
        _check_ladder("review_thresholds", ladders.review_thresholds, ascending=True)
        _check_ladder("rating_thresholds", ladders.rating_thresholds, ascending=True)
        _check_ladder("order_thresholds", ladders.order_thresholds, ascending=True)
        _check_ladder("profit_thresholds", ladders.profit_thresholds, ascending=False)

        weight_sum = self.weights.total
        if abs(weight_sum - 1.0) > self.weight_sum_tolerance:
            logger.warning(
                "Somme des poids = %.4f (≠ 1.0): les scores peuvent sortir de [0, 100]",
                weight_sum,
            )
        return True


def _is_number(value) -> bool:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return False
    return not math.isnan(value)


def _check_non_negative(name: str, value) -> None:
    if not _is_number(value):
        raise ScoringConfigError(f"{name} doit être numérique, reçu: {value!r}")
    if value < 0:
        raise ScoringConfigError(f"{name} ne peut pas être négatif, reçu: {value}")


def _check_ladder(name: str, ladder: Tuple[Tuple[float, int], ...], ascending: bool) -> None:
    bounds = [threshold for threshold, _ in ladder]
    for bound in bounds:
        if not _is_number(bound):
            raise ScoringConfigError(f"{name}: seuil non numérique {bound!r}")
    ordered = sorted(bounds) if ascending else sorted(bounds, reverse=True)
    if bounds != ordered:
        direction = "croissant" if ascending else "décroissant"
        raise ScoringConfigError(f"{name} doit être trié par ordre {direction}: {bounds}")


# Instance par défaut (valeurs de l'extension navigateur)
DEFAULT_CONFIG = ScoringConfig()
