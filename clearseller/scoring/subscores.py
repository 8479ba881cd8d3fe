"""
Calculateurs de sous-scores ClearSeller (0-100).

Quatre fonctions pures, une par signal brut:
    - review_score(review_count)
    - rating_score(rating)
    - order_score(order_count)
    - profit_score(supplier_price)

Chaque calculateur est TOTAL: aucune exception. None, une valeur non
numérique (chaîne comprise), NaN, ±inf (Decimal compris) ou un booléen sont
ramenés à 0 et prennent la branche "aucun signal".
"""

import math
import numbers
from decimal import Decimal
from typing import Any, Optional, Tuple

from .scoring_config import SubScoreLadders

_DEFAULT_LADDERS = SubScoreLadders()


def as_number(value: Any) -> float:
    """
    Ramène une entrée quelconque à un nombre; 0 si absente ou invalide.

    Un entier est toujours fini: il est retourné tel quel, même hors de la
    plage des float (10**400 tombe dans la bande haute).
    """
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, Decimal):
        if not value.is_finite():
            return 0
        converted = float(value)
        # Décimal fini mais hors plage float
        return converted if math.isfinite(converted) else int(value)
    if isinstance(value, numbers.Integral):
        return int(value)
    if not isinstance(value, numbers.Real):
        return 0
    if not math.isfinite(value):
        return 0
    return value


def ascending_ladder(value: Any, thresholds: Tuple[Tuple[float, int], ...], top_points: int) -> int:
    """
    Applique une échelle ascendante: première borne telle que valeur < borne.

    Une valeur au-dessus de toutes les bornes reçoit top_points.
    """
    value = as_number(value)
    for threshold, points in thresholds:
        if value < threshold:
            return points
    return top_points


def descending_ladder(
    value: Any,
    thresholds: Tuple[Tuple[float, int], ...],
    floor_points: int,
    unknown_points: int,
) -> int:
    """
    Applique une échelle descendante: première borne telle que valeur > borne.

    0 (inconnu) → unknown_points; sous toutes les bornes → floor_points.
    """
    value = as_number(value)
    if not value:
        return unknown_points
    for threshold, points in thresholds:
        if value > threshold:
            return points
    return floor_points


def review_score(review_count: Any, ladders: Optional[SubScoreLadders] = None) -> int:
    """Preuve sociale: <100 → 10 ... 10K+ → 100."""
    ladders = ladders or _DEFAULT_LADDERS
    return ascending_ladder(review_count, ladders.review_thresholds, ladders.review_top_points)


def rating_score(rating: Any, ladders: Optional[SubScoreLadders] = None) -> int:
    """Qualité perçue: aucune note ou <3.5 → 0 ... 4.7+ → 100."""
    ladders = ladders or _DEFAULT_LADDERS
    return ascending_ladder(rating, ladders.rating_thresholds, ladders.rating_top_points)


def order_score(order_count: Any, ladders: Optional[SubScoreLadders] = None) -> int:
    """Demande prouvée: <500 → 10 ... 50K+ → 100."""
    ladders = ladders or _DEFAULT_LADDERS
    return ascending_ladder(order_count, ladders.order_thresholds, ladders.order_top_points)


def profit_score(supplier_price: Any, ladders: Optional[SubScoreLadders] = None) -> int:
    """
    Potentiel de marge à partir du prix fournisseur (échelle inversée).

    Prix inconnu (0) → 50: politique explicite "on suppose moyen".
    >50 → 20, >30 → 40, >20 → 60, >10 → 80, sinon → 100.
    """
    ladders = ladders or _DEFAULT_LADDERS
    return descending_ladder(
        supplier_price,
        ladders.profit_thresholds,
        ladders.profit_floor_points,
        ladders.profit_unknown_points,
    )
