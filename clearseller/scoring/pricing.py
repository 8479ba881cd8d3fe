"""
Module de prix ClearSeller.

Deux usages:
    1. Prix de revente suggéré = prix fournisseur × markup plateforme,
       arrondi "psychologiquement" (.99 / 4.99 / 9.99)
    2. Calcul de rentabilité d'un prix de vente donné (frais plateforme,
       paiement, shipping → profit net, marge, ROI, seuil de rentabilité)

ÉCHELLE D'ARRONDI PSYCHOLOGIQUE (à reproduire à l'identique):
    base < 20  → floor(base) + 0.99
    base < 50  → floor(base / 5) × 5 + 4.99
    sinon      → floor(base / 10) × 10 + 9.99

Le même arrondi sert au prix affiché à l'utilisateur, au prix par défaut
d'un import et à l'estimation de profit des raisons du scorer.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from .scoring_config import ScoringConfig, DEFAULT_CONFIG
from .subscores import as_number
from ..signals.signal_models import Source


class PricingError(ValueError):
    """Entrée invalide pour un calcul de rentabilité."""


def source_key(source: Any) -> str:
    """Clé de plateforme pour la table des markups ("" si illisible)."""
    if isinstance(source, Source):
        return source.value
    if isinstance(source, str):
        return source.strip().lower()
    return ""


def markup_multiplier(source: Any, config: Optional[ScoringConfig] = None) -> float:
    """
    Multiplicateur de markup de la plateforme source.

    Une plateforme inconnue n'est PAS une erreur: on retombe silencieusement
    sur le multiplicateur par défaut (2.5).
    """
    config = config or DEFAULT_CONFIG
    return config.markup_for(source_key(source))


def psychological_price(base: float) -> float:
    """Arrondit un prix calculé vers une terminaison "charm" (.99)."""
    if base < 20:
        price = math.floor(base) + 0.99
    elif base < 50:
        price = math.floor(base / 5) * 5 + 4.99
    else:
        price = math.floor(base / 10) * 10 + 9.99
    # Supprime le bruit flottant (19 + 0.99 → 19.99)
    return round(price, 2)


def estimate_price(supplier_price: Any, source: Any, config: Optional[ScoringConfig] = None) -> float:
    """
    Prix de revente suggéré pour un produit.

    Exemples (config par défaut):
        estimate_price(10, "aliexpress") → base 25.0 → 29.99
        estimate_price(5, "temu")        → base 15.0 → 15.99
        estimate_price(30, "amazon")     → base 54.0 → 59.99

    Un prix hors de la plage des float ne donne pas d'estimation: 0.0.
    L'arrondi psychologique ne retourne jamais 0, la valeur reste distincte.
    """
    try:
        base = float(as_number(supplier_price)) * markup_multiplier(source, config)
    except OverflowError:
        return 0.0
    if not math.isfinite(base):
        return 0.0
    return psychological_price(base)


def suggest_listing_price(
    supplier_price: Any,
    source: Any,
    price: Optional[float] = None,
    config: Optional[ScoringConfig] = None,
) -> float:
    """Prix par défaut à l'import: celui de l'appelant s'il est fourni, sinon l'estimation."""
    if price is not None and as_number(price) > 0:
        return float(price)
    return estimate_price(supplier_price, source, config)


# =============================================================================
# CALCULATEUR DE RENTABILITÉ
# =============================================================================

class RecommendationType(Enum):
    """Niveau de la recommandation affichée avec le calcul de profit."""
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class PlatformFees:
    """Frais de transaction d'une boutique (pourcentage + fixe)."""
    transaction_percent: float
    transaction_fixed: float


PLATFORM_FEES: Dict[str, PlatformFees] = {
    "shopify": PlatformFees(0.029, 0.30),
    "woocommerce": PlatformFees(0.029, 0.30),  # Stripe / PayPal
    "etsy": PlatformFees(0.065, 0.20),
}

# Traitement du paiement (identique quelle que soit la boutique)
PAYMENT_PROCESSING_PERCENT = 0.029
PAYMENT_PROCESSING_FIXED = 0.30

# Shipping moyen US
SHIPPING_COSTS: Dict[str, float] = {
    "standard": 6.50,
    "express": 15.00,
}

BREAK_EVEN_BUFFER = 1.05  # +5% de marge de sécurité


@dataclass(frozen=True)
class FeesBreakdown:
    platform_fees: float
    payment_processing: float
    shipping: float
    total: float


@dataclass(frozen=True)
class ProfitResult:
    """
    Rentabilité d'un prix de vente.

    profit_margin et roi sont en pourcentage.
    """
    selling_price: float
    product_cost: float
    fees: FeesBreakdown
    total_costs: float
    net_profit: float
    profit_margin: float
    roi: float
    break_even_price: float
    recommendation: str
    recommendation_type: RecommendationType
    platform: str = "shopify"
    shipping_method: str = "standard"

    def to_dict(self) -> Dict[str, Any]:
        """Format de réponse du calculateur (clés camelCase)."""
        return {
            "sellingPrice": self.selling_price,
            "totalCosts": self.total_costs,
            "costBreakdown": {
                "productCost": self.product_cost,
                "fees": {
                    "platformFees": self.fees.platform_fees,
                    "paymentProcessing": self.fees.payment_processing,
                    "shipping": self.fees.shipping,
                    "total": self.fees.total,
                },
            },
            "netProfit": self.net_profit,
            "profitMargin": self.profit_margin,
            "roi": self.roi,
            "breakEvenPrice": self.break_even_price,
            "recommendation": self.recommendation,
            "recommendationType": self.recommendation_type.value,
        }


def calculate_fees(selling_price: float, platform: str = "shopify", shipping_method: str = "standard") -> FeesBreakdown:
    """
    Frais d'une vente.

    Plateforme inconnue → barème Shopify; méthode inconnue → standard.
    Chaque poste est arrondi au centime, le total est calculé sur les
    montants non arrondis.
    """
    platform_cfg = PLATFORM_FEES.get(platform, PLATFORM_FEES["shopify"])
    platform_fee = selling_price * platform_cfg.transaction_percent + platform_cfg.transaction_fixed
    payment = selling_price * PAYMENT_PROCESSING_PERCENT + PAYMENT_PROCESSING_FIXED
    shipping = SHIPPING_COSTS.get(shipping_method, SHIPPING_COSTS["standard"])

    return FeesBreakdown(
        platform_fees=round(platform_fee, 2),
        payment_processing=round(payment, 2),
        shipping=round(shipping, 2),
        total=round(platform_fee + payment + shipping, 2),
    )


def _recommend(profit_margin: float):
    if profit_margin < 15:
        return (
            "⚠️ Low profit margin - Consider increasing price or finding cheaper supplier",
            RecommendationType.ERROR,
        )
    if profit_margin < 30:
        return "💡 Fair margin - Room for improvement with better pricing", RecommendationType.WARNING
    if profit_margin > 60:
        return "🚀 Excellent margin - Competitive advantage!", RecommendationType.SUCCESS
    return "✅ Healthy profit margin - Good positioning", RecommendationType.SUCCESS


def calculate_profit(
    supplier_price: float,
    selling_price: float,
    platform: str = "shopify",
    shipping_method: str = "standard",
) -> ProfitResult:
    """
    Calcule la rentabilité d'un produit vendu à selling_price.

    Raises:
        PricingError: prix fournisseur ou prix de vente manquant / non positif,
            ou hors de la plage des float
    """
    try:
        supplier_price = float(as_number(supplier_price))
        selling_price = float(as_number(selling_price))
    except OverflowError:
        raise PricingError("prix hors de la plage représentable")
    if supplier_price <= 0 or selling_price <= 0:
        raise PricingError("supplier_price et selling_price doivent être positifs")

    platform = (platform or "shopify").lower()
    shipping_method = (shipping_method or "standard").lower()

    fees = calculate_fees(selling_price, platform, shipping_method)
    total_costs = supplier_price + fees.total
    net_profit = selling_price - total_costs
    profit_margin = net_profit / selling_price * 100
    roi = net_profit / total_costs * 100
    recommendation, recommendation_type = _recommend(profit_margin)

    return ProfitResult(
        selling_price=selling_price,
        product_cost=supplier_price,
        fees=fees,
        total_costs=total_costs,
        net_profit=net_profit,
        profit_margin=profit_margin,
        roi=roi,
        break_even_price=total_costs * BREAK_EVEN_BUFFER,
        recommendation=recommendation,
        recommendation_type=recommendation_type,
        platform=platform,
        shipping_method=shipping_method,
    )
