"""
ClearSeller Signal Models
=========================

Dataclasses representing the raw product signals handed to the scoring engine.
These models are the typed boundary between marketplace scrapers (AliExpress,
Amazon, Temu) and the deterministic scorer.

Models:
    - Source: Marketplace the listing was observed on
    - ProductSignal: Immutable snapshot of one scraped listing

Convention:
    Absent or unknown numeric fields are stored as 0. The scorer reads 0 as
    "no signal", never as the worst possible value.
"""

from dataclasses import dataclass, asdict
from enum import Enum
from typing import Any, Dict, Optional


class Source(str, Enum):
    """Marketplace a product signal was scraped from."""
    ALIEXPRESS = "aliexpress"
    AMAZON = "amazon"
    TEMU = "temu"
    MANUAL = "manual"  # Saisie manuelle / import par lien

    @classmethod
    def parse(cls, value: Any) -> Optional["Source"]:
        """
        Resolve a source from an enum member or a case-insensitive string.

        Returns:
            Matching Source, or None when the value is not a known marketplace
        """
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


@dataclass(frozen=True)
class ProductSignal:
    """
    Point-in-time signals for one product listing.

    Prices are in the listing currency (USD for every supported marketplace).
    `supplier_price` is the cost basis used for margin estimation; `price` is
    whatever price was displayed on the page.
    """
    title: str = ""
    price: float = 0.0
    supplier_price: float = 0.0
    rating: float = 0.0          # 0-5, 0 = aucune note observée
    review_count: int = 0
    order_count: int = 0
    image_count: int = 0
    source: Source = Source.MANUAL

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        data = asdict(self)
        data["source"] = self.source.value if isinstance(self.source, Source) else str(self.source)
        return data
