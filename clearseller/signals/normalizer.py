"""
ClearSeller Signal Normalizer
=============================

Converts untyped payloads produced by the browser extension scrapers into
typed ProductSignal records.

This is the only place where scraped text is parsed. The scoring engine only
ever sees well-typed numeric fields.

Parsing rules:
    - Prices:  "$1,299.50", "US $12.99", "12,99 €"    → float
    - Counts:  "12,345 Reviews", "1.2K sold", "10K+"   → int
    - Rating:  "4.8", "4.8 out of 5"                   → float in [0, 5]
    - Anything unparsable, negative or out of range    → 0 ("no signal")

Both camelCase keys (as sent by the extension) and snake_case keys are
accepted.
"""

import logging
import math
import re
from typing import Any, Dict, Iterable, List, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from .signal_models import ProductSignal, Source

logger = logging.getLogger(__name__)

_NUMBER_RE = re.compile(r"\d[\d.,]*")
_COUNT_RE = re.compile(r"(\d[\d.,]*)\s*(?:([kKmM])(?![A-Za-z]))?")
_RATING_RE = re.compile(r"\d+(?:[.,]\d+)?")

_COUNT_MULTIPLIERS = {"k": 1_000, "m": 1_000_000}


class SignalParseError(ValueError):
    """Raised when a scraped payload cannot be turned into a ProductSignal."""


def _as_float(value) -> float:
    try:
        return float(value)
    except OverflowError:
        return math.nan


def _finite_non_negative(value: float) -> float:
    if not math.isfinite(value) or value < 0:
        return 0.0
    return value


def _decimal_string(raw: str) -> str:
    """
    Normalize thousands/decimal separators to a plain "1234.56" string.

    The last separator is the decimal one when both "," and "." appear.
    A lone "," followed by exactly two digits is a decimal comma ("12,99").
    """
    if "," in raw and "." in raw:
        if raw.rfind(",") > raw.rfind("."):
            return raw.replace(".", "").replace(",", ".")
        return raw.replace(",", "")
    if "," in raw:
        head, _, tail = raw.rpartition(",")
        if raw.count(",") == 1 and len(tail) == 2:
            return f"{head}.{tail}"
        return raw.replace(",", "")
    if raw.count(".") > 1:
        return raw.replace(".", "")
    return raw


def parse_price(value: Any) -> float:
    """Parse a scraped price into a non-negative float (0 when unknown)."""
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        return _finite_non_negative(_as_float(value))
    match = _NUMBER_RE.search(str(value))
    if not match:
        return 0.0
    try:
        return _finite_non_negative(float(_decimal_string(match.group(0).rstrip(".,"))))
    except ValueError:
        return 0.0


def parse_count(value: Any) -> int:
    """Parse a scraped counter ("1.2K sold", "12,345 Reviews") into an int."""
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        return int(_finite_non_negative(_as_float(value)))
    match = _COUNT_RE.search(str(value))
    if not match:
        return 0
    number, suffix = match.group(1).rstrip(".,"), match.group(2)
    try:
        if suffix:
            # "1.2K" / "1,2K": the separator is a decimal point
            amount = float(number.replace(",", ".")) * _COUNT_MULTIPLIERS[suffix.lower()]
        else:
            amount = float(number.replace(",", ""))
    except ValueError:
        return 0
    return int(round(_finite_non_negative(amount)))


def parse_rating(value: Any) -> float:
    """Parse a scraped star rating; values outside [0, 5] mean "no rating"."""
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        rating = _as_float(value)
    else:
        match = _RATING_RE.search(str(value))
        if not match:
            return 0.0
        rating = float(match.group(0).replace(",", "."))
    if not math.isfinite(rating) or rating < 0 or rating > 5:
        return 0.0
    return rating


class ScrapedProduct(BaseModel):
    """
    Raw product payload as posted by the extension scrapers.

    Field names follow the extension's camelCase payload; snake_case aliases
    are accepted too.
    """
    title: str = ""
    price: float = 0.0
    supplierPrice: float = Field(default=0.0, alias="supplier_price")
    rating: float = 0.0
    reviewCount: int = Field(default=0, alias="review_count")
    orderCount: int = Field(default=0, alias="order_count")
    imageCount: Optional[int] = Field(default=None, alias="image_count")
    images: List[Any] = Field(default_factory=list)
    source: Source = Source.MANUAL

    class Config:
        populate_by_name = True

    @field_validator("title", mode="before")
    @classmethod
    def _clean_title(cls, value):
        if value is None:
            return ""
        if not isinstance(value, (str, int, float)):
            raise ValueError(f"title must be text, got: {type(value).__name__}")
        return " ".join(str(value).split())

    @field_validator("price", "supplierPrice", mode="before")
    @classmethod
    def _parse_price(cls, value):
        return parse_price(value)

    @field_validator("reviewCount", "orderCount", mode="before")
    @classmethod
    def _parse_count(cls, value):
        return parse_count(value)

    @field_validator("imageCount", mode="before")
    @classmethod
    def _parse_image_count(cls, value):
        if value is None:
            return None
        return parse_count(value)

    @field_validator("rating", mode="before")
    @classmethod
    def _parse_rating(cls, value):
        return parse_rating(value)

    @field_validator("images", mode="before")
    @classmethod
    def _parse_images(cls, value):
        if value is None:
            return []
        if isinstance(value, (list, tuple)):
            return [image for image in value if image]
        return [value]

    @field_validator("source", mode="before")
    @classmethod
    def _parse_source(cls, value):
        source = Source.parse(value)
        if source is None:
            logger.debug(
                "Unknown source %r, using %s", value, Source.MANUAL.value,
                extra={"source": str(value)},
            )
            return Source.MANUAL
        return source

    def to_signal(self) -> ProductSignal:
        """
        Build the typed signal.

        The scrapers report a single observed price which is the supplier
        cost, so supplier_price falls back to price when it is missing.
        """
        supplier_price = self.supplierPrice if self.supplierPrice > 0 else self.price
        image_count = self.imageCount if self.imageCount is not None else len(self.images)
        return ProductSignal(
            title=self.title,
            price=self.price,
            supplier_price=supplier_price,
            rating=self.rating,
            review_count=self.reviewCount,
            order_count=self.orderCount,
            image_count=image_count,
            source=self.source,
        )


def normalize_signal(payload: Dict[str, Any]) -> ProductSignal:
    """
    Parse one scraped payload into a ProductSignal.

    Raises:
        SignalParseError: If the payload is not a mapping or fails validation
    """
    if not isinstance(payload, dict):
        raise SignalParseError(f"Product payload must be an object, got: {type(payload).__name__}")
    try:
        return ScrapedProduct.model_validate(payload).to_signal()
    except ValidationError as e:
        raise SignalParseError(f"Invalid product payload: {e}") from e


def normalize_signals(payloads: Iterable[Dict[str, Any]], skip_invalid: bool = False) -> List[ProductSignal]:
    """
    Parse a list of scraped payloads.

    Args:
        payloads: Raw payloads, in scan order
        skip_invalid: Log and drop invalid payloads instead of raising

    Returns:
        Parsed signals, in input order
    """
    signals = []
    for index, payload in enumerate(payloads):
        try:
            signals.append(normalize_signal(payload))
        except SignalParseError as e:
            if not skip_invalid:
                raise
            logger.warning("Skipping payload #%d: %s", index, e)
    return signals
