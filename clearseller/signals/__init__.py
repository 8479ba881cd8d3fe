"""
ClearSeller Signals Module
==========================

Typed product signals and the boundary that parses scraped payloads into them.

This module provides:
    - ProductSignal: Immutable input record of the scoring engine
    - Source: Marketplace enum (aliexpress, amazon, temu, manual)
    - normalize_signal / normalize_signals: Scraped payload → ProductSignal

Quick Start:
    from clearseller.signals import normalize_signal

    signal = normalize_signal({
        "title": "Magnetic Car Phone Mount",
        "price": "US $4.12",
        "rating": "4.8",
        "reviewCount": "12,345 Reviews",
        "orderCount": "10K+ sold",
        "images": ["a.jpg", "b.jpg", "c.jpg"],
        "source": "aliexpress",
    })
"""

from .signal_models import ProductSignal, Source
from .normalizer import (
    ScrapedProduct,
    SignalParseError,
    normalize_signal,
    normalize_signals,
    parse_count,
    parse_price,
    parse_rating,
)

__all__ = [
    "ProductSignal",
    "Source",
    "ScrapedProduct",
    "SignalParseError",
    "normalize_signal",
    "normalize_signals",
    "parse_count",
    "parse_price",
    "parse_rating",
]
