"""Configuration for ShopBot."""

from config.patterns import (
    ADD_PHRASES,
    REMOVE_PHRASES,
    CATEGORY_PATTERNS,
    TYPE_CUES,
    PRODUCT_INQUIRY_PHRASES,
    PRODUCT_TYPE_NOUNS,
    extract_price_range,
    has_phrase,
    has_pattern,
)
from config.settings import Settings, load_settings

__all__ = [
    "ADD_PHRASES",
    "REMOVE_PHRASES",
    "CATEGORY_PATTERNS",
    "TYPE_CUES",
    "PRODUCT_INQUIRY_PHRASES",
    "PRODUCT_TYPE_NOUNS",
    "extract_price_range",
    "has_phrase",
    "has_pattern",
    "Settings",
    "load_settings",
]
