"""
Tire catalog module for price-list tire search.

Provides parsing of free-text product names into tire sizes, matching
logic to find products of a requested size, and the price list loader.
"""

from tirehub.tire_catalog.extractor import (
    EXTRACTION_RULES,
    ExtractionRule,
    extract,
    extract_many,
    extract_with_rule,
)
from tirehub.tire_catalog.matcher import (
    ASPECT_RATIO_TOLERANCE,
    MatcherSettings,
    build_relevance_pattern,
    match,
    match_all,
    match_catalog,
    match_external,
    resolve_category,
    resolve_mode,
    search_catalog,
    search_external,
)
from tirehub.tire_catalog.loader import PriceCatalog, load_products, resolve_price_list_path

__all__ = [
    "EXTRACTION_RULES",
    "ExtractionRule",
    "extract",
    "extract_many",
    "extract_with_rule",
    "ASPECT_RATIO_TOLERANCE",
    "MatcherSettings",
    "build_relevance_pattern",
    "match",
    "match_all",
    "match_catalog",
    "match_external",
    "resolve_category",
    "resolve_mode",
    "search_catalog",
    "search_external",
    "PriceCatalog",
    "load_products",
    "resolve_price_list_path",
]
