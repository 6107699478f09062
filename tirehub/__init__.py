"""
Tire Price List Hub (tirehub)

A small service over a product price list that understands tire sizes.
Product names such as "185/60 R15 JK TYRE VECTRA 88 H" are parsed into
width / aspect ratio / rim diameter, so tires can be searched by size in
the local price list or in an external catalog.

Usage:
    python -m tirehub parse "185/60 R15 JK TYRE VECTRA 88 H"
    python -m tirehub search --width 155 --aspect-ratio 70 --rim-diameter 13
    python -m tirehub search-external --width 205 --aspect-ratio 55 --rim-diameter 16
    python -m tirehub serve --port 8000
"""

__version__ = "0.1.0"
__author__ = "Tire Price List Hub"

from tirehub.models.inputs import MatchQuery, MatchMode, TireCategory, Product, ExternalListing
from tirehub.models.outputs import TireSpecification, MatchResult, TireSearchResult
from tirehub.tire_catalog.extractor import extract
from tirehub.tire_catalog.matcher import match, match_external, MatcherSettings
from tirehub.tire_catalog.loader import PriceCatalog

__all__ = [
    "MatchQuery",
    "MatchMode",
    "TireCategory",
    "Product",
    "ExternalListing",
    "TireSpecification",
    "MatchResult",
    "TireSearchResult",
    "extract",
    "match",
    "match_external",
    "MatcherSettings",
    "PriceCatalog",
]
