"""
Pydantic models for tire search inputs and outputs.
"""

from tirehub.models.inputs import (
    MatchQuery,
    MatchMode,
    TireCategory,
    Product,
    ExternalListing,
    MIN_RESULT_LIMIT,
    MAX_RESULT_LIMIT,
    DEFAULT_RESULT_LIMIT,
)
from tirehub.models.outputs import (
    TireSpecification,
    MatchResult,
    TireSearchResult,
    ParseResult,
)

__all__ = [
    "MatchQuery",
    "MatchMode",
    "TireCategory",
    "Product",
    "ExternalListing",
    "MIN_RESULT_LIMIT",
    "MAX_RESULT_LIMIT",
    "DEFAULT_RESULT_LIMIT",
    "TireSpecification",
    "MatchResult",
    "TireSearchResult",
    "ParseResult",
]
