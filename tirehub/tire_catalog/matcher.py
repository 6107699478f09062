"""
Tire matching logic.

Matches a MatchQuery against candidate specifications and ranks the
survivors by price. Two modes exist:

- EXACT: aspect ratio and rim diameter must equal the query's.
- TOLERANT: aspect ratio may differ by up to a configured tolerance.

A query that supplies both aspect ratio and rim diameter is upgraded to
EXACT automatically (configurable). Listings from the external catalog
search service carry no parsed specification; they are filtered with a
relevance regex built from the query instead.
"""

import re
from typing import Iterable, Optional, Sequence

from pydantic import BaseModel, Field

from tirehub.models.inputs import ExternalListing, MatchMode, MatchQuery, Product, TireCategory
from tirehub.models.numbers import round_price
from tirehub.models.outputs import MatchResult, TireSearchResult, TireSpecification
from tirehub.tire_catalog.extractor import extract


# Aspect ratios within this distance are treated as interchangeable in
# tolerant mode
ASPECT_RATIO_TOLERANCE = 5


class MatcherSettings(BaseModel):
    """Tunable constants for tire matching."""
    aspect_ratio_tolerance: int = Field(
        default=ASPECT_RATIO_TOLERANCE,
        ge=0,
        description="Allowed aspect ratio difference in tolerant mode",
    )
    auto_exact_when_fully_specified: bool = Field(
        default=True,
        description="Use exact mode when a car query gives both aspect ratio and rim diameter",
    )

    model_config = {"frozen": True}


DEFAULT_SETTINGS = MatcherSettings()

Candidate = tuple[Product, TireSpecification]


def resolve_category(query: MatchQuery) -> TireCategory:
    """Car if the query has an aspect ratio, truck otherwise."""
    return query.category


def resolve_mode(query: MatchQuery, settings: Optional[MatcherSettings] = None) -> MatchMode:
    """
    Decide once per query how strictly to compare.

    Exact when requested, or when auto-upgrade is on and both aspect
    ratio and rim diameter are given.
    """
    settings = settings or DEFAULT_SETTINGS
    if query.exact_mode:
        return MatchMode.EXACT
    fully_specified = query.aspect_ratio is not None and query.rim_diameter is not None
    if settings.auto_exact_when_fully_specified and fully_specified:
        return MatchMode.EXACT
    return MatchMode.TOLERANT


def _rim_matches(query_rim: Optional[int], spec_rim: Optional[int]) -> bool:
    """Rim equality on R-normalised integers; a missing side never matches."""
    if query_rim is None or spec_rim is None:
        return False
    return query_rim == spec_rim


def _aspect_within(
    query_aspect: Optional[int],
    spec_aspect: Optional[int],
    tolerance: int,
) -> bool:
    if query_aspect is None:
        return True
    if spec_aspect is None:
        return False
    return abs(spec_aspect - query_aspect) <= tolerance


def spec_matches(
    query: MatchQuery,
    spec: TireSpecification,
    mode: MatchMode,
    settings: Optional[MatcherSettings] = None,
) -> bool:
    """
    Check a single specification against a query.

    Args:
        query: Target size
        spec: Candidate specification
        mode: Result of resolve_mode(query)
        settings: Matcher constants (defaults used if None)

    Returns:
        True if the candidate satisfies the query
    """
    settings = settings or DEFAULT_SETTINGS

    if spec.width is None or spec.width != query.width:
        return False

    if resolve_category(query) == TireCategory.CAR:
        if mode == MatchMode.EXACT:
            return (
                spec.aspect_ratio == query.aspect_ratio
                and _rim_matches(query.rim_diameter, spec.rim_diameter)
            )
        aspect_ok = _aspect_within(
            query.aspect_ratio, spec.aspect_ratio, settings.aspect_ratio_tolerance
        )
        rim_ok = query.rim_diameter is None or _rim_matches(query.rim_diameter, spec.rim_diameter)
        return aspect_ok and rim_ok

    # Truck: aspect ratio is never examined
    if query.rim_diameter is None:
        return True
    return _rim_matches(query.rim_diameter, spec.rim_diameter)


def _to_result(product: Product, spec: TireSpecification) -> MatchResult:
    return MatchResult(
        product_id=product.id,
        product_name=product.name,
        price=round_price(product.price),
        stock=product.stock,
        specification=spec,
    )


def match_all(
    query: MatchQuery,
    candidates: Iterable[Candidate],
    settings: Optional[MatcherSettings] = None,
) -> list[MatchResult]:
    """
    Every candidate that satisfies the query, cheapest first.

    Unparseable specifications are skipped. Missing prices count as 0
    and therefore sort first; ties keep input order.
    """
    mode = resolve_mode(query, settings)
    matches = [
        _to_result(product, spec)
        for product, spec in candidates
        if spec.is_parseable and spec_matches(query, spec, mode, settings)
    ]
    matches.sort(key=lambda m: m.price)
    return matches


def match(
    query: MatchQuery,
    candidates: Iterable[Candidate],
    settings: Optional[MatcherSettings] = None,
) -> list[MatchResult]:
    """Matching candidates, cheapest first, truncated to query.result_limit."""
    return match_all(query, candidates, settings)[:query.result_limit]


def catalog_candidates(products: Iterable[Product]) -> list[Candidate]:
    """Pair each product with the specification parsed from its name."""
    return [(product, extract(product.name)) for product in products]


def match_catalog(
    query: MatchQuery,
    products: Iterable[Product],
    settings: Optional[MatcherSettings] = None,
) -> list[MatchResult]:
    """Parse product names on the fly and match them against the query."""
    return match(query, catalog_candidates(products), settings)


def search_catalog(
    query: MatchQuery,
    products: Iterable[Product],
    settings: Optional[MatcherSettings] = None,
) -> TireSearchResult:
    """Match a price list and wrap the ranked results with search metadata."""
    matches = match_all(query, catalog_candidates(products), settings)
    return TireSearchResult(
        search_type=resolve_category(query),
        search_spec=query.label,
        total_found=len(matches),
        results=matches[:query.result_limit],
        query=query,
        mode=resolve_mode(query, settings),
    )


# =============================================================================
# External listings
# =============================================================================

def build_relevance_pattern(query: MatchQuery) -> re.Pattern:
    """
    Build a regex accepting textual renderings of the query's size.

    Width, then the optional aspect ratio, then the rim diameter, with
    '/' or whitespace between them and optional Z, R and F rating letters
    before the diameter. Matches '205/55ZR16', '205 55 R16', '205/55RF16'.
    Best effort: descriptions in other notations are missed and
    unrelated digit runs may match.
    """
    pattern = re.escape(str(query.width))
    if query.aspect_ratio is not None:
        pattern += r'[/\s]*' + re.escape(str(query.aspect_ratio))
    pattern += r'[/\s]*Z?R?F?'
    if query.rim_diameter is not None:
        pattern += re.escape(str(query.rim_diameter))
    return re.compile(pattern, re.IGNORECASE)


def _external_spec(query: MatchQuery, listing: ExternalListing) -> TireSpecification:
    # Listings are never parsed; without a query rim the size stays uncategorised
    category = resolve_category(query) if query.rim_diameter is not None else None
    return TireSpecification(
        width=query.width,
        aspect_ratio=query.aspect_ratio,
        rim_diameter=query.rim_diameter,
        category=category,
        original_text=listing.description,
    )


def match_external_all(
    query: MatchQuery,
    listings: Sequence[ExternalListing],
) -> list[MatchResult]:
    """Every in-stock listing whose description fits the query, cheapest first."""
    pattern = build_relevance_pattern(query)
    matches = [
        MatchResult(
            product_id=listing.key,
            product_name=listing.description,
            price=round_price(listing.price),
            stock=listing.stock,
            specification=_external_spec(query, listing),
        )
        for listing in listings
        if listing.stock > 0 and pattern.search(listing.description)
    ]
    matches.sort(key=lambda m: m.price)
    return matches


def match_external(
    query: MatchQuery,
    listings: Sequence[ExternalListing],
) -> list[MatchResult]:
    """Regex-filtered external listings, truncated to query.result_limit."""
    return match_external_all(query, listings)[:query.result_limit]


def search_external(
    query: MatchQuery,
    listings: Sequence[ExternalListing],
) -> TireSearchResult:
    """Filter external listings and wrap them with search metadata."""
    matches = match_external_all(query, listings)
    return TireSearchResult(
        search_type=resolve_category(query),
        search_spec=query.label,
        total_found=len(matches),
        results=matches[:query.result_limit],
        query=query,
    )
