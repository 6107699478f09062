"""
Tire size extraction from free-text product names.

Product names in the price list carry the tire size in several notations:

    155 70 13 ...            car, space separated
    175 65 R14 ...           car, space separated with R
    1100 R22 T-2400 14/C     truck, no aspect ratio
    205/55R16 ... 195/65-15  car, slash notation
    185/60 R15 ...           car, slash notation with a space before R

Rules are tried in a fixed order and the first match wins. Anchored rules
come first so that truck sizes are not read as car sizes and unrelated
numbers (load ratings, part numbers) are not picked up by the loose rules.
"""

import re
from dataclasses import dataclass
from typing import Any, Iterable, Optional

from tirehub.models.inputs import TireCategory
from tirehub.models.outputs import TireSpecification


@dataclass(frozen=True)
class ExtractionRule:
    """A named size pattern and the tire category it implies."""
    name: str
    pattern: re.Pattern
    category: TireCategory


# Digit classes are spelled [0-9] so only ASCII digits count; \s still
# matches any whitespace.
EXTRACTION_RULES: tuple[ExtractionRule, ...] = (
    # 155 70 13 <...>
    ExtractionRule(
        "car_spaced",
        re.compile(r'^(?P<width>[0-9]{3})\s+(?P<aspect>[0-9]{2})\s+(?P<rim>[0-9]{2})\s'),
        TireCategory.CAR,
    ),
    # 175 65 R14 <...>
    ExtractionRule(
        "car_spaced_r",
        re.compile(r'^(?P<width>[0-9]{3})\s+(?P<aspect>[0-9]{2})\s+R(?P<rim>[0-9]{2})\s'),
        TireCategory.CAR,
    ),
    # 1100 R22 <...>
    ExtractionRule(
        "truck_r",
        re.compile(r'^(?P<width>[0-9]{3,4})\s+R(?P<rim>[0-9]{2})\s'),
        TireCategory.TRUCK,
    ),
    # 205/55R16, 195/65-15
    ExtractionRule(
        "slash_dash_or_r",
        re.compile(r'(?P<width>[0-9]{3})/(?P<aspect>[0-9]{2})[-R](?P<rim>[0-9]{2})'),
        TireCategory.CAR,
    ),
    # 185/60 R15
    ExtractionRule(
        "slash_space_r",
        re.compile(r'(?P<width>[0-9]{3})/(?P<aspect>[0-9]{2})\s+R(?P<rim>[0-9]{2})'),
        TireCategory.CAR,
    ),
    # 185/60 15, 185/60R 15, 185/6015
    ExtractionRule(
        "slash_flexible",
        re.compile(r'(?P<width>[0-9]{3})/(?P<aspect>[0-9]{2})\s*R?\s*(?P<rim>[0-9]{2})'),
        TireCategory.CAR,
    ),
)


def _clean_name(product_name: Any) -> str:
    if product_name is None:
        return ""
    return str(product_name).strip()


def _int_group(match: re.Match, group: str) -> Optional[int]:
    value = match.groupdict().get(group)
    return int(value, 10) if value is not None else None


def extract_with_rule(product_name: Any) -> tuple[TireSpecification, Optional[str]]:
    """
    Extract a tire specification and report which rule produced it.

    Args:
        product_name: Free-text product name (None is treated as "")

    Returns:
        Tuple of (specification, rule name or None if nothing matched)
    """
    name = _clean_name(product_name)

    for rule in EXTRACTION_RULES:
        match = rule.pattern.search(name)
        if not match:
            continue
        spec = TireSpecification(
            width=_int_group(match, "width"),
            aspect_ratio=_int_group(match, "aspect"),
            rim_diameter=_int_group(match, "rim"),
            category=rule.category,
            original_text=name,
        )
        return spec, rule.name

    return TireSpecification.unparseable(name), None


def extract(product_name: Any) -> TireSpecification:
    """
    Extract a tire specification from a product name.

    Never raises for string input; a name that matches no rule yields a
    specification with width=None.
    """
    spec, _ = extract_with_rule(product_name)
    return spec


def extract_many(product_names: Iterable[Any]) -> list[TireSpecification]:
    """Extract specifications for several product names."""
    return [extract(name) for name in product_names]
