"""
Numeric coercion helpers shared by the catalog and query models.

Spreadsheet exports and the external search service hand us prices,
stock counts and rim diameters as ints, floats or loosely formatted
strings ("1,250.00", "R15"). These helpers turn them into numbers.
"""

import math
import re
from typing import Any, Optional


RIM_PREFIX_PATTERN = re.compile(r"[rR]")
RIM_DIGITS_PATTERN = re.compile(r"[0-9]+")


def parse_number(value: Any) -> Optional[float]:
    """Parse a value to float, returning None if invalid."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        if math.isnan(value) or math.isinf(value):
            return None
        return float(value)
    s = str(value).strip().replace(',', '').lstrip('$')
    if not s:
        return None
    try:
        number = float(s)
    except ValueError:
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def round_price(price: Any) -> int:
    """
    Round a price to a whole currency unit.

    Halves round up. Anything that is not a number becomes 0.
    """
    number = parse_number(price)
    if number is None:
        return 0
    return int(math.floor(number + 0.5))


def normalize_rim_diameter(value: Any) -> Optional[int]:
    """
    Normalise a rim diameter to an integer number of inches.

    Accepts 15, 15.0, "15", "R15" and "r15". Returns None for
    missing or non-numeric values.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    text = RIM_PREFIX_PATTERN.sub('', str(value)).strip()
    if not RIM_DIGITS_PATTERN.fullmatch(text):
        return None
    return int(text)
