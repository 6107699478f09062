"""
Helpers to turn tire search results into a compact, human-readable
console summary.
"""

from __future__ import annotations

from typing import Any

from tirehub.models.outputs import ParseResult, TireSearchResult


def _fmt_value(value: Any) -> str:
    """Format an optional field, showing 'n/a' when missing."""
    if value is None:
        return "n/a"
    if hasattr(value, "value"):
        return str(value.value)
    return str(value)


def _fmt_stock(stock: float) -> str:
    if float(stock).is_integer():
        return str(int(stock))
    return f"{stock:.2f}"


def print_parse_result(result: ParseResult) -> None:
    """Render a parsed product name."""
    spec = result.parsed_specs
    print(f"Input:        {result.input}")
    if not result.is_parseable:
        print("Parsed:       not a recognised tire size")
        return
    print(f"Size:         {spec.label} ({_fmt_value(spec.category)})")
    print(f"Width:        {_fmt_value(spec.width)} mm")
    print(f"Aspect ratio: {_fmt_value(spec.aspect_ratio)}")
    print(f"Rim:          {_fmt_value(spec.rim_diameter)} in")
    print(f"Rule:         {_fmt_value(result.rule)}")


def print_search_result(result: TireSearchResult) -> None:
    """Render a tire search as a ranked table."""
    mode = f", {result.mode.value} mode" if result.mode is not None else ""
    print(f"Tire search {result.search_spec} ({result.search_type.value}{mode})")
    shown = len(result.results)
    print(f"Found {result.total_found} (showing {shown})")

    if not result.results:
        print("  No matching tires found")
        return

    id_width = max(len(m.product_id) for m in result.results)
    for i, m in enumerate(result.results, start=1):
        print(
            f"  {i:>2}. {m.product_id:<{id_width}}  "
            f"${m.price:>7,}  stock {_fmt_stock(m.stock):>4}  {m.product_name}"
        )
