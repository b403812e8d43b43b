"""Display helpers shared by the terminal table and the API detail view.

A zero change or zero volume shows as N/A, the same as a missing one.
"""
from typing import Optional


def format_price(price: Optional[float]) -> str:
    if not price:
        return "N/A"
    if price < 1:
        return f"{price:.6f}"
    # grouped, up to three decimals, trailing zeros dropped
    return "$" + f"{price:,.3f}".rstrip("0").rstrip(".")


def format_change(change: Optional[float]) -> str:
    if not change:
        return "N/A"
    sign = "+" if change > 0 else ""
    return f"{sign}{change:.2f}%"


def format_volume(volume: Optional[float]) -> str:
    """Volume in billions of USD, one decimal."""
    if not volume:
        return "N/A"
    return f"${volume / 1_000_000_000:.1f}B"
