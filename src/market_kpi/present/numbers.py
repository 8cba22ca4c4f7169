"""Locale-style number formatting for KPI display."""

from __future__ import annotations

CURRENCY_SYMBOLS = {
    "INR": "₹",
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
    "CNY": "¥",
}


def format_grouped(value: float, decimals: int = 1) -> str:
    """Format with thousands grouping, e.g. ``1,234,567.0``."""
    return f"{value:,.{decimals}f}"


def format_indian_number(value: float, decimals: int = 1) -> str:
    """Format with Indian lakh/crore digit grouping.

    The last three integer digits form one group and every two digits
    before them form another: ``123456789`` -> ``12,34,56,789.0``.

    Args:
        value: Number to format.
        decimals: Fractional digits to keep.

    Returns:
        The formatted string, with a leading "-" for negative values.
    """
    text = f"{abs(value):.{decimals}f}"
    sign = "-" if value < 0 and float(text) != 0 else ""
    whole, _, frac = text.partition(".")

    if len(whole) > 3:
        head, tail = whole[:-3], whole[-3:]
        groups: list[str] = []
        while len(head) > 2:
            groups.insert(0, head[-2:])
            head = head[:-2]
        if head:
            groups.insert(0, head)
        whole = ",".join(groups + [tail])

    return f"{sign}{whole}.{frac}" if frac else f"{sign}{whole}"


def currency_symbol(code: str) -> str:
    """Symbol for an ISO currency code; unknown codes are returned as-is."""
    return CURRENCY_SYMBOLS.get(code.upper(), code)


def format_percent(value: float, decimals: int = 2) -> str:
    return f"{value:.{decimals}f}%"
