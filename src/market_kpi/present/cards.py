"""KPI card text built from a `KpiResult`.

`build_cards(None)` returns an empty list: when no data resolves the KPI
section shows nothing at all, not zeros and not an error.
"""

from __future__ import annotations

from dataclasses import dataclass

from market_kpi.models import KpiResult
from market_kpi.present.numbers import (
    currency_symbol,
    format_grouped,
    format_indian_number,
    format_percent,
)


@dataclass(frozen=True)
class KpiCard:
    """One rendered KPI tile.

    Attributes:
        title: Upper caption, e.g. "Market Size 2024".
        value: Main formatted figure.
        caption: Optional secondary line under the figure.
    """
    title: str
    value: str
    caption: str | None = None


def headline(kpi: KpiResult) -> str:
    """Descriptive header, e.g. ``Market Size for India | By Product``."""
    return f"{kpi.data_type_label} for {kpi.geography_label} | {kpi.segment_type_label}"


def format_amount(kpi: KpiResult, amount: float) -> str:
    """Format a display amount according to the KPI's data type and currency.

    Args:
        kpi: Result providing data type, currency and unit.
        amount: A `display_*` quantity of the result.

    Returns:
        ``₹ 12,34,567.0`` for INR values, ``$ 1,234.5 Million`` for other
        currencies, ``1,234.5 Units`` for volumes.
    """
    if kpi.data_type == "value" and kpi.is_inr:
        return f"{currency_symbol(kpi.currency)} {format_indian_number(amount)}"
    if kpi.data_type == "value":
        return f"{currency_symbol(kpi.currency)} {format_grouped(amount)} {kpi.unit}".rstrip()
    return f"{format_grouped(amount)} {kpi.unit}".rstrip()


def growth_caption(growth_percent: float) -> str:
    if growth_percent < 0:
        return f"{growth_percent:.1f}% decrease"
    return f"+{growth_percent:.1f}% increase"


def build_cards(kpi: KpiResult | None) -> list[KpiCard]:
    """Return the four KPI cards, or an empty list when there is no result."""
    if kpi is None:
        return []

    period = f"{kpi.start_year}-{kpi.end_year}"
    return [
        KpiCard(
            title=f"{kpi.data_type_label} {kpi.start_year}",
            value=format_amount(kpi, kpi.display_start_value),
        ),
        KpiCard(
            title=f"{kpi.data_type_label} {kpi.end_year}",
            value=format_amount(kpi, kpi.display_end_value),
        ),
        KpiCard(
            title=f"CAGR ({period})",
            value=format_percent(kpi.cagr_percent),
        ),
        KpiCard(
            title=f"Absolute Growth ({period})",
            value=format_amount(kpi, kpi.display_absolute_growth),
            caption=growth_caption(kpi.growth_percent),
        ),
    ]
