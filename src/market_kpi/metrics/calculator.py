"""KPI calculator.

Sums the selected records at the start and end of the KPI period and derives
CAGR, absolute growth and growth percent, together with the currency, unit
and labels the presentation layer needs.

Expectations:
- Input: records already resolved by `market_kpi.selection` (no overlaps)
- Output: a frozen `KpiResult`, or None when there is nothing to sum
"""
from __future__ import annotations

import logging
import math

from market_kpi.config import Settings, get_settings
from market_kpi.filters import with_segment_type
from market_kpi.metrics.period import Period, resolve_period
from market_kpi.models import Dataset, DataType, FilterState, KpiResult, Metadata, Record
from market_kpi.selection.selector import resolve
from market_kpi.values import positive_years, to_number, value_at

log = logging.getLogger(__name__)

INR = "INR"
MILLION = 1_000_000.0
DEFAULT_VALUE_UNIT = "Million"
DEFAULT_VOLUME_UNIT = "Units"
ALL_GEOGRAPHIES = "All Geographies"
ALL_SEGMENTS = "All Segments"


# =========================================================
# TOTALS
# =========================================================

def boundary_values(record: Record, period: Period) -> tuple[float, float]:
    """Return a record's (start, end) values for the KPI period.

    A value that is missing, malformed or exactly zero is replaced by the
    earliest (for the start) or latest (for the end) strictly positive
    value in the record's series, when there is one.

    Args:
        record: A selected record.
        period: The KPI period.

    Returns:
        Tuple `(start_value, end_value)`; 0.0 where nothing usable exists.
    """
    series = record.time_series
    start = value_at(series, period.start_year) or 0.0
    end = value_at(series, period.end_year) or 0.0

    if start == 0 or end == 0:
        years = positive_years(series)
        if years:
            if start == 0:
                start = to_number(series[years[0]]) or 0.0
            if end == 0:
                end = to_number(series[years[-1]]) or 0.0
    return start, end


def period_totals(records: list[Record], period: Period) -> tuple[float, float]:
    """Sum `boundary_values` over all records."""
    start_total = 0.0
    end_total = 0.0
    for record in records:
        start, end = boundary_values(record, period)
        start_total += start
        end_total += end
    return start_total, end_total


# =========================================================
# GROWTH
# =========================================================

def cagr_percent(start_total: float, end_total: float, years: int) -> float:
    """Compound annual growth rate in percent.

    Returns 0.0 whenever the rate is undefined: a non-positive start total,
    a non-positive period, a negative end/start ratio or a non-finite result.
    """
    if start_total <= 0 or years <= 0:
        return 0.0
    ratio = end_total / start_total
    if ratio < 0:
        return 0.0
    rate = (ratio ** (1.0 / years) - 1.0) * 100.0
    return rate if math.isfinite(rate) else 0.0


def growth_percent(start_total: float, absolute_growth: float) -> float:
    if start_total <= 0:
        return 0.0
    return absolute_growth / start_total * 100.0


# =========================================================
# UNITS & LABELS
# =========================================================

def resolve_currency(override: str | None, metadata: Metadata, default: str) -> str:
    """Explicit override, else dataset currency, else `default` (upper-cased)."""
    chosen = (override or "").strip() or (metadata.currency or "").strip() or default
    return chosen.upper()


def resolve_unit(metadata: Metadata, data_type: DataType) -> str:
    if data_type == "volume":
        return metadata.volume_unit or DEFAULT_VOLUME_UNIT
    return metadata.value_unit or DEFAULT_VALUE_UNIT


def display_divisor(currency: str, unit: str) -> float:
    """Divisor applied to totals before display.

    INR values are shown in their native unit (Indian digit grouping is
    applied by the formatter); other currencies with a "million" unit are
    divided by one million; anything else is shown raw.
    """
    if currency == INR:
        return 1.0
    if "million" in unit.lower():
        return MILLION
    return 1.0


def data_type_label(data_type: DataType) -> str:
    return "Market Volume" if data_type == "volume" else "Market Size"


def geography_label(geographies: frozenset[str], dropped: bool = False) -> str:
    """Label for the geography scope of a KPI.

    Examples:
        ``All Geographies``, ``India``, ``2 Geographies (Brazil, India)``,
        ``3 Geographies (Brazil, China...)``.
    """
    if dropped or not geographies:
        return ALL_GEOGRAPHIES
    names = sorted(geographies)
    if len(names) == 1:
        return names[0]
    suffix = "..." if len(names) > 2 else ""
    return f"{len(names)} Geographies ({', '.join(names[:2])}{suffix})"


# =========================================================
# COMPUTE
# =========================================================

def compute(
    records: list[Record],
    metadata: Metadata,
    flt: FilterState,
    *,
    currency: str | None = None,
    geography_dropped: bool = False,
    settings: Settings | None = None,
) -> KpiResult | None:
    """Compute the headline KPIs for a resolved record set.

    Args:
        records: Non-overlapping records from the selector.
        metadata: Dataset metadata (years, currency, units).
        flt: Filter state the records were selected for.
        currency: Optional display currency overriding the dataset's.
        geography_dropped: Whether the selector had to drop the geography
            filter; the geography label then reads "All Geographies".
        settings: Optional settings; read from the environment when omitted.

    Returns:
        A `KpiResult`, or None when `records` is empty.
    """
    if not records:
        return None

    s = settings or get_settings()
    period = resolve_period(metadata, s.default_start_year, s.default_end_year)
    start_total, end_total = period_totals(records, period)
    absolute = end_total - start_total

    log.debug(
        "Totals over %d record(s): %s=%s %s=%s",
        len(records),
        period.start_year,
        start_total,
        period.end_year,
        end_total,
    )

    chosen_currency = resolve_currency(currency, metadata, s.default_currency)
    unit = resolve_unit(metadata, flt.data_type)
    divisor = display_divisor(chosen_currency, unit)

    return KpiResult(
        period_start_value=start_total,
        period_end_value=end_total,
        cagr_percent=cagr_percent(start_total, end_total, period.span),
        absolute_growth=absolute,
        growth_percent=growth_percent(start_total, absolute),
        start_year=period.start_year,
        end_year=period.end_year,
        currency=chosen_currency,
        unit=unit,
        is_inr=chosen_currency == INR,
        display_divisor=divisor,
        display_start_value=start_total / divisor,
        display_end_value=end_total / divisor,
        display_absolute_growth=absolute / divisor,
        data_type=flt.data_type,
        data_type_label=data_type_label(flt.data_type),
        geography_label=geography_label(flt.geographies, geography_dropped),
        segment_type_label=flt.segment_type or ALL_SEGMENTS,
        record_count=len(records),
        geography_dropped=geography_dropped,
    )


def compute_kpis(
    dataset: Dataset,
    flt: FilterState,
    *,
    currency: str | None = None,
    settings: Settings | None = None,
) -> KpiResult | None:
    """Resolve the segment type, select records and compute KPIs in one call."""
    resolved = with_segment_type(flt, dataset)
    selection = resolve(dataset.matrix(resolved.data_type), resolved)
    return compute(
        selection.records,
        dataset.metadata,
        resolved,
        currency=currency,
        geography_dropped=selection.geography_dropped,
        settings=settings,
    )
