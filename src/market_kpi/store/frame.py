"""pandas views over record lists.

Used by the CLI `records` command and the dashboard page to show which
records a selection summed and how their totals evolve per year.
"""

from __future__ import annotations

import pandas as pd

from market_kpi.models import Record
from market_kpi.values import to_number

RECORD_COLUMNS = [
    "geography",
    "segment",
    "segment_type",
    "is_aggregated",
    "aggregation_level",
]


def records_to_frame(records: list[Record]) -> pd.DataFrame:
    """Return a long-format DataFrame, one row per (record, year).

    Args:
        records: Records to flatten.

    Returns:
        DataFrame with columns `geography`, `segment`, `segment_type`,
        `is_aggregated`, `aggregation_level`, `year`, `value`. Malformed
        series entries appear as NaN.
    """
    rows: list[dict[str, object]] = []
    for r in records:
        for year, raw in sorted(r.time_series.items()):
            number = to_number(raw)
            rows.append(
                {
                    "geography": r.geography,
                    "segment": r.segment,
                    "segment_type": r.segment_type,
                    "is_aggregated": r.is_aggregated,
                    "aggregation_level": r.aggregation_level,
                    "year": year,
                    "value": float("nan") if number is None else number,
                }
            )
    return pd.DataFrame(rows, columns=RECORD_COLUMNS + ["year", "value"])


def records_table(records: list[Record]) -> pd.DataFrame:
    """Return a wide DataFrame: one row per record, one column per year."""
    years = sorted({year for r in records for year in r.time_series})
    rows: list[dict[str, object]] = []
    for r in records:
        row: dict[str, object] = {c: getattr(r, c) for c in RECORD_COLUMNS}
        for year in years:
            number = to_number(r.time_series.get(year))
            row[str(year)] = float("nan") if number is None else number
        rows.append(row)
    return pd.DataFrame(rows, columns=RECORD_COLUMNS + [str(y) for y in years])


def yearly_totals(records: list[Record]) -> pd.DataFrame:
    """Return per-year totals of `records` with columns `year` and `total`."""
    long = records_to_frame(records)
    if long.empty:
        return pd.DataFrame({"year": pd.Series(dtype="int64"), "total": pd.Series(dtype="float64")})
    return (
        long.groupby("year", as_index=False)["value"]
        .sum()
        .rename(columns={"value": "total"})
        .sort_values("year")
        .reset_index(drop=True)
    )
