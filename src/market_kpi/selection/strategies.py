"""Record filters and aggregation rules used by the selector.

Each function is pure: it takes a list of records and returns a new list
(or new synthetic records) without touching its input. Relative order of
the input is preserved so repeated selections are identical.
"""

from __future__ import annotations

import logging
from collections.abc import Collection

from market_kpi.models import Record
from market_kpi.values import to_number

log = logging.getLogger(__name__)

# Level of an aggregated record that represents a whole geography.
GEOGRAPHY_TOTAL_LEVEL = 1


def match_segment_type(records: list[Record], segment_type: str | None) -> list[Record]:
    """Keep records of exactly `segment_type`. No segment type matches nothing."""
    if not segment_type:
        return []
    return [r for r in records if r.segment_type == segment_type]


def match_geographies(records: list[Record], geographies: Collection[str]) -> list[Record]:
    """Keep records in `geographies`; an empty collection keeps everything."""
    if not geographies:
        return list(records)
    return [r for r in records if r.geography in geographies]


def leaf_records(records: list[Record]) -> list[Record]:
    return [r for r in records if r.is_leaf]


def aggregated_records(records: list[Record]) -> list[Record]:
    return [r for r in records if r.is_aggregated is True]


def at_level(records: list[Record], level: int) -> list[Record]:
    """Select records at exactly `level` without summing any pair twice.

    Aggregated records at the level represent their `geography::segment`
    pairs. Leaf records at the same level are kept only for pairs no
    aggregated record covers, so they fill gaps rather than overlap.

    Args:
        records: Candidate records (already filtered by segment type and
            geography).
        level: Requested aggregation level.

    Returns:
        The chosen records in input order.
    """
    candidates = [r for r in records if r.aggregation_level == level]

    covered: set[str] = set()
    chosen: set[int] = set()
    for i, r in enumerate(candidates):
        if r.is_aggregated is True and r.key not in covered:
            covered.add(r.key)
            chosen.add(i)
    aggregated_count = len(chosen)
    for i, r in enumerate(candidates):
        if r.is_leaf and r.key not in covered:
            covered.add(r.key)
            chosen.add(i)

    log.debug(
        "Level %d: %d aggregated record(s), %d uncovered leaf record(s)",
        level,
        aggregated_count,
        len(chosen) - aggregated_count,
    )
    return [r for i, r in enumerate(candidates) if i in chosen]


def coalesce_by_geography(records: list[Record]) -> list[Record]:
    """Collapse records into one synthetic record per geography.

    The time series of each synthetic record is the per-year sum over every
    year present in any record of that geography. Entries that are not
    numeric are skipped. Input records are copied, never modified.

    Args:
        records: Aggregated records, possibly of mixed granularity.

    Returns:
        One record per geography, in first-seen order.
    """
    grouped: dict[str, list[Record]] = {}
    for r in records:
        grouped.setdefault(r.geography, []).append(r)

    coalesced: list[Record] = []
    for group in grouped.values():
        totals: dict[int, float] = {}
        for r in group:
            for year, raw in r.time_series.items():
                number = to_number(raw)
                if number is None:
                    continue
                totals[year] = totals.get(year, 0.0) + number
        coalesced.append(group[0].model_copy(update={"time_series": dict(sorted(totals.items()))}))
    return coalesced


def best_available(records: list[Record]) -> list[Record]:
    """Pick the most granular non-overlapping record set.

    Leaf records first; otherwise aggregated geography totals (level 1);
    otherwise every aggregated record, coalesced by geography.
    """
    leaves = leaf_records(records)
    if leaves:
        return leaves

    aggregated = aggregated_records(records)
    totals = [r for r in aggregated if r.aggregation_level == GEOGRAPHY_TOTAL_LEVEL]
    if totals:
        log.debug("No leaf records; using %d level-%d aggregate(s)", len(totals), GEOGRAPHY_TOTAL_LEVEL)
        return totals

    if aggregated:
        log.debug("No leaf or level-%d records; coalescing %d aggregate(s)", GEOGRAPHY_TOTAL_LEVEL, len(aggregated))
        return coalesce_by_geography(aggregated)
    return []


def resolve_aggregation(records: list[Record], level: int | None) -> list[Record]:
    """Apply the aggregation choice: an explicit level, or the best available."""
    if level is not None:
        return at_level(records, level)
    return best_available(records)
