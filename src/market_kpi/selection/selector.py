"""Resolve the record set a KPI computation should sum.

The selector walks an ordered list of tiers. Each tier relaxes the filter a
little further; the first tier that yields records wins:

1. ``requested``: segment type, geographies and aggregation level as given
2. ``all_geographies``: the geography filter is dropped
3. ``segment_type_only``: geographies and aggregation level are dropped

Segment type is never relaxed, since summing across segment types double
counts. Geographies are only relaxed when at least one requested geography
appears somewhere in the matrix. When every tier comes back empty the
selection is empty, which callers treat as "no data for this combination"
rather than an error.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from market_kpi.models import FilterState, Record
from market_kpi.selection.strategies import (
    match_geographies,
    match_segment_type,
    resolve_aggregation,
)

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Selection:
    """Outcome of a selection.

    Attributes:
        records: Records to sum; empty when nothing resolved.
        tier: Name of the tier that produced the records, or None.
        geography_dropped: True when a requested geography filter had to be
            dropped to find data, so labels should read "All Geographies".
    """
    records: list[Record] = field(default_factory=list)
    tier: str | None = None
    geography_dropped: bool = False

    @property
    def empty(self) -> bool:
        return not self.records


@dataclass(frozen=True)
class Tier:
    name: str
    relax: Callable[[FilterState], FilterState]


def _as_requested(flt: FilterState) -> FilterState:
    return flt


def _drop_geographies(flt: FilterState) -> FilterState:
    return flt.model_copy(update={"geographies": frozenset()})


def _segment_type_only(flt: FilterState) -> FilterState:
    return flt.model_copy(update={"geographies": frozenset(), "aggregation_level": None})


TIERS: tuple[Tier, ...] = (
    Tier("requested", _as_requested),
    Tier("all_geographies", _drop_geographies),
    Tier("segment_type_only", _segment_type_only),
)


def _apply(records: list[Record], flt: FilterState) -> list[Record]:
    scoped = match_segment_type(records, flt.segment_type)
    scoped = match_geographies(scoped, flt.geographies)
    return resolve_aggregation(scoped, flt.aggregation_level)


def resolve(records: list[Record], flt: FilterState) -> Selection:
    """Resolve the non-overlapping record set for `flt`.

    Args:
        records: The geography/segment matrix for the requested data type.
        flt: Filter state with the segment type already resolved.

    Returns:
        A `Selection`; empty when no tier produced records.
    """
    if not flt.segment_type:
        log.info("No segment type available; nothing to select")
        return Selection()

    # Geographies the matrix has never heard of are not relaxed to "all".
    known = {r.geography for r in records}
    unknown_scope = bool(flt.geographies) and not (flt.geographies & known)
    if unknown_scope:
        log.info("Requested geographies %s are not in the dataset", sorted(flt.geographies))

    tried: list[FilterState] = []
    for tier in TIERS:
        relaxed = tier.relax(flt)
        if relaxed in tried:
            continue
        if unknown_scope and not relaxed.geographies:
            continue
        tried.append(relaxed)

        selected = _apply(records, relaxed)
        if not selected:
            log.debug("Tier %s produced no records", tier.name)
            continue

        dropped = bool(flt.geographies) and not relaxed.geographies
        if dropped:
            log.warning(
                "No data for geographies %s in %r; falling back to all geographies",
                sorted(flt.geographies),
                flt.segment_type,
            )
        log.info("Selected %d record(s) via tier %s", len(selected), tier.name)
        return Selection(records=selected, tier=tier.name, geography_dropped=dropped)

    log.info(
        "No records for segment type %r (geographies=%s, level=%s)",
        flt.segment_type,
        sorted(flt.geographies) or "all",
        flt.aggregation_level,
    )
    return Selection()


def select(records: list[Record], flt: FilterState) -> list[Record]:
    """Return only the records of `resolve(records, flt)`."""
    return resolve(records, flt).records
