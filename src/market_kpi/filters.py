"""Filter-state helpers.

The filter itself is a plain `FilterState` value supplied by the caller; the
helpers here only fill in what can be inferred from the dataset and never
modify the caller's object.
"""

from __future__ import annotations

import logging

from market_kpi.models import Dataset, FilterState

log = logging.getLogger(__name__)


def resolve_segment_type(flt: FilterState, dataset: Dataset) -> str | None:
    """Return the segment type a computation should use.

    Args:
        flt: Current filter state.
        dataset: Dataset whose dimensions declare the segment types.

    Returns:
        The filter's segment type, else the first declared segment type, else
        None when the dataset declares none.
    """
    if flt.segment_type:
        return flt.segment_type
    for segment_type in dataset.dimensions.segments:
        return segment_type
    return None


def with_segment_type(flt: FilterState, dataset: Dataset) -> FilterState:
    """Return a copy of `flt` carrying the resolved segment type."""
    segment_type = resolve_segment_type(flt, dataset)
    if segment_type == flt.segment_type:
        return flt
    log.debug("Segment type not set; using %r from dataset dimensions", segment_type)
    return flt.model_copy(update={"segment_type": segment_type})
