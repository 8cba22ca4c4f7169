from __future__ import annotations

from typing import Any

from market_kpi.filters import resolve_segment_type, with_segment_type
from market_kpi.models import Dataset, FilterState


def test_explicit_segment_type_wins(dataset_dict: dict[str, Any]) -> None:
    ds = Dataset.model_validate(dataset_dict)
    assert resolve_segment_type(FilterState(segment_type="By Region"), ds) == "By Region"


def test_segment_type_inferred_from_dimensions(dataset_dict: dict[str, Any]) -> None:
    ds = Dataset.model_validate(dataset_dict)
    flt = FilterState(geographies={"India"})

    resolved = with_segment_type(flt, ds)

    assert resolved.segment_type == "By Product"
    assert resolved.geographies == frozenset({"India"})
    assert flt.segment_type is None


def test_missing_segment_type_resolves_to_none() -> None:
    ds = Dataset()
    assert resolve_segment_type(FilterState(), ds) is None
    assert with_segment_type(FilterState(), ds).segment_type is None
