"""Pydantic models for the market dataset, the filter state and KPI results.

These models define the shape of an already-loaded market-research dataset
(records tagged by geography, segment and aggregation level, each carrying a
year -> value time series), the user filter applied to it, and the KPI
result handed to the presentation layer.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

DataType = Literal["value", "volume"]


class Record(BaseModel):
    """One row of a geography/segment matrix.

    Attributes:
        geography: Geography name (country, region or "Global").
        segment: Segment name within `segment_type`.
        segment_type: Dimension family the segment belongs to (e.g. "By Product").
        is_aggregated: True for rollups, False for leaves, None when the source
            did not carry a real boolean. None is never treated as a leaf.
        aggregation_level: Depth of the rollup, when known.
        time_series: Year -> value. Values are kept as delivered and may be
            malformed; they are coerced when metrics are computed.
    """
    model_config = ConfigDict(extra="ignore", frozen=True)

    geography: str
    segment: str
    segment_type: str
    is_aggregated: bool | None = None
    aggregation_level: int | None = None
    time_series: dict[int, Any] = Field(default_factory=dict)

    @field_validator("is_aggregated", mode="before")
    @classmethod
    def _only_real_booleans(cls, v: Any) -> bool | None:
        # "false", 0 or a missing flag must not turn a record into a leaf
        return v if isinstance(v, bool) else None

    @field_validator("aggregation_level", mode="before")
    @classmethod
    def _level_or_none(cls, v: Any) -> int | None:
        if v is None or isinstance(v, bool):
            return None
        if isinstance(v, int):
            return v
        if isinstance(v, float) and v.is_integer():
            return int(v)
        if isinstance(v, str) and v.strip().lstrip("-").isdigit():
            return int(v.strip())
        return None

    @field_validator("time_series", mode="before")
    @classmethod
    def _year_keys(cls, v: Any) -> dict[int, Any]:
        if v is None:
            return {}
        if not isinstance(v, Mapping):
            raise ValueError("time_series must be a mapping of year to value")
        series: dict[int, Any] = {}
        for key, value in v.items():
            try:
                year = int(str(key).strip())
            except ValueError:
                continue
            series[year] = value
        return series

    @property
    def key(self) -> str:
        """`geography::segment` identity used to detect double counting."""
        return f"{self.geography}::{self.segment}"

    @property
    def is_leaf(self) -> bool:
        return self.is_aggregated is False


class Dimensions(BaseModel):
    """Known geographies and the segments of each segment type."""
    model_config = ConfigDict(extra="ignore", frozen=True)

    geographies: list[str] = Field(default_factory=list)
    segments: dict[str, list[str]] = Field(default_factory=dict)

    @field_validator("geographies", mode="before")
    @classmethod
    def _flatten_geographies(cls, v: Any) -> Any:
        if v is None:
            return []
        if isinstance(v, Mapping):
            return v.get("all_geographies") or []
        return v

    @field_validator("segments", mode="before")
    @classmethod
    def _segment_names(cls, v: Any) -> Any:
        if v is None:
            return {}
        if not isinstance(v, Mapping):
            return v
        names: dict[str, list[str]] = {}
        for segment_type, entry in v.items():
            if isinstance(entry, Mapping):
                entry = entry.get("items") or []
            names[segment_type] = [str(x) for x in entry or []]
        return names


class GeographySegmentMatrix(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    geography_segment_matrix: list[Record] = Field(default_factory=list)


class DataSections(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    value: GeographySegmentMatrix = Field(default_factory=GeographySegmentMatrix)
    volume: GeographySegmentMatrix = Field(default_factory=GeographySegmentMatrix)


class Metadata(BaseModel):
    """Dataset-level year range, currency and unit declarations."""
    model_config = ConfigDict(extra="ignore", frozen=True)

    years: list[int] = Field(default_factory=list)
    start_year: int | None = None
    forecast_year: int | None = None
    currency: str | None = None
    value_unit: str | None = None
    volume_unit: str | None = None


class Dataset(BaseModel):
    """A loaded market-research dataset. Read-only to the KPI core."""
    model_config = ConfigDict(extra="ignore", frozen=True)

    dimensions: Dimensions = Field(default_factory=Dimensions)
    data: DataSections = Field(default_factory=DataSections)
    metadata: Metadata = Field(default_factory=Metadata)

    def matrix(self, data_type: DataType) -> list[Record]:
        """Return the geography/segment records for `value` or `volume`."""
        if data_type == "volume":
            return self.data.volume.geography_segment_matrix
        return self.data.value.geography_segment_matrix


class FilterState(BaseModel):
    """User-selected constraints for one KPI computation.

    An empty `geographies` set means all geographies; a missing
    `aggregation_level` lets the selector pick the best available level.
    """
    model_config = ConfigDict(extra="forbid", frozen=True)

    geographies: frozenset[str] = frozenset()
    segment_type: str | None = None
    data_type: DataType = "value"
    aggregation_level: int | None = Field(default=None, ge=0)


class KpiResult(BaseModel):
    """Headline KPIs for one filter state.

    Raw totals (`period_*_value`, `absolute_growth`) are never divided;
    the `display_*` fields carry the unit conversion used for rendering.
    """
    model_config = ConfigDict(extra="forbid", frozen=True)

    period_start_value: float
    period_end_value: float
    cagr_percent: float
    absolute_growth: float
    growth_percent: float
    start_year: int
    end_year: int
    currency: str
    unit: str
    is_inr: bool
    display_divisor: float = Field(..., gt=0)
    display_start_value: float
    display_end_value: float
    display_absolute_growth: float
    data_type: DataType
    data_type_label: str
    geography_label: str
    segment_type_label: str
    record_count: int = Field(..., ge=0)
    geography_dropped: bool = False
