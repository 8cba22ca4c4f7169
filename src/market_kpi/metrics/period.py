"""Resolution of the KPI period from dataset metadata."""

from __future__ import annotations

from dataclasses import dataclass

from market_kpi.models import Metadata


@dataclass(frozen=True)
class Period:
    start_year: int
    end_year: int

    @property
    def span(self) -> int:
        return self.end_year - self.start_year

    @property
    def label(self) -> str:
        return f"{self.start_year}-{self.end_year}"


def resolve_period(metadata: Metadata, default_start: int, default_end: int) -> Period:
    """Pick the start and end years of the KPI period.

    Declared `start_year`/`forecast_year` win; otherwise the min/max of
    `years`; the defaults apply only when the metadata has no years at all.

    Args:
        metadata: Dataset metadata.
        default_start: Start year used when no year metadata exists.
        default_end: End year used when no year metadata exists.

    Returns:
        The resolved `Period`.
    """
    years = sorted(metadata.years)
    start = metadata.start_year or (years[0] if years else None) or default_start
    end = metadata.forecast_year or (years[-1] if years else None) or default_end
    return Period(start_year=start, end_year=end)
