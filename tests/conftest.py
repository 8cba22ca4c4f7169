from __future__ import annotations

import logging
from typing import Any, Iterator

import pytest

from market_kpi.config import Settings


@pytest.fixture(autouse=True)
def _restore_root_logging() -> Iterator[None]:
    # configure_logging replaces root handlers; keep tests independent
    root = logging.getLogger()
    level = root.level
    yield
    for h in list(root.handlers):
        if isinstance(h, logging.FileHandler) or type(h) is logging.StreamHandler:
            root.removeHandler(h)
            h.close()
    root.setLevel(level)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        default_currency="USD",
        default_start_year=2024,
        default_end_year=2032,
        package_service_url="http://packager.test/api/generate-dashboard",
        request_timeout=5.0,
        dataset_path=None,
    )


@pytest.fixture
def dataset_dict() -> dict[str, Any]:
    """A small dataset in the JSON shape the dashboard receives."""
    return {
        "dimensions": {
            "geographies": {"all_geographies": ["India", "Brazil", "China"]},
            "segments": {
                "By Product": {"items": ["Tablets", "Capsules"]},
                "By Region": ["North", "South"],
            },
        },
        "data": {
            "value": {
                "geography_segment_matrix": [
                    {
                        "geography": "India",
                        "segment": "Tablets",
                        "segment_type": "By Product",
                        "is_aggregated": False,
                        "aggregation_level": 2,
                        "time_series": {"2024": 40, "2028": 70, "2032": 100},
                    },
                    {
                        "geography": "India",
                        "segment": "Capsules",
                        "segment_type": "By Product",
                        "is_aggregated": False,
                        "aggregation_level": 2,
                        "time_series": {"2024": 60, "2028": 110, "2032": 200},
                    },
                    {
                        "geography": "India",
                        "segment": "All",
                        "segment_type": "By Product",
                        "is_aggregated": True,
                        "aggregation_level": 1,
                        "time_series": {"2024": 100, "2028": 180, "2032": 300},
                    },
                    {
                        "geography": "Brazil",
                        "segment": "All",
                        "segment_type": "By Product",
                        "is_aggregated": True,
                        "aggregation_level": 1,
                        "time_series": {"2024": 50, "2028": 65, "2032": 80},
                    },
                    {
                        "geography": "China",
                        "segment": "North",
                        "segment_type": "By Region",
                        "is_aggregated": False,
                        "aggregation_level": 2,
                        "time_series": {"2024": 10, "2032": 20},
                    },
                ]
            },
            "volume": {
                "geography_segment_matrix": [
                    {
                        "geography": "India",
                        "segment": "Tablets",
                        "segment_type": "By Product",
                        "is_aggregated": False,
                        "aggregation_level": 2,
                        "time_series": {"2024": 1000, "2032": 1500},
                    }
                ]
            },
        },
        "metadata": {
            "years": [2024, 2025, 2026, 2027, 2028, 2029, 2030, 2031, 2032],
            "start_year": 2024,
            "forecast_year": 2032,
            "currency": "USD",
            "value_unit": "Million",
            "volume_unit": "Tons",
        },
    }
