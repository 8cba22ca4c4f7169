from __future__ import annotations

import json
import math
from pathlib import Path
from typing import Any

import pytest

from market_kpi.models import Record
from market_kpi.store.frame import records_table, records_to_frame, yearly_totals
from market_kpi.store.load import DatasetLoadError, load_dataset, parse_dataset


def _write(tmp_path: Path, payload: Any) -> Path:
    path = tmp_path / "dataset.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_load_dataset_reads_json(tmp_path: Path, dataset_dict: dict[str, Any]) -> None:
    ds = load_dataset(_write(tmp_path, dataset_dict))
    assert ds.metadata.forecast_year == 2032
    assert ds.matrix("value")[0].time_series[2024] == 40


def test_load_dataset_missing_file(tmp_path: Path) -> None:
    with pytest.raises(DatasetLoadError):
        load_dataset(tmp_path / "missing.json")


def test_load_dataset_invalid_json(tmp_path: Path) -> None:
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(DatasetLoadError):
        load_dataset(path)


def test_parse_dataset_rejects_record_without_geography() -> None:
    bad = {"data": {"value": {"geography_segment_matrix": [{"segment": "A", "segment_type": "T"}]}}}
    with pytest.raises(DatasetLoadError) as exc:
        parse_dataset(bad)
    assert isinstance(exc.value, ValueError)


def _records() -> list[Record]:
    return [
        Record(
            geography="India",
            segment="Tablets",
            segment_type="By Product",
            is_aggregated=False,
            time_series={2024: 40, 2032: "oops"},
        ),
        Record(
            geography="India",
            segment="Capsules",
            segment_type="By Product",
            is_aggregated=False,
            time_series={2024: 60, 2028: 80},
        ),
    ]


def test_records_to_frame_is_long_format() -> None:
    df = records_to_frame(_records())
    assert list(df.columns) == [
        "geography",
        "segment",
        "segment_type",
        "is_aggregated",
        "aggregation_level",
        "year",
        "value",
    ]
    assert len(df) == 4
    oops = df[(df["segment"] == "Tablets") & (df["year"] == 2032)]["value"].iloc[0]
    assert math.isnan(oops)


def test_records_table_has_one_row_per_record() -> None:
    table = records_table(_records())
    assert len(table) == 2
    assert list(table.columns)[-3:] == ["2024", "2028", "2032"]
    assert table.loc[0, "2024"] == 40
    assert math.isnan(table.loc[0, "2028"])


def test_yearly_totals() -> None:
    totals = yearly_totals(_records())
    assert totals["year"].tolist() == [2024, 2028, 2032]
    assert totals["total"].tolist() == [100.0, 80.0, 0.0]


def test_frames_for_empty_selection() -> None:
    assert records_to_frame([]).empty
    assert records_table([]).empty
    assert yearly_totals([]).empty
