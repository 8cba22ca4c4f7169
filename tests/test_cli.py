from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from market_kpi.cli import main


@pytest.fixture
def dataset_path(tmp_path: Path, dataset_dict: dict[str, Any], monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.chdir(tmp_path)
    path = tmp_path / "market.json"
    path.write_text(json.dumps(dataset_dict), encoding="utf-8")
    return path


def test_kpi_command_prints_cards(dataset_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    main(["kpi", str(dataset_path), "--geography", "India", "--segment-type", "By Product"])
    out = capsys.readouterr().out

    assert "Market Size for India | By Product" in out
    assert "CAGR (2024-2032): 14.72%" in out
    assert "(+200.0% increase)" in out


def test_kpi_command_without_data(dataset_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    main(["kpi", str(dataset_path), "--geography", "Atlantis"])
    out = capsys.readouterr().out

    assert "No data for this combination." in out
    assert "CAGR" not in out


def test_records_command_prints_table(dataset_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    main(["records", str(dataset_path), "--geography", "Brazil"])
    out = capsys.readouterr().out

    assert "Brazil" in out
    assert "Tablets" not in out


def test_kpi_command_with_unreadable_dataset_exits(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    with pytest.raises(SystemExit) as exc:
        main(["kpi", str(tmp_path / "missing.json")])
    assert exc.value.code == 1


def test_export_command_failure_exits(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    import requests

    class _Failed:
        status_code = 502
        ok = False

        def json(self) -> Any:
            return {"error": "upstream down"}

    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(requests, "post", lambda url, **kw: _Failed())
    value = tmp_path / "value.json"
    value.write_text("{}", encoding="utf-8")

    with pytest.raises(SystemExit) as exc:
        main(["export", "--value-file", str(value), "--project-name", "demo"])
    assert exc.value.code == 1
