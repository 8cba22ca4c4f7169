from __future__ import annotations

from pathlib import Path

import pytest

from market_kpi.config import DEFAULT_PACKAGE_SERVICE_URL, get_settings

ENV_VARS = (
    "KPI_DEFAULT_CURRENCY",
    "KPI_DEFAULT_START_YEAR",
    "KPI_DEFAULT_END_YEAR",
    "KPI_PACKAGE_SERVICE_URL",
    "KPI_REQUEST_TIMEOUT",
    "KPI_DATASET_PATH",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults() -> None:
    s = get_settings()
    assert s.default_currency == "USD"
    assert (s.default_start_year, s.default_end_year) == (2024, 2032)
    assert s.package_service_url == DEFAULT_PACKAGE_SERVICE_URL
    assert s.request_timeout == 120.0
    assert s.dataset_path is None


def test_reads_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("KPI_DEFAULT_CURRENCY", "inr")
    monkeypatch.setenv("KPI_DEFAULT_START_YEAR", "2020")
    monkeypatch.setenv("KPI_REQUEST_TIMEOUT", "30")
    monkeypatch.setenv("KPI_DATASET_PATH", "data/market.json")

    s = get_settings()

    assert s.default_currency == "INR"
    assert s.default_start_year == 2020
    assert s.request_timeout == 30.0
    assert s.dataset_path == Path("data/market.json")


def test_rejects_non_integer_year(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("KPI_DEFAULT_END_YEAR", "soon")
    with pytest.raises(RuntimeError, match="KPI_DEFAULT_END_YEAR"):
        get_settings()


@pytest.mark.parametrize("timeout", ["0", "-5", "fast"])
def test_rejects_bad_timeout(monkeypatch: pytest.MonkeyPatch, timeout: str) -> None:
    monkeypatch.setenv("KPI_REQUEST_TIMEOUT", timeout)
    with pytest.raises(RuntimeError, match="KPI_REQUEST_TIMEOUT"):
        get_settings()
