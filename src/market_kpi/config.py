"""Configuration helpers and Settings container.

This module provides a small `Settings` dataclass and `get_settings` which
reads the KPI defaults and the packaging service endpoint from the
environment (a project-level `.env` is loaded first).
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import os

from dotenv import load_dotenv

# Explicitly load .env from project root
PROJECT_ROOT = Path(__file__).resolve().parents[2]
load_dotenv(PROJECT_ROOT / ".env")

DEFAULT_PACKAGE_SERVICE_URL = "http://localhost:3000/api/generate-dashboard"


@dataclass(frozen=True)
class Settings:
    """Container for KPI configuration read from the environment.

    Attributes:
        default_currency: Currency used when neither an override nor the
            dataset metadata names one.
        default_start_year: Start of the KPI period when the dataset carries
            no year metadata at all.
        default_end_year: End of the KPI period under the same condition.
        package_service_url: Endpoint of the dashboard packaging service.
        request_timeout: Timeout in seconds for the packaging request.
        dataset_path: Optional dataset file opened by the dashboard page.
    """
    default_currency: str
    default_start_year: int
    default_end_year: int
    package_service_url: str
    request_timeout: float
    dataset_path: Path | None


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise RuntimeError(f"{name} must be an integer year, got {raw!r}") from None


def get_settings() -> Settings:
    """Read environment variables and return a frozen `Settings` object.

    Raises:
        RuntimeError: if a default year is not an integer or the request
            timeout is not a positive number.
    """
    default_currency = os.getenv("KPI_DEFAULT_CURRENCY", "").strip().upper() or "USD"
    default_start_year = _int_env("KPI_DEFAULT_START_YEAR", 2024)
    default_end_year = _int_env("KPI_DEFAULT_END_YEAR", 2032)
    package_service_url = (
        os.getenv("KPI_PACKAGE_SERVICE_URL", "").strip() or DEFAULT_PACKAGE_SERVICE_URL
    )

    raw_timeout = os.getenv("KPI_REQUEST_TIMEOUT", "120").strip()
    try:
        request_timeout = float(raw_timeout)
    except ValueError:
        request_timeout = -1.0
    if request_timeout <= 0:
        raise RuntimeError(
            f"KPI_REQUEST_TIMEOUT must be a positive number of seconds, got {raw_timeout!r}"
        )

    raw_dataset = os.getenv("KPI_DATASET_PATH", "").strip()
    dataset_path = Path(raw_dataset) if raw_dataset else None

    return Settings(
        default_currency=default_currency,
        default_start_year=default_start_year,
        default_end_year=default_end_year,
        package_service_url=package_service_url,
        request_timeout=request_timeout,
        dataset_path=dataset_path,
    )
