"""Load market datasets from JSON files.

The dashboard receives datasets as JSON documents with `dimensions`, `data`
and `metadata` sections. This module decodes and validates them into the
pydantic `Dataset` model; everything downstream works on that model.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from market_kpi.models import Dataset

log = logging.getLogger(__name__)


class DatasetLoadError(ValueError):
    """Raised when a dataset file cannot be read or does not match the schema."""


def parse_dataset(obj: Any) -> Dataset:
    """Validate an already-decoded JSON object as a `Dataset`.

    Raises:
        DatasetLoadError: if the object does not match the dataset schema.
    """
    try:
        return Dataset.model_validate(obj)
    except ValidationError as e:
        raise DatasetLoadError(f"Invalid dataset: {e.error_count()} validation error(s)\n{e}") from e


def load_dataset(path: Path) -> Dataset:
    """Read and validate a dataset JSON file.

    Args:
        path: Path to the dataset JSON document.

    Returns:
        The validated `Dataset`.

    Raises:
        DatasetLoadError: if the file cannot be read, is not valid JSON, or
            does not match the dataset schema.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise DatasetLoadError(f"Cannot read dataset {path}: {e}") from e

    try:
        dataset = Dataset.model_validate_json(text)
    except ValidationError as e:
        raise DatasetLoadError(f"Invalid dataset {path}: {e.error_count()} validation error(s)\n{e}") from e

    log.info(
        "Loaded dataset %s: %d value record(s), %d volume record(s)",
        path,
        len(dataset.matrix("value")),
        len(dataset.matrix("volume")),
    )
    return dataset
