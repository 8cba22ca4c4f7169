from __future__ import annotations

from typing import Any

import pytest

from market_kpi.values import positive_years, to_number


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        (12, 12.0),
        (3.5, 3.5),
        ("1,250.5", 1250.5),
        (" 7 ", 7.0),
        ("", None),
        ("n/a", None),
        (None, None),
        (True, None),
        (float("nan"), None),
        ("inf", None),
        ([1], None),
    ],
)
def test_to_number(raw: Any, expected: float | None) -> None:
    assert to_number(raw) == expected


def test_positive_years_skips_zero_negative_and_malformed() -> None:
    series = {2030: 4, 2024: 0, 2025: -1, 2026: "x", 2027: "2"}
    assert positive_years(series) == [2027, 2030]
