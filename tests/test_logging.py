from __future__ import annotations

import logging
from pathlib import Path

from market_kpi.logging_config import configure_logging


def test_configure_logging_adds_stream_handler() -> None:
    # Ensure configuring logging doesn't raise and attaches a StreamHandler
    configure_logging(None)
    root = logging.getLogger()
    assert any(isinstance(h, logging.StreamHandler) for h in root.handlers)


def test_configure_logging_writes_to_file(tmp_path: Path) -> None:
    log_path = tmp_path / "logs" / "market_kpi.log"
    configure_logging(log_path, level=logging.DEBUG)

    logging.getLogger("market_kpi.test").debug("selected %d record(s)", 3)
    for h in logging.getLogger().handlers:
        h.flush()

    text = log_path.read_text(encoding="utf-8")
    assert "| DEBUG | market_kpi.test | selected 3 record(s)" in text
