"""Pytest configuration for test isolation.

Settings are read from ``CASHFLOW_*`` environment variables (and a local
``.env`` when the CLI runs), so a developer's shell or working tree could
change horizon or week-start behavior under the tests. Every test starts with
those variables cleared and runs from its own temporary directory. Logging
configured by CLI tests is torn down afterwards so ``caplog`` keeps working.
"""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from cashflow_forecast.logging_setup import reset_logging

DATA_DIR = Path(__file__).resolve().parent / "data"


@pytest.fixture(autouse=True)
def _isolate_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    for key in list(os.environ):
        if key.startswith("CASHFLOW_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    yield
    reset_logging()


@pytest.fixture
def bank_export_path() -> Path:
    return DATA_DIR / "bank_export.csv"
