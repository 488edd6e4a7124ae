"""Pytest configuration for test isolation.

Settings are resolved from ``SL_*`` environment variables (and a ``.env`` in
the working directory when the CLI runs). A developer's shell or ``.env`` must
not leak into assertions, so every test starts from a clean slate. The CLI
reinstalls the package log handler on each run; it is put back afterwards.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from zoneinfo import ZoneInfo

import pytest

_SETTINGS_VARS = (
    "SL_TIMEZONE",
    "SL_PROFILE",
    "SL_PROFILES_PATH",
    "SL_MAX_FILE_BYTES",
    "STATEMENT_LEDGER_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def _clean_settings_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _SETTINGS_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def _restore_package_logger() -> Iterator[None]:
    logger = logging.getLogger("statement_ledger")
    handlers, level, propagate = list(logger.handlers), logger.level, logger.propagate
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)
    logger.propagate = propagate


@pytest.fixture
def zone() -> ZoneInfo:
    return ZoneInfo("Asia/Bishkek")
