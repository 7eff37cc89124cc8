"""Pytest fixtures shared across gateway panel tests."""
from __future__ import annotations

from datetime import datetime
from typing import Callable, Iterator

import pytest

from backend.gateway_panel.history import HistoryLog


@pytest.fixture(autouse=True)
def panel_env_sandbox(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "GATEWAY_PANEL_API_BASE_URL",
        "GATEWAY_PANEL_INSTANCE",
        "GATEWAY_PANEL_HTTP_TIMEOUT",
        "GATEWAY_PANEL_HISTORY_LIMIT",
        "GATEWAY_PANEL_CORS_ORIGINS",
    ):
        monkeypatch.delenv(name, raising=False)


def _ticking_clock(start: datetime) -> Callable[[], datetime]:
    ticks: Iterator[int] = iter(range(10_000))

    def _clock() -> datetime:
        return start.replace(second=next(ticks) % 60, microsecond=123456)

    return _clock


@pytest.fixture()
def history() -> HistoryLog:
    return HistoryLog(clock=_ticking_clock(datetime(2024, 5, 1, 14, 3, 0)))
