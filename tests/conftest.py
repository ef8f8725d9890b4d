from __future__ import annotations

from zoneinfo import ZoneInfo

import pytest

from dupwatch.config.settings import Settings, get_settings
from tests.helpers.clocks import JERUSALEM, FakeClock, local


@pytest.fixture()
def tz() -> ZoneInfo:
    return JERUSALEM


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock(local(2024, 1, 10, 8, 0))


@pytest.fixture()
def settings() -> Settings:
    get_settings.cache_clear()
    return Settings(
        timezone="Asia/Jerusalem",
        history_backend="memory",
        check_interval_seconds=0.05,
    )
