"""Fixtures compartidas."""

from typing import Any, Dict, List, Optional

import pytest

from env_monitor_services.monitoring.engine import GlobalEscalationEngine
from env_monitor_services.narrative.builder import NarrativeBuilder

# 2023-11-14 22:13:20 UTC (2023-11-15 07:13:20 en Asia/Tokyo)
NOW_MS = 1_700_000_000_000
MINUTE_MS = 60 * 1000


def make_rows(
    temps: List[float],
    end_ms: int = NOW_MS,
    step_ms: int = MINUTE_MS,
    humidity: Optional[float] = 50.0,
    pressure: Optional[float] = 1013.0,
    light: Optional[float] = 300.0,
) -> List[Dict[str, Any]]:
    """Filas cronológicas terminando en end_ms, una por temperatura."""
    start = end_ms - step_ms * (len(temps) - 1)
    return [
        {
            "timestamp": start + i * step_ms,
            "Temperature": t,
            "Humidity": humidity,
            "Pressure": pressure,
            "Light": light,
        }
        for i, t in enumerate(temps)
    ]


@pytest.fixture
def now_ms() -> int:
    return NOW_MS


@pytest.fixture
def engine() -> GlobalEscalationEngine:
    """Motor nuevo por test (store propio), idioma por defecto en."""
    return GlobalEscalationEngine(locale_provider=lambda: "en_US.UTF-8")


@pytest.fixture
def narrative() -> NarrativeBuilder:
    return NarrativeBuilder(locale_provider=lambda: "en_US.UTF-8")
