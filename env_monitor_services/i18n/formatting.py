"""Formato de horas y deltas para los mensajes.

Las horas se muestran en la zona horaria de visualización
(por defecto Asia/Tokyo), nunca en la del servidor.
"""

from __future__ import annotations

from datetime import datetime, timezone, tzinfo
from functools import lru_cache
from typing import Union
from zoneinfo import ZoneInfo

from ..monitoring.models import Signal, WindowDelta
from ..monitoring.numeric_precision import format_signed
from ..monitoring.thresholds import SIGNAL_DELTA_THRESHOLDS
from .messages import catalog

DEFAULT_DISPLAY_TZ = "Asia/Tokyo"

TzLike = Union[str, tzinfo, None]


@lru_cache(maxsize=16)
def _zone(name: str) -> tzinfo:
    return ZoneInfo(name)


def resolve_tz(tz: TzLike) -> tzinfo:
    if tz is None:
        return _zone(DEFAULT_DISPLAY_TZ)
    if isinstance(tz, str):
        return _zone(tz)
    return tz


def _local(ms: int, tz: TzLike) -> datetime:
    return datetime.fromtimestamp(ms / 1000, tz=timezone.utc).astimezone(resolve_tz(tz))


def fmt_hm(ms: int, tz: TzLike = None) -> str:
    return _local(ms, tz).strftime("%H:%M")


def fmt_ymdhm(ms: int, tz: TzLike = None) -> str:
    return _local(ms, tz).strftime("%Y/%m/%d %H:%M")


def format_signal_delta(signal: Signal, delta: float) -> str:
    """Delta con signo y unidad: "+4.0°C", "-12 lux"."""
    th = SIGNAL_DELTA_THRESHOLDS[signal]
    return f"{format_signed(delta, th.decimals)}{th.unit}"


def format_window(window: WindowDelta, lang: str, tz: TzLike = None) -> str:
    return catalog(lang)["WINDOW"](fmt_hm(window.from_ms, tz), fmt_hm(window.to_ms, tz))
