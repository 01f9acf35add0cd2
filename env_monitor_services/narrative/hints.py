"""Hipótesis de causa para la narrativa (heurísticas de tasa de cambio).

Cada función retorna el texto del catálogo o "" si no aplica.
"""

from __future__ import annotations

from ..i18n.messages import message
from ..monitoring.models import Signal


def _rate(delta: float, minutes: float) -> float:
    return abs(delta) / max(minutes, 0.1)


def temperature_hint(lang: str, delta: float, minutes: float) -> str:
    if _rate(delta, minutes) >= 2.0:
        return message(lang, "HINT_SENSOR_HEAT")
    if delta > 0.8:
        return message(lang, "HINT_HEATER")
    if delta < -0.8:
        return message(lang, "HINT_AC")
    return ""


def humidity_hint(lang: str, delta: float, minutes: float) -> str:
    rate = _rate(delta, minutes)
    if delta > 4 and rate > 1.5:
        return message(lang, "HINT_HUMIDIFIER")
    if delta < -4 and rate > 1.5:
        return message(lang, "HINT_DEHUM")
    return ""


def pressure_hint(lang: str, delta: float, minutes: float) -> str:
    if _rate(delta, minutes) >= 0.6:
        return message(lang, "HINT_WEATHER")
    return ""


def light_hint(lang: str, delta: float, minutes: float = 0.0) -> str:
    # La luz no depende de la duración
    if delta > 200:
        return message(lang, "HINT_LIGHTS_ON")
    if delta < -200:
        return message(lang, "HINT_LIGHTS_OFF")
    return ""


HINTS = {
    Signal.TEMPERATURE: temperature_hint,
    Signal.HUMIDITY: humidity_hint,
    Signal.PRESSURE: pressure_hint,
    Signal.LIGHT: light_hint,
}


def hint_for(lang: str, signal: Signal, delta: float, minutes: float) -> str:
    return HINTS[signal](lang, delta, minutes)
