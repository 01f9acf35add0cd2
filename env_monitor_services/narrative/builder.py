"""Constructor de narrativa del dispositivo seleccionado.

Produce UNA frase (con números y ventana de tiempo exacta) y un
badge OK/WARN. Es un consumidor hermano de las utilidades de series;
no toca el EventStore ni genera candidatos globales.

Rotación de mensajes: cada llamada avanza un contador que elige
uno de cinco modos, con fallback a volatilidad / estable.
"""

from __future__ import annotations

import time
from typing import Any, Dict, List, Optional, Sequence

from ..i18n.formatting import TzLike, fmt_hm, fmt_ymdhm
from ..i18n.messages import (
    TREND_KEYS,
    LocaleProvider,
    catalog,
    message,
    range_change_text,
    resolve_language,
    signal_label,
)
from ..monitoring.models import NarrativeResult, Reading, SeriesPoint, Signal, ViewMode
from ..monitoring.time_series import (
    build_series,
    delta_over_window,
    last_n,
    parse_rows,
    std,
    z_anomaly,
)
from .hints import hint_for

LIVE_WINDOW_MS = 10 * 60 * 1000
LIVE_MIN_ROWS = 8
MIN_ROWS = 5
TRAILING_POINTS = 30
MESSAGE_MODES = 5

# Desviación estándar a partir de la cual la señal se considera volátil
VOLATILITY_STD = {
    Signal.TEMPERATURE: 0.8,
    Signal.HUMIDITY: 4.0,
    Signal.PRESSURE: 0.9,
    Signal.LIGHT: 220.0,
}
VOLATILITY_MIN_POINTS = 10

# Cambio mínimo para mencionarse en el resumen de día/rango
RANGE_FOCUS_MIN_DELTA = {
    Signal.TEMPERATURE: 1.0,
    Signal.HUMIDITY: 5.0,
    Signal.PRESSURE: 1.0,
    Signal.LIGHT: 200.0,
}

# Orden de señales en modo live (modo 0..3)
LIVE_MODE_SIGNALS = (Signal.TEMPERATURE, Signal.HUMIDITY, Signal.PRESSURE, Signal.LIGHT)

TITLE_KEYS = {
    ViewMode.LIVE: "TITLE_LIVE",
    ViewMode.DAY: "TITLE_DAY",
    ViewMode.RANGE: "TITLE_RANGE",
}


def _view_mode(value: Any) -> ViewMode:
    try:
        return ViewMode(value)
    except ValueError:
        return ViewMode.LIVE


def slice_live(readings: Sequence[Reading], now_ms: int) -> List[Reading]:
    """Últimos 10 minutos si hay suficientes filas; si no, todas."""
    from_ms = now_ms - LIVE_WINDOW_MS
    sliced = [
        r for r in readings
        if r.timestamp_ms is not None and from_ms <= r.timestamp_ms <= now_ms
    ]
    return sliced if len(sliced) >= LIVE_MIN_ROWS else list(readings)


class NarrativeBuilder:
    """Feed de IA del dispositivo seleccionado."""

    def __init__(
        self,
        locale_provider: Optional[LocaleProvider] = None,
        display_tz: TzLike = None,
    ) -> None:
        self._locale_provider = locale_provider
        self._tz = display_tz
        self._cycle = 0

    def update(
        self,
        rows: Sequence[Any],
        view_mode: str = "live",
        now_ms: Optional[int] = None,
        device_name: str = "",
        range_start_ms: Optional[int] = None,
        range_end_ms: Optional[int] = None,
        lang_mode: str = "auto",
    ) -> NarrativeResult:
        now_ms = now_ms if now_ms is not None else int(time.time() * 1000)
        mode = _view_mode(view_mode)
        lang = resolve_language(lang_mode, self._locale_provider)

        readings = parse_rows(rows)
        if mode == ViewMode.LIVE:
            readings = slice_live(readings, now_ms)

        badge, text = self._build_message(
            readings, mode, now_ms, lang, device_name, range_start_ms, range_end_ms
        )
        return NarrativeResult(
            title=message(lang, TITLE_KEYS[mode]),
            badge_level=badge,
            message=text,
            lang=lang,
        )

    def _build_message(
        self,
        readings: List[Reading],
        mode: ViewMode,
        now_ms: int,
        lang: str,
        device_name: str,
        range_start_ms: Optional[int],
        range_end_ms: Optional[int],
    ):
        prefix = message(lang, "PREFIX", device_name)

        if not readings:
            return "WARN", prefix + message(lang, "NO_DATA")
        if len(readings) < MIN_ROWS:
            return "WARN", prefix + message(lang, "NOT_ENOUGH")

        series: Dict[Signal, List[SeriesPoint]] = {
            signal: build_series(readings, signal) for signal in Signal
        }

        badge = "OK"
        if any(z_anomaly(last_n(points, TRAILING_POINTS)) for points in series.values()):
            badge = "WARN"

        self._cycle += 1
        rotation = self._cycle % MESSAGE_MODES

        stamps = [r.timestamp_ms for r in readings if r.timestamp_ms is not None]
        first_ms = stamps[0] if stamps else None
        last_ms = stamps[-1] if stamps else None

        if mode == ViewMode.LIVE:
            sentence = self._live_sentence(series, rotation, now_ms - LIVE_WINDOW_MS, now_ms, lang)
            if sentence is not None:
                return badge, prefix + sentence
            volatility_points = {s: last_n(p, TRAILING_POINTS) for s, p in series.items()}
        else:
            win_from = first_ms
            win_to = last_ms
            if mode == ViewMode.RANGE:
                if range_start_ms is not None:
                    win_from = range_start_ms
                if range_end_ms is not None:
                    win_to = min(range_end_ms, now_ms)
            sentence = self._period_sentence(series, rotation, win_from, win_to, lang)
            if sentence is not None:
                return badge, prefix + sentence
            volatility_points = series

        volatile = [
            signal_label(lang, signal, title=True)
            for signal in Signal
            if len(series[signal]) >= VOLATILITY_MIN_POINTS
            and std([p.value for p in volatility_points[signal]]) >= VOLATILITY_STD[signal]
        ]
        if volatile:
            joined = catalog(lang)["VOL_SEP"].join(volatile)
            return "WARN", prefix + message(lang, "VOLATILE", joined)

        return badge, prefix + message(lang, "STABLE")

    def _live_sentence(
        self,
        series: Dict[Signal, List[SeriesPoint]],
        rotation: int,
        win_from: int,
        win_to: int,
        lang: str,
    ) -> Optional[str]:
        """Tendencia de una señal en los últimos 10 minutos (modos 0..3)."""
        if rotation >= len(LIVE_MODE_SIGNALS):
            return None
        signal = LIVE_MODE_SIGNALS[rotation]
        window = delta_over_window(series[signal], win_from, win_to)
        if window is None:
            return None
        hint = hint_for(lang, signal, window.delta, window.minutes)
        up_key, down_key = TREND_KEYS[signal]
        key = up_key if window.delta >= 0 else down_key
        return message(
            lang, key, window.delta, fmt_hm(window.from_ms, self._tz), fmt_hm(window.to_ms, self._tz), hint
        )

    def _period_sentence(
        self,
        series: Dict[Signal, List[SeriesPoint]],
        rotation: int,
        win_from: Optional[int],
        win_to: Optional[int],
        lang: str,
    ) -> Optional[str]:
        """Resumen de día / rango según el modo de rotación."""
        temps = series[Signal.TEMPERATURE]
        hums = series[Signal.HUMIDITY]

        if rotation == 0:
            picks = []
            for signal in Signal:
                points = series[signal]
                if not points:
                    continue
                delta = points[-1].value - points[0].value
                if abs(delta) >= RANGE_FOCUS_MIN_DELTA[signal]:
                    picks.append(range_change_text(lang, signal, delta))
            focus = catalog(lang)["LIST_SEP"].join(picks[:2]) if picks else message(lang, "RANGE_NO_CHANGE")
            return message(
                lang,
                "RANGE_SUMMARY",
                fmt_ymdhm(win_from, self._tz) if win_from is not None else "--",
                fmt_ymdhm(win_to, self._tz) if win_to is not None else "--",
                focus,
            )

        if rotation == 1 and temps:
            peak = max(temps, key=lambda p: p.value)
            return message(
                lang,
                "PEAK",
                signal_label(lang, Signal.TEMPERATURE),
                f"{peak.value:.1f}°C",
                fmt_ymdhm(peak.time_ms, self._tz),
            )

        if rotation == 2 and hums:
            low = min(hums, key=lambda p: p.value)
            return message(
                lang,
                "LOW",
                signal_label(lang, Signal.HUMIDITY),
                f"{low.value:.1f}%",
                fmt_ymdhm(low.time_ms, self._tz),
            )

        if rotation == 3 and len(temps) >= 2:
            first, last = temps[0], temps[-1]
            delta = last.value - first.value
            minutes = max(1, round((last.time_ms - first.time_ms) / 60000))
            hint = hint_for(lang, Signal.TEMPERATURE, delta, minutes)
            key = "TEMP_UP" if delta >= 0 else "TEMP_DOWN"
            return message(
                lang, key, delta, fmt_ymdhm(first.time_ms, self._tz), fmt_ymdhm(last.time_ms, self._tz), hint
            )

        return None
