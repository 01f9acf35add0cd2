"""Tests de la narrativa del dispositivo seleccionado.

Ejecutar:
    pytest tests/test_narrative_builder.py -v
"""

import pytest

from env_monitor_services.monitoring.models import Reading, Signal
from env_monitor_services.narrative.builder import slice_live
from env_monitor_services.narrative.hints import hint_for, humidity_hint, light_hint, temperature_hint

from conftest import MINUTE_MS, NOW_MS, make_rows

SECOND_MS = 1000


# =============================================================================
# DATOS INSUFICIENTES
# =============================================================================

class TestInsufficientData:
    """Sin datos o con pocas filas el badge es WARN."""

    def test_no_rows(self, narrative):
        result = narrative.update([], now_ms=NOW_MS, device_name="Room 1")

        assert result.badge_level == "WARN"
        assert result.message == "Room 1: No data in this view yet."
        assert result.title == "AI Live Feed"

    def test_not_enough_rows(self, narrative):
        result = narrative.update(make_rows([20.0] * 4), now_ms=NOW_MS, device_name="Room 1")
        assert result.message == "Room 1: Not enough data yet to analyze."

    def test_default_device_prefix(self, narrative):
        assert narrative.update([], now_ms=NOW_MS).message.startswith("Device: ")

    def test_japanese(self, narrative):
        result = narrative.update([], now_ms=NOW_MS, device_name="教室", lang_mode="jp")
        assert result.lang == "jp"
        assert result.message == "教室：この表示範囲にデータがまだありません。"
        assert result.title == "AIライブフィード"


# =============================================================================
# LIVE
# =============================================================================

class TestLiveFeed:
    """Rotación de mensajes en modo live."""

    def test_rotation_over_signals(self, narrative):
        rows = make_rows([20.0 + 0.1 * i for i in range(10)])

        messages = [narrative.update(rows, now_ms=NOW_MS, device_name="Lab").message for _ in range(5)]

        assert messages[0].startswith("Lab: Humidity increased by about 0.0%")
        assert messages[1].startswith("Lab: Pressure rose by about 0.0 hPa")
        assert messages[2].startswith("Lab: Light increased by about 0 lux")
        assert messages[3] == "Lab: Environment looks stable."
        assert messages[4].startswith("Lab: Temperature increased by about 0.9°C from 07:04 to 07:13.")

    def test_temperature_hint_included(self, narrative):
        rows = make_rows([20.0 + 0.5 * i for i in range(10)])
        for _ in range(4):
            narrative.update(rows, now_ms=NOW_MS)

        message = narrative.update(rows, now_ms=NOW_MS).message
        assert "about 4.5°C" in message
        assert message.endswith("A room heater may be on.")

    def test_z_score_outlier_sets_warn_badge(self, narrative):
        rows = make_rows([20.0, 20.1] * 7 + [21.0], step_ms=30 * SECOND_MS)
        result = narrative.update(rows, now_ms=NOW_MS)
        assert result.badge_level == "WARN"

    def test_flat_series_is_ok(self, narrative):
        result = narrative.update(make_rows([21.0] * 10), now_ms=NOW_MS)
        assert result.badge_level == "OK"

    def test_unknown_view_mode_falls_back_to_live(self, narrative):
        result = narrative.update(make_rows([21.0] * 10), view_mode="week", now_ms=NOW_MS)
        assert result.title == "AI Live Feed"

    def test_slice_live_keeps_recent_rows(self):
        old = [Reading(timestamp_ms=NOW_MS - 60 * MINUTE_MS)]
        recent = [Reading(timestamp_ms=NOW_MS - i * MINUTE_MS) for i in range(8)]
        assert slice_live(old + recent, NOW_MS) == recent

    def test_slice_live_falls_back_to_all_rows(self):
        readings = [Reading(timestamp_ms=NOW_MS - i * 5 * MINUTE_MS) for i in range(10)]
        assert slice_live(readings, NOW_MS) == readings


# =============================================================================
# DÍA / RANGO
# =============================================================================

class TestPeriodSummary:
    """Resúmenes de día y rango."""

    def test_day_peak(self, narrative):
        temps = [20.0, 21.0, 25.0, 22.0, 21.0, 20.5]
        result = narrative.update(make_rows(temps), view_mode="day", now_ms=NOW_MS, device_name="Lab")

        assert result.title == "AI Day Summary"
        assert result.message == "Lab: Highest temperature was 25.0°C at 2023/11/15 07:10."

    def test_day_lowest_humidity(self, narrative):
        rows = make_rows([20.0] * 6)
        rows[3]["Humidity"] = 35.0
        narrative.update(rows, view_mode="day", now_ms=NOW_MS)

        message = narrative.update(rows, view_mode="day", now_ms=NOW_MS, device_name="Lab").message
        assert message == "Lab: Lowest humidity was 35.0% at 2023/11/15 07:11."

    def test_range_summary_uses_requested_window(self, narrative):
        rows = make_rows([20.0, 20.5, 21.0, 21.5, 22.0, 23.0])
        for _ in range(4):
            narrative.update(rows, view_mode="range", now_ms=NOW_MS)

        result = narrative.update(
            rows,
            view_mode="range",
            now_ms=NOW_MS,
            device_name="Lab",
            range_start_ms=NOW_MS - 60 * MINUTE_MS,
            range_end_ms=NOW_MS + 60 * MINUTE_MS,
        )
        assert result.title == "AI Range Summary"
        assert result.message == (
            "Lab: From 2023/11/15 06:13 to 2023/11/15 07:13, temperature changed ~3.0°C."
        )

    def test_range_summary_without_changes(self, narrative):
        rows = make_rows([20.0] * 6)
        for _ in range(4):
            narrative.update(rows, view_mode="day", now_ms=NOW_MS)

        message = narrative.update(rows, view_mode="day", now_ms=NOW_MS).message
        assert "no major changes were observed" in message

    def test_volatility_forces_warn(self, narrative):
        rows = make_rows([20.0, 22.0] * 6)
        for _ in range(3):
            narrative.update(rows, view_mode="day", now_ms=NOW_MS)

        result = narrative.update(rows, view_mode="day", now_ms=NOW_MS, device_name="Lab")
        assert result.badge_level == "WARN"
        assert result.message == "Lab: Temperature is fluctuating, the environment is changing."


# =============================================================================
# HIPÓTESIS
# =============================================================================

class TestHints:
    """Heurísticas de tasa de cambio."""

    def test_fast_temperature_rise_points_to_heat_source(self):
        assert temperature_hint("en", 5.0, 2) == "Sensor may be exposed to heat (or a heat source nearby)."

    @pytest.mark.parametrize(
        "delta,expected",
        [(1.0, "A room heater may be on."), (-1.0, "Air conditioner or ventilation may be affecting it."), (0.5, "")],
    )
    def test_slow_temperature_change(self, delta, expected):
        assert temperature_hint("en", delta, 10) == expected

    def test_humidity_needs_rate(self):
        assert humidity_hint("en", 6.0, 2) != ""
        assert humidity_hint("en", 6.0, 10) == ""

    def test_light_ignores_duration(self):
        assert light_hint("en", 250) == "Lights or sunlight likely increased."
        assert light_hint("en", -250) == "Lights turned off or sunlight reduced."

    def test_hint_for_dispatch(self):
        assert hint_for("jp", Signal.PRESSURE, 3.0, 2) == "屋外の天候変化の影響かもしれません。"
