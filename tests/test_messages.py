"""Tests del catálogo EN/JP y del formato de horas.

Ejecutar:
    pytest tests/test_messages.py -v
"""

import pytest

from env_monitor_services.i18n.formatting import fmt_hm, fmt_ymdhm, format_signal_delta, format_window
from env_monitor_services.i18n.messages import (
    TEXT,
    message,
    resolve_language,
    signal_label,
    spike_text,
)
from env_monitor_services.monitoring.models import Signal, WindowDelta

from conftest import MINUTE_MS, NOW_MS


class TestLanguageResolution:
    """auto | en | jp."""

    @pytest.mark.parametrize("mode", ["en", "jp"])
    def test_explicit_mode(self, mode):
        assert resolve_language(mode, lambda: "ja_JP") == mode

    def test_auto_japanese_locale(self):
        assert resolve_language("auto", lambda: "ja_JP.UTF-8") == "jp"
        assert resolve_language("auto", lambda: "JA") == "jp"

    def test_auto_other_locale(self):
        assert resolve_language("auto", lambda: "es_ES.UTF-8") == "en"
        assert resolve_language("auto", lambda: None) == "en"

    def test_unknown_mode_behaves_as_auto(self):
        assert resolve_language("fr", lambda: "ja_JP") == "jp"

    def test_failing_provider_falls_back_to_en(self):
        def broken():
            raise RuntimeError("no locale")

        assert resolve_language("auto", broken) == "en"

    def test_default_provider_reads_env(self, monkeypatch):
        monkeypatch.setenv("LC_ALL", "ja_JP.UTF-8")
        assert resolve_language("auto") == "jp"


class TestCatalog:
    """Ambos idiomas exponen las mismas claves."""

    def test_same_keys(self):
        assert set(TEXT["en"]) == set(TEXT["jp"])

    def test_offline_messages(self):
        assert message("en", "OFFLINE_WARN", "Room", 50) == "Room: No data for 50s, the device may be offline."
        assert message("jp", "OFFLINE_ALERT", "教室", 6, 0) == "教室：6分0秒データなし（送信失敗／オフラインの可能性が高い）。"

    def test_persist_message_mentions_minutes(self):
        text = message("en", "MODAL_PERSIST", "Room", "temperature", 31)
        assert "persisted abnormal for over 31 minutes" in text

    def test_fixed_text_entries(self):
        assert message("en", "NO_DATA") == "No data in this view yet."
        assert message("jp", "OK") == "正常"

    def test_signal_labels(self):
        assert signal_label("en", Signal.PRESSURE) == "pressure"
        assert signal_label("en", Signal.PRESSURE, title=True) == "Pressure"
        assert signal_label("jp", Signal.LIGHT) == "照度"

    def test_spike_text(self):
        text = spike_text("en", Signal.LIGHT, "Lab", "+650 lux", "(07:10–07:13)")
        assert text == "Lab: Sudden light change (+650 lux) (07:10–07:13)."

    def test_unknown_lang_uses_english(self):
        assert message("de", "OK") == "OK"


class TestFormatting:
    """Horas en Asia/Tokyo y deltas con unidad."""

    def test_display_tz_default_tokyo(self):
        assert fmt_hm(NOW_MS) == "07:13"
        assert fmt_ymdhm(NOW_MS) == "2023/11/15 07:13"

    def test_display_tz_override(self):
        assert fmt_hm(NOW_MS, "UTC") == "22:13"

    def test_signal_delta(self):
        assert format_signal_delta(Signal.TEMPERATURE, 4.0) == "+4.0°C"
        assert format_signal_delta(Signal.HUMIDITY, -9.26) == "-9.3%"
        assert format_signal_delta(Signal.PRESSURE, 2.0) == "+2.0 hPa"
        assert format_signal_delta(Signal.LIGHT, 650.4) == "+650 lux"

    def test_window_text(self):
        window = WindowDelta(delta=1.0, from_ms=NOW_MS - 3 * MINUTE_MS, to_ms=NOW_MS, first=0.0, last=1.0)
        assert format_window(window, "en") == "(07:10–07:13)"
        assert format_window(window, "jp") == "07:10〜07:13"
