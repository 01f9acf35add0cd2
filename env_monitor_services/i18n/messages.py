"""Catálogo de mensajes EN/JP.

Tabla pura (idioma, tipo de mensaje) -> función de formato.
Sin estado ni efectos secundarios.
"""

from __future__ import annotations

import logging
import os
from typing import Callable, Dict, Optional

from ..monitoring.models import Signal

logger = logging.getLogger(__name__)

LocaleProvider = Callable[[], Optional[str]]

SUPPORTED_LANGS = ("en", "jp")


def _with_hint_en(sentence: str, hint: str) -> str:
    return f"{sentence} {hint}" if hint else sentence


def _with_hint_jp(sentence: str, hint: str) -> str:
    return f"{sentence}{hint or ''}".strip()


TEXT: Dict[str, Dict[str, object]] = {
    "en": {
        "TITLE_LIVE": "AI Live Feed",
        "TITLE_DAY": "AI Day Summary",
        "TITLE_RANGE": "AI Range Summary",
        "OK": "OK",
        "WARN": "WARNING",
        "ALERT": "ALERT",
        "NO_DATA": "No data in this view yet.",
        "NOT_ENOUGH": "Not enough data yet to analyze.",
        # Feed del dispositivo seleccionado
        "STABLE": lambda: "Environment looks stable.",
        "VOLATILE": lambda what: f"{what} is fluctuating, the environment is changing.",
        "TEMP_UP": lambda d, frm, to, hint: _with_hint_en(
            f"Temperature increased by about {d:.1f}°C from {frm} to {to}.", hint
        ),
        "TEMP_DOWN": lambda d, frm, to, hint: _with_hint_en(
            f"Temperature decreased by about {abs(d):.1f}°C from {frm} to {to}.", hint
        ),
        "HUM_UP": lambda d, frm, to, hint: _with_hint_en(
            f"Humidity increased by about {d:.1f}% from {frm} to {to}.", hint
        ),
        "HUM_DOWN": lambda d, frm, to, hint: _with_hint_en(
            f"Humidity decreased by about {abs(d):.1f}% from {frm} to {to}.", hint
        ),
        "PRESS_UP": lambda d, frm, to, hint: _with_hint_en(
            f"Pressure rose by about {d:.1f} hPa from {frm} to {to}.", hint
        ),
        "PRESS_DOWN": lambda d, frm, to, hint: _with_hint_en(
            f"Pressure dropped by about {abs(d):.1f} hPa from {frm} to {to}.", hint
        ),
        "LIGHT_UP": lambda d, frm, to, hint: _with_hint_en(
            f"Light increased by about {d:.0f} lux from {frm} to {to}.", hint
        ),
        "LIGHT_DOWN": lambda d, frm, to, hint: _with_hint_en(
            f"Light decreased by about {abs(d):.0f} lux from {frm} to {to}.", hint
        ),
        "RANGE_SUMMARY": lambda frm, to, focus: f"From {frm} to {to}, {focus}.",
        "RANGE_NO_CHANGE": "no major changes were observed",
        "RANGE_CHANGED": {
            Signal.TEMPERATURE: lambda d: f"temperature changed ~{d:.1f}°C",
            Signal.HUMIDITY: lambda d: f"humidity changed ~{d:.1f}%",
            Signal.PRESSURE: lambda d: f"pressure changed ~{d:.1f} hPa",
            Signal.LIGHT: lambda d: f"light changed ~{d:.0f} lux",
        },
        "LIST_SEP": ", ",
        "VOL_SEP": ", ",
        "PEAK": lambda what, v, at: f"Highest {what} was {v} at {at}.",
        "LOW": lambda what, v, at: f"Lowest {what} was {v} at {at}.",
        # Hipótesis (la salida sigue siendo una sola frase)
        "HINT_HEATER": "A room heater may be on.",
        "HINT_AC": "Air conditioner or ventilation may be affecting it.",
        "HINT_SENSOR_HEAT": "Sensor may be exposed to heat (or a heat source nearby).",
        "HINT_HUMIDIFIER": "Humidifier, shower, or cooking may be adding moisture.",
        "HINT_DEHUM": "Dehumidifier or AC may be reducing moisture.",
        "HINT_WEATHER": "Outdoor weather may be changing.",
        "HINT_LIGHTS_ON": "Lights or sunlight likely increased.",
        "HINT_LIGHTS_OFF": "Lights turned off or sunlight reduced.",
        "PREFIX": lambda name: f"{name or 'Device'}: ",
        # Monitoreo global
        "TOAST_SPIKE": {
            Signal.TEMPERATURE: lambda name, d, win: f"{name}: Sudden temperature change ({d}) {win}.",
            Signal.HUMIDITY: lambda name, d, win: f"{name}: Sudden humidity change ({d}) {win}.",
            Signal.PRESSURE: lambda name, d, win: f"{name}: Sudden pressure change ({d}) {win}.",
            Signal.LIGHT: lambda name, d, win: f"{name}: Sudden light change ({d}) {win}.",
        },
        "OFFLINE_WARN": lambda name, sec: f"{name}: No data for {sec}s, the device may be offline.",
        "OFFLINE_ALERT": lambda name, m, s: (
            f"{name}: No data for {m}m {s}s, upload is likely failing or the device is offline."
        ),
        "MODAL_REPEAT": lambda name, what, d, win: (
            f"{name} has shown repeated {what} anomalies in a short period ({d} {win}). Please be aware."
        ),
        "MODAL_PERSIST": lambda name, what, mins: (
            f"{name} {what} has persisted abnormal for over {mins} minutes. "
            "This may indicate an environmental issue or sensor exposure. Please check when possible."
        ),
        "WHAT": {
            Signal.TEMPERATURE: "temperature",
            Signal.HUMIDITY: "humidity",
            Signal.PRESSURE: "pressure",
            Signal.LIGHT: "light",
        },
        "WHAT_TITLE": {
            Signal.TEMPERATURE: "Temperature",
            Signal.HUMIDITY: "Humidity",
            Signal.PRESSURE: "Pressure",
            Signal.LIGHT: "Light",
        },
        "WINDOW": lambda frm, to: f"({frm}–{to})",
    },
    "jp": {
        "TITLE_LIVE": "AIライブフィード",
        "TITLE_DAY": "AI 1日まとめ",
        "TITLE_RANGE": "AI 範囲まとめ",
        "OK": "正常",
        "WARN": "注意",
        "ALERT": "警告",
        "NO_DATA": "この表示範囲にデータがまだありません。",
        "NOT_ENOUGH": "解析に十分なデータがまだありません。",
        "STABLE": lambda: "状態は安定しています。",
        "VOLATILE": lambda what: f"{what}に変動があります。環境の変化が起きています。",
        "TEMP_UP": lambda d, frm, to, hint: _with_hint_jp(
            f"{frm}〜{to}で温度が約{d:.1f}℃上昇しました。", hint
        ),
        "TEMP_DOWN": lambda d, frm, to, hint: _with_hint_jp(
            f"{frm}〜{to}で温度が約{abs(d):.1f}℃低下しました。", hint
        ),
        "HUM_UP": lambda d, frm, to, hint: _with_hint_jp(
            f"{frm}〜{to}で湿度が約{d:.1f}%上昇しました。", hint
        ),
        "HUM_DOWN": lambda d, frm, to, hint: _with_hint_jp(
            f"{frm}〜{to}で湿度が約{abs(d):.1f}%低下しました。", hint
        ),
        "PRESS_UP": lambda d, frm, to, hint: _with_hint_jp(
            f"{frm}〜{to}で気圧が約{d:.1f}hPa上昇しました。", hint
        ),
        "PRESS_DOWN": lambda d, frm, to, hint: _with_hint_jp(
            f"{frm}〜{to}で気圧が約{abs(d):.1f}hPa低下しました。", hint
        ),
        "LIGHT_UP": lambda d, frm, to, hint: _with_hint_jp(
            f"{frm}〜{to}で照度が約{d:.0f}lux上昇しました。", hint
        ),
        "LIGHT_DOWN": lambda d, frm, to, hint: _with_hint_jp(
            f"{frm}〜{to}で照度が約{abs(d):.0f}lux低下しました。", hint
        ),
        "RANGE_SUMMARY": lambda frm, to, focus: f"{frm}〜{to}で、{focus}。",
        "RANGE_NO_CHANGE": "大きな変化は少なめです",
        "RANGE_CHANGED": {
            Signal.TEMPERATURE: lambda d: f"温度が約{d:.1f}℃変化",
            Signal.HUMIDITY: lambda d: f"湿度が約{d:.1f}%変化",
            Signal.PRESSURE: lambda d: f"気圧が約{d:.1f}hPa変化",
            Signal.LIGHT: lambda d: f"照度が約{d:.0f}lux変化",
        },
        "LIST_SEP": "、",
        "VOL_SEP": "・",
        "PEAK": lambda what, v, at: f"最高{what}は{at}に{v}でした。",
        "LOW": lambda what, v, at: f"最低{what}は{at}に{v}でした。",
        "HINT_HEATER": "暖房が入っている可能性があります。",
        "HINT_AC": "空調や換気の影響の可能性があります。",
        "HINT_SENSOR_HEAT": "センサーが熱源に近い／熱にさらされている可能性があります。",
        "HINT_HUMIDIFIER": "加湿器・入浴・調理などで湿気が増えた可能性があります。",
        "HINT_DEHUM": "除湿機やエアコンで湿度が下がった可能性があります。",
        "HINT_WEATHER": "屋外の天候変化の影響かもしれません。",
        "HINT_LIGHTS_ON": "照明または日光が増えた可能性があります。",
        "HINT_LIGHTS_OFF": "照明OFFまたは日光が減った可能性があります。",
        "PREFIX": lambda name: f"{name or 'デバイス'}：",
        "TOAST_SPIKE": {
            Signal.TEMPERATURE: lambda name, d, win: f"{name}：温度の急変（{d}）{win}。",
            Signal.HUMIDITY: lambda name, d, win: f"{name}：湿度の急変（{d}）{win}。",
            Signal.PRESSURE: lambda name, d, win: f"{name}：気圧の急変（{d}）{win}。",
            Signal.LIGHT: lambda name, d, win: f"{name}：照度の急変（{d}）{win}。",
        },
        "OFFLINE_WARN": lambda name, sec: f"{name}：{sec}秒データなし（オフラインの可能性）。",
        "OFFLINE_ALERT": lambda name, m, s: (
            f"{name}：{m}分{s}秒データなし（送信失敗／オフラインの可能性が高い）。"
        ),
        "MODAL_REPEAT": lambda name, what, d, win: (
            f"{name}で短時間に{what}の異常が繰り返し検出されています（{d}、{win}）。ご注意ください。"
        ),
        "MODAL_PERSIST": lambda name, what, mins: (
            f"{name}の{what}が{mins}分以上異常状態です。"
            "環境変化またはセンサー露出の可能性があります。可能なら確認してください。"
        ),
        "WHAT": {
            Signal.TEMPERATURE: "温度",
            Signal.HUMIDITY: "湿度",
            Signal.PRESSURE: "気圧",
            Signal.LIGHT: "照度",
        },
        "WHAT_TITLE": {
            Signal.TEMPERATURE: "温度",
            Signal.HUMIDITY: "湿度",
            Signal.PRESSURE: "気圧",
            Signal.LIGHT: "照度",
        },
        "WINDOW": lambda frm, to: f"{frm}〜{to}",
    },
}

# Claves de tendencia por señal (subida, bajada)
TREND_KEYS = {
    Signal.TEMPERATURE: ("TEMP_UP", "TEMP_DOWN"),
    Signal.HUMIDITY: ("HUM_UP", "HUM_DOWN"),
    Signal.PRESSURE: ("PRESS_UP", "PRESS_DOWN"),
    Signal.LIGHT: ("LIGHT_UP", "LIGHT_DOWN"),
}


def default_locale_provider() -> Optional[str]:
    """Locale del proceso (LC_ALL / LANG)."""
    return os.getenv("LC_ALL") or os.getenv("LANG")


def resolve_language(lang_mode: Optional[str], locale_provider: Optional[LocaleProvider] = None) -> str:
    """Resuelve auto|en|jp a un idioma soportado.

    `auto` delega en el proveedor de locale: "ja*" -> jp, cualquier otro -> en.
    """
    if lang_mode in SUPPORTED_LANGS:
        return lang_mode
    provider = locale_provider or default_locale_provider
    try:
        locale = (provider() or "").lower()
    except Exception:
        logger.warning("[I18N] Proveedor de locale falló, usando en", exc_info=True)
        locale = ""
    return "jp" if locale.startswith("ja") else "en"


def catalog(lang: str) -> Dict[str, object]:
    return TEXT.get(lang, TEXT["en"])


def message(lang: str, kind: str, *params) -> str:
    """Renderiza un mensaje del catálogo.

    Las entradas de texto fijo se retornan tal cual; las funciones
    reciben `params`.
    """
    entry = catalog(lang)[kind]
    if callable(entry):
        return entry(*params)
    return str(entry)


def signal_label(lang: str, signal: Signal, title: bool = False) -> str:
    table = catalog(lang)["WHAT_TITLE" if title else "WHAT"]
    return table[signal]


def spike_text(lang: str, signal: Signal, device_name: str, delta_text: str, window_text: str) -> str:
    return catalog(lang)["TOAST_SPIKE"][signal](device_name, delta_text, window_text)


def range_change_text(lang: str, signal: Signal, delta: float) -> str:
    return catalog(lang)["RANGE_CHANGED"][signal](delta)
