"""Umbrales fijos de detección de anomalías por señal.

Los umbrales son deliberadamente gruesos: una violación es una
anomalía real, no ruido.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict

from .models import Signal


@dataclass(frozen=True)
class SignalDeltaThresholds:
    """Magnitudes mínimas de cambio para considerar la señal anómala."""

    step: float  # entre las dos últimas muestras
    window_5m: float
    window_10m: float
    decimals: int = 1  # precisión para el texto del delta
    unit: str = ""


SIGNAL_DELTA_THRESHOLDS: Dict[Signal, SignalDeltaThresholds] = {
    Signal.TEMPERATURE: SignalDeltaThresholds(3.0, 3.5, 4.0, decimals=1, unit="°C"),
    Signal.HUMIDITY: SignalDeltaThresholds(8.0, 10.0, 14.0, decimals=1, unit="%"),
    Signal.PRESSURE: SignalDeltaThresholds(1.5, 2.0, 3.0, decimals=1, unit=" hPa"),
    Signal.LIGHT: SignalDeltaThresholds(400.0, 600.0, 900.0, decimals=0, unit=" lux"),
}

# Mínimo de muestras por chequeo (evita falsos positivos con datos escasos)
MIN_STEP_SAMPLES = 3
MIN_WINDOW_SAMPLES = 10

WINDOW_5M_MINUTES = 5
WINDOW_10M_MINUTES = 10


@dataclass(frozen=True)
class EscalationConfig:
    """Parámetros por defecto del ciclo de evaluación (milisegundos)."""

    warn_ms: int = 45 * 1000
    alert_ms: int = 5 * 60 * 1000
    # Ventana de silencio antes de limpiar una anomalía inactiva
    repeat_window_ms: int = 10 * 60 * 1000
    persist_window_ms: int = 30 * 60 * 1000
    snooze_ms: int = 5 * 60 * 1000
    # Tiempo inicial en que una anomalía se reporta como toast (0 = siempre modal)
    anomaly_toast_window_ms: int = 0


DEFAULT_ESCALATION_CONFIG = EscalationConfig()
