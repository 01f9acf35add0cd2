"""Motor global de escalamiento (offline + anomalías).

Estructura modular:
- models.py: Dataclasses (Reading, DeviceSnapshot, EventState, Candidate, ...)
- numeric_precision.py: Guards de NaN/Infinity
- time_series.py: Conversión de filas, series, deltas y z-score
- thresholds.py: Umbrales por señal y parámetros del ciclo
- event_store.py: Estado de eventos por event_key
- offline_detector.py: Detección offline
- anomaly_detector.py: Detección step / ventana 5m / ventana 10m
- arbitration.py: Una notificación por ciclo
- engine.py: Punto de entrada de evaluación (importar desde .engine)
"""

from .models import (
    Candidate,
    DeviceInfo,
    DeviceSnapshot,
    EvaluationResult,
    EventState,
    NarrativeResult,
    Notification,
    Reading,
    SeriesPoint,
    Signal,
    Stage,
    ViewMode,
)
from .event_store import EventStore, anomaly_event_key, offline_event_key
from .thresholds import DEFAULT_ESCALATION_CONFIG, EscalationConfig, SIGNAL_DELTA_THRESHOLDS

__all__ = [
    "Candidate",
    "DeviceInfo",
    "DeviceSnapshot",
    "EvaluationResult",
    "EventState",
    "NarrativeResult",
    "Notification",
    "Reading",
    "SeriesPoint",
    "Signal",
    "Stage",
    "ViewMode",
    "EventStore",
    "anomaly_event_key",
    "offline_event_key",
    "DEFAULT_ESCALATION_CONFIG",
    "EscalationConfig",
    "SIGNAL_DELTA_THRESHOLDS",
]
