"""Modelos de datos del motor de monitoreo.

Dataclasses que representan lecturas, snapshots de dispositivo,
estado de eventos y resultados de evaluación.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum, IntEnum
from typing import Any, Mapping, Optional, Sequence


class Signal(Enum):
    """Señales ambientales monitoreadas por dispositivo."""

    TEMPERATURE = "Temperature"  # °C
    HUMIDITY = "Humidity"  # %
    PRESSURE = "Pressure"  # hPa
    LIGHT = "Light"  # lux

    @property
    def field_name(self) -> str:
        return self.value.lower()


class Stage(IntEnum):
    """Nivel de severidad de un evento."""

    NONE = 0
    WARN = 1  # toast, no bloqueante
    MODAL = 2  # modal bloqueante
    CRITICAL = 3  # modal crítico


class ViewMode(str, Enum):
    LIVE = "live"
    DAY = "day"
    RANGE = "range"


@dataclass(frozen=True)
class Reading:
    """Lectura de un dispositivo ya normalizada.

    Cada señal es opcional: un valor ausente o inválido queda en None.
    """

    timestamp_ms: Optional[int]
    temperature: Optional[float] = None
    humidity: Optional[float] = None
    pressure: Optional[float] = None
    light: Optional[float] = None

    def value_of(self, signal: Signal) -> Optional[float]:
        return getattr(self, signal.field_name)


@dataclass(frozen=True)
class SeriesPoint:
    """Punto (time_ms, value) de una serie cronológica."""

    time_ms: int
    value: float


@dataclass(frozen=True)
class WindowDelta:
    """Cambio de valor entre la primera y la última muestra de una ventana."""

    delta: float
    from_ms: int
    to_ms: int
    first: float
    last: float

    @property
    def minutes(self) -> int:
        """Duración de la ventana en minutos (mínimo 1)."""
        return max(1, round((self.to_ms - self.from_ms) / 60000))


@dataclass(frozen=True)
class DeviceInfo:
    """Dispositivo registrado (id + nombre visible)."""

    device_id: str
    device_name: str


@dataclass
class DeviceSnapshot:
    """Snapshot de un dispositivo suministrado en cada ciclo.

    `last_data_ms` None significa que nunca se han visto datos.
    """

    device_id: str
    device_name: str = ""
    rows: Sequence[Any] = field(default_factory=list)
    last_data_ms: Optional[int] = None

    @property
    def display_name(self) -> str:
        return self.device_name or self.device_id or "Device"

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "DeviceSnapshot":
        """Construye un snapshot desde un dict (acepta camelCase y snake_case)."""
        device_id = data.get("device_id") or data.get("deviceId") or ""
        device_name = data.get("device_name") or data.get("deviceName") or ""
        rows = data.get("rows")
        last_data = data.get("last_data_ms", data.get("lastDataMs"))
        return cls(
            device_id=str(device_id),
            device_name=str(device_name),
            rows=list(rows) if isinstance(rows, (list, tuple)) else [],
            last_data_ms=last_data,
        )


@dataclass
class EventState:
    """Estado mutable de un evento (dispositivo + señal + condición).

    Reglas:
    - first_seen_ms se fija una sola vez por ocurrencia continua
    - last_fired_stage nunca baja mientras first_seen_ms no sea None
    - last_ack_ms silencia la notificación, no la detección
    """

    first_seen_ms: Optional[int] = None
    last_seen_ms: Optional[int] = None
    last_fired_stage: int = 0
    last_ack_ms: Optional[int] = None

    @property
    def is_active(self) -> bool:
        return self.first_seen_ms is not None

    def mark_active(self, now_ms: int) -> None:
        """Registra una observación activa en este ciclo."""
        self.last_seen_ms = now_ms
        if self.first_seen_ms is None:
            self.first_seen_ms = now_ms

    def raise_stage(self, stage: int) -> int:
        """Aplica el piso monotónico y retorna el stage efectivo."""
        if stage > self.last_fired_stage:
            self.last_fired_stage = int(stage)
        return self.last_fired_stage

    def reset(self) -> None:
        """Limpia la ocurrencia (recuperación confirmada)."""
        self.first_seen_ms = None
        self.last_seen_ms = None
        self.last_fired_stage = 0

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class Candidate:
    """Condición activa y no silenciada, elegible para notificar."""

    stage: int
    level: str  # warn | alert | modal | critical
    event_key: str
    text: str
    device_name: str
    signal: str  # "offline" o Signal.value
    seen_since_ms: Optional[int]
    delta_text: Optional[str] = None


@dataclass(frozen=True)
class Notification:
    """Notificación lista para mostrar (toast o modal)."""

    level: str
    text: str
    event_key: str

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class EvaluationResult:
    """Resultado de un ciclo: como máximo uno de toast/modal."""

    lang: str
    toast: Optional[Notification] = None
    modal: Optional[Notification] = None

    @property
    def notification(self) -> Optional[Notification]:
        return self.modal or self.toast

    def to_dict(self) -> dict:
        return {
            "toast": self.toast.to_dict() if self.toast else None,
            "modal": self.modal.to_dict() if self.modal else None,
            "lang": self.lang,
        }


@dataclass(frozen=True)
class NarrativeResult:
    """Frase única para el dispositivo seleccionado."""

    title: str
    badge_level: str  # OK | WARN
    message: str
    lang: str

    def to_dict(self) -> dict:
        return asdict(self)
