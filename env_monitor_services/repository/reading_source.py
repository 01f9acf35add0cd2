from __future__ import annotations

import threading
from typing import Any, Dict, List, Optional, Protocol, Sequence

from ..monitoring.models import DeviceInfo, DeviceSnapshot
from ..monitoring.time_series import ts_to_ms


class ReadingSourceError(RuntimeError):
    """Fallo al obtener lecturas de un dispositivo."""


class ReadingSource(Protocol):
    """Interfaz abstracta de lecturas recientes por dispositivo.

    El motor solo depende de esta interfaz, no de la implementación concreta.
    """

    def fetch_recent(self, device_id: str, limit: int) -> List[Dict[str, Any]]:
        """Últimas `limit` filas del dispositivo en orden cronológico.

        Cada fila: {"timestamp", "Temperature", "Humidity", "Pressure", "Light"}.
        Lista vacía si el dispositivo nunca reportó.
        """

        ...


def build_snapshot(device: DeviceInfo, rows: Sequence[Dict[str, Any]]) -> DeviceSnapshot:
    """Snapshot del ciclo: last_data_ms sale de la última fila."""
    last_data_ms: Optional[int] = None
    if rows:
        last_data_ms = ts_to_ms(rows[-1].get("timestamp"))
    return DeviceSnapshot(
        device_id=device.device_id,
        device_name=device.device_name,
        rows=list(rows),
        last_data_ms=last_data_ms,
    )


class InMemoryReadingSource(ReadingSource):
    """Implementación sencilla en memoria.

    Útil para tests y para alimentar el runner desde otro hilo.
    """

    def __init__(self) -> None:
        self._rows: Dict[str, List[Dict[str, Any]]] = {}
        self._lock = threading.Lock()

    def append(self, device_id: str, row: Dict[str, Any]) -> None:
        with self._lock:
            self._rows.setdefault(device_id, []).append(dict(row))

    def extend(self, device_id: str, rows: Sequence[Dict[str, Any]]) -> None:
        for row in rows:
            self.append(device_id, row)

    def fetch_recent(self, device_id: str, limit: int) -> List[Dict[str, Any]]:  # type: ignore[override]
        with self._lock:
            rows = list(self._rows.get(device_id, []))
        rows.sort(key=lambda r: ts_to_ms(r.get("timestamp")) or 0)
        if limit > 0:
            rows = rows[-limit:]
        return rows
