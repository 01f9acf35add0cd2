"""Store de eventos del motor global.

FUENTE ÚNICA DE VERDAD para el estado de cada condición monitoreada.
Cada instancia del motor posee su propio store (sin estado global).
"""

from __future__ import annotations

from typing import Dict, Iterator, Optional

from .models import EventState, Signal


def offline_event_key(device_id: str) -> str:
    return f"{device_id}:offline"


def anomaly_event_key(device_id: str, signal: Signal) -> str:
    return f"{device_id}:{signal.value}:anomaly"


class EventStore:
    """Mapa event_key -> EventState.

    Las entradas se crean de forma perezosa y nunca se eliminan:
    al resolverse una condición solo se limpian sus campos.
    """

    def __init__(self) -> None:
        self._events: Dict[str, EventState] = {}

    def get_or_init(self, event_key: str) -> EventState:
        """Retorna el estado existente o crea uno vacío."""
        state = self._events.get(event_key)
        if state is None:
            state = EventState()
            self._events[event_key] = state
        return state

    def get(self, event_key: str) -> Optional[EventState]:
        return self._events.get(event_key)

    def acknowledge(self, event_key: str, now_ms: int) -> None:
        """Marca el evento como reconocido por un operador."""
        if not event_key:
            return
        self.get_or_init(event_key).last_ack_ms = now_ms

    @staticmethod
    def is_snoozed(state: EventState, now_ms: int, snooze_ms: int) -> bool:
        if state.last_ack_ms is None:
            return False
        return now_ms - state.last_ack_ms < snooze_ms

    def clear(self, event_key: str) -> None:
        """Resetea la ocurrencia (no toca last_ack_ms)."""
        state = self._events.get(event_key)
        if state is not None:
            state.reset()

    def snapshot(self) -> Dict[str, dict]:
        """Copia de solo lectura del store (para diagnóstico)."""
        return {key: state.to_dict() for key, state in self._events.items()}

    def __contains__(self, event_key: object) -> bool:
        return event_key in self._events

    def __iter__(self) -> Iterator[str]:
        return iter(self._events)

    def __len__(self) -> int:
        return len(self._events)
