"""Detector de dispositivos offline.

Reglas (age = now - last_data_ms):
- Sin datos nunca vistos -> offline máximo (MODAL)
- age < warn            -> inactivo, se limpia el evento
- warn <= age < alert   -> WARN (toast)
- age >= alert          -> MODAL
"""

from __future__ import annotations

import logging
from typing import Optional

from ..i18n.messages import message
from .event_store import EventStore, offline_event_key
from .models import Candidate, DeviceSnapshot, Stage
from .thresholds import EscalationConfig

logger = logging.getLogger(__name__)

OFFLINE_SIGNAL = "offline"


class OfflineDetector:
    """Evalúa la condición offline de un dispositivo por ciclo."""

    def __init__(self, store: EventStore) -> None:
        self._store = store

    def evaluate(
        self,
        snapshot: DeviceSnapshot,
        last_data_ms: Optional[int],
        now_ms: int,
        lang: str,
        cfg: EscalationConfig,
    ) -> Optional[Candidate]:
        """Actualiza el evento offline y retorna un candidato si aplica."""
        event_key = offline_event_key(snapshot.device_id)

        if last_data_ms is None:
            # Dispositivo nunca visto: se asume crítico, no se omite
            age_ms = cfg.alert_ms + 1
        else:
            age_ms = now_ms - last_data_ms
            if age_ms < cfg.warn_ms:
                if event_key in self._store:
                    self._store.clear(event_key)
                return None

        stage = Stage.MODAL if age_ms >= cfg.alert_ms else Stage.WARN

        state = self._store.get_or_init(event_key)
        state.mark_active(now_ms)

        if self._store.is_snoozed(state, now_ms, cfg.snooze_ms):
            logger.debug("[OFFLINE] %s silenciado (ack=%s)", event_key, state.last_ack_ms)
            return None

        stage = state.raise_stage(stage)
        name = snapshot.display_name
        sec = max(0, age_ms // 1000)

        if stage >= Stage.MODAL:
            text = message(lang, "OFFLINE_ALERT", name, sec // 60, sec % 60)
            level = "modal"
        else:
            text = message(lang, "OFFLINE_WARN", name, sec)
            level = "warn"

        return Candidate(
            stage=int(stage),
            level=level,
            event_key=event_key,
            text=text,
            device_name=name,
            signal=OFFLINE_SIGNAL,
            seen_since_ms=state.first_seen_ms,
        )
