"""Detector de anomalías por señal (step + ventanas de 5 y 10 minutos).

Una señal está activa si cualquiera de los tres deltas alcanza
su umbral. El delta reportado al operador se elige por prioridad:
step > ventana 5m > ventana 10m.

La dispersión (z-score) NO participa aquí; solo alimenta la
narrativa del dispositivo seleccionado.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Optional, Sequence

from ..i18n.formatting import TzLike, format_signal_delta, format_window
from ..i18n.messages import message, signal_label, spike_text
from .event_store import EventStore, anomaly_event_key
from .models import Candidate, DeviceSnapshot, SeriesPoint, Signal, Stage, WindowDelta
from .thresholds import (
    MIN_STEP_SAMPLES,
    MIN_WINDOW_SAMPLES,
    SIGNAL_DELTA_THRESHOLDS,
    WINDOW_10M_MINUTES,
    WINDOW_5M_MINUTES,
    EscalationConfig,
    SignalDeltaThresholds,
)
from .time_series import step_delta, trailing_window_delta

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeltaBreach:
    """Delta que superó su umbral."""

    kind: str  # step | window_5m | window_10m
    window: WindowDelta
    threshold: float


def check_signal(
    points: Sequence[SeriesPoint], thresholds: SignalDeltaThresholds
) -> Optional[DeltaBreach]:
    """Evalúa los tres deltas y retorna el de mayor prioridad que dispara.

    Returns:
        DeltaBreach o None si la señal no está activa (o hay pocos datos)
    """
    checks = []
    if len(points) >= MIN_STEP_SAMPLES:
        checks.append(("step", step_delta(points), thresholds.step))
    if len(points) >= MIN_WINDOW_SAMPLES:
        checks.append(
            ("window_5m", trailing_window_delta(points, WINDOW_5M_MINUTES), thresholds.window_5m)
        )
        checks.append(
            ("window_10m", trailing_window_delta(points, WINDOW_10M_MINUTES), thresholds.window_10m)
        )

    for kind, window, threshold in checks:
        if window is not None and abs(window.delta) >= threshold:
            return DeltaBreach(kind=kind, window=window, threshold=threshold)
    return None


class AnomalyDetector:
    """Mantiene los eventos de anomalía por (dispositivo, señal)."""

    def __init__(
        self,
        store: EventStore,
        thresholds: Optional[Dict[Signal, SignalDeltaThresholds]] = None,
        display_tz: TzLike = None,
    ) -> None:
        self._store = store
        self._thresholds = thresholds or SIGNAL_DELTA_THRESHOLDS
        self._tz = display_tz

    def evaluate_signal(
        self,
        snapshot: DeviceSnapshot,
        signal: Signal,
        points: Sequence[SeriesPoint],
        now_ms: int,
        lang: str,
        cfg: EscalationConfig,
    ) -> Optional[Candidate]:
        event_key = anomaly_event_key(snapshot.device_id, signal)
        breach = check_signal(points, self._thresholds[signal])

        if breach is None:
            self._settle_inactive(event_key, now_ms, cfg.repeat_window_ms)
            return None

        state = self._store.get_or_init(event_key)
        state.mark_active(now_ms)

        if self._store.is_snoozed(state, now_ms, cfg.snooze_ms):
            logger.debug("[ANOMALY] %s silenciado (ack=%s)", event_key, state.last_ack_ms)
            return None

        seen_for = now_ms - state.first_seen_ms
        if seen_for >= cfg.persist_window_ms:
            stage = Stage.CRITICAL
        elif seen_for < cfg.anomaly_toast_window_ms and state.last_fired_stage < Stage.MODAL:
            stage = Stage.WARN
        else:
            stage = Stage.MODAL
        stage = state.raise_stage(stage)

        name = snapshot.display_name
        delta_text = format_signal_delta(signal, breach.window.delta)
        window_text = format_window(breach.window, lang, self._tz)

        if stage >= Stage.CRITICAL:
            mins = max(seen_for // 60000, cfg.persist_window_ms // 60000)
            text = message(lang, "MODAL_PERSIST", name, signal_label(lang, signal), mins)
            level = "critical"
        elif stage == Stage.MODAL:
            text = message(lang, "MODAL_REPEAT", name, signal_label(lang, signal), delta_text, window_text)
            level = "modal"
        else:
            text = spike_text(lang, signal, name, delta_text, window_text)
            level = "warn"

        return Candidate(
            stage=int(stage),
            level=level,
            event_key=event_key,
            text=text,
            device_name=name,
            signal=signal.value,
            seen_since_ms=state.first_seen_ms,
            delta_text=delta_text,
        )

    def _settle_inactive(self, event_key: str, now_ms: int, quiet_ms: int) -> None:
        """Limpia el evento solo tras un periodo de silencio (evita flapping)."""
        state = self._store.get(event_key)
        if state is None or state.last_seen_ms is None:
            return
        if now_ms - state.last_seen_ms > quiet_ms:
            logger.info("[ANOMALY] %s resuelto tras %dms sin actividad", event_key, now_ms - state.last_seen_ms)
            self._store.clear(event_key)
