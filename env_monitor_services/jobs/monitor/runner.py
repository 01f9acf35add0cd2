"""Monitor runner: poll de todos los dispositivos + evaluación global.

- Un poll nunca se solapa con otro (si el anterior sigue en curso, se omite)
- El I/O termina ANTES de llamar al motor; los snapshots se reemplazan
  completos bajo el lock de evaluación
- Las evaluaciones (timer, poll, ack) se serializan con un lock
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Dict, List, Optional, Sequence

from ...monitoring.engine import GlobalEscalationEngine
from ...monitoring.models import DeviceInfo, DeviceSnapshot, EvaluationResult
from ...repository.reading_source import ReadingSource, build_snapshot
from .config import RunnerConfig
from .metrics import (
    MONITOR_ACTIVE_CANDIDATES,
    MONITOR_EVALUATION_LATENCY,
    MONITOR_FETCH_FAILURES,
    MONITOR_POLLS,
)
from .sinks import NotificationDispatcher

logger = logging.getLogger(__name__)


def _wall_clock_ms() -> int:
    return int(time.time() * 1000)


class MonitorRunner:
    """Orquesta fuente de lecturas -> motor -> despacho."""

    def __init__(
        self,
        engine: GlobalEscalationEngine,
        source: ReadingSource,
        devices: Sequence[DeviceInfo],
        dispatcher: NotificationDispatcher,
        cfg: RunnerConfig,
        clock: Callable[[], int] = _wall_clock_ms,
    ) -> None:
        self._engine = engine
        self._source = source
        self._devices = list(devices)
        self._dispatcher = dispatcher
        self._cfg = cfg
        self._clock = clock
        self._poll_lock = threading.Lock()
        self._eval_lock = threading.Lock()
        self._snapshots: Dict[str, DeviceSnapshot] = {
            d.device_id: DeviceSnapshot(device_id=d.device_id, device_name=d.device_name)
            for d in self._devices
        }
        self.last_result: Optional[EvaluationResult] = None

    @property
    def snapshots(self) -> List[DeviceSnapshot]:
        return [self._snapshots[d.device_id] for d in self._devices]

    def poll_once(self) -> Optional[EvaluationResult]:
        """Refresca todos los dispositivos y evalúa.

        Returns:
            Resultado del ciclo o None si se omitió por solapamiento
        """
        if not self._poll_lock.acquire(blocking=False):
            logger.info("[RUNNER] Poll anterior en curso, se omite este ciclo")
            MONITOR_POLLS.labels(status="skipped").inc()
            return None
        try:
            t0 = time.monotonic()
            failed = 0
            fresh: Dict[str, DeviceSnapshot] = {}
            for device in self._devices:
                try:
                    rows = self._source.fetch_recent(device.device_id, self._cfg.rows_per_device)
                    snapshot = build_snapshot(device, rows)
                except Exception as e:
                    failed += 1
                    MONITOR_FETCH_FAILURES.labels(device_id=device.device_id).inc()
                    logger.error("[RUNNER] poll_failed device=%s err=%s", device.device_id, e)
                    # Sin datos: el motor lo tratará como offline
                    snapshot = DeviceSnapshot(device_id=device.device_id, device_name=device.device_name)
                fresh[device.device_id] = snapshot

            logger.info(
                "[RUNNER] poll ms=%.1f devices=%d fail=%d",
                (time.monotonic() - t0) * 1000,
                len(self._devices),
                failed,
            )
            MONITOR_POLLS.labels(status="ok").inc()
            with self._eval_lock:
                self._snapshots = fresh
                return self._evaluate_locked(None)
        finally:
            self._poll_lock.release()

    def evaluate(self, ack_event_key: Optional[str] = None) -> EvaluationResult:
        """Evalúa sobre los snapshots en cache y despacha la notificación."""
        with self._eval_lock:
            return self._evaluate_locked(ack_event_key)

    def acknowledge(self, event_key: Optional[str] = None) -> EvaluationResult:
        """OK del operador sobre el modal visible (o un evento explícito)."""
        with self._eval_lock:
            dismissed = self._dispatcher.dismiss_modal()
            return self._evaluate_locked(event_key or dismissed)

    def _evaluate_locked(self, ack_event_key: Optional[str]) -> EvaluationResult:
        now_ms = self._clock()
        with MONITOR_EVALUATION_LATENCY.time():
            result = self._engine.evaluate(
                self.snapshots,
                now_ms=now_ms,
                ack_event_key=ack_event_key,
                **self._cfg.evaluation_params(),
            )
        MONITOR_ACTIVE_CANDIDATES.set(len(self._engine.last_candidates))
        self.last_result = result
        self._dispatcher.dispatch(result, now_ms)
        return result

    def run_forever(self, stop_event: Optional[threading.Event] = None) -> None:
        """Bucle con poll cada `poll_seconds` y re-evaluación cada `reevaluate_seconds`."""
        stop_event = stop_event or threading.Event()
        next_poll = time.monotonic()
        next_eval = next_poll + self._cfg.reevaluate_seconds

        while not stop_event.is_set():
            now = time.monotonic()
            try:
                if now >= next_poll:
                    self.poll_once()
                    next_poll = now + self._cfg.poll_seconds
                    next_eval = now + self._cfg.reevaluate_seconds
                    if self._cfg.once:
                        return
                elif now >= next_eval:
                    self.evaluate()
                    next_eval = now + self._cfg.reevaluate_seconds
            except Exception as e:
                logger.error("[RUNNER] Error en iteración: %s", e)
                if self._cfg.once:
                    raise
                logger.info("[RUNNER] Continuando con siguiente iteración...")

            wait = max(0.0, min(next_poll, next_eval) - time.monotonic())
            stop_event.wait(timeout=wait)
