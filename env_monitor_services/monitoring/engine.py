"""Motor global de escalamiento.

ÚNICO PUNTO DE DECISIÓN para las notificaciones de la flota:
- Aplica el ack ANTES de detectar (el mismo ciclo ya no re-muestra el evento)
- Evalúa offline + anomalías por dispositivo/señal
- Arbitra y retorna como máximo una notificación

El motor es síncrono y no es reentrante: el llamador garantiza
una sola evaluación en curso.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Iterable, List, Mapping, Optional, Union

from ..i18n.formatting import TzLike
from ..i18n.messages import LocaleProvider, resolve_language
from .anomaly_detector import AnomalyDetector
from .arbitration import rank_candidates, select_notification
from .event_store import EventStore
from .models import Candidate, DeviceSnapshot, EvaluationResult, Signal
from .numeric_precision import safe_float
from .offline_detector import OfflineDetector
from .thresholds import DEFAULT_ESCALATION_CONFIG, EscalationConfig
from .time_series import build_series, is_epoch_number, parse_rows, ts_to_ms

logger = logging.getLogger(__name__)

DeviceInput = Union[DeviceSnapshot, Mapping[str, Any]]


def _now_ms() -> int:
    return int(time.time() * 1000)


def _last_data_ms(value: Any) -> Optional[int]:
    """Los números ya vienen en epoch ms; otros formatos se convierten."""
    if is_epoch_number(value):
        number = safe_float(value, None)
        return int(number) if number is not None and number > 0 else None
    return ts_to_ms(value)


class GlobalEscalationEngine:
    """Evaluador en proceso de la flota completa.

    Cada instancia posee su propio EventStore, de modo que varias
    instancias (p.ej. una por test) no comparten estado.
    """

    def __init__(
        self,
        config: EscalationConfig = DEFAULT_ESCALATION_CONFIG,
        locale_provider: Optional[LocaleProvider] = None,
        display_tz: TzLike = None,
        store: Optional[EventStore] = None,
    ) -> None:
        self.config = config
        self.store = store if store is not None else EventStore()
        self._locale_provider = locale_provider
        self._offline = OfflineDetector(self.store)
        self._anomaly = AnomalyDetector(self.store, display_tz=display_tz)
        self.last_candidates: List[Candidate] = []

    def acknowledge(self, event_key: str, now_ms: Optional[int] = None) -> None:
        self.store.acknowledge(event_key, now_ms if now_ms is not None else _now_ms())

    def evaluate(
        self,
        devices: Iterable[DeviceInput],
        now_ms: Optional[int] = None,
        lang_mode: str = "auto",
        warn_ms: Optional[int] = None,
        alert_ms: Optional[int] = None,
        repeat_window_ms: Optional[int] = None,
        persist_window_ms: Optional[int] = None,
        snooze_ms: Optional[int] = None,
        ack_event_key: Optional[str] = None,
        anomaly_toast_window_ms: Optional[int] = None,
    ) -> EvaluationResult:
        """Ejecuta un ciclo de evaluación completo.

        Args:
            devices: Snapshots (DeviceSnapshot o dicts) de todos los dispositivos
            now_ms: Hora actual en epoch ms (default: reloj del sistema)
            lang_mode: auto | en | jp
            warn_ms / alert_ms: Umbrales offline del ciclo
            repeat_window_ms: Silencio requerido para limpiar una anomalía
            persist_window_ms: Duración continua para escalar a CRITICAL
            snooze_ms: Duración del silencio tras un ack
            ack_event_key: Evento reconocido por el operador en este ciclo
            anomaly_toast_window_ms: Ventana inicial como toast (0 = siempre modal)

        Returns:
            EvaluationResult con como máximo uno de toast/modal
        """
        now_ms = now_ms if now_ms is not None else _now_ms()
        cfg = self._cycle_config(
            warn_ms=warn_ms,
            alert_ms=alert_ms,
            repeat_window_ms=repeat_window_ms,
            persist_window_ms=persist_window_ms,
            snooze_ms=snooze_ms,
            anomaly_toast_window_ms=anomaly_toast_window_ms,
        )
        lang = resolve_language(lang_mode, self._locale_provider)

        if ack_event_key:
            self.store.acknowledge(ack_event_key, now_ms)
            logger.info("[ENGINE] ack event=%s now=%d", ack_event_key, now_ms)

        candidates: List[Candidate] = []
        for device in devices or []:
            try:
                snapshot = device if isinstance(device, DeviceSnapshot) else DeviceSnapshot.from_mapping(device)
            except Exception:
                logger.exception("[ENGINE] Snapshot de dispositivo inválido: %r", device)
                continue
            try:
                candidates.extend(self._evaluate_device(snapshot, now_ms, lang, cfg))
            except Exception:
                logger.exception("[ENGINE] Falló evaluación device=%s", snapshot.device_id)

        self.last_candidates = rank_candidates(candidates)
        result = select_notification(candidates, lang)

        if result.notification is not None:
            logger.debug(
                "[ENGINE] candidates=%d top=%s level=%s",
                len(candidates),
                result.notification.event_key,
                result.notification.level,
            )
        return result

    def _evaluate_device(
        self, snapshot: DeviceSnapshot, now_ms: int, lang: str, cfg: EscalationConfig
    ) -> List[Candidate]:
        """Offline + anomalías de un dispositivo; los fallos quedan aislados."""
        found: List[Candidate] = []
        last_data_ms = _last_data_ms(snapshot.last_data_ms)

        try:
            candidate = self._offline.evaluate(snapshot, last_data_ms, now_ms, lang, cfg)
            if candidate is not None:
                found.append(candidate)
        except Exception:
            logger.exception("[ENGINE] Falló detección offline device=%s", snapshot.device_id)

        # Sin datos nunca vistos no hay series que analizar
        if last_data_ms is None:
            return found

        try:
            readings = parse_rows(snapshot.rows)
        except Exception:
            logger.exception("[ENGINE] Filas inválidas device=%s", snapshot.device_id)
            return found

        for signal in Signal:
            try:
                points = build_series(readings, signal)
                candidate = self._anomaly.evaluate_signal(snapshot, signal, points, now_ms, lang, cfg)
                if candidate is not None:
                    found.append(candidate)
            except Exception:
                logger.exception(
                    "[ENGINE] Falló detección de anomalía device=%s signal=%s",
                    snapshot.device_id,
                    signal.value,
                )
        return found

    def _cycle_config(self, **overrides: Optional[int]) -> EscalationConfig:
        base = self.config
        values = {
            name: (int(value) if value is not None else getattr(base, name))
            for name, value in overrides.items()
        }
        return EscalationConfig(**values)
