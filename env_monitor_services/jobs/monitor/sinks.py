"""Destinos de notificación y política de despacho.

El motor decide QUÉ notificar; aquí solo se decide si se vuelve
a mostrar (dedupe de toasts, modal ya visible) y a dónde se envía.
"""

from __future__ import annotations

import logging
from typing import Optional, Protocol

import requests

from ...monitoring.models import EvaluationResult, Notification
from .metrics import MONITOR_NOTIFICATIONS

logger = logging.getLogger(__name__)


class NotificationSink(Protocol):
    """Interfaz del colaborador de presentación."""

    def show_toast(self, notification: Notification, lang: str) -> None:
        ...

    def show_modal(self, notification: Notification, lang: str) -> None:
        ...


class LoggingNotificationSink(NotificationSink):
    """Sink por defecto: deja la notificación en el log."""

    def show_toast(self, notification: Notification, lang: str) -> None:  # type: ignore[override]
        logger.warning("[TOAST] level=%s event=%s lang=%s %s",
                       notification.level, notification.event_key, lang, notification.text)

    def show_modal(self, notification: Notification, lang: str) -> None:  # type: ignore[override]
        logger.error("[MODAL] level=%s event=%s lang=%s %s",
                     notification.level, notification.event_key, lang, notification.text)


class WebhookNotificationSink(NotificationSink):
    """Envía la notificación al backend vía endpoint interno.

    No bloquea si falla - solo loguea el error.
    """

    PATH = "/notifications/internal/monitor"

    def __init__(self, backend_url: str, internal_key: str, timeout: float = 5.0) -> None:
        self._url = backend_url.rstrip("/") + self.PATH
        self._internal_key = internal_key
        self._timeout = timeout

    def show_toast(self, notification: Notification, lang: str) -> None:  # type: ignore[override]
        self._post("toast", notification, lang)

    def show_modal(self, notification: Notification, lang: str) -> None:  # type: ignore[override]
        self._post("modal", notification, lang)

    def _post(self, kind: str, notification: Notification, lang: str) -> None:
        if not self._internal_key:
            logger.warning("[PUSH] INTERNAL_API_KEY not configured - skipping push trigger")
            return
        try:
            response = requests.post(
                self._url,
                json={"type": kind, "lang": lang, **notification.to_dict()},
                headers={
                    "X-Internal-Key": self._internal_key,
                    "Content-Type": "application/json",
                },
                timeout=self._timeout,
            )
            if response.ok:
                logger.info("[PUSH] %s enviado event=%s", kind, notification.event_key)
            else:
                logger.warning("[PUSH] Failed to push %s: %s %s", kind, response.status_code, response.text)
        except requests.RequestException as e:
            logger.error("[PUSH] Error sending %s notification: %s", kind, e)


class NotificationDispatcher:
    """Aplica la política de visualización del resultado de cada ciclo.

    Reglas:
    - Modal con otro modal visible: solo lo reemplaza un CRITICAL de otro evento
    - Toast con modal visible: se descarta
    - Mismo toast dentro de `toast_min_gap_ms`: se descarta
    """

    def __init__(self, sink: NotificationSink, toast_min_gap_ms: int = 6000) -> None:
        self._sink = sink
        self._toast_min_gap_ms = toast_min_gap_ms
        self._modal_event_key: Optional[str] = None
        self._last_toast_event: Optional[str] = None
        self._last_toast_ms: int = 0

    @property
    def modal_event_key(self) -> Optional[str]:
        """Evento del modal visible (None si no hay modal)."""
        return self._modal_event_key

    def dispatch(self, result: EvaluationResult, now_ms: int) -> Optional[str]:
        """Retorna "modal" | "toast" si se mostró algo, None si no."""
        if result.modal is not None:
            modal = result.modal
            if self._modal_event_key is None or (
                modal.level == "critical" and modal.event_key != self._modal_event_key
            ):
                self._modal_event_key = modal.event_key
                self._sink.show_modal(modal, result.lang)
                MONITOR_NOTIFICATIONS.labels(kind="modal", level=modal.level).inc()
                return "modal"
            return None

        if result.toast is not None and self._modal_event_key is None:
            toast = result.toast
            if (
                toast.event_key == self._last_toast_event
                and now_ms - self._last_toast_ms < self._toast_min_gap_ms
            ):
                return None
            self._last_toast_event = toast.event_key
            self._last_toast_ms = now_ms
            self._sink.show_toast(toast, result.lang)
            MONITOR_NOTIFICATIONS.labels(kind="toast", level=toast.level).inc()
            return "toast"

        return None

    def dismiss_modal(self) -> Optional[str]:
        """Oculta el modal y retorna su event_key (para el ack)."""
        event_key = self._modal_event_key
        self._modal_event_key = None
        return event_key
