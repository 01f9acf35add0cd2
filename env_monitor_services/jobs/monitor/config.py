"""Monitor runner configuration."""

from __future__ import annotations

from dataclasses import dataclass

from ...common.config import Settings


@dataclass(frozen=True)
class RunnerConfig:
    """Configuración del runner de monitoreo."""
    rows_per_device: int
    poll_seconds: float
    reevaluate_seconds: float
    lang_mode: str
    warn_ms: int
    alert_ms: int
    repeat_window_ms: int
    persist_window_ms: int
    snooze_ms: int
    anomaly_toast_window_ms: int
    once: bool = False

    @classmethod
    def from_settings(cls, settings: Settings, **overrides) -> "RunnerConfig":
        values = dict(
            rows_per_device=settings.rows_per_device,
            poll_seconds=settings.poll_seconds,
            reevaluate_seconds=settings.reevaluate_seconds,
            lang_mode=settings.lang_mode,
            warn_ms=settings.warn_ms,
            alert_ms=settings.alert_ms,
            repeat_window_ms=settings.repeat_window_ms,
            persist_window_ms=settings.persist_window_ms,
            snooze_ms=settings.snooze_ms,
            anomaly_toast_window_ms=settings.anomaly_toast_window_ms,
        )
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)

    def evaluation_params(self) -> dict:
        """Parámetros por ciclo para GlobalEscalationEngine.evaluate()."""
        return {
            "lang_mode": self.lang_mode,
            "warn_ms": self.warn_ms,
            "alert_ms": self.alert_ms,
            "repeat_window_ms": self.repeat_window_ms,
            "persist_window_ms": self.persist_window_ms,
            "snooze_ms": self.snooze_ms,
            "anomaly_toast_window_ms": self.anomaly_toast_window_ms,
        }
