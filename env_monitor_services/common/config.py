from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Tuple

from dotenv import load_dotenv

from ..monitoring.models import DeviceInfo

# Registro por defecto (formato id=Nombre separado por comas)
DEFAULT_DEVICES = (
    "atom_s3_lite_01=Atom S3 Lite 01,"
    "atom_s3_lite_02=学習支援室,"
    "atom_s3_lite_03=Atom S3 Lite 03,"
    "atom_s3_lite_04=Atom S3 Lite 04"
)


def _default_env_file() -> str:
    repo_root = Path(__file__).resolve().parents[2]
    return str(repo_root / ".env")


def parse_devices(raw: str) -> Tuple[DeviceInfo, ...]:
    """Parsea "id=Nombre,id2=Nombre2" (el nombre es opcional)."""
    devices = []
    for chunk in (raw or "").split(","):
        chunk = chunk.strip()
        if not chunk:
            continue
        device_id, _, name = chunk.partition("=")
        device_id = device_id.strip()
        if device_id:
            devices.append(DeviceInfo(device_id=device_id, device_name=name.strip() or device_id))
    return tuple(devices)


@dataclass(frozen=True)
class Settings:
    database_url: str
    readings_table: str

    devices: Tuple[DeviceInfo, ...]
    rows_per_device: int
    poll_seconds: float
    reevaluate_seconds: float

    warn_ms: int
    alert_ms: int
    repeat_window_ms: int
    persist_window_ms: int
    snooze_ms: int
    anomaly_toast_window_ms: int

    lang_mode: str
    display_tz: str
    locale: str

    backend_url: str
    internal_api_key: str
    toast_min_gap_ms: int
    metrics_port: int


def get_settings() -> Settings:
    # Carga el env file (si existe) sin pisar variables reales del entorno.
    env_file = os.getenv("MONITOR_ENV_FILE", _default_env_file())
    if env_file and Path(env_file).exists():
        load_dotenv(env_file, override=False)

    return Settings(
        database_url=os.getenv("DATABASE_URL", "sqlite:///./env_monitor.db"),
        readings_table=os.getenv("READINGS_TABLE", "sensor_readings"),
        devices=parse_devices(os.getenv("MONITOR_DEVICES", DEFAULT_DEVICES)),
        # Ventana reciente acotada por dispositivo
        rows_per_device=int(os.getenv("MONITOR_ROWS_PER_DEVICE", "120")),
        poll_seconds=float(os.getenv("MONITOR_POLL_SECONDS", "15")),
        reevaluate_seconds=float(os.getenv("MONITOR_REEVALUATE_SECONDS", "5")),
        warn_ms=int(os.getenv("OFFLINE_WARN_MS", str(45 * 1000))),
        alert_ms=int(os.getenv("OFFLINE_ALERT_MS", str(5 * 60 * 1000))),
        repeat_window_ms=int(os.getenv("REPEAT_WINDOW_MS", str(10 * 60 * 1000))),
        persist_window_ms=int(os.getenv("PERSIST_WINDOW_MS", str(30 * 60 * 1000))),
        snooze_ms=int(os.getenv("MODAL_SNOOZE_MS", str(5 * 60 * 1000))),
        anomaly_toast_window_ms=int(os.getenv("ANOMALY_TOAST_WINDOW_MS", "0")),
        lang_mode=os.getenv("MONITOR_LANG", "auto"),
        display_tz=os.getenv("DISPLAY_TZ", "Asia/Tokyo"),
        locale=os.getenv("MONITOR_LOCALE", ""),
        backend_url=os.getenv("BACKEND_URL", ""),
        internal_api_key=os.getenv("INTERNAL_API_KEY", ""),
        toast_min_gap_ms=int(os.getenv("TOAST_MIN_GAP_MS", "6000")),
        # 0 = sin servidor de métricas
        metrics_port=int(os.getenv("MONITOR_METRICS_PORT", "0")),
    )
