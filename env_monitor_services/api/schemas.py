from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field

LangMode = Literal["auto", "en", "jp"]


class DeviceSnapshotIn(BaseModel):
    device_id: str = Field(..., min_length=1)
    device_name: str = ""
    # Filas crudas: timestamp + Temperature/Humidity/Pressure/Light
    rows: List[Dict[str, Any]] = Field(default_factory=list)
    # epoch ms, epoch s o ISO-8601; None = nunca visto
    last_data_ms: Optional[Any] = None


class EvaluateRequest(BaseModel):
    devices: List[DeviceSnapshotIn] = Field(default_factory=list)
    now_ms: Optional[int] = Field(default=None, gt=0)
    lang_mode: LangMode = "auto"

    warn_ms: Optional[int] = Field(default=None, ge=0)
    alert_ms: Optional[int] = Field(default=None, ge=0)
    repeat_window_ms: Optional[int] = Field(default=None, ge=0)
    persist_window_ms: Optional[int] = Field(default=None, ge=0)
    snooze_ms: Optional[int] = Field(default=None, ge=0)
    anomaly_toast_window_ms: Optional[int] = Field(default=None, ge=0)

    ack_event_key: Optional[str] = None


class AckRequest(BaseModel):
    event_key: str = Field(..., min_length=1)
    now_ms: Optional[int] = Field(default=None, gt=0)
    lang_mode: LangMode = "auto"


class NotificationOut(BaseModel):
    level: str
    text: str
    event_key: str


class EvaluationOut(BaseModel):
    toast: Optional[NotificationOut] = None
    modal: Optional[NotificationOut] = None
    lang: str


class NarrativeRequest(BaseModel):
    rows: List[Dict[str, Any]] = Field(default_factory=list)
    view_mode: Literal["live", "day", "range"] = "live"
    now_ms: Optional[int] = Field(default=None, gt=0)
    device_name: str = ""
    range_start_ms: Optional[int] = None
    range_end_ms: Optional[int] = None
    lang_mode: LangMode = "auto"


class NarrativeOut(BaseModel):
    title: str
    badge_level: Literal["OK", "WARN"]
    message: str
    lang: str


class EventStateOut(BaseModel):
    first_seen_ms: Optional[int] = None
    last_seen_ms: Optional[int] = None
    last_fired_stage: int = 0
    last_ack_ms: Optional[int] = None


class EventsOut(BaseModel):
    events: Dict[str, EventStateOut] = Field(default_factory=dict)
