"""Endpoints del motor de escalamiento y de la narrativa."""

from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, Depends, Request

from ...monitoring.engine import GlobalEscalationEngine
from ...monitoring.models import DeviceSnapshot, EvaluationResult
from ...narrative.builder import NarrativeBuilder
from ..schemas import (
    AckRequest,
    EvaluateRequest,
    EvaluationOut,
    EventsOut,
    NarrativeOut,
    NarrativeRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["monitoring"])


def get_escalation_engine(request: Request) -> GlobalEscalationEngine:
    return request.app.state.escalation_engine


def get_narrative_builder(request: Request) -> NarrativeBuilder:
    return request.app.state.narrative_builder


def _result_out(result: EvaluationResult) -> EvaluationOut:
    return EvaluationOut.model_validate(result.to_dict())


@router.post("/evaluate", response_model=EvaluationOut)
def evaluate(
    payload: EvaluateRequest,
    request: Request,
    engine: GlobalEscalationEngine = Depends(get_escalation_engine),
) -> EvaluationOut:
    devices: List[DeviceSnapshot] = [
        DeviceSnapshot.from_mapping(d.model_dump()) for d in payload.devices
    ]
    params = payload.model_dump(exclude={"devices"})

    # Una sola evaluación en curso
    with request.app.state.eval_lock:
        result = engine.evaluate(devices, **params)
        request.app.state.last_devices = devices
        request.app.state.last_params = {
            k: v for k, v in params.items() if k not in ("now_ms", "ack_event_key", "lang_mode")
        }

    return _result_out(result)


@router.post("/ack", response_model=EvaluationOut)
def acknowledge(
    payload: AckRequest,
    request: Request,
    engine: GlobalEscalationEngine = Depends(get_escalation_engine),
) -> EvaluationOut:
    """OK del operador: silencia el evento y re-evalúa el último snapshot."""
    with request.app.state.eval_lock:
        result = engine.evaluate(
            request.app.state.last_devices,
            now_ms=payload.now_ms,
            lang_mode=payload.lang_mode,
            ack_event_key=payload.event_key,
            **request.app.state.last_params,
        )
    logger.info("[API] ack event=%s", payload.event_key)
    return _result_out(result)


@router.post("/narrative", response_model=NarrativeOut)
def narrative(
    payload: NarrativeRequest,
    request: Request,
    builder: NarrativeBuilder = Depends(get_narrative_builder),
) -> NarrativeOut:
    with request.app.state.narrative_lock:
        result = builder.update(**payload.model_dump())
    return NarrativeOut.model_validate(result.to_dict())


@router.get("/events", response_model=EventsOut)
def events(engine: GlobalEscalationEngine = Depends(get_escalation_engine)) -> EventsOut:
    """Vista de solo lectura del EventStore."""
    return EventsOut.model_validate({"events": engine.store.snapshot()})
