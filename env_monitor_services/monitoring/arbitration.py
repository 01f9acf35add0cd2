"""Arbitraje de severidad: una sola notificación por ciclo."""

from __future__ import annotations

from typing import List, Sequence

from .models import Candidate, EvaluationResult, Notification, Stage


def rank_candidates(candidates: Sequence[Candidate]) -> List[Candidate]:
    """Ordena por (stage, seen_since_ms) descendente.

    El orden es estable: a igualdad total gana el primero observado.
    """
    return sorted(
        candidates,
        key=lambda c: (c.stage, c.seen_since_ms or 0),
        reverse=True,
    )


def select_notification(candidates: Sequence[Candidate], lang: str) -> EvaluationResult:
    """Convierte el candidato de mayor prioridad en toast o modal."""
    if not candidates:
        return EvaluationResult(lang=lang)

    top = rank_candidates(candidates)[0]

    if top.stage >= Stage.CRITICAL:
        return EvaluationResult(
            lang=lang,
            modal=Notification(level="critical", text=top.text, event_key=top.event_key),
        )
    if top.stage == Stage.MODAL:
        return EvaluationResult(
            lang=lang,
            modal=Notification(level="modal", text=top.text, event_key=top.event_key),
        )

    toast_level = "alert" if top.level == "alert" else "warn"
    return EvaluationResult(
        lang=lang,
        toast=Notification(level=toast_level, text=top.text, event_key=top.event_key),
    )
