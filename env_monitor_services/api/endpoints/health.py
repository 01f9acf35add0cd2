"""Health and metrics endpoints."""

from fastapi import APIRouter
from fastapi.responses import Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

router = APIRouter(tags=["health"])


@router.get("/health")
def health():
    """Liveness probe: always returns ok if process is running."""
    return {"status": "ok"}


@router.get("/metrics")
def metrics():
    """Métricas Prometheus del proceso."""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
