from __future__ import annotations

import threading
from typing import Optional

from fastapi import FastAPI

from .. import __version__
from ..common.config import get_settings
from ..i18n.messages import default_locale_provider
from ..monitoring.engine import GlobalEscalationEngine
from ..narrative.builder import NarrativeBuilder
from .endpoints.health import router as health_router
from .endpoints.monitoring import router as monitoring_router


def create_app(
    engine: Optional[GlobalEscalationEngine] = None,
    narrative: Optional[NarrativeBuilder] = None,
) -> FastAPI:
    """Construye la app con su propio motor (sin estado global entre apps)."""
    if engine is None or narrative is None:
        settings = get_settings()
        locale = settings.locale
        locale_provider = (lambda: locale) if locale else default_locale_provider
        if engine is None:
            engine = GlobalEscalationEngine(locale_provider=locale_provider, display_tz=settings.display_tz)
        if narrative is None:
            narrative = NarrativeBuilder(locale_provider=locale_provider, display_tz=settings.display_tz)

    app = FastAPI(title="Environment Monitor Service", version=__version__)
    app.state.escalation_engine = engine
    app.state.narrative_builder = narrative
    app.state.eval_lock = threading.Lock()
    app.state.narrative_lock = threading.Lock()
    app.state.last_devices = []
    app.state.last_params = {}

    app.include_router(health_router)
    app.include_router(monitoring_router)
    return app


app = create_app()
