"""Lecturas recientes desde SQL (solo lectura).

Tabla esperada:
    sensor_readings(device_id, timestamp, temperature, humidity, pressure, light)
"""

from __future__ import annotations

import logging
import re
from typing import Any, Dict, List

from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from .reading_source import ReadingSource, ReadingSourceError

logger = logging.getLogger(__name__)

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)?$")


class SqlReadingSource(ReadingSource):
    """ReadingSource sobre SQLAlchemy Core."""

    def __init__(self, engine: Engine, table: str = "sensor_readings") -> None:
        if not _IDENTIFIER.match(table):
            raise ValueError(f"Nombre de tabla inválido: {table!r}")
        self._engine = engine
        self._query = text(
            f"""
            SELECT timestamp, temperature, humidity, pressure, light
            FROM {table}
            WHERE device_id = :device_id
            ORDER BY timestamp DESC
            LIMIT :limit
            """
        )

    def fetch_recent(self, device_id: str, limit: int) -> List[Dict[str, Any]]:  # type: ignore[override]
        try:
            with self._engine.connect() as conn:
                rows = conn.execute(
                    self._query, {"device_id": device_id, "limit": int(limit)}
                ).mappings().all()
        except SQLAlchemyError as e:
            logger.error("[DB] Falló lectura device=%s err=%s", device_id, type(e).__name__)
            raise ReadingSourceError(f"fetch_recent failed for {device_id}") from e

        # Invertir para orden cronológico
        return [
            {
                "timestamp": row["timestamp"],
                "Temperature": row["temperature"],
                "Humidity": row["humidity"],
                "Pressure": row["pressure"],
                "Light": row["light"],
            }
            for row in reversed(rows)
        ]
