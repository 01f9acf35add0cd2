"""Utilidades de tiempo y series.

Único punto de conversión de filas crudas a `Reading`; el resto del
pipeline trabaja sobre `SeriesPoint` ya filtrados y ordenados.
"""

from __future__ import annotations

import numbers
import statistics
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Iterable, List, Optional, Sequence, TypeVar

from .models import Reading, SeriesPoint, Signal, WindowDelta
from .numeric_precision import is_valid_sensor_value, safe_float

T = TypeVar("T")

# Epoch en segundos por debajo de este valor, en ms por encima
_EPOCH_MS_CUTOFF = 1e12


def is_epoch_number(value: Any) -> bool:
    """int, float, Decimal (columnas NUMERIC), etc.; nunca bool."""
    return isinstance(value, (numbers.Real, Decimal)) and not isinstance(value, bool)


def ts_to_ms(ts: Any) -> Optional[int]:
    """Convierte un timestamp heterogéneo a epoch en milisegundos.

    Acepta:
        - int/float/Decimal en segundos (< 1e12) o milisegundos
        - datetime (naive se asume UTC)
        - str ISO-8601 (con o sin "Z") o numérica
        - objetos con to_datetime() (timestamps de Firestore)

    Returns:
        Epoch ms o None si no es resoluble
    """
    if ts is None or isinstance(ts, bool):
        return None

    to_datetime = getattr(ts, "to_datetime", None)
    if callable(to_datetime):
        ts = to_datetime()

    if isinstance(ts, datetime):
        if ts.tzinfo is None:
            ts = ts.replace(tzinfo=timezone.utc)
        return int(ts.timestamp() * 1000)

    if is_epoch_number(ts):
        number = safe_float(ts, None)
        if number is None or number <= 0:
            return None
        return int(number * 1000) if number < _EPOCH_MS_CUTOFF else int(number)

    if isinstance(ts, str):
        raw = ts.strip()
        if not raw:
            return None
        numeric = safe_float(raw, None)
        if numeric is not None:
            return ts_to_ms(numeric)
        try:
            parsed = datetime.fromisoformat(raw.replace("Z", "+00:00"))
        except ValueError:
            return None
        return ts_to_ms(parsed)

    return None


def _row_get(row: Any, *keys: str) -> Any:
    if isinstance(row, dict):
        for key in keys:
            if key in row:
                return row[key]
        return None
    for key in keys:
        if hasattr(row, key):
            return getattr(row, key)
    return None


def to_reading(row: Any) -> Optional[Reading]:
    """Convierte una fila cruda (dict u objeto) en `Reading`.

    Los valores no numéricos quedan en None; la fila se descarta
    solo si no es dict ni objeto.
    """
    if isinstance(row, Reading):
        return row
    if row is None or isinstance(row, (str, bytes, int, float)):
        return None

    timestamp_ms = ts_to_ms(_row_get(row, "timestamp", "ts", "timestamp_ms"))
    values = {
        signal.field_name: safe_float(_row_get(row, signal.value, signal.field_name), None)
        for signal in Signal
    }
    return Reading(timestamp_ms=timestamp_ms, **values)


def parse_rows(rows: Iterable[Any]) -> List[Reading]:
    """Convierte filas crudas descartando las irrecuperables."""
    readings = []
    for row in rows or []:
        reading = to_reading(row)
        if reading is not None:
            readings.append(reading)
    return readings


def build_series(rows: Iterable[Any], signal: Signal) -> List[SeriesPoint]:
    """Serie cronológica de una señal.

    Solo incluye valores finitos con timestamp resoluble,
    ordenados por tiempo ascendente.
    """
    points = []
    for reading in parse_rows(rows):
        value = reading.value_of(signal)
        if not is_valid_sensor_value(value) or reading.timestamp_ms is None:
            continue
        points.append(SeriesPoint(time_ms=reading.timestamp_ms, value=value))
    points.sort(key=lambda p: p.time_ms)
    return points


def last_n(items: Sequence[T], n: int) -> List[T]:
    if len(items) <= n:
        return list(items)
    return list(items[len(items) - n:])


def delta_over_window(
    points: Sequence[SeriesPoint], from_ms: int, to_ms: int
) -> Optional[WindowDelta]:
    """Delta entre la primera y la última muestra dentro de [from_ms, to_ms]."""
    within = [p for p in points if from_ms <= p.time_ms <= to_ms]
    if len(within) < 2:
        return None
    first = within[0]
    last = within[-1]
    return WindowDelta(
        delta=last.value - first.value,
        from_ms=first.time_ms,
        to_ms=last.time_ms,
        first=first.value,
        last=last.value,
    )


def trailing_window_delta(
    points: Sequence[SeriesPoint], minutes: float
) -> Optional[WindowDelta]:
    """Delta de los últimos `minutes` anclado en la muestra más reciente."""
    if not points:
        return None
    to_ms = points[-1].time_ms
    from_ms = to_ms - int(minutes * 60 * 1000)
    return delta_over_window(points, from_ms, to_ms)


def step_delta(points: Sequence[SeriesPoint]) -> Optional[WindowDelta]:
    """Delta entre las dos últimas muestras."""
    if len(points) < 2:
        return None
    prev, last = points[-2], points[-1]
    return WindowDelta(
        delta=last.value - prev.value,
        from_ms=prev.time_ms,
        to_ms=last.time_ms,
        first=prev.value,
        last=last.value,
    )


def mean(values: Sequence[float]) -> Optional[float]:
    if not values:
        return None
    return statistics.fmean(values)


def std(values: Sequence[float]) -> float:
    """Desviación estándar poblacional (sin Bessel); 0 con menos de 2 valores."""
    if len(values) < 2:
        return 0.0
    return statistics.pstdev(values)


def z_anomaly(
    points: Sequence[SeriesPoint], z_threshold: float = 2.8, min_points: int = 12
) -> bool:
    """True si la última muestra está a más de z_threshold desviaciones de la media."""
    values = [p.value for p in points]
    if len(values) < min_points:
        return False
    sd = std(values)
    if sd <= 1e-9:
        return False
    z = abs((values[-1] - mean(values)) / sd)
    return z > z_threshold
