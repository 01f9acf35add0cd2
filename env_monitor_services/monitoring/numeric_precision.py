"""Funciones canónicas de validación numérica.

Política:
- Cálculos internos: Python float (IEEE 754 double)
- Valores NaN/Infinity nunca entran a una serie
- Redondeo: SOLO en frontera (texto para el operador)
"""

from __future__ import annotations

import math
from typing import Optional


def safe_float(value, default: Optional[float] = 0.0) -> Optional[float]:
    """Convierte un valor a float con validación de NaN/Infinity.

    Args:
        value: Valor a convertir (puede ser None, str, Decimal, etc.)
        default: Valor por defecto si es inválido

    Returns:
        Float válido o default si el valor es None, bool, NaN o Infinity
    """
    if value is None or isinstance(value, bool):
        return default
    try:
        f = float(value)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(f):
        return default
    return f


def is_valid_sensor_value(value) -> bool:
    """True si el valor es un número finito utilizable."""
    return safe_float(value, None) is not None


def format_signed(value: float, decimals: int) -> str:
    """Formatea un delta con signo explícito (+4.0, -0.5)."""
    sign = "+" if value >= 0 else ""
    return f"{sign}{value:.{decimals}f}"
