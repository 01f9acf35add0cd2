"""Fuentes de lecturas crudas (colaborador externo del motor).

- reading_source.py: Interfaz ReadingSource + implementación en memoria
- sql_reading_source.py: Implementación de solo lectura con SQLAlchemy
"""

from .reading_source import InMemoryReadingSource, ReadingSource, ReadingSourceError, build_snapshot

__all__ = ["InMemoryReadingSource", "ReadingSource", "ReadingSourceError", "build_snapshot"]
