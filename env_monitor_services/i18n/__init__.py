"""Catálogo de mensajes bilingüe (EN/JP) y formato de presentación."""

from .messages import TEXT, SUPPORTED_LANGS, message, resolve_language, signal_label

__all__ = ["TEXT", "SUPPORTED_LANGS", "message", "resolve_language", "signal_label"]
