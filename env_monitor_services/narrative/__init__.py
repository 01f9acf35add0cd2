"""Narrativa de una frase para el dispositivo seleccionado."""
