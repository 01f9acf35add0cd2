"""Poller periódico del monitoreo global."""
