"""Métricas Prometheus del runner de monitoreo."""

from __future__ import annotations

from prometheus_client import Counter, Gauge, Histogram

MONITOR_POLLS = Counter(
    "env_monitor_polls_total",
    "Total poll cycles",
    ["status"],  # ok, skipped
)
MONITOR_FETCH_FAILURES = Counter(
    "env_monitor_fetch_failures_total",
    "Reading fetch failures per device",
    ["device_id"],
)
MONITOR_NOTIFICATIONS = Counter(
    "env_monitor_notifications_total",
    "Notifications shown by the dispatcher",
    ["kind", "level"],  # kind: toast, modal
)
MONITOR_EVALUATION_LATENCY = Histogram(
    "env_monitor_evaluation_seconds",
    "Escalation engine evaluation latency",
    buckets=[0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0],
)
MONITOR_ACTIVE_CANDIDATES = Gauge(
    "env_monitor_active_candidates",
    "Candidates found in the last evaluation",
)
