"""CLI entry point for the monitor runner."""

from __future__ import annotations

import argparse
import logging

from prometheus_client import start_http_server

from ...common.config import get_settings
from ...common.db import get_engine
from ...i18n.messages import default_locale_provider
from ...monitoring.engine import GlobalEscalationEngine
from ...repository.sql_reading_source import SqlReadingSource
from .config import RunnerConfig
from .runner import MonitorRunner
from .sinks import LoggingNotificationSink, NotificationDispatcher, NotificationSink, WebhookNotificationSink

logger = logging.getLogger(__name__)


def main() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler()],
    )

    p = argparse.ArgumentParser(description="Environment monitor (offline + anomaly escalation)")
    p.add_argument("--sleep-seconds", type=float, default=None, help="poll interval (default: MONITOR_POLL_SECONDS)")
    p.add_argument("--lang", choices=("auto", "en", "jp"), default=None)
    p.add_argument("--once", action="store_true", help="run a single poll and exit")
    args = p.parse_args()

    settings = get_settings()
    cfg = RunnerConfig.from_settings(
        settings,
        poll_seconds=args.sleep_seconds,
        lang_mode=args.lang,
        once=bool(args.once),
    )

    locale = settings.locale
    engine = GlobalEscalationEngine(
        locale_provider=(lambda: locale) if locale else default_locale_provider,
        display_tz=settings.display_tz,
    )
    source = SqlReadingSource(get_engine(settings), table=settings.readings_table)

    sink: NotificationSink = LoggingNotificationSink()
    if settings.backend_url:
        sink = WebhookNotificationSink(settings.backend_url, settings.internal_api_key)
    dispatcher = NotificationDispatcher(sink, toast_min_gap_ms=settings.toast_min_gap_ms)

    logger.info("Monitor Runner started")
    logger.info(
        "Config: devices=%d, rows=%d, poll=%.1fs, reevaluate=%.1fs, lang=%s",
        len(settings.devices),
        cfg.rows_per_device,
        cfg.poll_seconds,
        cfg.reevaluate_seconds,
        cfg.lang_mode,
    )

    if settings.metrics_port > 0:
        start_http_server(settings.metrics_port)
        logger.info("Metrics server on :%d", settings.metrics_port)

    runner = MonitorRunner(engine, source, settings.devices, dispatcher, cfg)
    try:
        runner.run_forever()
    except KeyboardInterrupt:
        logger.info("Monitor Runner detenido")


if __name__ == "__main__":
    main()
