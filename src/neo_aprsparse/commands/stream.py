"""Decode live traffic from an APRS-IS server."""

from __future__ import annotations

import logging
import time
from argparse import Namespace
from typing import Any, Optional

from .. import config as config_module
from ..aprsis_client import APRSISClient, APRSISClientError, RetryBackoff
from ..decoder import PacketDecoder
from ..timeutils import utc_timestamp
from .decode import format_packet

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())

STATS_INTERVAL = 60.0


def run_stream(args: Namespace) -> int:
    """Connect to APRS-IS and print each decoded packet until stopped."""
    overrides: dict[str, Any] = {}
    filter_string = getattr(args, "filter", None)
    if filter_string:
        overrides = {"aprs": {"filter": filter_string}}
    try:
        app_config = config_module.load_config(getattr(args, "config", None), overrides)
    except ValueError as exc:
        logger.error("Config invalid: %s", exc)
        return 1

    limit: Optional[int] = getattr(args, "count", None)
    aprs_config = app_config.station.to_aprsis_config()
    logger.debug("Configuration:\n%s", config_module.config_summary(app_config))
    if aprs_config.receive_only:
        logger.info("No passcode configured; connecting receive-only")

    decoder = PacketDecoder()
    backoff = RetryBackoff(base_delay=2.0, max_delay=120.0, multiplier=2.0)
    client: Optional[APRSISClient] = None
    next_stats_report = time.monotonic() + STATS_INTERVAL
    shown = 0

    try:
        while limit is None or shown < limit:
            if client is None:
                if not backoff.ready():
                    time.sleep(backoff.seconds_until_ready())
                try:
                    candidate = APRSISClient(aprs_config)
                    candidate.connect()
                    client = candidate
                    backoff.record_success()
                except APRSISClientError as exc:
                    delay = backoff.record_failure()
                    logger.warning(
                        "APRS-IS connection failed: %s; retrying in %ss", exc, int(delay)
                    )
                    continue

            try:
                for line in client.iter_lines():
                    if not line.strip():
                        continue
                    result = decoder.decode(line)
                    if result.packet is not None:
                        shown += 1
                        print(f"[{shown:06d}] {format_packet(result.packet)}", flush=True)

                    if time.monotonic() >= next_stats_report:
                        _log_stats(decoder)
                        next_stats_report = time.monotonic() + STATS_INTERVAL
                    if limit is not None and shown >= limit:
                        break
            except APRSISClientError as exc:
                logger.warning("APRS-IS read error: %s; reconnecting", exc)
                client.close()
                client = None
    except KeyboardInterrupt:
        logger.info("Stopping stream...")
    finally:
        if client is not None:
            client.close()

    stats = decoder.stats
    logger.info(
        "Lines processed: %s (decoded=%s, failed=%s)",
        stats.lines,
        stats.decoded,
        stats.failed,
    )
    return 0


def _log_stats(decoder: PacketDecoder) -> None:
    stats = decoder.stats
    logger.info(
        "[stats %s] lines=%s decoded=%s failed=%s",
        utc_timestamp(),
        stats.lines,
        stats.decoded,
        stats.failed,
    )
