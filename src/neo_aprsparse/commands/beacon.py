"""Replay recorded GPS samples through SmartBeaconing.

The input is a CSV file with a header row and the columns
``timestamp`` (ISO 8601, UTC when no offset is given), ``latitude``,
``longitude``, ``speed_kmh`` and an optional ``bearing`` (degrees,
empty when unknown).
"""

from __future__ import annotations

import csv
import logging
from argparse import Namespace
from datetime import datetime, timezone
from typing import Optional

from .. import config as config_module
from ..beaconing import KMH_TO_MS, Location, SmartBeaconing
from ..coordinates import latlon_to_gridsquare

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())

REQUIRED_COLUMNS = ("timestamp", "latitude", "longitude", "speed_kmh")


class SampleError(ValueError):
    pass


def run_beacon(args: Namespace) -> int:
    """Print the samples at which a beacon would have been transmitted."""
    try:
        app_config = config_module.load_config(getattr(args, "config", None))
    except ValueError as exc:
        logger.error("Config invalid: %s", exc)
        return 1

    engine = SmartBeaconing(app_config.beaconing)
    input_path = args.input
    samples = 0
    beacons = 0
    try:
        with open(input_path, newline="", encoding="utf-8") as handle:
            reader = csv.DictReader(handle)
            missing = [c for c in REQUIRED_COLUMNS if c not in (reader.fieldnames or ())]
            if missing:
                logger.error("%s is missing columns: %s", input_path, ", ".join(missing))
                return 1
            for row_number, row in enumerate(reader, start=2):
                try:
                    location = parse_sample(row)
                except SampleError as exc:
                    logger.warning("Skipping row %s: %s", row_number, exc)
                    continue
                samples += 1
                if engine.check_location(location):
                    beacons += 1
                    grid = latlon_to_gridsquare(location.latitude, location.longitude)
                    print(
                        f"{location.timestamp.strftime('%Y-%m-%dT%H:%M:%SZ')} "
                        f"{location.latitude:.5f},{location.longitude:.5f} {grid} "
                        f"{location.speed / KMH_TO_MS:.1f}km/h"
                    )
    except OSError as exc:
        logger.error("Unable to read %s: %s", input_path, exc)
        return 1

    logger.info("Samples: %s beacons: %s", samples, beacons)
    return 0


def parse_sample(row: dict[str, Optional[str]]) -> Location:
    """Build a :class:`Location` (speed in m/s) from one CSV row."""
    timestamp = _parse_timestamp(row.get("timestamp"))
    if timestamp is None:
        raise SampleError(f"invalid timestamp {row.get('timestamp')!r}")
    try:
        latitude = float(row.get("latitude") or "")
        longitude = float(row.get("longitude") or "")
        speed = float(row.get("speed_kmh") or "") * KMH_TO_MS
        raw_bearing = (row.get("bearing") or "").strip()
        bearing = float(raw_bearing) if raw_bearing else None
    except ValueError as exc:
        raise SampleError(str(exc)) from exc
    return Location(timestamp, latitude, longitude, speed, bearing)


def _parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    normalized = value.strip().replace("Z", "+00:00")
    try:
        dt = datetime.fromisoformat(normalized)
    except ValueError:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)
