"""Write the station configuration file from command-line values."""

from __future__ import annotations

import logging
import re
from argparse import Namespace
from typing import Any

from .. import config as config_module

CALLSIGN_PATTERN = re.compile(r"^[A-Z0-9]{1,6}(-[0-9]{1,2})?$")

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())


def run_setup(args: Namespace) -> int:
    """Merge the given values over the current configuration and save it."""
    config_path = config_module.resolve_config_path(getattr(args, "config", None))

    if getattr(args, "reset", False) and config_path.exists():
        config_path.unlink()
        logger.info("Removed existing configuration at %s", config_path)

    overrides = _collect_overrides(args)
    callsign = overrides.get("station", {}).get("callsign")
    if callsign is not None and not CALLSIGN_PATTERN.match(callsign):
        logger.error("Callsign must look like CALL or CALL-SSID: %s", callsign)
        return 1

    try:
        new_config = config_module.load_config(config_path, overrides)
    except ValueError as exc:
        logger.error("Configuration invalid: %s", exc)
        return 1

    if getattr(args, "dry_run", False):
        logger.info("Dry run: configuration not written")
        logger.info("%s", config_module.config_summary(new_config))
        return 0

    saved_path = config_module.save_config(new_config, path=config_path)
    logger.info("Configuration saved to %s", saved_path)
    logger.info("%s", config_module.config_summary(new_config))
    return 0


def _collect_overrides(args: Namespace) -> dict[str, Any]:
    station: dict[str, Any] = {}
    aprs: dict[str, Any] = {}
    callsign = getattr(args, "callsign", None)
    if callsign:
        station["callsign"] = callsign.strip().upper()
    passcode = getattr(args, "passcode", None)
    if passcode:
        station["passcode"] = passcode.strip()
    for attr, key in (("server", "server"), ("port", "port"), ("filter", "filter")):
        value = getattr(args, attr, None)
        if value is not None:
            aprs[key] = value

    overrides: dict[str, Any] = {}
    if station:
        overrides["station"] = station
    if aprs:
        overrides["aprs"] = aprs
    return overrides
