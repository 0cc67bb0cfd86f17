"""Command-line interface entry points for neo-aprsparse."""

from __future__ import annotations

import argparse
import logging
import os
import sys
import time
from argparse import Namespace
from typing import Callable

from neo_aprsparse import __version__
from neo_aprsparse import config as config_module
from neo_aprsparse.commands import run_beacon, run_decode, run_passcode, run_setup, run_stream

CommandHandler = Callable[[Namespace], int]

LOG_LEVEL_ENV_VAR = "NEO_APRSPARSE_LOG_LEVEL"
LOG_FILENAME = "neo-aprsparse.log"

_LOG_LEVEL_ALIASES: dict[str, int] = {
    "critical": logging.CRITICAL,
    "error": logging.ERROR,
    "warning": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
}


def _resolve_log_level(candidate: str | None) -> int:
    for value in (candidate, os.getenv(LOG_LEVEL_ENV_VAR)):
        if not value:
            continue
        stripped = value.strip()
        if not stripped:
            continue
        lower = stripped.lower()
        if lower in _LOG_LEVEL_ALIASES:
            return _LOG_LEVEL_ALIASES[lower]
        if stripped.isdigit():
            return int(stripped)
    return logging.INFO


def _configure_logging(level_name: str | None) -> None:
    # stderr keeps stdout clean for decoded output and JSON records
    stream_handler = logging.StreamHandler(sys.stderr)
    stream_handler.setFormatter(logging.Formatter("%(message)s"))
    handlers: list[logging.Handler] = [stream_handler]

    try:
        log_dir = config_module.get_logs_dir()
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_dir / LOG_FILENAME, encoding="utf-8")
        file_formatter = logging.Formatter(
            "%(asctime)sZ %(levelname)s %(name)s %(message)s", datefmt="%Y-%m-%dT%H:%M:%S"
        )
        file_formatter.converter = time.gmtime
        file_handler.setFormatter(file_formatter)
        handlers.append(file_handler)
    except OSError:
        # Without a writable data directory we log to the console only.
        pass

    logging.basicConfig(
        level=_resolve_log_level(level_name),
        handlers=handlers,
        force=True,
    )


def build_parser() -> argparse.ArgumentParser:
    """Construct the top-level argument parser."""
    parser = argparse.ArgumentParser(
        prog="neo-aprsparse",
        description="Decode APRS packets and plan SmartBeaconing transmissions.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Environment overrides:\n"
            "  NEO_APRSPARSE_LOG_LEVEL      Default logging level when --log-level is omitted.\n"
            "  NEO_APRSPARSE_CONFIG_PATH    Path to config.toml.\n"
            "  NEO_APRSPARSE_<SECTION>__<KEY>  Override a single config value."
        ),
    )
    parser.add_argument(
        "--log-level",
        help="Set log verbosity (DEBUG, INFO, WARNING, ERROR, CRITICAL or numeric)",
    )
    parser.add_argument(
        "--config",
        help="Path to configuration file (overrides default location)",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"neo-aprsparse {__version__}",
        help="Show package version and exit",
    )
    subparsers = parser.add_subparsers(dest="command", required=False)

    decode_parser = subparsers.add_parser(
        "decode", help="Decode TNC2 lines from a file or stdin"
    )
    decode_parser.add_argument(
        "--input",
        help="File with one TNC2 packet per line (default: stdin)",
    )
    decode_parser.add_argument(
        "--json",
        action="store_true",
        help="Emit one JSON record per packet",
    )

    stream_parser = subparsers.add_parser(
        "stream", help="Decode live packets from an APRS-IS server"
    )
    stream_parser.add_argument(
        "--filter",
        help="APRS-IS server-side filter, e.g. 'r/49.0/-72.0/50'",
    )
    stream_parser.add_argument(
        "--count",
        type=_positive_int,
        help="Stop after this many packets",
    )

    beacon_parser = subparsers.add_parser(
        "beacon", help="Replay a GPS track (CSV) through SmartBeaconing"
    )
    beacon_parser.add_argument(
        "--input",
        required=True,
        help="CSV with timestamp,latitude,longitude,speed_kmh[,bearing] columns",
    )

    passcode_parser = subparsers.add_parser(
        "passcode", help="Print the APRS-IS passcode for a callsign"
    )
    passcode_parser.add_argument("callsign", help="Callsign, with or without SSID")

    setup_parser = subparsers.add_parser(
        "setup", help="Write station settings to the configuration file"
    )
    setup_parser.add_argument("--callsign", help="Station callsign, optionally with SSID")
    setup_parser.add_argument("--passcode", help="APRS-IS passcode (omit for receive-only)")
    setup_parser.add_argument("--server", help="APRS-IS server hostname")
    setup_parser.add_argument("--port", type=_positive_int, help="APRS-IS server port")
    setup_parser.add_argument("--filter", help="Default APRS-IS server-side filter")
    setup_parser.add_argument(
        "--reset",
        action="store_true",
        help="Discard the existing configuration before applying values",
    )
    setup_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show the resulting configuration without writing it",
    )

    return parser


def _positive_int(raw: str) -> int:
    try:
        value = int(raw)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"not an integer: {raw!r}") from exc
    if value <= 0:
        raise argparse.ArgumentTypeError("must be greater than zero")
    return value


def main(argv: list[str] | None = None) -> int:
    """Process CLI arguments and dispatch to the requested command."""
    parser = build_parser()
    args = parser.parse_args(argv)

    # Require an explicit command; no silent default behavior
    if args.command is None:
        parser.error("command required")

    _configure_logging(getattr(args, "log_level", None))

    handlers: dict[str, CommandHandler] = {
        "decode": run_decode,
        "stream": run_stream,
        "beacon": run_beacon,
        "passcode": run_passcode,
        "setup": run_setup,
    }
    handler = handlers.get(args.command)
    if handler is None:  # pragma: no cover - future safeguard
        parser.error(f"Unknown command: {args.command}")

    return handler(args)


if __name__ == "__main__":  # pragma: no cover - direct CLI execution path
    raise SystemExit(main())
