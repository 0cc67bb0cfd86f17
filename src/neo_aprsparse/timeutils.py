"""Small time utilities used by the decoders and the CLI."""

from __future__ import annotations

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Return the current time as a timezone-aware UTC ``datetime``."""
    return datetime.now(timezone.utc)


def utc_timestamp() -> str:
    """Return current UTC time formatted as YYYY-MM-DDTHH:MM:SSZ.

    Using a timezone-aware `datetime` avoids deprecation warnings.
    """
    return utc_now().strftime("%Y-%m-%dT%H:%M:%SZ")
