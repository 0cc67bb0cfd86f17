"""Decoding of the APRS timestamp formats.

Recognised forms, selected by the trailing character or the length:

- ``DDHHMMz``  day/hour/minute UTC in the current month
- ``DDHHMM/``  local time, not supported (no timestamp)
- ``HHMMSSh``  hour/minute/second UTC on the current day
- ``MMDDHHMM`` month/day/hour/minute UTC in the current year
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from . import timeutils

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())

TIMESTAMP_LENGTH = 7
_MONTH_FORM_LENGTH = 8


def decode_timestamp(text: str, *, now: datetime | None = None) -> datetime | None:
    """Return the UTC ``datetime`` encoded in ``text`` or ``None``.

    ``now`` supplies the month/year (and day) the short forms omit. A ``z``
    form with bad digits falls back to ``now``; any other fault gives None.
    """
    if not text:
        return None
    reference = now or timeutils.utc_now()
    try:
        return _decode(text, reference)
    except ValueError as exc:
        logger.debug("Timestamp %r not decodable: %s", text, exc)
        return None


def _decode(text: str, now: datetime) -> datetime | None:
    suffix = text[-1]
    if suffix == "z":
        try:
            day, hour, minute = int(text[0:2]), int(text[2:4]), int(text[4:6])
            return datetime(now.year, now.month, day, hour, minute, tzinfo=timezone.utc)
        except ValueError:
            return now
    if suffix == "/":
        return None
    if suffix == "h":
        hour, minute, second = int(text[0:2]), int(text[2:4]), int(text[4:6])
        return datetime(
            now.year, now.month, now.day, hour, minute, second, tzinfo=timezone.utc
        )
    if len(text) == _MONTH_FORM_LENGTH:
        month, day = int(text[0:2]), int(text[2:4])
        hour, minute = int(text[4:6]), int(text[6:8])
        return datetime(now.year, month, day, hour, minute, tzinfo=timezone.utc)
    return None
