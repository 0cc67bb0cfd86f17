"""Position and symbol decoding for plain and base-91 compressed reports."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from .models import Coordinate, CoordinateSet, Position

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())

UNCOMPRESSED_LENGTH = 19
COMPRESSED_LENGTH = 13

BASE91_OFFSET = 33
BASE91_RADIX = 91
COMPRESSED_LAT_DIVISOR = 380926.0
COMPRESSED_LON_DIVISOR = 190463.0

# Compressed reports never start with a digit, so a numeric overlay is sent as a..j
_OVERLAY_LETTERS = "abcdefghij"


@dataclass(slots=True, frozen=True)
class PositionFields:
    position: Position = field(default_factory=Position)
    symbol_table_identifier: str | None = None
    symbol_code: str | None = None
    comment: str = ""


def decode_base91(chars: str) -> int:
    """Combine base-91 digits (ASCII 33 = 0) most significant first."""
    total = 0
    for ch in chars:
        total = total * BASE91_RADIX + (ord(ch) - BASE91_OFFSET)
    return total


def decode_position_and_symbol(
    field_text: str, *, original: str | None = None
) -> PositionFields:
    """Decode the position and symbol at the start of ``field_text``.

    The undecoded remainder is returned as the comment. If anything goes
    wrong the untouched ``original`` field (defaults to ``field_text``) is
    returned as the comment instead.
    """
    try:
        if not field_text:
            return PositionFields()
        if "0" <= field_text[0] <= "9":
            return _decode_uncompressed(field_text)
        return _decode_compressed(field_text)
    except (ValueError, IndexError, TypeError) as exc:
        logger.debug("Position decode failed for %r: %s", field_text, exc)
        return PositionFields(comment=field_text if original is None else original)


def _decode_uncompressed(text: str) -> PositionFields:
    if len(text) < UNCOMPRESSED_LENGTH:
        return PositionFields()

    # DDMM.mmN T DDDMM.mmW C
    coordinates = CoordinateSet(
        Coordinate.from_nmea(text[0:8]),
        Coordinate.from_nmea(text[9:18]),
    )
    if not coordinates.in_range:
        coordinates = CoordinateSet()

    return PositionFields(
        position=Position(coordinate_set=coordinates),
        symbol_table_identifier=text[8],
        symbol_code=text[18],
        comment=text[UNCOMPRESSED_LENGTH:],
    )


def _decode_compressed(text: str) -> PositionFields:
    if len(text) < COMPRESSED_LENGTH:
        return PositionFields()

    table = text[0]
    if table in _OVERLAY_LETTERS:
        table = chr(ord(table) - ord("a") + ord("0"))

    latitude = 90 - decode_base91(text[1:5]) / COMPRESSED_LAT_DIVISOR
    longitude = -180 + decode_base91(text[5:9]) / COMPRESSED_LON_DIVISOR
    coordinates = CoordinateSet.from_values(latitude, longitude)
    if not coordinates.in_range:
        coordinates = CoordinateSet()

    # text[10:13] holds course/speed and the compression type; left undecoded
    return PositionFields(
        position=Position(coordinate_set=coordinates),
        symbol_table_identifier=table,
        symbol_code=text[9],
        comment=text[COMPRESSED_LENGTH:],
    )
