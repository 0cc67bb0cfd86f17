"""Coordinate conversions used by the packet decoders.

Covers Maidenhead grid locators and the NMEA-style ``DDMM.mmN`` /
``DDDMM.mmW`` strings found in uncompressed APRS positions.
"""

from __future__ import annotations

import math
import re

GRID_CENTER_SUFFIX = "IL"

_GRID_PATTERN = re.compile(r"^[A-R]{2}[0-9]{2}[A-X]{2}$")
_LATITUDE_NMEA_LENGTH = 8
_LONGITUDE_NMEA_LENGTH = 9


def latlon_to_gridsquare(latitude: float, longitude: float) -> str:
    """Return the 6-character Maidenhead locator for a coordinate.

    Latitude is shifted into 0..180 and longitude into 0..360, then split
    into 20x10 degree fields, 2x1 degree squares and 1/12 x 1/24 degree
    subsquares. Every step truncates.
    """
    lat = latitude + 90
    lon = longitude + 180

    field_lon = int(lon / 20)
    lon -= field_lon * 20
    field_lat = int(lat / 10)
    lat -= field_lat * 10

    square_lon = int(lon / 2)
    square_lat = int(lat)
    lon -= square_lon * 2
    lat -= square_lat

    return (
        chr(ord("A") + field_lon)
        + chr(ord("A") + field_lat)
        + str(square_lon)
        + str(square_lat)
        + chr(ord("A") + int(lon * 12))
        + chr(ord("A") + int(lat * 24))
    )


def gridsquare_to_latlon(locator: str) -> tuple[float, float] | None:
    """Return the centre ``(latitude, longitude)`` of a 4 or 6 character locator.

    Four character locators are padded to the middle subsquare. Anything
    that does not match the field/square/subsquare pattern returns None.
    """
    locator = locator.upper()
    if len(locator) == 4:
        locator += GRID_CENTER_SUFFIX
    if not _GRID_PATTERN.match(locator):
        return None
    longitude = (
        (ord(locator[0]) - ord("A")) * 20
        + int(locator[2]) * 2
        + (ord(locator[4]) - ord("A") + 0.5) / 12
        - 180
    )
    latitude = (
        (ord(locator[1]) - ord("A")) * 10
        + int(locator[3])
        + (ord(locator[5]) - ord("A") + 0.5) / 24
        - 90
    )
    return latitude, longitude


def _to_nmea(value: float, direction: str, degree_digits: int) -> str:
    magnitude = abs(value)
    degrees = math.floor(magnitude)
    minutes = (magnitude - degrees) * 60
    # f-string formatting always uses "." regardless of the host locale
    return f"{degrees:0{degree_digits}d}{minutes:05.2f}{direction}"


def lat_to_nmea(latitude: float) -> str:
    """Format a latitude as ``DDMM.mmN`` / ``DDMM.mmS``."""
    return _to_nmea(latitude, "S" if latitude < 0 else "N", 2)


def lon_to_nmea(longitude: float) -> str:
    """Format a longitude as ``DDDMM.mmE`` / ``DDDMM.mmW``."""
    return _to_nmea(longitude, "W" if longitude < 0 else "E", 3)


def nmea_to_float(nmea: str | None) -> float:
    """Parse an NMEA-style latitude (8 chars) or longitude (9 chars).

    Returns 0.0 for empty input, any other length, or unparsable digits.
    """
    if not nmea:
        return 0.0
    if len(nmea) == _LATITUDE_NMEA_LENGTH:
        degree_digits, negative = 2, "S"
    elif len(nmea) == _LONGITUDE_NMEA_LENGTH:
        degree_digits, negative = 3, "W"
    else:
        return 0.0
    try:
        value = float(nmea[:degree_digits])
        value += float(nmea[degree_digits : degree_digits + 5]) / 60
    except ValueError:
        return 0.0
    if nmea[-1].upper() == negative:
        value = -value
    return value
