"""Station identifier parsing (``BASE[-SSID]``)."""

from __future__ import annotations

from dataclasses import dataclass

MAX_SSID = 255


@dataclass(slots=True, frozen=True)
class Callsign:
    station_callsign: str
    base_callsign: str
    ssid: int = 0

    @classmethod
    def parse(cls, text: str) -> Callsign:
        """Split a station identifier into base callsign and numeric SSID.

        When the suffix after ``-`` is not an unsigned integer in 0..255 the
        whole identifier is kept as the base callsign and the SSID is 0.
        """
        station = text.upper().strip()
        if "-" not in station:
            return cls(station, station, 0)
        parts = station.split("-")
        ssid = _parse_ssid(parts[1])
        if ssid is None:
            return cls(station, station, 0)
        return cls(station, parts[0], ssid)

    def __str__(self) -> str:
        return self.station_callsign


def _parse_ssid(raw: str) -> int | None:
    if not raw.isascii() or not raw.isdigit():
        return None
    value = int(raw)
    if value > MAX_SSID:
        return None
    return value
