"""Immutable records produced by the packet decoder.

- Coordinate / CoordinateSet: a value plus its NMEA text form
- Position: coordinates with course, speed, altitude and grid square
- MessageData: addressee, sequence id and text of an APRS message
- DecodedPacket: everything extracted from one TNC2 line
- ParseDiagnostic / DecodeResult: outcome of a decode call
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from .callsign import Callsign
from .coordinates import lat_to_nmea, lon_to_nmea, nmea_to_float
from .data_type import PacketDataType

LATITUDE_LIMIT = 90.0
LONGITUDE_LIMIT = 180.0


@dataclass(slots=True, frozen=True)
class Coordinate:
    value: float = 0.0
    nmea: str = ""

    @classmethod
    def from_value(cls, value: float, is_latitude: bool) -> Coordinate:
        nmea = lat_to_nmea(value) if is_latitude else lon_to_nmea(value)
        return cls(value, nmea)

    @classmethod
    def from_nmea(cls, nmea: str | None) -> Coordinate:
        if not nmea:
            return cls()
        return cls(nmea_to_float(nmea), nmea.strip())


@dataclass(slots=True, frozen=True)
class CoordinateSet:
    latitude: Coordinate = field(default_factory=Coordinate)
    longitude: Coordinate = field(default_factory=Coordinate)

    @classmethod
    def from_values(cls, latitude: float, longitude: float) -> CoordinateSet:
        return cls(
            Coordinate.from_value(latitude, True),
            Coordinate.from_value(longitude, False),
        )

    @property
    def is_valid(self) -> bool:
        # (0, 0) is the "no position" sentinel, even though it is a real place
        return not (self.latitude.value == 0 and self.longitude.value == 0)

    @property
    def in_range(self) -> bool:
        return (
            -LATITUDE_LIMIT <= self.latitude.value <= LATITUDE_LIMIT
            and -LONGITUDE_LIMIT <= self.longitude.value <= LONGITUDE_LIMIT
        )


@dataclass(slots=True, frozen=True)
class Position:
    coordinate_set: CoordinateSet = field(default_factory=CoordinateSet)
    ambiguity: int = 0
    course: int = 0  # degrees, 0 = unknown
    speed: int = 0  # knots
    altitude: int = 0
    gridsquare: str = ""

    @classmethod
    def empty(cls) -> Position:
        return cls()

    @property
    def is_valid(self) -> bool:
        return self.coordinate_set.is_valid

    @property
    def latitude(self) -> float:
        return self.coordinate_set.latitude.value

    @property
    def longitude(self) -> float:
        return self.coordinate_set.longitude.value


class MessageType(Enum):
    UNKNOWN = "unknown"
    GENERAL = "general"
    BULLETIN = "bulletin"
    ANNOUNCEMENT = "announcement"
    NWS = "nws"
    ACK = "ack"
    REJECT = "reject"
    AUTO_ANSWER = "auto_answer"


@dataclass(slots=True, frozen=True)
class MessageData:
    addressee: str = ""
    seq_id: str = ""
    msg_text: str = ""
    msg_type: MessageType = MessageType.UNKNOWN
    msg_index: int = 0  # Mic-E message code, meaningless elsewhere


@dataclass(slots=True, frozen=True)
class DecodedPacket:
    """One TNC2 line split into its header and decoded information field."""

    raw_packet: str
    source_callsign: Callsign
    dest_callsign: Callsign
    digipeater_path: str
    data_type_char: str | None
    data_type: PacketDataType
    source_path_header: str
    information_field: str
    comment: str = ""
    symbol_table_identifier: str | None = None
    symbol_code: str | None = None
    from_d7: bool = False
    from_d700: bool = False
    timestamp: datetime | None = None
    position: Position = field(default_factory=Position)
    message_data: MessageData = field(default_factory=MessageData)

    @property
    def digipeaters(self) -> list[str]:
        return [hop for hop in self.digipeater_path.split(",") if hop]

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serialisable view of the packet."""
        position = self.position
        message = self.message_data
        return {
            "raw": self.raw_packet,
            "source": self.source_callsign.station_callsign,
            "destination": self.dest_callsign.station_callsign,
            "path": self.digipeaters,
            "data_type": self.data_type.value,
            "symbol_table": self.symbol_table_identifier,
            "symbol_code": self.symbol_code,
            "comment": self.comment,
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
            "position": {
                "latitude": position.latitude,
                "longitude": position.longitude,
                "course": position.course,
                "speed": position.speed,
                "gridsquare": position.gridsquare,
            }
            if position.is_valid
            else None,
            "message": {
                "addressee": message.addressee,
                "seq_id": message.seq_id,
                "text": message.msg_text,
                "type": message.msg_type.value,
            }
            if self.data_type is PacketDataType.MESSAGE
            else None,
            "from_d7": self.from_d7,
            "from_d700": self.from_d700,
        }


@dataclass(slots=True, frozen=True)
class ParseDiagnostic:
    packet: str
    message: str

    def __str__(self) -> str:
        return f"{self.message}: {self.packet}"


@dataclass(slots=True, frozen=True)
class DecodeResult:
    success: bool
    packet: DecodedPacket | None = None
    diagnostics: tuple[ParseDiagnostic, ...] = ()

    def __bool__(self) -> bool:
        return self.success
