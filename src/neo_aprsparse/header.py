"""Split a TNC2 line into its header parts and information field."""

from __future__ import annotations

from dataclasses import dataclass

from .callsign import Callsign
from .data_type import PacketDataType, get_data_type


class DecodeError(ValueError):
    """Raised when a packet cannot be decoded at all."""


class MalformedHeaderError(DecodeError):
    """Raised when a line lacks the ``SRC>DEST...:`` header structure."""


@dataclass(slots=True, frozen=True)
class PacketHeader:
    source_callsign: Callsign
    dest_callsign: Callsign
    digipeater_path: str
    data_type_char: str | None
    data_type: PacketDataType
    source_path_header: str
    information_field: str


def split_header(line: str) -> PacketHeader:
    """Split ``SRC>DEST[,DIGI...]:<TYPE><INFO>`` on the first ``>`` and ``:``.

    A recognised type character is removed from the information field; an
    unrecognised one stays in it and is reported as ``None`` with type
    ``UNKNOWN``. An empty information field is a beacon.
    """
    gt = line.find(">")
    colon = line.find(":")
    if gt == -1 or colon == -1 or colon <= gt:
        raise MalformedHeaderError("Packet header missing or misordered '>' / ':'")

    header = line[:colon]
    source = Callsign.parse(line[:gt])

    rest = header[gt + 1 :]
    comma = rest.find(",")
    if comma > 0:
        dest = Callsign.parse(rest[:comma])
        path = rest[comma + 1 :]
    else:
        dest = Callsign.parse(rest)
        path = ""

    payload = line[colon + 1 :]
    if not payload:
        return PacketHeader(
            source, dest, path, None, PacketDataType.BEACON, header, ""
        )

    type_char: str | None = payload[0]
    data_type = get_data_type(type_char)
    if data_type is PacketDataType.UNKNOWN:
        type_char = None
        information = payload
    else:
        information = payload[1:]

    return PacketHeader(source, dest, path, type_char, data_type, header, information)
