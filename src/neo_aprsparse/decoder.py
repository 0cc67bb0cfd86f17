"""Packet decoding entry points.

``decode_packet`` turns one TNC2 line into a :class:`DecodeResult`. It
never raises: header errors and unexpected faults come back as a failed
result carrying one diagnostic, while field-level problems leave the
affected field empty and the decode still succeeds.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, replace

from .coordinates import latlon_to_gridsquare
from .data_type import (
    PacketDataType,
    is_mic_e,
    is_position,
    is_timestamped_position,
)
from .header import MalformedHeaderError, PacketHeader, split_header
from .message import decode_message
from .mic_e import decode_mic_e
from .models import DecodedPacket, DecodeResult, MessageData, ParseDiagnostic
from .position import decode_position_and_symbol
from .timestamp import TIMESTAMP_LENGTH, decode_timestamp

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())

UNKNOWN_TYPE_MESSAGE = "Unknown packet type"


def decode_packet(line: str) -> DecodeResult:
    """Decode a single TNC2 line."""
    try:
        header = split_header(line)
    except MalformedHeaderError as exc:
        return DecodeResult(False, None, (ParseDiagnostic(line, str(exc)),))

    try:
        packet, diagnostics = _decode_information(line, header)
    except Exception as exc:  # never raise to callers
        logger.debug("Unexpected decoder fault", exc_info=True)
        return DecodeResult(False, None, (ParseDiagnostic(line, str(exc)),))

    position = packet.position
    if position.is_valid and not position.gridsquare:
        gridsquare = latlon_to_gridsquare(position.latitude, position.longitude)
        packet = replace(packet, position=replace(position, gridsquare=gridsquare))
    return DecodeResult(True, packet, tuple(diagnostics))


def _decode_information(
    line: str, header: PacketHeader
) -> tuple[DecodedPacket, list[ParseDiagnostic]]:
    info = header.information_field
    data_type = header.data_type
    diagnostics: list[ParseDiagnostic] = []
    fields: dict[str, object] = {}

    if not info:
        data_type = PacketDataType.BEACON
    elif data_type is PacketDataType.UNKNOWN:
        diagnostics.append(ParseDiagnostic(line, UNKNOWN_TYPE_MESSAGE))
    elif is_position(data_type):
        fields.update(_position_fields(info))
    elif is_timestamped_position(data_type):
        fields["timestamp"] = decode_timestamp(info[:TIMESTAMP_LENGTH])
        fields.update(_position_fields(info[TIMESTAMP_LENGTH:], original=info))
    elif data_type is PacketDataType.MESSAGE:
        message = decode_message(info)
        if message is None:
            data_type = PacketDataType.INVALID_OR_TEST_DATA
        else:
            fields["message_data"] = message
    elif is_mic_e(data_type):
        mic_e = decode_mic_e(header.dest_callsign.station_callsign, info)
        fields.update(
            position=mic_e.position,
            symbol_table_identifier=mic_e.symbol_table_identifier,
            symbol_code=mic_e.symbol_code,
            from_d7=mic_e.from_d7,
            from_d700=mic_e.from_d700,
            comment=mic_e.comment,
            message_data=MessageData(msg_index=mic_e.msg_index),
        )
    else:
        logger.debug("Leaving %s information field undecoded", data_type.value)

    packet = DecodedPacket(
        raw_packet=line,
        source_callsign=header.source_callsign,
        dest_callsign=header.dest_callsign,
        digipeater_path=header.digipeater_path,
        data_type_char=header.data_type_char,
        data_type=data_type,
        source_path_header=header.source_path_header,
        information_field=info,
        **fields,  # type: ignore[arg-type]
    )
    return packet, diagnostics


def _position_fields(text: str, *, original: str | None = None) -> dict[str, object]:
    decoded = decode_position_and_symbol(text, original=original)
    return {
        "position": decoded.position,
        "symbol_table_identifier": decoded.symbol_table_identifier,
        "symbol_code": decoded.symbol_code,
        "comment": decoded.comment,
    }


@dataclass(slots=True)
class DecoderStats:
    lines: int = 0
    decoded: int = 0
    failed: int = 0
    diagnostics: int = 0
    positions: int = 0


class PacketDecoder:
    """Decode a stream of lines, logging diagnostics and keeping counters.

    Decoding itself is stateless; only the counters are shared, and they
    are guarded by a lock so one instance may serve several threads.
    """

    def __init__(self, *, log_diagnostics: bool = True) -> None:
        self._log_diagnostics = log_diagnostics
        self._stats = DecoderStats()
        self._lock = threading.Lock()

    @property
    def stats(self) -> DecoderStats:
        with self._lock:
            return replace(self._stats)

    def decode(self, line: str) -> DecodeResult:
        result = decode_packet(line)
        with self._lock:
            self._stats.lines += 1
            if result.success:
                self._stats.decoded += 1
                if result.packet is not None and result.packet.position.is_valid:
                    self._stats.positions += 1
            else:
                self._stats.failed += 1
            self._stats.diagnostics += len(result.diagnostics)
        if self._log_diagnostics:
            for diagnostic in result.diagnostics:
                logger.warning("%s", diagnostic)
        return result

    def iter_decode(self, lines: Iterable[str]) -> Iterator[DecodeResult]:
        """Decode each line, skipping blanks and APRS-IS ``#`` comment lines."""
        for raw in lines:
            line = raw.rstrip("\r\n")
            if not line.strip() or line.startswith("#"):
                continue
            yield self.decode(line)


def iter_decode(lines: Iterable[str]) -> Iterator[DecodeResult]:
    return PacketDecoder(log_diagnostics=False).iter_decode(lines)


__all__ = [
    "DecoderStats",
    "PacketDecoder",
    "UNKNOWN_TYPE_MESSAGE",
    "decode_packet",
    "iter_decode",
]
