"""Decode TNC2 lines from a file or standard input."""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from collections.abc import Iterable
from typing import Any, TextIO

from ..data_type import PacketDataType
from ..decoder import PacketDecoder
from ..models import DecodedPacket, DecodeResult

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())

_SNIPPET_LIMIT = 120


def run_decode(args: Namespace) -> int:
    """Decode every line of ``--input`` (or stdin) and print the results."""
    input_path = getattr(args, "input", None)
    as_json = getattr(args, "json", False)
    # in JSON mode diagnostics travel inside each record instead of the log
    decoder = PacketDecoder(log_diagnostics=not as_json)

    if input_path in (None, "-"):
        _decode_stream(decoder, sys.stdin, as_json)
    else:
        try:
            with open(input_path, encoding="utf-8", errors="replace") as handle:
                _decode_stream(decoder, handle, as_json)
        except OSError as exc:
            logger.error("Unable to read %s: %s", input_path, exc)
            return 1

    stats = decoder.stats
    if not as_json:
        logger.info(
            "Lines: %s decoded=%s failed=%s positions=%s diagnostics=%s",
            stats.lines,
            stats.decoded,
            stats.failed,
            stats.positions,
            stats.diagnostics,
        )
    return 0


def _decode_stream(decoder: PacketDecoder, lines: Iterable[str] | TextIO, as_json: bool) -> None:
    for count, result in enumerate(decoder.iter_decode(lines), start=1):
        if as_json:
            print(json.dumps(result_to_dict(result)))
        elif result.packet is not None:
            print(f"[{count:06d}] {format_packet(result.packet)}")


def result_to_dict(result: DecodeResult) -> dict[str, Any]:
    return {
        "success": result.success,
        "packet": result.packet.to_dict() if result.packet is not None else None,
        "diagnostics": [str(diagnostic) for diagnostic in result.diagnostics],
    }


def format_packet(packet: DecodedPacket) -> str:
    """One-line human readable summary of a decoded packet."""
    parts = [
        f"{packet.source_callsign}>{packet.dest_callsign}",
        packet.data_type.value,
    ]
    position = packet.position
    if position.is_valid:
        parts.append(f"{position.latitude:.5f},{position.longitude:.5f}")
        if position.gridsquare:
            parts.append(position.gridsquare)
        if position.course:
            parts.append(f"{position.course}deg {position.speed}kt")
    if packet.data_type is PacketDataType.MESSAGE:
        message = packet.message_data
        parts.append(f"to={message.addressee} [{message.msg_type.value}]")
        if message.msg_text:
            parts.append(message.msg_text)
        if message.seq_id:
            parts.append(f"#{message.seq_id}")
    if packet.timestamp is not None:
        parts.append(packet.timestamp.strftime("%Y-%m-%dT%H:%M:%SZ"))
    if packet.comment:
        parts.append(packet.comment)

    summary = " ".join(parts)
    if len(summary) > _SNIPPET_LIMIT:
        summary = summary[: _SNIPPET_LIMIT - 3] + "..."
    return summary
