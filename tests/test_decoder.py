"""Tests for the packet decoding entry points."""

from __future__ import annotations

import json
import logging

import pytest

from neo_aprsparse import decoder as decoder_module
from neo_aprsparse.data_type import PacketDataType
from neo_aprsparse.decoder import (
    UNKNOWN_TYPE_MESSAGE,
    PacketDecoder,
    decode_packet,
    iter_decode,
)
from neo_aprsparse.models import MessageType

WATRDG_LINE = "WATRDG>S8RSUX,BAXTER*,WIDE,qAo,N0NHJ-5:'sDJl\"`#/]KC0RIA Waterdog Digipeater"
POSITION_LINE = "N0CALL-9>APRS,WIDE1-1:!4903.50N/07201.75W-Test"


def test_decode_mic_e_packet() -> None:
    result = decode_packet(WATRDG_LINE)

    assert result.success
    assert result.diagnostics == ()
    packet = result.packet
    assert packet is not None
    assert packet.data_type is PacketDataType.TM_D700
    assert packet.source_callsign.station_callsign == "WATRDG"
    assert packet.dest_callsign.station_callsign == "S8RSUX"
    assert packet.digipeaters == ["BAXTER*", "WIDE", "qAo", "N0NHJ-5"]
    assert packet.position.is_valid
    assert packet.position.latitude == pytest.approx(38.3930, abs=1e-4)
    assert packet.position.longitude == pytest.approx(-107.67433, abs=1e-4)
    assert packet.position.course == 268
    assert packet.position.gridsquare == "DM68DJ"
    assert packet.symbol_code == "#"
    assert packet.symbol_table_identifier == "/"
    assert packet.from_d700
    assert packet.message_data.msg_index == 5
    assert packet.comment == "]KC0RIA Waterdog Digipeater"


def test_decode_position_packet_fills_gridsquare() -> None:
    result = decode_packet(POSITION_LINE)

    assert result
    packet = result.packet
    assert packet is not None
    assert packet.data_type is PacketDataType.POSITION
    assert packet.data_type_char == "!"
    assert packet.position.latitude == pytest.approx(49.0583, abs=1e-4)
    assert packet.position.longitude == pytest.approx(-72.0292, abs=1e-4)
    assert packet.position.gridsquare == "FN39XB"
    assert packet.symbol_code == "-"
    assert packet.comment == "Test"
    assert packet.source_path_header == "N0CALL-9>APRS,WIDE1-1"


def test_decode_timestamped_position() -> None:
    result = decode_packet("N0CALL>APRS:@092345z4903.50N/07201.75W>Mobile")

    packet = result.packet
    assert packet is not None
    assert packet.data_type is PacketDataType.POSITION_TIME_MSG
    assert packet.timestamp is not None
    assert (packet.timestamp.day, packet.timestamp.hour, packet.timestamp.minute) == (9, 23, 45)
    assert packet.symbol_code == ">"
    assert packet.comment == "Mobile"


def test_timestamped_position_with_bad_position_keeps_whole_field_as_comment(monkeypatch) -> None:
    def broken(text: str) -> None:
        raise ValueError("bad digits")

    monkeypatch.setattr("neo_aprsparse.position._decode_uncompressed", broken)

    result = decode_packet("N0CALL>APRS:/092345z4903.50N/07201.75W>x")

    packet = result.packet
    assert result.success
    assert packet is not None
    assert not packet.position.is_valid
    assert packet.comment == "092345z4903.50N/07201.75W>x"


def test_decode_message_packet() -> None:
    result = decode_packet("N0CALL-9>APRS,WIDE1-1::N0CALL   :Hello{001")

    packet = result.packet
    assert packet is not None
    assert packet.data_type is PacketDataType.MESSAGE
    assert packet.message_data.msg_type is MessageType.GENERAL
    assert packet.message_data.addressee == "N0CALL"
    assert packet.message_data.seq_id == "001"
    assert packet.message_data.msg_text == "Hello"
    assert not packet.position.is_valid


def test_short_message_is_invalid_data() -> None:
    result = decode_packet("N0CALL>APRS::N0C")

    assert result.success
    assert result.packet is not None
    assert result.packet.data_type is PacketDataType.INVALID_OR_TEST_DATA


def test_empty_information_field_is_beacon() -> None:
    result = decode_packet("N0CALL>APRS:")

    assert result.success
    assert result.packet is not None
    assert result.packet.data_type is PacketDataType.BEACON
    assert result.packet.data_type_char is None


def test_unknown_type_reports_diagnostic() -> None:
    line = "N0CALL>APRS:xyz"
    result = decode_packet(line)

    assert result.success
    assert result.packet is not None
    assert result.packet.data_type is PacketDataType.UNKNOWN
    assert result.packet.information_field == "xyz"
    assert len(result.diagnostics) == 1
    assert result.diagnostics[0].message == UNKNOWN_TYPE_MESSAGE
    assert result.diagnostics[0].packet == line


def test_unimplemented_type_is_left_undecoded() -> None:
    result = decode_packet("N0CALL>APRS:>Monitoring 144.390")

    assert result.success
    assert result.diagnostics == ()
    assert result.packet is not None
    assert result.packet.data_type is PacketDataType.STATUS
    assert result.packet.information_field == "Monitoring 144.390"
    assert result.packet.comment == ""


def test_malformed_header_fails_with_diagnostic() -> None:
    result = decode_packet("not a packet")

    assert not result
    assert result.packet is None
    assert len(result.diagnostics) == 1
    assert result.diagnostics[0].packet == "not a packet"
    assert "header" in str(result.diagnostics[0])


def test_unexpected_fault_is_reported_not_raised(monkeypatch) -> None:
    def explode(_dest: str, _info: str):
        raise RuntimeError("boom")

    monkeypatch.setattr(decoder_module, "decode_mic_e", explode)

    result = decode_packet(WATRDG_LINE)

    assert not result.success
    assert result.packet is None
    assert result.diagnostics[0].message == "boom"
    assert result.diagnostics[0].packet == WATRDG_LINE


def test_packet_to_dict_is_json_serialisable() -> None:
    packet = decode_packet(WATRDG_LINE).packet
    assert packet is not None

    data = json.loads(json.dumps(packet.to_dict()))

    assert data["source"] == "WATRDG"
    assert data["data_type"] == "tm_d700"
    assert data["position"]["gridsquare"] == "DM68DJ"
    assert data["message"] is None


def test_packet_decoder_counts_and_logs(caplog) -> None:
    decoder = PacketDecoder()
    lines = [
        "# aprsc 2.1.14",
        "",
        POSITION_LINE + "\r\n",
        "N0CALL>APRS:xyz",
        "broken",
    ]

    with caplog.at_level(logging.WARNING, logger="neo_aprsparse.decoder"):
        results = list(decoder.iter_decode(lines))

    assert len(results) == 3
    stats = decoder.stats
    assert stats.lines == 3
    assert stats.decoded == 2
    assert stats.failed == 1
    assert stats.positions == 1
    assert stats.diagnostics == 2
    assert any(UNKNOWN_TYPE_MESSAGE in record.getMessage() for record in caplog.records)


def test_packet_decoder_stats_are_snapshots() -> None:
    decoder = PacketDecoder(log_diagnostics=False)
    snapshot = decoder.stats

    decoder.decode(POSITION_LINE)

    assert snapshot.lines == 0
    assert decoder.stats.lines == 1


def test_module_iter_decode() -> None:
    results = list(iter_decode([POSITION_LINE, "#comment", WATRDG_LINE]))

    assert [r.packet.data_type for r in results if r.packet] == [
        PacketDataType.POSITION,
        PacketDataType.TM_D700,
    ]


def test_zero_zero_position_reads_as_no_position() -> None:
    # (0, 0) doubles as the "no position" marker, so a real report there is dropped
    result = decode_packet("N0CALL>APRS:!0000.00N/00000.00E-")

    packet = result.packet
    assert result.success
    assert packet is not None
    assert not packet.position.is_valid
    assert packet.position.gridsquare == ""
    assert packet.symbol_code == "-"
