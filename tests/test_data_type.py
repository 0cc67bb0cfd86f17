"""Tests for data type classification."""

from __future__ import annotations

import pytest

from neo_aprsparse.data_type import (
    PacketDataType,
    get_data_type,
    is_implemented,
    is_mic_e,
    is_position,
    is_timestamped_position,
)


@pytest.mark.parametrize(
    ("char", "expected"),
    [
        ("!", PacketDataType.POSITION),
        ("=", PacketDataType.POSITION_MSG),
        ("/", PacketDataType.POSITION_TIME),
        ("@", PacketDataType.POSITION_TIME_MSG),
        (":", PacketDataType.MESSAGE),
        ("`", PacketDataType.MIC_E),
        ("'", PacketDataType.TM_D700),
        ("\x1c", PacketDataType.MIC_E_CURRENT),
        ("\x1d", PacketDataType.MIC_E_OLD),
        (">", PacketDataType.STATUS),
        (";", PacketDataType.OBJECT),
        ("T", PacketDataType.TELEMETRY),
        ("}", PacketDataType.THIRD_PARTY),
        (" ", PacketDataType.BEACON),
    ],
)
def test_get_data_type_maps_table(char: str, expected: PacketDataType) -> None:
    assert get_data_type(char) is expected


@pytest.mark.parametrize("char", ["x", "A", "0", "\x00", "", None, "!!"])
def test_get_data_type_is_total(char) -> None:
    assert get_data_type(char) is PacketDataType.UNKNOWN


def test_predicates() -> None:
    assert is_position(PacketDataType.POSITION_MSG)
    assert not is_position(PacketDataType.POSITION_TIME)
    assert is_timestamped_position(PacketDataType.POSITION_TIME_MSG)
    assert is_mic_e(PacketDataType.TM_D700)
    assert not is_mic_e(PacketDataType.MESSAGE)
    assert is_implemented(PacketDataType.MESSAGE)
    assert not is_implemented(PacketDataType.WEATHER_REPORT)
