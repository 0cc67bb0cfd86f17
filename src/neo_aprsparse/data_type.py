"""APRS data type identifiers (the first byte of the information field)."""

from __future__ import annotations

from enum import Enum


class PacketDataType(Enum):
    UNKNOWN = "unknown"
    BEACON = "beacon"
    MIC_E_CURRENT = "mic_e_current"  # 0x1C current Mic-E data (rev 0 beta)
    MIC_E_OLD = "mic_e_old"  # 0x1D old Mic-E data (rev 0 beta)
    POSITION = "position"  # '!' no timestamp, no messaging
    PEET_BROS_UII_1 = "peet_bros_uii_1"  # '#'
    RAW_GPS_OR_U2K = "raw_gps_or_u2k"  # '$'
    MICRO_FINDER = "micro_finder"  # '%' Agrelo DFJr / MicroFinder
    MAP_FEATURE = "map_feature"  # '&' reserved
    TM_D700 = "tm_d700"  # "'" old Mic-E (current for TM-D700)
    ITEM = "item"  # ')'
    PEET_BROS_UII_2 = "peet_bros_uii_2"  # '*'
    SHELTER_DATA = "shelter_data"  # '+' reserved
    INVALID_OR_TEST_DATA = "invalid_or_test_data"  # ','
    SPACE_WEATHER = "space_weather"  # '.' reserved
    POSITION_TIME = "position_time"  # '/' timestamp, no messaging
    MESSAGE = "message"  # ':'
    OBJECT = "object"  # ';'
    STATION_CAPABILITIES = "station_capabilities"  # '<'
    POSITION_MSG = "position_msg"  # '=' no timestamp, with messaging
    STATUS = "status"  # '>'
    QUERY = "query"  # '?'
    POSITION_TIME_MSG = "position_time_msg"  # '@' timestamp, with messaging
    TELEMETRY = "telemetry"  # 'T'
    MAIDENHEAD_GRID_LOC = "maidenhead_grid_loc"  # '[' obsolete
    WEATHER_REPORT = "weather_report"  # '_' without position
    MIC_E = "mic_e"  # '`'
    USER_DEFINED = "user_defined"  # '{'
    THIRD_PARTY = "third_party"  # '}'


_DATA_TYPES: dict[str, PacketDataType] = {
    "\x00": PacketDataType.UNKNOWN,
    " ": PacketDataType.BEACON,
    "\x1c": PacketDataType.MIC_E_CURRENT,
    "\x1d": PacketDataType.MIC_E_OLD,
    "!": PacketDataType.POSITION,
    "#": PacketDataType.PEET_BROS_UII_1,
    "$": PacketDataType.RAW_GPS_OR_U2K,
    "%": PacketDataType.MICRO_FINDER,
    "&": PacketDataType.MAP_FEATURE,
    "'": PacketDataType.TM_D700,
    ")": PacketDataType.ITEM,
    "*": PacketDataType.PEET_BROS_UII_2,
    "+": PacketDataType.SHELTER_DATA,
    ",": PacketDataType.INVALID_OR_TEST_DATA,
    ".": PacketDataType.SPACE_WEATHER,
    "/": PacketDataType.POSITION_TIME,
    ":": PacketDataType.MESSAGE,
    ";": PacketDataType.OBJECT,
    "<": PacketDataType.STATION_CAPABILITIES,
    "=": PacketDataType.POSITION_MSG,
    ">": PacketDataType.STATUS,
    "?": PacketDataType.QUERY,
    "@": PacketDataType.POSITION_TIME_MSG,
    "T": PacketDataType.TELEMETRY,
    "[": PacketDataType.MAIDENHEAD_GRID_LOC,
    "_": PacketDataType.WEATHER_REPORT,
    "`": PacketDataType.MIC_E,
    "{": PacketDataType.USER_DEFINED,
    "}": PacketDataType.THIRD_PARTY,
}

POSITION_TYPES = frozenset({PacketDataType.POSITION, PacketDataType.POSITION_MSG})
TIMESTAMPED_POSITION_TYPES = frozenset(
    {PacketDataType.POSITION_TIME, PacketDataType.POSITION_TIME_MSG}
)
MIC_E_TYPES = frozenset(
    {
        PacketDataType.MIC_E_CURRENT,
        PacketDataType.MIC_E_OLD,
        PacketDataType.TM_D700,
        PacketDataType.MIC_E,
    }
)
IMPLEMENTED_TYPES = (
    POSITION_TYPES | TIMESTAMPED_POSITION_TYPES | MIC_E_TYPES | {PacketDataType.MESSAGE}
)


def get_data_type(ch: str | None) -> PacketDataType:
    """Map a single type character to its :class:`PacketDataType`.

    Never raises; anything not in the table (including ``None`` or a string
    that is not exactly one character) is ``UNKNOWN``.
    """
    if not ch or len(ch) != 1:
        return PacketDataType.UNKNOWN
    return _DATA_TYPES.get(ch, PacketDataType.UNKNOWN)


def is_position(data_type: PacketDataType) -> bool:
    return data_type in POSITION_TYPES


def is_timestamped_position(data_type: PacketDataType) -> bool:
    return data_type in TIMESTAMPED_POSITION_TYPES


def is_mic_e(data_type: PacketDataType) -> bool:
    return data_type in MIC_E_TYPES


def is_implemented(data_type: PacketDataType) -> bool:
    """True when the information field of this kind is actually decoded."""
    return data_type in IMPLEMENTED_TYPES
