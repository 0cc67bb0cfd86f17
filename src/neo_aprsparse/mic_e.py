"""Mic-E decoding.

Mic-E packs the latitude, a 3-bit message code and the N/S, E/W and
longitude-offset flags into the six characters of the destination
callsign. Longitude, speed, course and the symbol follow in the
information field, each byte offset by 28.

Decoding stops at the first validation failure and keeps whatever was
decoded up to that point (symbol, radio flags, message code, latitude).
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .models import Coordinate, CoordinateSet, Position

DIGIT_OFFSET = 0x30
SPACE_DIGIT = 0x1C  # 'L' after removing DIGIT_OFFSET
AMBIGUOUS_NIBBLE = 0x0A
LETTER_LOW = 0x10  # 'A'..'K' after removing DIGIT_OFFSET are 0x11..0x1B
LETTER_HIGH = 0x1B
FLAG_SET = 0x20  # P..Z carry the N / +100 / W flags
MESSAGE_BIT = 0x10
CUSTOM_MESSAGE_FLAG = 0x08

INFO_OFFSET = 28
MAX_INFO_VALUE = 99
MAX_SPEED_COURSE_VALUE = 97
HUNDRED_DEGREES = 100
LONGITUDE_WRAP_HIGH = 190
LONGITUDE_WRAP_LOW = 180
LONGITUDE_WRAP_LOW_SHIFT = 80
MINUTES_WRAP = 60
SPEED_WRAP = 800
COURSE_WRAP = 400

D7_MARKER = ">"
D700_MARKER = "]"

_VALID_DEST_LENGTHS = (6, 8, 9)


@dataclass(slots=True, frozen=True)
class MicEFields:
    position: Position = field(default_factory=Position)
    symbol_table_identifier: str | None = None
    symbol_code: str | None = None
    from_d7: bool = False
    from_d700: bool = False
    comment: str = ""
    msg_index: int = 0


def convert_dest_char(ch: str) -> int:
    """Recover the digit (low nibble) and flag bits of a destination character."""
    value = ord(ch) - DIGIT_OFFSET
    if value == SPACE_DIGIT:
        value = AMBIGUOUS_NIBBLE
    if LETTER_LOW < value <= LETTER_HIGH:
        value -= 1
    if value & 0x0F == AMBIGUOUS_NIBBLE:
        # ambiguity is not tracked; a space digit reads as 0
        value &= 0xF0
    return value


def _is_standard_char(ch: str) -> bool:
    return "0" <= ch <= "9" or ch == "L" or "P" <= ch <= "Z"


def _is_custom_char(ch: str) -> bool:
    return "0" <= ch <= "9" or "A" <= ch <= "L"


def is_valid_destination(dest: str) -> bool:
    """Check the destination callsign can carry Mic-E data."""
    if len(dest) not in _VALID_DEST_LENGTHS:
        return False
    custom = any("A" <= ch <= "K" for ch in dest[:3])
    check = _is_custom_char if custom else _is_standard_char
    if not all(check(ch) for ch in dest[:3]):
        return False
    if not all(_is_standard_char(ch) for ch in dest[3:6]):
        return False
    if len(dest) > 6:
        if dest[6] != "-" or not "0" <= dest[7] <= "9":
            return False
        if len(dest) == 9 and not "0" <= dest[8] <= "9":
            return False
    return True


def decode_mic_e(dest: str, info: str) -> MicEFields:
    """Decode a Mic-E report from the destination callsign and information field."""
    if not is_valid_destination(dest):
        return MicEFields()

    c = convert_dest_char(dest[0])
    msg_index = CUSTOM_MESSAGE_FLAG if c & MESSAGE_BIT else 0
    if c >= MESSAGE_BIT:
        msg_index += 0x04
    degrees = (c & 0x0F) * 10
    c = convert_dest_char(dest[1])
    if c >= MESSAGE_BIT:
        msg_index += 0x02
    degrees += c & 0x0F
    c = convert_dest_char(dest[2])
    if c >= MESSAGE_BIT:
        msg_index += 0x01
    minutes = (c & 0x0F) * 10
    c = convert_dest_char(dest[3])
    north = c >= FLAG_SET
    minutes += c & 0x0F
    c = convert_dest_char(dest[4])
    hundred = c >= FLAG_SET
    hundredths = (c & 0x0F) * 10
    c = convert_dest_char(dest[5])
    west = c >= FLAG_SET
    hundredths += c & 0x0F

    latitude = degrees + minutes / 60.0 + hundredths / 6000.0
    if not north:
        latitude = -latitude
    lat_coordinate = Coordinate.from_value(latitude, True)

    symbol_code = info[6] if len(info) > 6 else None
    symbol_table = info[7] if len(info) > 7 else None
    from_d7 = from_d700 = False
    if len(info) > 8:
        from_d7 = info[8] == D7_MARKER
        from_d700 = info[8] == D700_MARKER

    def result(position: Position, comment: str = "") -> MicEFields:
        return MicEFields(
            position=position,
            symbol_table_identifier=symbol_table,
            symbol_code=symbol_code,
            from_d7=from_d7,
            from_d700=from_d700,
            comment=comment,
            msg_index=msg_index,
        )

    if len(info) < 3:
        # nothing to read the longitude from; the latitude stays
        return result(Position(coordinate_set=CoordinateSet(latitude=lat_coordinate)))

    lon_degrees = ord(info[0]) - INFO_OFFSET
    lon_minutes = ord(info[1]) - INFO_OFFSET
    lon_hundredths = ord(info[2]) - INFO_OFFSET
    if not all(
        0 <= value <= MAX_INFO_VALUE
        for value in (lon_degrees, lon_minutes, lon_hundredths)
    ):
        return result(Position.empty())

    if hundred:
        lon_degrees += HUNDRED_DEGREES
    if lon_degrees >= LONGITUDE_WRAP_HIGH:
        lon_degrees -= LONGITUDE_WRAP_HIGH
    elif lon_degrees >= LONGITUDE_WRAP_LOW:
        lon_degrees -= LONGITUDE_WRAP_LOW_SHIFT
    if lon_minutes >= MINUTES_WRAP:
        lon_minutes -= MINUTES_WRAP
    longitude = lon_degrees + lon_minutes / 60.0 + lon_hundredths / 6000.0
    if west:
        longitude = -longitude

    coordinates = CoordinateSet(lat_coordinate, Coordinate.from_value(longitude, False))
    comment = info[8:]
    position = Position(coordinate_set=coordinates)

    if len(info) <= 5:
        return result(position, comment)

    dc = ord(info[4]) - INFO_OFFSET
    if not 0 <= dc <= MAX_SPEED_COURSE_VALUE:
        return result(position, comment)
    sp = ord(info[3]) - INFO_OFFSET
    if not 0 <= sp <= MAX_INFO_VALUE:
        return result(position, comment)
    speed = sp * 10 + dc // 10  # knots
    se = ord(info[5]) - INFO_OFFSET
    if not 0 <= se <= MAX_INFO_VALUE:
        return result(position, comment)
    course = (dc % 10) * 100 + se

    if speed >= SPEED_WRAP:
        speed -= SPEED_WRAP
    if course >= COURSE_WRAP:
        course -= COURSE_WRAP
    if course > 0:
        position = Position(coordinate_set=coordinates, course=course, speed=speed)
    return result(position, comment)
