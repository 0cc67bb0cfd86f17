"""APRS message decoding (``:ADDRESSEE:text{seq``)."""

from __future__ import annotations

import re

from .models import MessageData, MessageType

ADDRESSEE_LENGTH = 9
BODY_OFFSET = ADDRESSEE_LENGTH + 1
SEQUENCE_DELIMITER = "{"

_ANNOUNCEMENT_ADDRESSEE = re.compile(r"^BLN[A-Z]", re.IGNORECASE)
_BULLETIN_ADDRESSEE = re.compile(r"^BLN[0-9]", re.IGNORECASE)
_AUTO_ANSWER = re.compile(r"^AA:|^\[AA\]", re.IGNORECASE)


def decode_message(field_text: str) -> MessageData | None:
    """Decode a message information field.

    Returns None when the field is too short to hold the 9 character
    addressee; the caller treats that packet as invalid/test data.
    """
    if len(field_text) < ADDRESSEE_LENGTH:
        return None

    addressee = field_text[:ADDRESSEE_LENGTH].upper().strip()
    if len(field_text) < BODY_OFFSET:
        return MessageData(addressee=addressee)

    body = field_text[BODY_OFFSET:]
    if len(body) > 3:
        prefix = body[:3].upper()
        if prefix == "ACK":
            return MessageData(addressee, body[3:], "", MessageType.ACK)
        if prefix == "REJ":
            return MessageData(addressee, body[3:], "", MessageType.REJECT)

    seq_id = ""
    idx = body.rfind(SEQUENCE_DELIMITER)
    if idx >= 0:
        seq_id = body[idx + 1 :]
        body = body[:idx]

    msg_type, body = _classify(addressee, body)
    return MessageData(addressee, seq_id, body, msg_type)


def _classify(addressee: str, body: str) -> tuple[MessageType, str]:
    if not body:
        return MessageType.GENERAL, body
    upper = body.upper()
    if upper.startswith("NWS-"):
        return MessageType.NWS, body
    if upper.startswith("NWS_"):
        return MessageType.NWS, body.replace("NWS_", "NWS-")
    if upper.startswith("BLN"):
        if _ANNOUNCEMENT_ADDRESSEE.match(addressee):
            return MessageType.ANNOUNCEMENT, body
        if _BULLETIN_ADDRESSEE.match(addressee):
            return MessageType.BULLETIN, body
        return MessageType.GENERAL, body
    if _AUTO_ANSWER.match(body):
        return MessageType.AUTO_ANSWER, body
    return MessageType.GENERAL, body
