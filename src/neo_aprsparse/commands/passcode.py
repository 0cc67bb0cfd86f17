"""Print the APRS-IS passcode for a callsign."""

from __future__ import annotations

from argparse import Namespace

from ..aprsis_client import compute_passcode
from ..callsign import Callsign


def run_passcode(args: Namespace) -> int:
    callsign = Callsign.parse(getattr(args, "callsign", "") or "")
    if not callsign.base_callsign:
        print("A callsign is required")
        return 1
    print(compute_passcode(callsign.base_callsign))
    return 0
