"""CLI command handlers."""

from .beacon import run_beacon
from .decode import run_decode
from .passcode import run_passcode
from .setup import run_setup
from .stream import run_stream

__all__ = ["run_beacon", "run_decode", "run_passcode", "run_setup", "run_stream"]
