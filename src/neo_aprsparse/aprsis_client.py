"""Minimal APRS-IS client that feeds TNC2 lines to the decoder.

The client only moves text lines; decoding stays in
:mod:`neo_aprsparse.decoder`.
"""
from __future__ import annotations
import socket
import time
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Callable, Optional
import logging

from . import __version__

PASSCODE_SEED = 0x73E2
RECEIVE_ONLY_PASSCODE = "-1"

class APRSISClientError(RuntimeError):
    pass

def compute_passcode(callsign: str) -> str:
    """Return the APRS-IS passcode for ``callsign`` (SSID ignored)."""
    base = callsign.upper().strip().split("-")[0]
    code = PASSCODE_SEED
    # pad odd-length callsigns with NUL so characters pair up
    padded = base + "\0"
    for i in range(0, len(base), 2):
        code ^= ord(padded[i]) << 8
        code ^= ord(padded[i + 1])
    return str(code & 0x7FFF)

@dataclass(slots=True)
class APRSISConfig:
    host: str
    port: int
    callsign: str
    passcode: str | None = None
    software_name: str = "neo-aprsparse"
    software_version: str = __version__
    filter_string: str | None = None
    timeout: float = 30.0
    receive_only: bool = False

    def resolved_passcode(self) -> str:
        if self.receive_only:
            return RECEIVE_ONLY_PASSCODE
        if self.passcode:
            return self.passcode
        return compute_passcode(self.callsign)

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())

class RetryBackoff:
    def __init__(self, *, base_delay: float = 2.0, max_delay: float = 120.0, multiplier: float = 2.0, clock: Optional[Callable[[], float]] = None) -> None:
        if base_delay <= 0:
            raise ValueError("base_delay must be positive")
        if max_delay < base_delay:
            raise ValueError("max_delay must be >= base_delay")
        if multiplier < 1.0:
            raise ValueError("multiplier must be >= 1.0")
        self._base = base_delay
        self._max = max_delay
        self._multiplier = multiplier
        self._clock = clock or time.monotonic
        self._current = base_delay
        self._next_attempt = 0.0

    @property
    def current_delay(self) -> float:
        return self._current

    def ready(self) -> bool:
        return self._clock() >= self._next_attempt

    def seconds_until_ready(self) -> float:
        return max(0.0, self._next_attempt - self._clock())

    def record_failure(self) -> float:
        delay = self._current
        self._next_attempt = self._clock() + delay
        self._current = min(self._current * self._multiplier, self._max)
        return delay

    def record_success(self) -> None:
        self.reset()

    def reset(self) -> None:
        self._current = self._base
        self._next_attempt = 0.0

class APRSISClient:
    def __init__(self, config: APRSISConfig) -> None:
        self._config = config
        self._socket: Optional[socket.socket] = None
        self._buffer = bytearray()
        self.server_banner: str | None = None

    @property
    def is_connected(self) -> bool:
        return self._socket is not None

    def connect(self) -> None:
        if self._socket is not None:
            logger.debug("APRS-IS session already active for %s:%s", self._config.host, self._config.port)
            return
        logger.debug("Opening APRS-IS session to %s:%s as %s", self._config.host, self._config.port, self._config.callsign)
        try:
            sock = socket.create_connection((self._config.host, self._config.port), timeout=self._config.timeout)
        except OSError as exc:
            raise APRSISClientError(f"Unable to connect to APRS-IS server {self._config.host}:{self._config.port}: {exc}") from exc
        sock.settimeout(self._config.timeout)
        self._socket = sock
        self._buffer.clear()
        try:
            login = self._build_login_line().encode("ascii") + b"\n"
            try:
                sock.sendall(login)
            except OSError as exc:
                raise APRSISClientError(f"Failed to send APRS-IS login: {exc}") from exc
            self._await_logresp()
            logger.info("Connected to APRS-IS %s:%s as %s", self._config.host, self._config.port, self._config.callsign)
        except Exception:
            self.close()
            raise

    def read_line(self) -> str | None:
        """Return the next line without its line ending, or None on timeout.

        A partial line received before the timeout stays buffered, so the
        session survives quiet periods and the next call picks up where
        this one stopped.
        """
        try:
            raw = self._recv_line()
        except OSError as exc:
            raise APRSISClientError(f"Error reading from APRS-IS: {exc}") from exc
        if raw is None:
            return None
        # APRS-IS is nominally ASCII but carries arbitrary bytes from RF
        return raw.decode("utf-8", errors="replace").rstrip("\r\n")

    def iter_lines(self, *, include_comments: bool = False) -> Iterator[str]:
        """Yield packet lines until the connection drops; skips ``#`` server lines."""
        while True:
            line = self.read_line()
            if line is None:
                continue
            if line.startswith("#") and not include_comments:
                logger.debug("APRS-IS server: %s", line)
                continue
            yield line

    def close(self) -> None:
        sock = self._socket
        self._socket = None
        self._buffer.clear()
        if sock is None:
            logger.debug("APRS-IS close requested with no active session for %s:%s", self._config.host, self._config.port)
            return
        try:
            sock.close()
        except OSError:
            pass
        logger.info("Closed APRS-IS connection to %s:%s", self._config.host, self._config.port)

    def __enter__(self) -> "APRSISClient":
        self.connect(); return self
    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _recv_line(self) -> bytes | None:
        """Return one raw line including its ``\\n``, or None on timeout."""
        sock = self._require_socket()
        while True:
            end = self._buffer.find(b"\n")
            if end >= 0:
                raw = bytes(self._buffer[: end + 1])
                del self._buffer[: end + 1]
                return raw
            try:
                chunk = sock.recv(4096)
            except socket.timeout:
                return None
            if not chunk:
                raise APRSISClientError("APRS-IS server closed connection")
            self._buffer.extend(chunk)

    def _await_logresp(self) -> None:
        for _ in range(5):
            try:
                line = self._recv_line()
            except APRSISClientError:
                raise APRSISClientError("APRS-IS server closed connection during login") from None
            except OSError as exc:
                raise APRSISClientError(f"Error reading APRS-IS response: {exc}") from exc
            if line is None:
                raise APRSISClientError("Timed out waiting for APRS-IS login response")
            decoded = line.decode("utf-8", errors="replace").strip()
            lowered = decoded.lower()
            if lowered.startswith("# logresp"):
                if any(term in lowered for term in ("invalid", "reject", "bad")):
                    raise APRSISClientError(f"APRS-IS login failed: {lowered}")
                if "unverified" in lowered:
                    if self._config.receive_only:
                        return
                    raise APRSISClientError(f"APRS-IS login failed: {lowered}")
                if "verified" in lowered or " ok" in lowered:
                    return
            elif decoded.startswith("#") and self.server_banner is None:
                self.server_banner = decoded.lstrip("# ")
        raise APRSISClientError("APRS-IS login response not received")

    def _build_login_line(self) -> str:
        base = f"user {self._config.callsign} pass {self._config.resolved_passcode()} vers {self._config.software_name} {self._config.software_version}"
        if self._config.filter_string:
            base += f" filter {self._config.filter_string}"
        return base

    def _require_socket(self) -> socket.socket:
        if self._socket is None:
            raise APRSISClientError("APRS-IS connection not established")
        return self._socket
