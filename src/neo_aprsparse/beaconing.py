"""SmartBeaconing: decide when a moving tracker should transmit.

Slow stations beacon every ``slow_rate`` seconds, fast ones every
``fast_rate`` seconds, with a linear interpolation in between. A sharp
enough turn ("corner pegging") triggers an extra beacon once at least
``turn_time`` seconds have passed.

An engine keeps the last accepted location, so drive each instance from
a single GPS source; callers sharing one must serialise access.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import datetime

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())

KMH_TO_MS = 1 / 3.6
MS_TO_MPH = 2.23693629
STANDSTILL_SPEED = 0.01


@dataclass(slots=True, frozen=True)
class BeaconingConfig:
    fast_speed: float = 100.0 * KMH_TO_MS  # m/s
    fast_rate: int = 60  # seconds
    slow_speed: float = 5.0 * KMH_TO_MS  # m/s
    slow_rate: int = 1200  # seconds
    turn_time: int = 15  # seconds
    turn_min: float = 10.0  # degrees
    turn_slope: float = 240.0

    def __post_init__(self) -> None:
        if self.fast_speed <= self.slow_speed:
            raise ValueError("fast_speed must be greater than slow_speed")
        if self.fast_rate <= 0 or self.slow_rate <= 0:
            raise ValueError("beacon rates must be positive")


@dataclass(slots=True, frozen=True)
class Location:
    timestamp: datetime
    latitude: float
    longitude: float
    speed: float  # m/s
    bearing: float | None = None  # degrees, None when unknown

    @property
    def has_bearing(self) -> bool:
        return self.bearing is not None and not math.isnan(self.bearing)


def bearing_delta(alpha: float, beta: float) -> float:
    """Smallest angle between two bearings, 0..180 degrees."""
    delta = abs(alpha - beta) % 360
    return delta if delta <= 180 else 360 - delta


class SmartBeaconing:
    def __init__(self, config: BeaconingConfig | None = None) -> None:
        self._config = config or BeaconingConfig()
        self._last: Location | None = None

    @property
    def config(self) -> BeaconingConfig:
        return self._config

    @property
    def last_location(self) -> Location | None:
        return self._last

    def reset(self) -> None:
        self._last = None

    def check(
        self,
        latitude: float,
        longitude: float,
        timestamp: datetime,
        speed: float,
        bearing: float | None = None,
    ) -> bool:
        """Return True when a beacon should be sent for this sample."""
        return self.check_location(Location(timestamp, latitude, longitude, speed, bearing))

    def check_location(self, location: Location) -> bool:
        previous = self._last
        if previous is None:
            logger.debug("No previous location - beacon")
            beacon = True
        elif self._corner_peg(location, previous):
            logger.debug("Corner pegging")
            beacon = True
        else:
            elapsed = (location.timestamp - previous.timestamp).total_seconds()
            rate = self.beacon_rate(location.speed)
            logger.debug("Beacon if elapsed %.0fs >= rate %ss", elapsed, rate)
            beacon = elapsed >= rate

        if beacon:
            self._last = location
        return beacon

    def beacon_rate(self, speed: float) -> int:
        """Seconds between beacons at ``speed`` (m/s)."""
        cfg = self._config
        if speed <= cfg.slow_speed:
            return cfg.slow_rate
        if speed >= cfg.fast_speed:
            return cfg.fast_rate
        span = (cfg.fast_speed - speed) / (cfg.fast_speed - cfg.slow_speed)
        return round(cfg.fast_rate + (cfg.slow_rate - cfg.fast_rate) * span)

    def turn_threshold(self, speed: float) -> float:
        """Minimum bearing change (degrees) that counts as a corner at ``speed``."""
        cfg = self._config
        return math.floor(cfg.turn_min + cfg.turn_slope / (speed * MS_TO_MPH))

    def _corner_peg(self, location: Location, previous: Location) -> bool:
        cfg = self._config
        elapsed = (location.timestamp - previous.timestamp).total_seconds()

        if abs(location.speed) < STANDSTILL_SPEED:
            logger.debug("Standing still or hardly moving - no corner peg")
            return False

        if not previous.has_bearing:
            logger.debug(
                "Last bearing unknown - corner peg only if %.0fs >= %ss",
                elapsed,
                cfg.turn_time,
            )
            return elapsed >= cfg.turn_time
        if not location.has_bearing:
            return False

        delta = bearing_delta(location.bearing, previous.bearing)  # type: ignore[arg-type]
        threshold = self.turn_threshold(location.speed)
        logger.debug(
            "Corner peg if %.0fs >= %ss and %.1f deg > %.0f deg",
            elapsed,
            cfg.turn_time,
            delta,
            threshold,
        )
        return elapsed >= cfg.turn_time and delta > threshold
