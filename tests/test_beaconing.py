"""Tests for the SmartBeaconing engine."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from neo_aprsparse.beaconing import (
    KMH_TO_MS,
    BeaconingConfig,
    Location,
    SmartBeaconing,
    bearing_delta,
)

T0 = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)
LAT, LON = 49.0583, -72.0292


def _at(seconds: float) -> datetime:
    return T0 + timedelta(seconds=seconds)


def test_first_sample_always_beacons() -> None:
    engine = SmartBeaconing()

    assert engine.check(LAT, LON, T0, 0.0)
    assert engine.last_location == Location(T0, LAT, LON, 0.0, None)


def test_standstill_uses_slow_rate() -> None:
    engine = SmartBeaconing()
    engine.check(LAT, LON, T0, 0.0, 0.0)

    assert not engine.check(LAT, LON, _at(30), 0.0, 180.0)
    assert not engine.check(LAT, LON, _at(1199), 0.0, 180.0)
    assert engine.check(LAT, LON, _at(1200), 0.0, 180.0)


def test_rejected_sample_does_not_replace_last_location() -> None:
    engine = SmartBeaconing()
    engine.check(LAT, LON, T0, 0.0)
    engine.check(LAT + 1, LON, _at(10), 0.0)

    assert engine.last_location is not None
    assert engine.last_location.timestamp == T0


def test_fast_rate() -> None:
    engine = SmartBeaconing()
    engine.check(LAT, LON, T0, 30.0, 90.0)

    assert not engine.check(LAT, LON, _at(59), 30.0, 90.0)
    assert engine.check(LAT, LON, _at(60), 30.0, 90.0)


def test_elapsed_time_uses_total_seconds() -> None:
    engine = SmartBeaconing()
    engine.check(LAT, LON, T0, 0.0)

    assert engine.check(LAT, LON, _at(3600), 0.0)


def test_beacon_rate_interpolates() -> None:
    engine = SmartBeaconing()
    cfg = engine.config
    midpoint = (cfg.fast_speed + cfg.slow_speed) / 2

    assert engine.beacon_rate(0.0) == 1200
    assert engine.beacon_rate(cfg.slow_speed) == 1200
    assert engine.beacon_rate(cfg.fast_speed) == 60
    assert engine.beacon_rate(50.0) == 60
    assert engine.beacon_rate(midpoint) == 630


def test_turn_threshold() -> None:
    engine = SmartBeaconing()

    # 10 m/s = 22.37 mph -> 10 + 240 / 22.37
    assert engine.turn_threshold(10.0) == 20


def test_corner_peg_after_turn_time() -> None:
    engine = SmartBeaconing()
    engine.check(LAT, LON, T0, 10.0, 0.0)

    assert not engine.check(LAT, LON, _at(10), 10.0, 90.0)
    assert engine.check(LAT, LON, _at(20), 10.0, 90.0)


def test_small_turn_does_not_peg() -> None:
    engine = SmartBeaconing()
    engine.check(LAT, LON, T0, 10.0, 350.0)

    assert not engine.check(LAT, LON, _at(20), 10.0, 5.0)


def test_unknown_previous_bearing_pegs_after_turn_time() -> None:
    engine = SmartBeaconing()
    engine.check(LAT, LON, T0, 10.0, None)

    assert not engine.check(LAT, LON, _at(14), 10.0, 45.0)
    assert engine.check(LAT, LON, _at(15), 10.0, 45.0)


def test_unknown_current_bearing_never_pegs() -> None:
    engine = SmartBeaconing()
    engine.check(LAT, LON, T0, 10.0, 0.0)

    assert not engine.check(LAT, LON, _at(30), 10.0, None)
    assert not engine.check(LAT, LON, _at(30), 10.0, float("nan"))


def test_reset_clears_state() -> None:
    engine = SmartBeaconing()
    engine.check(LAT, LON, T0, 0.0)
    engine.reset()

    assert engine.last_location is None
    assert engine.check(LAT, LON, _at(1), 0.0)


def test_custom_config_slow_rate_below_slow_speed() -> None:
    cfg = BeaconingConfig(fast_speed=90 * KMH_TO_MS, fast_rate=30, slow_speed=10 * KMH_TO_MS, slow_rate=600)
    engine = SmartBeaconing(cfg)
    engine.check(LAT, LON, T0, 1.0, 90.0)

    assert engine.beacon_rate(1.0) == 600
    assert not engine.check(LAT, LON, _at(20), 1.0, 90.0)
    assert not engine.check(LAT, LON, _at(599), 1.0, 90.0)
    assert engine.check(LAT, LON, _at(600), 1.0, 90.0)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"fast_speed": 1.0, "slow_speed": 2.0},
        {"fast_rate": 0},
        {"slow_rate": -5},
    ],
)
def test_config_validation(kwargs) -> None:
    with pytest.raises(ValueError):
        BeaconingConfig(**kwargs)


@pytest.mark.parametrize(
    ("alpha", "beta", "expected"),
    [(350.0, 10.0, 20.0), (10.0, 350.0, 20.0), (0.0, 180.0, 180.0), (90.0, 90.0, 0.0), (720.0, 45.0, 45.0)],
)
def test_bearing_delta(alpha: float, beta: float, expected: float) -> None:
    assert bearing_delta(alpha, beta) == pytest.approx(expected)


def test_stationary_samples_seconds_apart_do_not_beacon() -> None:
    engine = SmartBeaconing()
    engine.check(LAT, LON, T0, 0.0, 270.0)

    assert not engine.check(LAT, LON, _at(5), 0.0, 270.0)
