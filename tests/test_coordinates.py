"""Tests for grid locator and NMEA coordinate helpers."""

from __future__ import annotations

import pytest

from neo_aprsparse.coordinates import (
    gridsquare_to_latlon,
    lat_to_nmea,
    latlon_to_gridsquare,
    lon_to_nmea,
    nmea_to_float,
)


def test_latlon_to_gridsquare_known_points() -> None:
    assert latlon_to_gridsquare(38.393, -107.674333) == "DM68DJ"
    assert latlon_to_gridsquare(49.058333, -72.029167) == "FN39XB"


def test_gridsquare_to_latlon_pads_four_character_locator() -> None:
    lat, lon = gridsquare_to_latlon("FN31")

    assert lat == pytest.approx(41.479167, abs=1e-5)
    assert lon == pytest.approx(-73.291667, abs=1e-5)
    assert gridsquare_to_latlon("fn31il") == gridsquare_to_latlon("FN31")


@pytest.mark.parametrize("locator", ["", "FN3", "ZZ99ZZ", "FN31ZZ", "FNXXAA", "FN31PR7"])
def test_gridsquare_to_latlon_rejects_invalid(locator: str) -> None:
    assert gridsquare_to_latlon(locator) is None


@pytest.mark.parametrize(
    ("lat", "lon"),
    [
        (38.393, -107.674333),
        (49.058333, -72.029167),
        (-33.8688, 151.2093),
        (51.4779, -0.0015),
        (-54.8019, -68.3030),
    ],
)
def test_gridsquare_round_trip_within_half_cell(lat: float, lon: float) -> None:
    center = gridsquare_to_latlon(latlon_to_gridsquare(lat, lon))

    assert center is not None
    assert abs(center[0] - lat) <= 1 / 48
    assert abs(center[1] - lon) <= 1 / 24


def test_nmea_formatting() -> None:
    assert lat_to_nmea(49.058333) == "4903.50N"
    assert lat_to_nmea(-33.5) == "3330.00S"
    assert lon_to_nmea(-72.029167) == "07201.75W"
    assert lon_to_nmea(8.25) == "00815.00E"


def test_nmea_to_float() -> None:
    assert nmea_to_float("4903.50N") == pytest.approx(49.058333, abs=1e-6)
    assert nmea_to_float("3330.00S") == pytest.approx(-33.5)
    assert nmea_to_float("07201.75W") == pytest.approx(-72.029167, abs=1e-6)
    assert nmea_to_float("00815.00E") == pytest.approx(8.25)


@pytest.mark.parametrize("text", [None, "", "bad", "49xx.50N", "4903.50", "0720175.00W"])
def test_nmea_to_float_returns_zero_for_unusable_input(text) -> None:
    assert nmea_to_float(text) == 0.0


@pytest.mark.parametrize("value", [49.058333, -12.3456, 0.5, 89.75])
def test_latitude_nmea_round_trip(value: float) -> None:
    assert nmea_to_float(lat_to_nmea(value)) == pytest.approx(value, abs=0.01 / 60)


@pytest.mark.parametrize("value", [-72.029167, 151.2093, -0.0015, 179.5])
def test_longitude_nmea_round_trip(value: float) -> None:
    assert nmea_to_float(lon_to_nmea(value)) == pytest.approx(value, abs=0.01 / 60)
