"""Vectorized conversions must agree with the scalar profile methods."""

import warnings

import numpy as np
import pytest

from tile_profiles import batch
from tile_profiles.geodetic import GeodeticProfile
from tile_profiles.mercator import MercatorProfile

LATS = np.array([51.5287718, -33.8688, 0.0, 84.9, -84.9, 35.6762])
LONS = np.array([-0.2416819, 151.2093, 0.0, -179.9, 179.9, 139.6503])


@pytest.fixture
def merc():
    return MercatorProfile(256)


def test_lat_lon_to_meters_matches_scalar(merc):
    mx, my = batch.lat_lon_to_meters(merc, LATS, LONS)
    for i, (lat, lon) in enumerate(zip(LATS, LONS)):
        smx, smy = merc.lat_lon_to_meters(float(lat), float(lon))
        assert mx[i] == pytest.approx(smx, rel=1e-12, abs=1e-6)
        assert my[i] == pytest.approx(smy, rel=1e-12, abs=1e-6)


def test_meters_round_trip(merc):
    mx, my = batch.lat_lon_to_meters(merc, LATS, LONS)
    lat, lon = batch.meters_to_lat_lon(merc, mx, my)
    np.testing.assert_allclose(lat, LATS, rtol=1e-9, atol=1e-12)
    np.testing.assert_allclose(lon, LONS, rtol=1e-9, atol=1e-12)


def test_pixels_round_trip(merc):
    px = np.array([1.0, 300.5, 4096.25])
    py = np.array([2.0, 17.0, 999.0])
    mx, my = batch.pixels_to_meters(merc, px, py, 4)
    px2, py2 = batch.meters_to_pixels(merc, mx, my, 4)
    np.testing.assert_allclose(px2, px, rtol=1e-9)
    np.testing.assert_allclose(py2, py, rtol=1e-9)


def test_pixels_to_tile_is_integer_and_matches_scalar(merc):
    px = np.array([0.0, 1.0, 256.0, 256.5, 1317.141])
    py = np.array([0.0, 256.0, 257.0, 1.0, 510.625])
    tx, ty = batch.pixels_to_tile(256, px, py)
    assert tx.dtype == np.int64
    expected = [merc.pixels_to_tile(float(x), float(y)) for x, y in zip(px, py)]
    assert list(zip(tx.tolist(), ty.tolist())) == expected


def test_lat_lon_to_tile_matches_scalar(merc):
    tx, ty = batch.lat_lon_to_tile(merc, LATS, LONS, 10)
    for i, (lat, lon) in enumerate(zip(LATS, LONS)):
        assert (tx[i], ty[i]) == merc.lat_lon_to_tile(float(lat), float(lon), 10)


def test_pole_gives_inf_without_raising(merc):
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        _, my = batch.lat_lon_to_meters(merc, [-90.0, 0.0], [0.0, 0.0])
    assert np.isneginf(my[0])
    assert my[1] == pytest.approx(0.0, abs=1e-6)


def test_geodetic_lat_lon_to_pixels():
    geo = GeodeticProfile(256)
    px, py = batch.geodetic_lat_lon_to_pixels(geo, [51.5287718], [-0.2416819], 2)
    assert px[0] == pytest.approx(1317.141, abs=0.001)
    assert py[0] == pytest.approx(510.625, abs=0.001)
    tx, ty = batch.pixels_to_tile(geo.tile_size, px, py)
    assert (int(tx[0]), int(ty[0])) == (5, 1)


def test_off_map_values_match_scalar(merc):
    my = np.array([1e10, -1e10, np.inf])
    lat, lon = batch.meters_to_lat_lon(merc, np.zeros(3), my)
    for i in range(3):
        slat, slon = merc.meters_to_lat_lon(0.0, float(my[i]))
        assert lat[i] == pytest.approx(slat)
        assert lon[i] == slon

    lats = np.array([-90.0, -100.0])
    _, bmy = batch.lat_lon_to_meters(merc, lats, np.zeros(2))
    _, south = merc.lat_lon_to_meters(-90.0, 0.0)
    _, beyond = merc.lat_lon_to_meters(-100.0, 0.0)
    assert bmy[0] == south == -np.inf
    assert np.isnan(bmy[1]) and np.isnan(beyond)
