#!/usr/bin/env python3
# tile_profiles/batch.py
"""
Vectorized conversions for arrays of points.

Same formulas as the MercatorProfile / GeodeticProfile methods, evaluated
with numpy over whole arrays. Out-of-range input yields nan/inf rather than
raising, matching the scalar contract of "garbage in, garbage out".
"""

from __future__ import annotations

from typing import Tuple

import numpy as np
from numpy.typing import ArrayLike

from tile_profiles.geodetic import GeodeticProfile
from tile_profiles.mercator import MercatorProfile

__all__ = [
    "lat_lon_to_meters",
    "meters_to_lat_lon",
    "meters_to_pixels",
    "pixels_to_meters",
    "pixels_to_tile",
    "lat_lon_to_tile",
    "geodetic_lat_lon_to_pixels",
]


def lat_lon_to_meters(profile: MercatorProfile, lat: ArrayLike, lon: ArrayLike) -> Tuple[np.ndarray, np.ndarray]:
    lat = np.asarray(lat, dtype=float)
    lon = np.asarray(lon, dtype=float)
    mx = lon * profile.origin_shift / 180.0
    with np.errstate(divide="ignore", invalid="ignore"):
        my = np.log(np.tan((90 + lat) * np.pi / 360.0)) / (np.pi / 180.0)
    my = my * profile.origin_shift / 180.0
    return mx, my


def meters_to_lat_lon(profile: MercatorProfile, mx: ArrayLike, my: ArrayLike) -> Tuple[np.ndarray, np.ndarray]:
    mx = np.asarray(mx, dtype=float)
    my = np.asarray(my, dtype=float)
    lon = (mx / profile.origin_shift) * 180.0
    lat = (my / profile.origin_shift) * 180.0
    with np.errstate(over="ignore"):
        lat = 180 / np.pi * (2 * np.arctan(np.exp(lat * np.pi / 180.0)) - np.pi / 2.0)
    return lat, lon


def meters_to_pixels(profile: MercatorProfile, mx: ArrayLike, my: ArrayLike, zoom: int) -> Tuple[np.ndarray, np.ndarray]:
    res = profile.resolution(zoom)
    px = (np.asarray(mx, dtype=float) + profile.origin_shift) / res
    py = (np.asarray(my, dtype=float) + profile.origin_shift) / res
    return px, py


def pixels_to_meters(profile: MercatorProfile, px: ArrayLike, py: ArrayLike, zoom: int) -> Tuple[np.ndarray, np.ndarray]:
    res = profile.resolution(zoom)
    mx = np.asarray(px, dtype=float) * res - profile.origin_shift
    my = np.asarray(py, dtype=float) * res - profile.origin_shift
    return mx, my


def pixels_to_tile(tile_size: int, px: ArrayLike, py: ArrayLike) -> Tuple[np.ndarray, np.ndarray]:
    """Tile indices covering the pixels; like the scalar form, pixel 0 maps to -1."""
    tx = np.ceil(np.asarray(px, dtype=float) / float(tile_size)) - 1
    ty = np.ceil(np.asarray(py, dtype=float) / float(tile_size)) - 1
    return tx.astype(np.int64), ty.astype(np.int64)


def lat_lon_to_tile(profile: MercatorProfile, lat: ArrayLike, lon: ArrayLike, zoom: int) -> Tuple[np.ndarray, np.ndarray]:
    """Mercator tile indices for arrays of finite, in-range lat/lon."""
    mx, my = lat_lon_to_meters(profile, lat, lon)
    px, py = meters_to_pixels(profile, mx, my, zoom)
    return pixels_to_tile(profile.tile_size, px, py)


def geodetic_lat_lon_to_pixels(profile: GeodeticProfile, lat: ArrayLike, lon: ArrayLike, zoom: int) -> Tuple[np.ndarray, np.ndarray]:
    res = profile.resolution(zoom)
    px = (180 + np.asarray(lat, dtype=float)) / res
    py = (90 + np.asarray(lon, dtype=float)) / res
    return px, py
