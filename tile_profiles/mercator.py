#!/usr/bin/env python3
# tile_profiles/mercator.py
"""
TMS Global Mercator profile.

Conversions needed for tiles in Spherical Mercator, EPSG:900913 / EPSG:3857
(Google Maps, OpenStreetMap, Bing and friends):

     LatLon      <->       Meters      <->     Pixels    <->       Tile

 WGS84 coordinates   Spherical Mercator  Pixels in pyramid  Tiles in pyramid
     lat/lon            XY in meters     XY pixels Z zoom      XYZ from TMS
    EPSG:4326           EPSG:3857

Extent of the Earth in meters is [-20037508.34, -20037508.34, 20037508.34,
20037508.34], origin in the middle. At zoom 0 the whole extent is covered by
one tile; every further zoom level halves the resolution.

Lat/lon on the WGS84 ellipsoid are projected as if they were on a sphere.
The resulting ~0.33% scale distortion in Y is accepted, as in every web map.
Latitudes beyond +/-85.05112878 are off the map: the forward projection
diverges towards the poles and is not clipped here (see geodesy.clamp_lat).
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Tuple

from tile_profiles.geodesy import (
    EARTH_RADIUS,
    ORIGIN_SHIFT,
    ZOOM_SCAN_CORRECTED,
    check_zoom_scan,
    google_tile,
    pixels_to_tile,
    quadkey,
    scan_zoom_for_pixel_size,
)

log = logging.getLogger(__name__)

__all__ = ["MercatorProfile"]


def _ieee_log(x: float) -> float:
    """math.log with IEEE results instead of exceptions: log(0) = -inf, log(<0) = nan."""
    if x > 0:
        return math.log(x)
    if x == 0:
        return -math.inf
    return math.nan


def _ieee_exp(x: float) -> float:
    """math.exp that overflows to inf instead of raising."""
    try:
        return math.exp(x)
    except OverflowError:
        return math.inf


def _ieee_tan(x: float) -> float:
    return math.tan(x) if math.isfinite(x) else math.nan


@dataclass(frozen=True)
class MercatorProfile:
    """
    Spherical Mercator tile pyramid for a given tile size in pixels.

    tile_size must be positive. A zero tile size gives an infinite
    initial_resolution, and pixels_to_tile then divides by zero.
    """

    tile_size: int = 256
    zoom_scan: str = ZOOM_SCAN_CORRECTED

    # Derived, fixed at construction
    initial_resolution: float = field(init=False)
    origin_shift: float = field(init=False)

    def __post_init__(self):
        check_zoom_scan(self.zoom_scan)
        # 156543.03392804062 for 256 px tiles
        circumference = 2 * math.pi * EARTH_RADIUS
        initial = circumference / self.tile_size if self.tile_size else math.inf
        object.__setattr__(self, "initial_resolution", initial)
        object.__setattr__(self, "origin_shift", ORIGIN_SHIFT)
        log.debug(
            "Mercator profile tile_size=%d initial_resolution=%r origin_shift=%r",
            self.tile_size, self.initial_resolution, self.origin_shift,
        )

    # ------------- lat/lon <-> meters -------------

    def lat_lon_to_meters(self, lat: float, lon: float) -> Tuple[float, float]:
        """
        Convert lat/lon in WGS84 datum to XY in Spherical Mercator meters.
        lat = -90 gives my = -inf; lat below -90 gives nan.
        """
        mx = lon * self.origin_shift / 180.0
        my = _ieee_log(_ieee_tan((90 + lat) * math.pi / 360.0)) / (math.pi / 180.0)
        my = my * self.origin_shift / 180.0
        return mx, my

    def meters_to_lat_lon(self, mx: float, my: float) -> Tuple[float, float]:
        """
        Convert Spherical Mercator XY to lat/lon in WGS84 datum.
        Meters far north or south of the map saturate at lat +/-90.
        """
        lon = (mx / self.origin_shift) * 180.0
        lat = (my / self.origin_shift) * 180.0
        lat = 180 / math.pi * (2 * math.atan(_ieee_exp(lat * math.pi / 180.0)) - math.pi / 2.0)
        return lat, lon

    # ------------- meters <-> pixels -------------

    def resolution(self, zoom: int) -> float:
        """Meters per pixel at the given zoom, measured at the equator."""
        return self.initial_resolution / (2 ** zoom)

    def pixels_to_meters(self, px: float, py: float, zoom: int) -> Tuple[float, float]:
        res = self.resolution(zoom)
        mx = px * res - self.origin_shift
        my = py * res - self.origin_shift
        return mx, my

    def meters_to_pixels(self, mx: float, my: float, zoom: int) -> Tuple[float, float]:
        res = self.resolution(zoom)
        px = (mx + self.origin_shift) / res
        py = (my + self.origin_shift) / res
        return px, py

    def pixels_to_raster(self, px: float, py: float, zoom: int) -> Tuple[float, float]:
        """Move the pixel origin from bottom-left to top-left. Its own inverse."""
        map_size = int(self.tile_size) << zoom
        return px, map_size - py

    # ------------- tiles -------------

    def pixels_to_tile(self, px: float, py: float) -> Tuple[int, int]:
        return pixels_to_tile(px, py, self.tile_size)

    def meters_to_tile(self, mx: float, my: float, zoom: int) -> Tuple[int, int]:
        px, py = self.meters_to_pixels(mx, my, zoom)
        return self.pixels_to_tile(px, py)

    def lat_lon_to_tile(self, lat: float, lon: float, zoom: int) -> Tuple[int, int]:
        mx, my = self.lat_lon_to_meters(lat, lon)
        return self.meters_to_tile(mx, my, zoom)

    def tile_bounds(self, tx: int, ty: int, zoom: int) -> Tuple[float, float, float, float]:
        """Return (minx, miny, maxx, maxy) of the tile in meters."""
        minx, miny = self.pixels_to_meters(tx * self.tile_size, ty * self.tile_size, zoom)
        maxx, maxy = self.pixels_to_meters((tx + 1) * self.tile_size, (ty + 1) * self.tile_size, zoom)
        return minx, miny, maxx, maxy

    def tile_lat_lon_bounds(self, tx: int, ty: int, zoom: int) -> Tuple[float, float, float, float]:
        """
        Return the tile corners in WGS84 as (min_lat, min_lon, max_lat, max_lon),
        i.e. the lower-left corner as (lat, lon) followed by the upper-right one.
        """
        minx, miny, maxx, maxy = self.tile_bounds(tx, ty, zoom)
        min_lat, min_lon = self.meters_to_lat_lon(minx, miny)
        max_lat, max_lon = self.meters_to_lat_lon(maxx, maxy)
        return min_lat, min_lon, max_lat, max_lon

    def google_tile(self, tx: int, ty: int, zoom: int) -> Tuple[int, int]:
        return google_tile(tx, ty, zoom)

    def quadkey(self, tx: int, ty: int, zoom: int) -> str:
        return quadkey(tx, ty, zoom)

    # ------------- zoom lookup -------------

    def zoom_for_pixel_size(self, pixel_size: float) -> int:
        """Maximal scaledown zoom of the pyramid closest to pixel_size (meters)."""
        return scan_zoom_for_pixel_size(pixel_size, self.resolution, self.zoom_scan)
