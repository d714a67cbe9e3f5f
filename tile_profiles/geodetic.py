#!/usr/bin/env python3
# tile_profiles/geodetic.py
"""
TMS Global Geodetic profile (Plate Carree, EPSG:4326, "unprojected").

Geodetic coordinates are used directly as planar XY; only scaling to the
pixel pyramid and cutting into tiles is needed. The top level holds two
tiles side by side, so area [-180,-90,180,90] is scaled to 512x256 pixels.

    LatLon      <->      Pixels      <->     Tiles

Note the axis pairing: the first coordinate spans [-180, 180] and the second
[-90, 90], which is why lat_lon_to_pixels offsets `lat` by 180 and `lon` by 90.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Tuple

from tile_profiles.geodesy import (
    ZOOM_SCAN_CORRECTED,
    check_zoom_scan,
    pixels_to_tile,
    scan_zoom_for_pixel_size,
)

log = logging.getLogger(__name__)

__all__ = ["GeodeticProfile", "REFERENCE_DIVISOR"]

# Pixels per tile edge assumed by the resolution formula
REFERENCE_DIVISOR = 256


@dataclass(frozen=True)
class GeodeticProfile:
    """
    Plate Carree tile pyramid.

    With fixed_divisor (the default) the resolution and tile bounds always
    assume 256 px tiles, whatever tile_size says; tile_size then only affects
    pixels_to_tile. Set fixed_divisor=False to scale everything by tile_size.
    """

    tile_size: int = 256
    fixed_divisor: bool = True
    zoom_scan: str = ZOOM_SCAN_CORRECTED

    def __post_init__(self):
        check_zoom_scan(self.zoom_scan)
        log.debug(
            "Geodetic profile tile_size=%d divisor=%d",
            self.tile_size, self.divisor,
        )

    @property
    def divisor(self) -> int:
        return REFERENCE_DIVISOR if self.fixed_divisor else int(self.tile_size)

    def resolution(self, zoom: int) -> float:
        """Degrees per pixel at the given zoom."""
        return 180.0 / self.divisor / 2 ** zoom

    def lat_lon_to_pixels(self, lat: float, lon: float, zoom: int) -> Tuple[float, float]:
        """Convert lat/lon to pixel coordinates in the given zoom of the EPSG:4326 pyramid."""
        res = self.resolution(zoom)
        px = (180 + lat) / res
        py = (90 + lon) / res
        return px, py

    def pixels_to_tile(self, px: float, py: float) -> Tuple[int, int]:
        return pixels_to_tile(px, py, self.tile_size)

    def lat_lon_to_tile(self, lat: float, lon: float, zoom: int) -> Tuple[int, int]:
        px, py = self.lat_lon_to_pixels(lat, lon, zoom)
        return self.pixels_to_tile(px, py)

    def tile_bounds(self, tx: int, ty: int, zoom: int) -> Tuple[float, float, float, float]:
        res = self.resolution(zoom)
        d = self.divisor
        return (
            tx * d * res - 180,
            ty * d * res - 90,
            (tx + 1) * d * res - 180,
            (ty + 1) * d * res - 90,
        )

    def tile_lat_lon_bounds(self, tx: int, ty: int, zoom: int) -> Tuple[float, float, float, float]:
        """Return the tile bounds in south, west, north, east order."""
        b = self.tile_bounds(tx, ty, zoom)
        return b[1], b[0], b[3], b[2]

    def zoom_for_pixel_size(self, pixel_size: float) -> int:
        """Maximal scaledown zoom of the pyramid closest to pixel_size (degrees)."""
        return scan_zoom_for_pixel_size(pixel_size, self.resolution, self.zoom_scan)
