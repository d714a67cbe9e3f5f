#!/usr/bin/env python3
# tile_profiles/geodesy.py
"""
Shared constants and tile-index helpers for the TMS profiles.

Pixel and tile coordinates follow TMS notation: origin [0,0] in the
bottom-left corner. Google/XYZ tiles put the origin in the top-left corner;
the flip between the two is the same raster with a different name.
"""

import logging
import math
from typing import Callable, Tuple

log = logging.getLogger(__name__)

__all__ = [
    "EARTH_RADIUS",
    "ORIGIN_SHIFT",
    "MAX_LAT",
    "MAX_ZOOM_SCAN",
    "ZOOM_SCAN_CORRECTED",
    "ZOOM_SCAN_LITERAL",
    "ZOOM_SCAN_MODES",
    "clamp_lat",
    "pixels_to_tile",
    "check_zoom_scan",
    "scan_zoom_for_pixel_size",
    "google_tile",
    "quadkey",
]

# WGS84 semi-major axis, used as the sphere radius
EARTH_RADIUS = 6378137.0

# Half the equatorial circumference: 20037508.342789244
ORIGIN_SHIFT = 2 * math.pi * EARTH_RADIUS / 2.0

# Web Mercator valid latitude limit
MAX_LAT = 85.05112878

# Zoom levels scanned by zoom_for_pixel_size (0..29)
MAX_ZOOM_SCAN = 30

# "corrected": first crossing at i returns i - 1, never below 0.
# "literal": crossing at 0 returns -1, any later crossing returns 0.
ZOOM_SCAN_CORRECTED = "corrected"
ZOOM_SCAN_LITERAL = "literal"
ZOOM_SCAN_MODES = (ZOOM_SCAN_CORRECTED, ZOOM_SCAN_LITERAL)


def clamp_lat(lat: float) -> float:
    """Clamp latitude to Web Mercator valid range.

    The profiles never clip on their own; callers feeding arbitrary input into
    MercatorProfile.lat_lon_to_meters should pass it through here first.
    """
    return max(min(lat, MAX_LAT), -MAX_LAT)


def pixels_to_tile(px: float, py: float, tile_size: int) -> Tuple[int, int]:
    """
    Return the TMS tile covering the given pixel.

    Tiles are half-open intervals ending on their upper edge, so a pixel
    exactly on a boundary belongs to the tile to its left/below.
    Only valid for px, py > 0: pixel 0 maps to tile -1.
    """
    tx = int(math.ceil(px / float(tile_size)) - 1)
    ty = int(math.ceil(py / float(tile_size)) - 1)
    return tx, ty


def check_zoom_scan(mode: str) -> str:
    if mode not in ZOOM_SCAN_MODES:
        raise ValueError(f"unknown zoom scan mode {mode!r}, expected one of {ZOOM_SCAN_MODES}")
    return mode


def scan_zoom_for_pixel_size(
    pixel_size: float,
    resolution: Callable[[int], float],
    mode: str = ZOOM_SCAN_CORRECTED,
) -> int:
    """
    Maximal scaledown zoom of the pyramid closest to pixel_size.

    Scans zoom 0..MAX_ZOOM_SCAN-1 for the first level whose resolution is
    finer than pixel_size. If pixel_size is finer than every scanned level,
    the deepest scanned zoom is returned.
    """
    for i in range(MAX_ZOOM_SCAN):
        if pixel_size > resolution(i):
            if mode == ZOOM_SCAN_LITERAL:
                return i - 1 if i == 0 else 0
            return i - 1 if i != 0 else 0  # don't scale up
    log.warning(
        "pixel size %g is finer than zoom %d, returning deepest scanned zoom",
        pixel_size, MAX_ZOOM_SCAN - 1,
    )
    return MAX_ZOOM_SCAN - 1


def google_tile(tx: int, ty: int, zoom: int) -> Tuple[int, int]:
    """Convert TMS tile coordinates to Google/XYZ tile coordinates (and back)."""
    return tx, (2 ** zoom - 1) - ty


def quadkey(tx: int, ty: int, zoom: int) -> str:
    """
    Convert TMS tile coordinates to a Microsoft QuadTree key.
    Zoom 0 yields the empty key.
    """
    key = []
    ty = (2 ** zoom - 1) - ty
    for i in range(zoom, 0, -1):
        digit = 0
        mask = 1 << (i - 1)
        if (tx & mask) != 0:
            digit += 1
        if (ty & mask) != 0:
            digit += 2
        key.append(str(digit))
    return "".join(key)
