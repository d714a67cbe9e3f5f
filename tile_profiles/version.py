#!/usr/bin/env python3
# tile_profiles/version.py
"""
Version metadata for tile_profiles.
"""

__version__ = "1.0.0"
__license__ = "MIT"

def version_info() -> str:
    """Return human-readable version string."""
    return f"tile_profiles v{__version__} (TMS Global Mercator / Global Geodetic)"
