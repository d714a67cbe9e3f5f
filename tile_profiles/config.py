#!/usr/bin/env python3
# tile_profiles/config.py
"""
Config loader/saver and defaults for building tile profiles.

Goals:
- Single JSON file per user.
- Safe atomic writes.
- Deep-merge of user config over defaults.
- Basic validation with sane fallbacks.
- No external deps.

Usage:
    from tile_profiles.config import Config
    cfg = Config.load()                 # ~/.config/tile_profiles/tile_profiles.json or OS-specific
    mercator = cfg.mercator_profile()
    cfg["geodetic"]["fixed_divisor"] = False
    cfg.save()
"""

from __future__ import annotations

import copy
import json
import logging
import os
import platform
import shutil
import tempfile
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from tile_profiles.geodesy import ZOOM_SCAN_CORRECTED, ZOOM_SCAN_MODES
from tile_profiles.geodetic import GeodeticProfile
from tile_profiles.mercator import MercatorProfile

log = logging.getLogger(__name__)

# ----------------------------
# Defaults
# ----------------------------

DEFAULT_CONFIG: Dict[str, Any] = {
    "mercator": {
        "tile_size": 256,
        "zoom_scan": ZOOM_SCAN_CORRECTED,   # corrected | literal
    },
    "geodetic": {
        "tile_size": 256,
        "fixed_divisor": True,              # resolution always assumes 256 px tiles
        "zoom_scan": ZOOM_SCAN_CORRECTED,
    },
    "logging": {
        "level": "INFO",
        "file": None,                       # path or None
        "rotate_bytes": 5 * 1024 * 1024,
        "rotate_keep": 3,
    },
}

TILE_SIZE_RANGE = (1, 4096)

# ----------------------------
# Helpers
# ----------------------------

def _os_config_home() -> str:
    """Return per-OS config base directory."""
    if platform.system() == "Windows":
        base = os.environ.get("APPDATA") or os.path.expanduser("~\\AppData\\Roaming")
        return os.path.join(base, "TileProfiles")
    if platform.system() == "Darwin":
        return os.path.join(os.path.expanduser("~/Library/Application Support"), "TileProfiles")
    return os.path.join(os.path.expanduser("~/.config"), "tile_profiles")

def _default_config_path() -> str:
    """Resolve default config path, honoring TILE_PROFILES_CONFIG env override."""
    env = os.environ.get("TILE_PROFILES_CONFIG")
    if env:
        return os.path.expanduser(env)
    return os.path.join(_os_config_home(), "tile_profiles.json")

def _deep_merge(a: Dict[str, Any], b: Dict[str, Any]) -> Dict[str, Any]:
    """Return deep-merged copy of dicts: values in b override a."""
    out = dict(a)
    for k, v in b.items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = _deep_merge(out[k], v)
        else:
            out[k] = v
    return out

def _atomic_write_json(path: str, data: Dict[str, Any]) -> None:
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    fd, tmp = tempfile.mkstemp(prefix=".tmp_cfg_", dir=os.path.dirname(path) or ".")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, sort_keys=True)
            f.write("\n")
        os.replace(tmp, path)
    except Exception:
        # Clean temp on error
        if os.path.exists(tmp):
            os.remove(tmp)
        raise

def _coerce_int(v: Any, default: int, minmax: Optional[Tuple[int, int]] = None) -> int:
    try:
        x = int(v)
    except (TypeError, ValueError, OverflowError):
        return int(default)
    if minmax:
        lo, hi = minmax
        if x < lo: x = lo
        if x > hi: x = hi
    return x

def _coerce_bool(v: Any, default: bool) -> bool:
    if isinstance(v, bool):
        return v
    if isinstance(v, str):
        s = v.strip().lower()
        if s in ("1", "true", "yes", "on"): return True
        if s in ("0", "false", "no", "off"): return False
    return default

def _coerce_choice(v: Any, choices: Tuple[str, ...], default: str) -> str:
    return v if v in choices else default

# ----------------------------
# Validation
# ----------------------------

def _validate(cfg: Dict[str, Any]) -> Dict[str, Any]:
    """Return validated copy with fallbacks applied."""
    c = _deep_merge(copy.deepcopy(DEFAULT_CONFIG), cfg or {})
    for section, defaults in DEFAULT_CONFIG.items():
        if not isinstance(c.get(section), dict):
            c[section] = copy.deepcopy(defaults)

    # mercator
    m = c["mercator"]
    m["tile_size"] = _coerce_int(m.get("tile_size"), DEFAULT_CONFIG["mercator"]["tile_size"], TILE_SIZE_RANGE)
    m["zoom_scan"] = _coerce_choice(m.get("zoom_scan"), ZOOM_SCAN_MODES, DEFAULT_CONFIG["mercator"]["zoom_scan"])

    # geodetic
    g = c["geodetic"]
    g["tile_size"] = _coerce_int(g.get("tile_size"), DEFAULT_CONFIG["geodetic"]["tile_size"], TILE_SIZE_RANGE)
    g["fixed_divisor"] = _coerce_bool(g.get("fixed_divisor"), DEFAULT_CONFIG["geodetic"]["fixed_divisor"])
    g["zoom_scan"] = _coerce_choice(g.get("zoom_scan"), ZOOM_SCAN_MODES, DEFAULT_CONFIG["geodetic"]["zoom_scan"])

    # logging
    lg = c["logging"]
    if str(lg.get("level")).upper() not in ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "NOTSET"):
        lg["level"] = DEFAULT_CONFIG["logging"]["level"]
    lg["level"] = str(lg["level"]).upper()
    lf = lg.get("file")
    lg["file"] = str(lf) if lf else None
    lg["rotate_bytes"] = _coerce_int(lg.get("rotate_bytes"), DEFAULT_CONFIG["logging"]["rotate_bytes"], (256 * 1024, 50 * 1024 * 1024))
    lg["rotate_keep"]  = _coerce_int(lg.get("rotate_keep"), DEFAULT_CONFIG["logging"]["rotate_keep"], (0, 50))

    return c

# ----------------------------
# Public API
# ----------------------------

@dataclass
class Config:
    """Thin wrapper around a nested dict with load/save/merge."""
    data: Dict[str, Any] = field(default_factory=lambda: copy.deepcopy(DEFAULT_CONFIG))
    path: str = field(default_factory=_default_config_path)

    # --- Mapping-style access
    def __getitem__(self, k: str) -> Any:
        return self.data[k]

    def __setitem__(self, k: str, v: Any) -> None:
        self.data[k] = v

    def get(self, k: str, default: Any = None) -> Any:
        return self.data.get(k, default)

    # --- Ops
    @classmethod
    def load(cls, path: Optional[str] = None, create_if_missing: bool = True) -> "Config":
        cfg_path = os.path.expanduser(path) if path else _default_config_path()
        if not os.path.exists(cfg_path):
            cfg = _validate(DEFAULT_CONFIG)
            if create_if_missing:
                _atomic_write_json(cfg_path, cfg)
            return cls(cfg, cfg_path)

        try:
            with open(cfg_path, "r", encoding="utf-8") as f:
                user_cfg = json.load(f)
            if not isinstance(user_cfg, dict):
                raise ValueError("top-level JSON value is not an object")
        except ValueError as exc:
            # Corrupt file. Backup and regenerate.
            backup = cfg_path + ".corrupt.bak"
            log.warning("Config %s is unreadable (%s), backing up to %s", cfg_path, exc, backup)
            shutil.copyfile(cfg_path, backup)
            user_cfg = {}

        return cls(_validate(user_cfg), cfg_path)

    def save(self) -> None:
        """Persist to JSON atomically."""
        full = _validate(self.data)
        _atomic_write_json(self.path, full)
        self.data = full  # sync in-memory with normalized values

    def update(self, partial: Dict[str, Any]) -> None:
        """Deep-merge a partial config then validate."""
        merged = _deep_merge(self.data, partial)
        self.data = _validate(merged)

    # --- Profile factories
    def mercator_profile(self) -> MercatorProfile:
        m = _validate(self.data)["mercator"]
        return MercatorProfile(tile_size=m["tile_size"], zoom_scan=m["zoom_scan"])

    def geodetic_profile(self) -> GeodeticProfile:
        g = _validate(self.data)["geodetic"]
        return GeodeticProfile(
            tile_size=g["tile_size"],
            fixed_divisor=g["fixed_divisor"],
            zoom_scan=g["zoom_scan"],
        )


__all__ = [
    "Config",
    "DEFAULT_CONFIG",
    "_default_config_path",
]
