"""Tests for the JSON config layer and profile factories."""

import json

import pytest

from tile_profiles.config import DEFAULT_CONFIG, Config, _default_config_path
from tile_profiles.geodetic import GeodeticProfile
from tile_profiles.mercator import MercatorProfile


@pytest.fixture
def cfg_path(tmp_path):
    return str(tmp_path / "conf" / "tile_profiles.json")


def test_load_missing_creates_defaults(cfg_path):
    cfg = Config.load(cfg_path)
    assert cfg["mercator"]["tile_size"] == 256
    with open(cfg_path, encoding="utf-8") as f:
        assert json.load(f) == cfg.data


def test_load_missing_without_create(cfg_path, tmp_path):
    Config.load(cfg_path, create_if_missing=False)
    assert not (tmp_path / "conf").exists()


def test_user_values_merge_over_defaults(cfg_path, tmp_path):
    (tmp_path / "conf").mkdir()
    with open(cfg_path, "w", encoding="utf-8") as f:
        json.dump({"geodetic": {"tile_size": 512, "fixed_divisor": "no"}}, f)
    cfg = Config.load(cfg_path)
    assert cfg["geodetic"]["tile_size"] == 512
    assert cfg["geodetic"]["fixed_divisor"] is False
    assert cfg["geodetic"]["zoom_scan"] == "corrected"
    assert cfg["mercator"] == DEFAULT_CONFIG["mercator"]


def test_invalid_values_fall_back(cfg_path):
    cfg = Config({}, cfg_path)
    cfg.update({
        "mercator": {"tile_size": "big", "zoom_scan": "random"},
        "geodetic": {"tile_size": -3},
        "logging": {"level": "chatty", "rotate_keep": 1000},
    })
    assert cfg["mercator"]["tile_size"] == 256
    assert cfg["mercator"]["zoom_scan"] == "corrected"
    assert cfg["geodetic"]["tile_size"] == 1
    assert cfg["logging"]["level"] == "INFO"
    assert cfg["logging"]["rotate_keep"] == 50


def test_non_dict_section_is_reset(cfg_path):
    cfg = Config({}, cfg_path)
    cfg.update({"mercator": 7})
    assert cfg["mercator"] == DEFAULT_CONFIG["mercator"]


def test_corrupt_file_is_backed_up(cfg_path, tmp_path):
    (tmp_path / "conf").mkdir()
    with open(cfg_path, "w", encoding="utf-8") as f:
        f.write("{not json")
    cfg = Config.load(cfg_path)
    assert cfg["mercator"]["tile_size"] == 256
    with open(cfg_path + ".corrupt.bak", encoding="utf-8") as f:
        assert f.read() == "{not json"


def test_save_round_trip(cfg_path):
    cfg = Config.load(cfg_path)
    cfg["mercator"]["zoom_scan"] = "literal"
    cfg["logging"]["level"] = "debug"
    cfg.save()
    assert cfg["logging"]["level"] == "DEBUG"
    again = Config.load(cfg_path)
    assert again["mercator"]["zoom_scan"] == "literal"
    assert again["logging"]["level"] == "DEBUG"


def test_defaults_are_not_mutated(cfg_path):
    cfg = Config.load(cfg_path)
    cfg["mercator"]["tile_size"] = 1024
    assert DEFAULT_CONFIG["mercator"]["tile_size"] == 256


def test_profile_factories(cfg_path):
    cfg = Config.load(cfg_path)
    cfg.update({
        "mercator": {"tile_size": 512, "zoom_scan": "literal"},
        "geodetic": {"fixed_divisor": False},
    })
    merc = cfg.mercator_profile()
    assert merc == MercatorProfile(512, zoom_scan="literal")
    assert merc.resolution(0) == pytest.approx(156543.03392804062 / 2)
    geo = cfg.geodetic_profile()
    assert isinstance(geo, GeodeticProfile)
    assert geo.fixed_divisor is False


def test_env_override(monkeypatch, tmp_path):
    target = tmp_path / "env.json"
    monkeypatch.setenv("TILE_PROFILES_CONFIG", str(target))
    assert _default_config_path() == str(target)
    cfg = Config.load()
    assert cfg.path == str(target)
    assert target.exists()


def test_non_finite_numbers_fall_back(cfg_path, tmp_path):
    (tmp_path / "conf").mkdir()
    with open(cfg_path, "w", encoding="utf-8") as f:
        f.write('{"mercator": {"tile_size": Infinity}, '
                '"geodetic": {"tile_size": NaN}, '
                '"logging": {"rotate_bytes": -Infinity}}')
    cfg = Config.load(cfg_path)
    assert cfg["mercator"]["tile_size"] == 256
    assert cfg["geodetic"]["tile_size"] == 256
    assert cfg["logging"]["rotate_bytes"] == DEFAULT_CONFIG["logging"]["rotate_bytes"]
