"""
Tests for settings loading and helpers
"""
import os

import pytest
import yaml

from virtualtourist import settings as settings_module
from virtualtourist.constants import DEFAULT_SETTINGS
from virtualtourist.settings import (
    apply_env_overrides,
    load_settings,
    merge_settings,
    reload_conf,
    verify_settings,
)
from virtualtourist.utils import format_size_py, mask_value, sanitize_sensitive_data


@pytest.fixture(autouse=True)
def reset_cached_settings(monkeypatch):
    monkeypatch.setattr(settings_module, "_cached_settings", None)
    for name in ("FLICKR_API_KEY", "VIRTUALTOURIST_DATA_DIR", "VIRTUALTOURIST_CONFIG_DIR"):
        monkeypatch.delenv(name, raising=False)


class TestMergeSettings:
    def test_nested_override(self):
        merged = merge_settings(DEFAULT_SETTINGS, {"flickr": {"api_key": "abc"}})

        assert merged["flickr"]["api_key"] == "abc"
        assert merged["flickr"]["max_photos"] == 15
        assert merged["server"] == DEFAULT_SETTINGS["server"]

    def test_defaults_not_mutated(self):
        merge_settings(DEFAULT_SETTINGS, {"cache": {"memory_max_items": 1}})

        assert DEFAULT_SETTINGS["cache"]["memory_max_items"] == 200


class TestLoadSettings:
    def test_writes_defaults_when_missing(self, tmp_path):
        settings = load_settings(config_dir=str(tmp_path))

        config_file = tmp_path / "settings.yaml"
        assert config_file.exists()
        assert yaml.safe_load(config_file.read_text())["flickr"]["page_limit"] == 40
        assert settings["server"]["port"] == 8465

    def test_reads_file_over_defaults(self, tmp_path):
        (tmp_path / "settings.yaml").write_text("flickr:\n  api_key: from-file\n  max_photos: 5\n")

        settings = load_settings(config_dir=str(tmp_path))

        assert settings["flickr"]["api_key"] == "from-file"
        assert settings["flickr"]["max_photos"] == 5
        assert settings["flickr"]["timeout"] == 10

    def test_cached_until_reload(self, tmp_path):
        first = load_settings(config_dir=str(tmp_path))
        (tmp_path / "settings.yaml").write_text("flickr:\n  api_key: changed\n")

        assert load_settings(config_dir=str(tmp_path)) is first
        assert reload_conf(config_dir=str(tmp_path))["flickr"]["api_key"] == "changed"

    def test_environment_api_key(self, tmp_path, monkeypatch):
        monkeypatch.setenv("FLICKR_API_KEY", "from-env")

        assert load_settings(config_dir=str(tmp_path))["flickr"]["api_key"] == "from-env"

    def test_config_dir_from_environment(self, tmp_path, monkeypatch):
        (tmp_path / "settings.yaml").write_text("flickr:\n  api_key: from-env-dir\n")
        monkeypatch.setenv("VIRTUALTOURIST_CONFIG_DIR", str(tmp_path))

        assert load_settings()["flickr"]["api_key"] == "from-env-dir"

    def test_images_dir_follows_data_dir_environment(self, tmp_path, monkeypatch):
        monkeypatch.setenv("VIRTUALTOURIST_DATA_DIR", str(tmp_path / "data"))

        settings = load_settings(config_dir=str(tmp_path))

        assert settings["cache"]["images_dir"] == os.path.join(str(tmp_path / "data"), "images")

    def test_images_dir_defaults_under_data_dir(self, tmp_path):
        settings = load_settings(config_dir=str(tmp_path))

        assert os.path.basename(settings["cache"]["images_dir"]) == "images"


class TestApplyEnvOverrides:
    def test_explicit_images_dir_kept(self):
        settings = merge_settings(DEFAULT_SETTINGS, {"cache": {"images_dir": "/srv/images"}})

        assert apply_env_overrides(settings)["cache"]["images_dir"] == "/srv/images"


class TestVerifySettings:
    def test_valid(self, test_settings):
        assert verify_settings(test_settings) == (True, [])

    def test_reports_every_problem(self):
        settings = merge_settings(
            DEFAULT_SETTINGS,
            {"flickr": {"max_photos": 0, "page_limit": 41}, "cache": {"memory_max_items": 0}},
        )

        valid, errors = verify_settings(settings)

        assert valid is False
        assert [error["path"] for error in errors] == [
            "flickr/api_key",
            "flickr/max_photos",
            "flickr/page_limit",
            "cache/memory_max_items",
        ]


class TestUtils:
    def test_sanitize_nested(self):
        data = {"api_key": "abcdef123456", "bbox": "1,2,3,4", "nested": [{"token": "xy"}]}

        assert sanitize_sensitive_data(data) == {
            "api_key": "ab***56",
            "bbox": "1,2,3,4",
            "nested": [{"token": "***"}],
        }

    def test_mask_short_value(self):
        assert mask_value("abc") == "***"

    def test_format_size(self):
        assert format_size_py(None) == "0 B"
        assert format_size_py(2048) == "2.00 KB"
