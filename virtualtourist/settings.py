import copy
import logging
import os

import yaml

from virtualtourist import constants
from virtualtourist.constants import CONFIG_FILENAME, DEFAULT_SETTINGS, IMAGES_DIRNAME

# Retrieve main logger
logger = logging.getLogger("main")

# Cache variable
_cached_settings = None


def get_data_dir():
    return os.environ.get("VIRTUALTOURIST_DATA_DIR") or constants.DATA_DIR


def get_config_file(config_dir=None):
    config_dir = config_dir or os.environ.get("VIRTUALTOURIST_CONFIG_DIR") or constants.CONFIG_DIR
    return os.path.join(config_dir, CONFIG_FILENAME)


def merge_settings(defaults, overrides):
    """Recursively merge overrides into a copy of defaults"""
    merged = copy.deepcopy(defaults)
    for section, values in (overrides or {}).items():
        if isinstance(values, dict) and isinstance(merged.get(section), dict):
            merged[section] = merge_settings(merged[section], values)
        else:
            merged[section] = values
    return merged


def apply_env_overrides(settings):
    api_key = os.environ.get("FLICKR_API_KEY")
    if api_key:
        settings["flickr"]["api_key"] = api_key
    if not settings["cache"].get("images_dir"):
        settings["cache"]["images_dir"] = os.path.join(get_data_dir(), IMAGES_DIRNAME)
    return settings


def load_settings(force=False, config_dir=None):
    global _cached_settings

    if _cached_settings and not force:
        return _cached_settings

    config_file = get_config_file(config_dir)
    if os.path.exists(config_file):
        logger.debug(f"Reading configuration file: {config_file}")
        with open(config_file, "r") as yaml_file:
            file_settings = yaml.safe_load(yaml_file) or {}
        settings = merge_settings(DEFAULT_SETTINGS, file_settings)
    else:
        settings = copy.deepcopy(DEFAULT_SETTINGS)
        os.makedirs(os.path.dirname(config_file), exist_ok=True)
        with open(config_file, "w") as yaml_file:
            yaml.dump(settings, yaml_file)
        logger.info(f"Default configuration written to {config_file}")

    _cached_settings = apply_env_overrides(settings)
    return _cached_settings


def verify_settings(settings):
    """Return (success, errors) for values the application cannot run with"""
    errors = []
    flickr = settings.get("flickr", {})
    if not flickr.get("api_key"):
        errors.append({"path": "flickr/api_key", "error": "Flickr API key is not configured."})
    if int(flickr.get("max_photos", 0)) <= 0:
        errors.append({"path": "flickr/max_photos", "error": "max_photos must be positive."})
    if not 1 <= int(flickr.get("page_limit", 0)) <= constants.FLICKR_PAGE_LIMIT:
        errors.append(
            {"path": "flickr/page_limit", "error": f"page_limit must be between 1 and {constants.FLICKR_PAGE_LIMIT}."}
        )
    if int(settings.get("cache", {}).get("memory_max_items", 0)) <= 0:
        errors.append({"path": "cache/memory_max_items", "error": "memory_max_items must be positive."})
    return not errors, errors


def reload_conf(config_dir=None):
    """Reload application settings cache"""
    global _cached_settings
    _cached_settings = None
    return load_settings(force=True, config_dir=config_dir)
