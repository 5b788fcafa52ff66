"""Locations of the configuration directories."""

from __future__ import annotations

import os
from pathlib import Path

import platformdirs

PRIMARY_CONFIG_DIR = "wayscriber"
LEGACY_CONFIG_DIR = "hyprmarker"


def config_home_dir() -> Path:
    """The user's configuration root, honouring an absolute ``XDG_CONFIG_HOME``."""
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg and Path(xdg).is_absolute():
        return Path(xdg)
    try:
        base = platformdirs.user_config_dir()
    except (RuntimeError, KeyError) as err:
        raise RuntimeError("Could not find config directory") from err
    if not base:
        raise RuntimeError("Could not find config directory")
    return Path(base)


def primary_config_dir() -> Path:
    """Directory holding the current configuration."""
    return config_home_dir() / PRIMARY_CONFIG_DIR


def legacy_config_dir() -> Path:
    """Directory used by the older hyprmarker configuration."""
    return config_home_dir() / LEGACY_CONFIG_DIR