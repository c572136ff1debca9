"""Filesystem locations for CLI data."""

import os
from pathlib import Path

APP_DIR_NAME = ".skyflow"


def config_dir() -> Path:
    """~/.skyflow/ (or $SKYFLOW_CONFIG_DIR)"""
    override = os.environ.get("SKYFLOW_CONFIG_DIR")
    if override:
        return Path(override)
    return Path.home() / APP_DIR_NAME


def config_path() -> Path:
    """~/.skyflow/config.json"""
    return config_dir() / "config.json"
