"""
Shared path utilities for the hdkeys data directory.
"""

from __future__ import annotations

import os
from pathlib import Path

DEFAULT_DATA_DIR_NAME = ".hdkeys"


def get_default_data_dir(create: bool = True) -> Path:
    """
    Get the default hdkeys data directory.

    Returns ~/.hdkeys or $HDKEYS_DATA_DIR if set.
    Creates the directory unless create is False.
    """
    env_path = os.getenv("HDKEYS_DATA_DIR")
    data_dir = Path(env_path) if env_path else Path.home() / DEFAULT_DATA_DIR_NAME

    if create:
        data_dir.mkdir(parents=True, exist_ok=True)
    return data_dir


def get_config_path() -> Path:
    """
    Get the path to the config file.

    $HDKEYS_CONFIG_FILE wins; otherwise config.toml inside the data directory.
    """
    env_path = os.environ.get("HDKEYS_CONFIG_FILE")
    if env_path:
        return Path(env_path)
    return get_default_data_dir(create=False) / "config.toml"
