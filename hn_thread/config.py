import copy
import os
from pathlib import Path
from typing import Any, Dict

import toml

from hn_thread.logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_CONFIG: Dict[str, Dict[str, Any]] = {
    "api": {
        "base_url": "https://hacker-news.firebaseio.com/v0",
        "request_timeout": 10.0,
        "max_concurrency": 32,
    },
    # "limit" and "max_fetches" are unlimited unless set
    "aggregate": {
        "depth": 10,
        "timeout": 300.0,
    },
    "logging": {"level": "INFO"},
}


def find_config_file() -> str:
    """
    Find the configuration file in standard locations.

    Look for config in the following locations (in order):
    1. ./hn_thread.toml (current directory)
    2. ~/.config/hn_thread/config.toml (user config directory)
    3. /etc/hn_thread/config.toml (system config directory)

    Returns:
        Path to the first config file found, or an empty string if none exists
    """
    candidates = [
        Path("./hn_thread.toml"),
        Path.home() / ".config" / "hn_thread" / "config.toml",
        Path("/etc/hn_thread/config.toml"),
    ]
    for candidate in candidates:
        if candidate.exists():
            return str(candidate)
    return ""


def load_config(config_path: str = "") -> Dict[str, Any]:
    """
    Load configuration from a TOML file.

    Args:
        config_path: Path to the configuration file. If not provided,
                    the function will search for a config file in standard locations.

    Returns:
        Dictionary with configuration values, user values merged over defaults
    """
    if not config_path:
        config_path = find_config_file()

    config = copy.deepcopy(DEFAULT_CONFIG)

    if config_path and os.path.exists(config_path):
        try:
            user_config = toml.load(config_path)
        except (toml.TomlDecodeError, OSError) as e:
            logger.warning("could not load config file", path=config_path, error=str(e))
            return config

        for section in config:
            if isinstance(user_config.get(section), dict):
                config[section].update(user_config[section])

    return config
