"""
Configuration loading following kkb_fastapi pattern.

Reads one of the TOML files under ``pcf_portal/config`` into a Config object.
"""
import logging
import os
from functools import lru_cache
from pathlib import Path

import toml

from pcf_portal.utils.constants import ConfigFile

CONFIG_DIR = Path(__file__).resolve().parent.parent / "config"

logger = logging.getLogger(__name__)


class Config:
    """Parsed configuration file."""

    def __init__(self, config_file: str):
        self.config_file = config_file
        self.path = CONFIG_DIR / config_file
        self.data = toml.load(self.path)

    def section(self, name: str) -> dict:
        """Return a config section, or an empty dict when it is missing."""
        return self.data.get(name, {})


@lru_cache
def get_config(config_file: str = ConfigFile.DEVELOPMENT) -> Config:
    """
    Load configuration by file name.

    Args:
        config_file: Configuration file name (e.g., "production.toml")

    Returns:
        Config instance (cached per file name)
    """
    logger.debug(f"Loading configuration from {config_file}")
    return Config(config_file)


def get_environment_config_file() -> str:
    """Pick the config file named by the ENVIRONMENT variable."""
    env = os.getenv("ENVIRONMENT", "development")
    return f"{env}.toml"


__all__ = ["Config", "ConfigFile", "get_config", "get_environment_config_file"]
