"""Configuration management for binge."""

from binge.config.paths import Paths
from binge.config.settings import ConfigManager, install_path

__all__ = ["ConfigManager", "Paths", "install_path"]
