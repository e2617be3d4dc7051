"""Centralized type definitions for binge.

TypedDict definitions for the loaded settings so that configuration is
passed around as plain, typed dictionaries.
"""

from pathlib import Path
from typing import TypedDict


class NetworkConfig(TypedDict):
    """Network configuration options."""

    timeout_seconds: int


class DirectoryConfig(TypedDict):
    """Directory paths configuration."""

    install: Path | None


class GlobalConfig(TypedDict):
    """Global application configuration."""

    config_version: str
    max_concurrent: int
    log_level: str
    console_log_level: str
    network: NetworkConfig
    directory: DirectoryConfig
