"""Global configuration manager for INI settings.

settings.conf example::

    [DEFAULT]
    config_version = 1.0.0
    max_concurrent = 8
    log_level = INFO
    console_log_level = INFO

    [network]
    timeout_seconds = 10

    [directory]
    install = ~/.local/bin
"""

import configparser
import os
from pathlib import Path

from binge.config.paths import Paths
from binge.constants import (
    CONFIG_FILE_NAME,
    CONFIG_VERSION,
    DEFAULT_CONSOLE_LOG_LEVEL,
    DEFAULT_LOG_LEVEL,
    DEFAULT_MAX_CONCURRENT,
    DEFAULT_TIMEOUT_SECONDS,
    KEY_CONFIG_VERSION,
    KEY_CONSOLE_LOG_LEVEL,
    KEY_INSTALL_DIR,
    KEY_LOG_LEVEL,
    KEY_MAX_CONCURRENT,
    KEY_TIMEOUT_SECONDS,
    LOCAL_BIN_SUFFIX,
    SECTION_DEFAULT,
    SECTION_DIRECTORY,
    SECTION_NETWORK,
)
from binge.exceptions import ConfigurationError
from binge.types import GlobalConfig

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

# Type alias for raw INI config dictionary
RawConfigDict = dict[str, str | dict[str, str]]


class ConfigManager:
    """Loads, validates and saves settings.conf."""

    def __init__(self, config_dir: Path | None = None) -> None:
        """Initialize config manager.

        Args:
            config_dir: Configuration directory (defaults to
                Paths.config_dir())

        """
        self.config_dir = config_dir or Paths.config_dir()
        self.settings_file = self.config_dir / CONFIG_FILE_NAME

    def get_default_global_config(self) -> RawConfigDict:
        """Get default configuration values as raw INI strings."""
        return {
            KEY_CONFIG_VERSION: CONFIG_VERSION,
            KEY_MAX_CONCURRENT: str(DEFAULT_MAX_CONCURRENT),
            KEY_LOG_LEVEL: DEFAULT_LOG_LEVEL,
            KEY_CONSOLE_LOG_LEVEL: DEFAULT_CONSOLE_LOG_LEVEL,
            SECTION_NETWORK: {
                KEY_TIMEOUT_SECONDS: str(DEFAULT_TIMEOUT_SECONDS)
            },
            SECTION_DIRECTORY: {KEY_INSTALL_DIR: ""},
        }

    def _create_parser(self) -> configparser.ConfigParser:
        return configparser.ConfigParser(
            inline_comment_prefixes=("#", ";"),
            interpolation=None,
        )

    def _create_config_from_defaults(
        self, defaults: RawConfigDict
    ) -> configparser.ConfigParser:
        config = self._create_parser()

        flat_defaults = {
            key: str(value)
            for key, value in defaults.items()
            if not isinstance(value, dict)
        }
        config.read_dict({SECTION_DEFAULT: flat_defaults})

        for key, value in defaults.items():
            if isinstance(value, dict):
                config.add_section(key)
                for subkey, subvalue in value.items():
                    config.set(key, subkey, str(subvalue))

        return config

    def load_global_config(self) -> GlobalConfig:
        """Load global configuration, writing defaults on first run.

        Returns:
            Loaded and validated global configuration

        Raises:
            ConfigurationError: If the file is unreadable or holds invalid
                values

        """
        defaults = self.get_default_global_config()
        config = self._create_config_from_defaults(defaults)

        if self.settings_file.exists():
            try:
                config.read(self.settings_file, encoding="utf-8")
            except (configparser.Error, OSError) as e:
                msg = f"Cannot read settings: {e}"
                raise ConfigurationError(
                    msg, target=str(self.settings_file)
                ) from e
        else:
            self.save_global_config(self._convert_to_global_config(config))

        return self._convert_to_global_config(config)

    def _convert_to_global_config(
        self, config: configparser.ConfigParser
    ) -> GlobalConfig:
        try:
            max_concurrent = config.getint(SECTION_DEFAULT, KEY_MAX_CONCURRENT)
            timeout_seconds = config.getint(
                SECTION_NETWORK, KEY_TIMEOUT_SECONDS
            )
        except ValueError as e:
            msg = f"Expected an integer: {e}"
            raise ConfigurationError(
                msg, target=str(self.settings_file)
            ) from e

        if max_concurrent < 1:
            msg = f"{KEY_MAX_CONCURRENT} must be at least 1"
            raise ConfigurationError(msg, target=str(self.settings_file))

        log_level = config.get(SECTION_DEFAULT, KEY_LOG_LEVEL).upper()
        console_level = config.get(
            SECTION_DEFAULT, KEY_CONSOLE_LOG_LEVEL
        ).upper()
        for level in (log_level, console_level):
            if level not in VALID_LOG_LEVELS:
                msg = f"Unknown log level '{level}'"
                raise ConfigurationError(msg, target=str(self.settings_file))

        install_dir = config.get(SECTION_DIRECTORY, KEY_INSTALL_DIR).strip()

        return {
            "config_version": config.get(SECTION_DEFAULT, KEY_CONFIG_VERSION),
            "max_concurrent": max_concurrent,
            "log_level": log_level,
            "console_log_level": console_level,
            "network": {"timeout_seconds": timeout_seconds},
            "directory": {
                "install": Paths.expand_path(install_dir)
                if install_dir
                else None
            },
        }

    def save_global_config(self, config: GlobalConfig) -> None:
        """Save global configuration to settings.conf.

        Raises:
            ConfigurationError: If the file cannot be written

        """
        parser = self._create_parser()
        parser.read_dict(
            {
                SECTION_DEFAULT: {
                    KEY_CONFIG_VERSION: config["config_version"],
                    KEY_MAX_CONCURRENT: str(config["max_concurrent"]),
                    KEY_LOG_LEVEL: config["log_level"],
                    KEY_CONSOLE_LOG_LEVEL: config["console_log_level"],
                },
                SECTION_NETWORK: {
                    KEY_TIMEOUT_SECONDS: str(
                        config["network"]["timeout_seconds"]
                    )
                },
                SECTION_DIRECTORY: {
                    KEY_INSTALL_DIR: str(config["directory"]["install"] or "")
                },
            }
        )

        try:
            self.config_dir.mkdir(parents=True, exist_ok=True)
            with self.settings_file.open("w", encoding="utf-8") as f:
                f.write("# binge settings\n")
                f.write("# Empty install uses ~/.local/bin from PATH\n\n")
                parser.write(f)
        except OSError as e:
            msg = f"Cannot write settings: {e}"
            raise ConfigurationError(
                msg, target=str(self.settings_file)
            ) from e


def install_path(config: GlobalConfig, search_path: str | None = None) -> Path:
    """Return the directory binaries are installed into.

    The configured directory wins. Otherwise the first ``$PATH`` entry
    ending in ``.local/bin`` is used.

    Args:
        config: Loaded global configuration
        search_path: PATH-style string (defaults to ``$PATH``)

    Raises:
        ConfigurationError: If neither source yields a directory

    """
    configured = config["directory"]["install"]
    if configured is not None:
        return configured

    if search_path is None:
        search_path = os.environ.get("PATH", "")

    suffix = Path(LOCAL_BIN_SUFFIX).parts
    for entry in search_path.split(os.pathsep):
        if entry and Path(entry).parts[-len(suffix) :] == suffix:
            return Path(entry)

    msg = "no suitable destination directory found, consider configuring one"
    raise ConfigurationError(msg)
