"""Path resolution for binge configuration and state.

Follows the XDG base directory layout: settings live under
``$XDG_CONFIG_HOME/binge`` and the manifest, logs and lock file under
``$XDG_STATE_HOME/binge``. ``BINGE_CONFIG_DIR`` and ``BINGE_STATE_DIR``
override both for tests.
"""

import os
from pathlib import Path

from binge.constants import (
    APP_NAME,
    CONFIG_FILE_NAME,
    ENV_CONFIG_DIR,
    ENV_STATE_DIR,
    LOCK_FILE_NAME,
    MANIFEST_FILE_NAME,
)


def _xdg_dir(env_var: str, fallback: Path) -> Path:
    value = os.environ.get(env_var)
    # XDG spec: relative values are invalid and must be ignored
    if value and Path(value).is_absolute():
        return Path(value)
    return fallback


class Paths:
    """Application paths and directory structure."""

    @classmethod
    def config_dir(cls) -> Path:
        """Directory holding settings.conf."""
        override = os.environ.get(ENV_CONFIG_DIR)
        if override:
            return Path(override).expanduser()
        base = _xdg_dir("XDG_CONFIG_HOME", Path.home() / ".config")
        return base / APP_NAME

    @classmethod
    def state_dir(cls) -> Path:
        """Directory holding the manifest, logs and lock file."""
        override = os.environ.get(ENV_STATE_DIR)
        if override:
            return Path(override).expanduser()
        base = _xdg_dir("XDG_STATE_HOME", Path.home() / ".local" / "state")
        return base / APP_NAME

    @classmethod
    def settings_file(cls) -> Path:
        return cls.config_dir() / CONFIG_FILE_NAME

    @classmethod
    def manifest_file(cls) -> Path:
        return cls.state_dir() / MANIFEST_FILE_NAME

    @classmethod
    def logs_dir(cls) -> Path:
        return cls.state_dir() / "logs"

    @classmethod
    def lock_file(cls) -> Path:
        return cls.state_dir() / LOCK_FILE_NAME

    @classmethod
    def expand_path(cls, path_str: str) -> Path:
        """Expand ``~`` and make the path absolute.

        Example:
            >>> Paths.expand_path("~/bin")
            PosixPath('/home/user/bin')

        """
        return Path(path_str).expanduser().resolve(strict=False)
