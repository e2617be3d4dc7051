"""Log level and log file settings for the logging system.

Bootstrap values are returned by load_log_settings() while the logger is
first created; update_logger_from_config() later applies the levels from
settings.conf once configuration can be loaded.
"""

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING

from binge.constants import (
    DEFAULT_CONSOLE_LOG_LEVEL,
    DEFAULT_LOG_LEVEL,
    ENV_LOG_DIR,
    LOG_FILE_NAME,
)

if TYPE_CHECKING:
    from binge.logger.state import _LoggerState
    from binge.types import GlobalConfig


def default_log_dir() -> Path:
    """Return the log directory, honouring ``BINGE_LOG_DIR``."""
    env_log_dir = os.getenv(ENV_LOG_DIR)
    if env_log_dir:
        return Path(env_log_dir).expanduser()

    # Late import: paths pulls in constants only, but keep logger import-light
    from binge.config.paths import Paths  # noqa: PLC0415

    return Paths.logs_dir()


def load_log_settings() -> tuple[str, str, Path]:
    """Return bootstrap (console_level, file_level, log_path)."""
    return (
        DEFAULT_CONSOLE_LOG_LEVEL,
        DEFAULT_LOG_LEVEL,
        default_log_dir() / LOG_FILE_NAME,
    )


def _is_console_handler(handler: logging.Handler) -> bool:
    return isinstance(handler, logging.StreamHandler) and not isinstance(
        handler, RotatingFileHandler
    )


def update_logger_from_config(
    state: "_LoggerState", config: "GlobalConfig"
) -> None:
    """Apply settings.conf log levels to the running handlers.

    Only handler levels change; handlers are never added or removed here.

    Args:
        state: Logger state object
        config: Loaded global configuration

    """
    console_level = getattr(
        logging, config.get("console_log_level", ""), logging.INFO
    )
    file_level = getattr(logging, config.get("log_level", ""), logging.INFO)

    if state.queue_listener is not None:
        for handler in state.queue_listener.handlers:
            if isinstance(handler, RotatingFileHandler):
                handler.setLevel(file_level)
            elif _is_console_handler(handler):
                handler.setLevel(console_level)

    state.config_applied = True


def set_console_level(state: "_LoggerState", level: str) -> None:
    """Temporarily override the console handler level.

    The previous level is remembered so restore_console_level() can put it
    back after the command finishes.
    """
    if state.queue_listener is None:
        return
    for handler in state.queue_listener.handlers:
        if _is_console_handler(handler):
            if state.saved_console_level is None:
                state.saved_console_level = handler.level
            handler.setLevel(getattr(logging, level, logging.DEBUG))


def restore_console_level(state: "_LoggerState") -> None:
    """Undo a previous set_console_level() call."""
    if state.queue_listener is None or state.saved_console_level is None:
        return
    for handler in state.queue_listener.handlers:
        if _is_console_handler(handler):
            handler.setLevel(state.saved_console_level)
    state.saved_console_level = None
