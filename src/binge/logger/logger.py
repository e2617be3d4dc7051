"""Public API of the binge logging system.

- setup_logging(): configure the queue-based root logger once
- get_logger(): module-level logger accessor
- apply_config(): apply levels from settings.conf
- flush_all_handlers() / clear_logger_state(): test and shutdown helpers
"""

import atexit
import contextlib
import logging
import time
from pathlib import Path
from typing import TYPE_CHECKING

from binge.constants import APP_NAME
from binge.logger import config as log_config
from binge.logger.handlers import setup_root_logger
from binge.logger.state import get_state

if TYPE_CHECKING:
    from binge.types import GlobalConfig

_FLUSH_TIMEOUT_SECONDS = 5.0


def flush_all_handlers() -> None:
    """Wait for queued records and flush every handler.

    QueueListener does not use task_done(), so the queue is polled until
    empty before the handlers are flushed.
    """
    state = get_state()
    if state.queue_listener is None or state.log_queue is None:
        return

    start_time = time.monotonic()
    while not state.log_queue.empty():
        if time.monotonic() - start_time > _FLUSH_TIMEOUT_SECONDS:
            break
        time.sleep(0.01)
    time.sleep(0.05)

    for handler in state.queue_listener.handlers:
        with contextlib.suppress(OSError, ValueError):
            handler.flush()


def _cleanup_logging() -> None:
    state = get_state()
    if state.queue_listener is not None:
        flush_all_handlers()
        state.queue_listener.stop()
        state.queue_listener = None


atexit.register(_cleanup_logging)


def setup_logging(
    name: str = APP_NAME,
    console_level: str | None = None,
    file_level: str | None = None,
    log_file: Path | None = None,
    enable_file_logging: bool = True,  # noqa: FBT001, FBT002
) -> logging.Logger:
    """Configure logging and return the named logger.

    The ``binge`` logger gets its handlers exactly once; child loggers such
    as ``binge.core.orchestrator`` simply propagate to it.

    Args:
        name: Logger name, typically __name__
        console_level: Console log level name
        file_level: File log level name
        log_file: Path to the log file
        enable_file_logging: Whether to attach the rotating file handler

    Returns:
        Logger instance

    """
    state = get_state()
    with state.lock:
        if not state.root_initialized:
            cfg_console, cfg_file, cfg_path = log_config.load_log_settings()
            setup_root_logger(
                state,
                console_level or cfg_console,
                file_level or cfg_file,
                log_file or cfg_path,
                enable_file_logging,
            )

    return logging.getLogger(name)


def get_logger(name: str = APP_NAME) -> logging.Logger:
    """Get a logger for a binge module.

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.info("Installed %s %s", repo, version)

    """
    return setup_logging(name=name)


def apply_config(config: "GlobalConfig") -> None:
    """Apply log levels from loaded settings to the running handlers."""
    log_config.update_logger_from_config(get_state(), config)


def set_console_level_temporarily(level: str) -> None:
    """Force the console level, e.g. to DEBUG for ``--verbose``."""
    log_config.set_console_level(get_state(), level)


def restore_console_level() -> None:
    """Restore the console level saved by set_console_level_temporarily."""
    log_config.restore_console_level(get_state())


def clear_logger_state() -> None:
    """Reset the logging system. Intended for tests only."""
    state = get_state()
    with state.lock:
        if state.queue_listener is not None:
            flush_all_handlers()
            state.queue_listener.stop()
            state.queue_listener = None

        state.log_queue = None
        state.root_initialized = False
        state.config_applied = False
        state.saved_console_level = None

        root_logger = logging.getLogger(APP_NAME)
        for handler in root_logger.handlers[:]:
            handler.close()
            root_logger.removeHandler(handler)
