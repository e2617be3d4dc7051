"""Logging utilities for binge.

Usage:
    >>> from binge.logger import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.info("Installing %s", repo)

Rules:
    1. Always use ``logger = get_logger(__name__)``
    2. Never call logging.basicConfig()
    3. Use %-formatting in log calls, never f-strings

Environment Variables:
    BINGE_LOG_DIR: Override the log directory (used by the test suite)
"""

from binge.logger.logger import (
    apply_config,
    clear_logger_state,
    flush_all_handlers,
    get_logger,
    restore_console_level,
    set_console_level_temporarily,
    setup_logging,
)

__all__ = [
    "apply_config",
    "clear_logger_state",
    "flush_all_handlers",
    "get_logger",
    "restore_console_level",
    "set_console_level_temporarily",
    "setup_logging",
]
