"""Console formatters for the binge logging system.

- ColoredConsoleFormatter: adds ANSI colors to the level name
- HybridConsoleFormatter: bare message for INFO, colored line otherwise

INFO lines are the user-facing report (installed, updated, skipped), so
they are printed without any metadata.
"""

import logging

from binge.constants import LOG_COLORS


class ColoredConsoleFormatter(logging.Formatter):
    """Console formatter with ANSI color support for log levels."""

    def format(self, record: logging.LogRecord) -> str:
        """Format the record with a colored level name.

        The level name is swapped only for the duration of the call so the
        shared record is left untouched for other handlers.
        """
        color = LOG_COLORS.get(record.levelname)
        if color is None:
            return super().format(record)

        original_levelname = record.levelname
        record.levelname = f"{color}{original_levelname}{LOG_COLORS['RESET']}"
        try:
            return super().format(record)
        finally:
            record.levelname = original_levelname


class HybridConsoleFormatter(logging.Formatter):
    """Plain message for INFO, structured colored output for other levels."""

    def __init__(
        self,
        fmt: str | None = None,
        datefmt: str | None = None,
    ) -> None:
        """Initialize with the structured format used for non-INFO records.

        Args:
            fmt: Format string for structured messages
            datefmt: Date format string for timestamps

        """
        super().__init__(fmt, datefmt)
        self._colored_formatter = ColoredConsoleFormatter(fmt, datefmt)

    def format(self, record: logging.LogRecord) -> str:
        """Format the record by level."""
        if record.levelno == logging.INFO:
            return record.getMessage()
        return self._colored_formatter.format(record)
