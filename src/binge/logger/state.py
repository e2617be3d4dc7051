"""Logger state shared by the binge logging helpers.

A single module-level instance keeps track of whether the root ``binge``
logger has been wired up and owns the queue listener thread.
"""

import threading
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import queue
    from logging.handlers import QueueListener


class _LoggerState:
    """Container for logger state.

    Attributes:
        lock: Guards root logger initialization
        root_initialized: Whether the root logger has handlers attached
        config_applied: Whether settings.conf levels were applied
        queue_listener: Background thread draining log records
        log_queue: Queue between QueueHandler and QueueListener
        saved_console_level: Console level stashed by a temporary override

    """

    def __init__(self) -> None:
        """Initialize logger state."""
        self.lock = threading.Lock()
        self.root_initialized = False
        self.config_applied = False
        self.queue_listener: QueueListener | None = None
        self.log_queue: queue.Queue | None = None
        self.saved_console_level: int | None = None


_state = _LoggerState()


def get_state() -> _LoggerState:
    """Return the process-wide logger state."""
    return _state
