"""Single-instance lock held for the duration of a mutating command."""

from __future__ import annotations

import asyncio
import fcntl
from pathlib import Path  # noqa: TC003
from typing import IO, TYPE_CHECKING, Self

from binge.exceptions import LockError
from binge.logger import get_logger

if TYPE_CHECKING:
    import types

logger = get_logger(__name__)


class LockManager:
    """Async context manager around a non-blocking ``fcntl.flock``.

    A second binge process fails fast instead of waiting, so two runs can
    never interleave manifest writes.

    Example:
        >>> async with LockManager(Paths.lock_file()):
        ...     manifest = store.load()

    """

    def __init__(self, lock_path: Path) -> None:
        self._lock_path = lock_path
        self._lock_file: IO[str] | None = None

    @property
    def locked(self) -> bool:
        return self._lock_file is not None

    def _acquire(self) -> None:
        self._lock_path.parent.mkdir(parents=True, exist_ok=True)

        lock_file = None
        try:
            lock_file = self._lock_path.open("w", encoding="utf-8")
            fcntl.flock(lock_file.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)
        except BlockingIOError as e:
            if lock_file is not None:
                lock_file.close()
            msg = "Another binge instance is already running"
            raise LockError(msg, target=str(self._lock_path)) from e
        except OSError as e:
            if lock_file is not None:
                lock_file.close()
            msg = f"cannot acquire lock: {e}"
            raise LockError(msg, target=str(self._lock_path)) from e

        self._lock_file = lock_file
        logger.debug("Acquired lock %s", self._lock_path)

    async def __aenter__(self) -> Self:
        """Acquire the lock.

        Raises:
            LockError: If another instance holds the lock or the lock file
                cannot be opened

        """
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, self._acquire)
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: types.TracebackType | None,
    ) -> None:
        if self._lock_file is not None:
            loop = asyncio.get_running_loop()
            await loop.run_in_executor(None, self._lock_file.close)
            self._lock_file = None
            logger.debug("Released lock %s", self._lock_path)
