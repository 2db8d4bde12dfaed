"""Waiting for exported files to be released by the editor."""

import logging
import time
from pathlib import Path
from typing import Callable, Optional

from .models import LockStatus

logger = logging.getLogger(__name__)


class LockWaiter:
    """
    Polls a file until it can be opened for reading.

    On Windows a file held open exclusively by another process fails to open
    with a sharing violation, which surfaces as PermissionError.
    """

    def __init__(
        self,
        clock: Optional[Callable[[], float]] = None,
        sleep: Optional[Callable[[float], None]] = None,
    ):
        """
        Initialize the lock waiter.

        Args:
            clock: Monotonic clock in seconds (defaults to time.monotonic)
            sleep: Sleep function in seconds (defaults to time.sleep)
        """
        self._clock = clock or time.monotonic
        self._sleep = sleep or time.sleep

    def is_locked(self, path: Path) -> bool:
        """
        Check whether the file is currently locked against reading.

        Args:
            path: File to probe

        Returns:
            True if opening the file was refused

        Raises:
            OSError: For any error other than a sharing violation
        """
        try:
            with open(path, "rb"):
                pass
        except PermissionError:
            return True
        return False

    def wait_until_readable(
        self,
        path: Path,
        timeout_ms: int = 5000,
        poll_interval_ms: int = 100,
    ) -> LockStatus:
        """
        Wait until the file can be read or the timeout elapses.

        Args:
            path: File to wait for
            timeout_ms: Maximum cumulative wait in milliseconds
            poll_interval_ms: Delay between probes in milliseconds

        Returns:
            READABLE as soon as a probe succeeds, TIMED_OUT otherwise
        """
        timeout = timeout_ms / 1000.0
        interval = poll_interval_ms / 1000.0
        started = self._clock()

        while self.is_locked(path):
            waited = self._clock() - started
            if waited >= timeout:
                logger.warning(f"{path.name} still locked after {timeout_ms}ms")
                return LockStatus.TIMED_OUT
            self._sleep(min(interval, timeout - waited))

        return LockStatus.READABLE
