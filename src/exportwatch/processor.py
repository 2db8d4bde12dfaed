"""Change processing: filtering, deduplication, copying and conversion."""

import logging
import shutil
import threading
from datetime import datetime
from typing import Optional

from .config import ExportWatchConfig
from .converter import ConversionInvoker, conversion_outputs
from .exceptions import ConversionError
from .lock_waiter import LockWaiter
from .models import LockStatus, ProcessingStats, WatchedEvent
from .tracker import LatestVersionTracker

logger = logging.getLogger(__name__)


class ChangeProcessor:
    """
    Turns raw export events into copies in the output directory.

    Handles extension and ignore-list filtering, deduplication of stale
    re-saves, waiting for the editor to release the file, copying and
    conversion of .cmnu files.

    Handling is serialized: the busy flag and the tracker are only touched
    by one event at a time, so an older version can never overwrite a newer
    one in the output directory.
    """

    def __init__(
        self,
        config: ExportWatchConfig,
        tracker: Optional[LatestVersionTracker] = None,
        lock_waiter: Optional[LockWaiter] = None,
        converter: Optional[ConversionInvoker] = None,
    ):
        """
        Initialize the change processor.

        Args:
            config: Export watcher configuration
            tracker: Latest version tracker (a fresh one by default)
            lock_waiter: Lock waiter used before copying
            converter: Converter invoker for convertible files
        """
        self.config = config
        self.tracker = tracker or LatestVersionTracker()
        self.lock_waiter = lock_waiter or LockWaiter()
        self.converter = converter or ConversionInvoker(config.converter_path)
        self.stats = ProcessingStats()

        self._busy = False
        self._lock = threading.Lock()
        self._stats_lock = threading.Lock()

    @property
    def is_busy(self) -> bool:
        """True while an event is being handled."""
        return self._busy

    def handle(self, event: WatchedEvent) -> None:
        """
        Process a single raw event. Never raises.

        Args:
            event: The raw event from the file system watcher
        """
        self._count("received")
        path = event.path

        if not self.config.is_recognized(path):
            self._count("unrecognized")
            return

        if self.config.is_ignored(path):
            logger.debug(f"Ignoring {path.name}")
            self._count("ignored")
            return

        with self._lock:
            self._busy = True
            try:
                self._process(event)
            except ConversionError as e:
                logger.error(f"Conversion of {path.name} failed: {e}")
                self._count("failed")
            except Exception:
                logger.error(f"Failed to process {path.name}", exc_info=True)
                self._count("failed")
            finally:
                self._busy = False

    def _process(self, event: WatchedEvent) -> None:
        path = event.path
        logical_name = event.logical_name

        try:
            stat = path.stat()
        except FileNotFoundError:
            logger.warning(f"{logical_name} disappeared before it could be read: {path}")
            self._count("failed")
            return

        resolution = self.tracker.resolve(logical_name, stat.st_mtime, path)
        if not resolution.accepted:
            logger.debug(
                f"Skipping stale {logical_name} from {path} "
                f"(mtime {stat.st_mtime} <= tracked {resolution.previous_write_time})"
            )
            self._count("stale")
            return

        write_time = datetime.fromtimestamp(stat.st_mtime).strftime("%H:%M:%S")
        logger.info(
            f"{event.kind.value.capitalize()}: {logical_name} - {stat.st_size} bytes - {write_time}"
        )

        status = self.lock_waiter.wait_until_readable(
            path,
            timeout_ms=self.config.lock_timeout_ms,
            poll_interval_ms=self.config.lock_poll_interval_ms,
        )
        if status is LockStatus.TIMED_OUT:
            logger.warning(f"{logical_name} is still locked, copying anyway")

        destination = self.config.destination_for(logical_name)
        try:
            shutil.copy2(path, destination)
        except OSError as e:
            logger.error(f"Failed to copy {logical_name} to {destination}: {e}")
            self._count("failed")
            return
        self._count("copied")

        if self.config.is_convertible(path):
            logger.info(f"Processing {logical_name}...")
            exit_code = self.converter.convert(destination, conversion_outputs(destination))
            if exit_code != 0:
                logger.warning(f"Converter exited with code {exit_code} for {logical_name}")
                self._count("conversion_errors")
            else:
                self._count("converted")

        logger.info(f"Done: {logical_name}")

    def _count(self, name: str) -> None:
        with self._stats_lock:
            setattr(self.stats, name, getattr(self.stats, name) + 1)
