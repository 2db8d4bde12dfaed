"""File system watcher using watchdog library."""

import threading
import time
from pathlib import Path
from typing import Callable, Optional

from watchdog.observers import Observer
from watchdog.events import FileSystemEventHandler

from .models import ChangeKind, WatchedEvent


class FSEventHandler(FileSystemEventHandler):
    """Handler that converts watchdog file events to WatchedEvent."""

    def __init__(self, callback: Callable[[WatchedEvent], None]):
        super().__init__()
        self.callback = callback

    def _emit(self, kind: ChangeKind, path: str) -> None:
        """Emit a WatchedEvent to the callback."""
        self.callback(WatchedEvent(kind=kind, path=Path(path).absolute(), observed_at=time.time()))

    def on_created(self, event):
        if not event.is_directory:
            self._emit(ChangeKind.CREATED, event.src_path)

    def on_modified(self, event):
        if not event.is_directory:
            self._emit(ChangeKind.MODIFIED, event.src_path)

    def on_moved(self, event):
        # The editor saves by writing a temporary file and renaming it over the
        # export, so the destination holds the new content.
        if not event.is_directory:
            self._emit(ChangeKind.RENAMED, event.dest_path)

    # Deletions never produce a copy, so they are not forwarded.


class DirectoryWatcher:
    """
    Wraps a watchdog observer for a single directory tree.

    Events are delivered on the observer thread; the callback should return
    quickly and hand the work off.
    """

    def __init__(
        self,
        event_callback: Callable[[WatchedEvent], None],
        recursive: bool = True,
    ):
        """
        Initialize the directory watcher.

        Args:
            event_callback: Callback function for raw filesystem events
            recursive: Whether to watch subdirectories
        """
        self.event_callback = event_callback
        self.recursive = recursive
        self._observer: Optional[Observer] = None
        self._root: Optional[Path] = None
        self._lock = threading.Lock()

    def start(self, root: Path) -> bool:
        """
        Start watching a directory.

        Args:
            root: Directory to watch

        Returns:
            True if watching started, False if already watching
        """
        root = root.resolve()

        with self._lock:
            if self._observer is not None:
                return False

            observer = Observer()
            observer.schedule(
                FSEventHandler(self.event_callback),
                str(root),
                recursive=self.recursive,
            )
            observer.start()

            self._observer = observer
            self._root = root
            return True

    def stop(self) -> bool:
        """
        Stop watching.

        Returns:
            True if watching stopped, False if not watching
        """
        with self._lock:
            if self._observer is None:
                return False

            observer = self._observer
            self._observer = None
            self._root = None

            observer.stop()
            observer.join(timeout=5.0)
            return True

    @property
    def is_watching(self) -> bool:
        with self._lock:
            return self._observer is not None

    @property
    def root(self) -> Optional[Path]:
        """The directory currently being watched."""
        with self._lock:
            return self._root
