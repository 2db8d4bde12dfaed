"""Thread-safe tracking of the latest version of each exported file."""

import threading
from pathlib import Path
from typing import Dict, Optional

from .models import Decision, Resolution, TrackedFile


class LatestVersionTracker:
    """
    Thread-safe map from logical filename to its latest observed instance.

    The editor re-saves the same logical file into several temporary
    locations. Only a candidate strictly newer than the tracked instance is
    accepted; everything else is a stale duplicate.
    """

    def __init__(self):
        """Initialize the tracker."""
        self._files: Dict[str, TrackedFile] = {}
        self._lock = threading.Lock()

    def resolve(self, logical_name: str, candidate_time: float, candidate_path: Path) -> Resolution:
        """
        Decide whether a candidate is the new authoritative version.

        The decision and the update happen under one lock, so two events for
        the same name can never both be accepted for the same timestamp.

        Args:
            logical_name: Filename without directory
            candidate_time: Modification time of the candidate
            candidate_path: Absolute path of the candidate

        Returns:
            Resolution with ACCEPT and the path to copy, or REJECT
        """
        with self._lock:
            tracked = self._files.get(logical_name)

            if tracked is None:
                self._files[logical_name] = TrackedFile(
                    logical_name=logical_name,
                    source_path=candidate_path,
                    last_write_time=candidate_time,
                )
                return Resolution(Decision.ACCEPT, candidate_path)

            if candidate_time > tracked.last_write_time:
                previous = tracked.last_write_time
                tracked.source_path = candidate_path
                tracked.last_write_time = candidate_time
                return Resolution(Decision.ACCEPT, candidate_path, previous)

            return Resolution(Decision.REJECT, None, tracked.last_write_time)

    def get(self, logical_name: str) -> Optional[TrackedFile]:
        """
        Get a copy of the tracked entry for a logical filename.

        Args:
            logical_name: Filename without directory

        Returns:
            The tracked entry, or None if never seen
        """
        with self._lock:
            tracked = self._files.get(logical_name)
            if tracked is None:
                return None
            return TrackedFile(tracked.logical_name, tracked.source_path, tracked.last_write_time)

    def __len__(self) -> int:
        """Return the number of tracked logical filenames."""
        with self._lock:
            return len(self._files)

    def __contains__(self, logical_name: str) -> bool:
        with self._lock:
            return logical_name in self._files
