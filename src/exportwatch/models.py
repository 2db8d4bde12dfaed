"""Data models for the exportwatch package."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional
import time


class ChangeKind(Enum):
    """Kinds of raw file system changes."""
    CREATED = "created"
    MODIFIED = "modified"
    RENAMED = "renamed"
    DELETED = "deleted"


class Decision(Enum):
    """Outcome of resolving a candidate against the tracked latest version."""
    ACCEPT = "accept"
    REJECT = "reject"


class LockStatus(Enum):
    """Outcome of waiting for a file to become readable."""
    READABLE = "readable"
    TIMED_OUT = "timed_out"


class SupervisorState(Enum):
    """Lifecycle states of the watch supervisor."""
    STARTING = "starting"
    WATCHING = "watching"
    DRAINING = "draining"
    STOPPED = "stopped"


@dataclass(frozen=True)
class WatchedEvent:
    """
    Raw change observed in the watched directory.

    Attributes:
        kind: The kind of change
        path: Absolute path of the affected file (destination for renames)
        observed_at: Unix timestamp when the event was observed
    """
    kind: ChangeKind
    path: Path
    observed_at: float = field(default_factory=time.time)

    def __post_init__(self):
        if not self.path.is_absolute():
            raise ValueError(f"path must be absolute: {self.path}")

    @property
    def logical_name(self) -> str:
        """Filename without directory, used as the deduplication key."""
        return self.path.name


@dataclass
class TrackedFile:
    """
    Most recent authoritative instance of a logical filename.

    Attributes:
        logical_name: Filename without directory, case as observed
        source_path: Absolute path of the latest instance
        last_write_time: Modification time of that instance
    """
    logical_name: str
    source_path: Path
    last_write_time: float


@dataclass(frozen=True)
class Resolution:
    """Result of LatestVersionTracker.resolve()."""
    decision: Decision
    source_path: Optional[Path] = None
    previous_write_time: Optional[float] = None

    @property
    def accepted(self) -> bool:
        return self.decision is Decision.ACCEPT


@dataclass
class ProcessingStats:
    """Counters kept by the change processor."""
    received: int = 0
    unrecognized: int = 0
    ignored: int = 0
    stale: int = 0
    copied: int = 0
    converted: int = 0
    conversion_errors: int = 0
    failed: int = 0

    def to_dict(self) -> dict:
        """Convert to dictionary for logging."""
        return {
            "received": self.received,
            "unrecognized": self.unrecognized,
            "ignored": self.ignored,
            "stale": self.stale,
            "copied": self.copied,
            "converted": self.converted,
            "conversion_errors": self.conversion_errors,
            "failed": self.failed,
        }
