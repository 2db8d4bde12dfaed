"""
Export Watcher Package

Watches the directory a device-configuration editor exports into and keeps
the project's output directory up to date.

Features:
- Recursive watching of the editor's temporary export directory
- Deduplication of rapid re-saves by modification time
- Bounded wait for the editor to release a file before copying
- Synchronous report conversion for .cmnu exports
- Graceful shutdown that drains in-flight work
"""

from .models import (
    ChangeKind,
    Decision,
    LockStatus,
    SupervisorState,
    WatchedEvent,
    TrackedFile,
    Resolution,
    ProcessingStats,
)

from .config import ExportWatchConfig, default_watch_directory

from .exceptions import (
    ExportWatchError,
    SettingsError,
    ToolNotFoundError,
    ConversionError,
    SupervisorAlreadyRunningError,
)

from .settings import ProjectSettings, resolve_project_settings
from .tracker import LatestVersionTracker
from .lock_waiter import LockWaiter
from .converter import ConversionInvoker, conversion_outputs
from .processor import ChangeProcessor
from .fs_watcher import DirectoryWatcher, FSEventHandler
from .supervisor import WatchSupervisor


__all__ = [
    # Models
    "ChangeKind",
    "Decision",
    "LockStatus",
    "SupervisorState",
    "WatchedEvent",
    "TrackedFile",
    "Resolution",
    "ProcessingStats",
    # Config
    "ExportWatchConfig",
    "default_watch_directory",
    "ProjectSettings",
    "resolve_project_settings",
    # Exceptions
    "ExportWatchError",
    "SettingsError",
    "ToolNotFoundError",
    "ConversionError",
    "SupervisorAlreadyRunningError",
    # Components
    "LatestVersionTracker",
    "LockWaiter",
    "ConversionInvoker",
    "conversion_outputs",
    "ChangeProcessor",
    "DirectoryWatcher",
    "FSEventHandler",
    # Main loop
    "WatchSupervisor",
]

__version__ = "0.1.0"
