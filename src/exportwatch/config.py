"""Configuration for the exportwatch package."""

import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import FrozenSet, Iterable, Optional, Tuple

# The editor exports into this subdirectory of the system temp directory.
WATCH_DIRECTORY_NAME = "C2IT"

CONVERTIBLE_EXTENSION = ".cmnu"
RECOGNIZED_EXTENSIONS: Tuple[str, ...] = (CONVERTIBLE_EXTENSION, ".vcl")

# Suffixes appended to a copied .cmnu file to name the converter outputs.
CONVERSION_OUTPUT_SUFFIXES: Tuple[str, ...] = (".M4.CSV", ".P4.CSV")


def default_watch_directory() -> Path:
    """Return the transient export directory the editor writes into."""
    return Path(tempfile.gettempdir()) / WATCH_DIRECTORY_NAME


def normalize_ignore_files(names: Iterable[str]) -> FrozenSet[str]:
    """Lowercase and strip filenames for case-insensitive matching."""
    return frozenset(name.strip().lower() for name in names if name and name.strip())


@dataclass
class ExportWatchConfig:
    """
    Configuration options for the export watcher.

    Attributes:
        output_directory: Directory the authoritative copies are written to
        converter_path: Path to the external converter executable
        watch_directory: Directory tree to watch for editor exports
        ignore_files: Lowercase filenames that are never copied
        recognized_extensions: Lowercase extensions that are copied
        convertible_extension: Lowercase extension that also gets converted
        lock_timeout_ms: Maximum time to wait for a locked file
        lock_poll_interval_ms: Interval between lock probes
        directory_poll_ms: Interval between checks for the watch directory
        shutdown_poll_ms: Interval between shutdown trigger checks
        drain_poll_ms: Interval between busy checks while draining
        drain_timeout_ms: Give up draining after this long (None waits forever)
        recursive: Whether to watch the directory tree recursively
    """
    output_directory: Path
    converter_path: Path
    watch_directory: Path = field(default_factory=default_watch_directory)
    ignore_files: FrozenSet[str] = field(default_factory=frozenset)
    recognized_extensions: Tuple[str, ...] = RECOGNIZED_EXTENSIONS
    convertible_extension: str = CONVERTIBLE_EXTENSION
    lock_timeout_ms: int = 5000
    lock_poll_interval_ms: int = 100
    directory_poll_ms: int = 250
    shutdown_poll_ms: int = 50
    drain_poll_ms: int = 50
    drain_timeout_ms: Optional[int] = None
    recursive: bool = True

    def __post_init__(self):
        self.output_directory = Path(self.output_directory)
        self.converter_path = Path(self.converter_path)
        self.watch_directory = Path(self.watch_directory)
        self.ignore_files = normalize_ignore_files(self.ignore_files)
        self.recognized_extensions = tuple(ext.lower() for ext in self.recognized_extensions)
        self.convertible_extension = self.convertible_extension.lower()

    def is_recognized(self, path: Path) -> bool:
        """Check if the file has one of the recognized export extensions."""
        return path.suffix.lower() in self.recognized_extensions

    def is_convertible(self, path: Path) -> bool:
        """Check if the file should be passed to the converter after copying."""
        return path.suffix.lower() == self.convertible_extension

    def is_ignored(self, path: Path) -> bool:
        """Check if the file name is on the ignore list (case-insensitive)."""
        return path.name.lower() in self.ignore_files

    def destination_for(self, logical_name: str) -> Path:
        """Return the output path for a logical filename."""
        return self.output_directory / logical_name
