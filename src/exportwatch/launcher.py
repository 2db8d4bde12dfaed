"""Starting the editor and detecting an already running instance."""

import logging
import subprocess
from pathlib import Path

import psutil

logger = logging.getLogger(__name__)


def _same_directory(exe: str, directory: Path) -> bool:
    try:
        return Path(exe).resolve().parent == directory
    except (OSError, ValueError):
        return False


def is_program_running(executable: Path) -> bool:
    """
    Check whether a program is running from the given install location.

    A process matches when its name matches the executable's stem
    (case-insensitive) and its executable lives in the same directory.

    Args:
        executable: Full path of the program

    Returns:
        True if a matching process was found
    """
    executable = Path(executable)
    directory = executable.resolve().parent
    stem = executable.stem.lower()

    for process in psutil.process_iter(["name", "exe"]):
        name = process.info.get("name") or ""
        if Path(name).stem.lower() != stem:
            continue
        exe = process.info.get("exe")
        if exe and _same_directory(exe, directory):
            return True

    return False


def launch_editor(executable: Path, project_file: Path) -> subprocess.Popen:
    """
    Open a project in the editor.

    Args:
        executable: Editor executable
        project_file: Project file to open

    Returns:
        Handle of the started editor process
    """
    logger.info(f"Opening: {project_file}")
    return subprocess.Popen([str(executable), str(project_file)])
