#!/usr/bin/env python3
"""
CLI for opening a project in the editor and collecting its exports.

Usage:
    exportwatch path/to/project.cprj
    python -m src.cli path/to/project.cprj --log-level DEBUG
"""

import argparse
import logging
import signal
import sys
from pathlib import Path
from typing import List, Optional

from src.exportwatch import (
    ExportWatchConfig,
    ToolNotFoundError,
    WatchSupervisor,
    resolve_project_settings,
)
from src.exportwatch.console import (
    SPACE,
    disable_quick_edit,
    escape_pressed,
    print_banner,
    read_key,
)
from src.exportwatch.launcher import is_program_running, launch_editor
from src.exportwatch.settings import ProjectSettings


logger = logging.getLogger("cli")


class GracefulShutdown:
    """Stop the supervisor gracefully on SIGINT/SIGTERM."""

    def __init__(self, supervisor: WatchSupervisor):
        self.supervisor = supervisor
        signal.signal(signal.SIGINT, self._handler)
        signal.signal(signal.SIGTERM, self._handler)

    def _handler(self, signum, frame):
        logger.info("Received shutdown signal, stopping...")
        self.supervisor.stop()


def check_tools(settings: ProjectSettings) -> None:
    """
    Make sure the configured executables exist.

    Raises:
        ToolNotFoundError: For the first missing executable
    """
    if not Path(settings.editor_path).is_file():
        raise ToolNotFoundError("editor", settings.editor_path)
    if not Path(settings.converter_path).is_file():
        raise ToolNotFoundError("converter", settings.converter_path)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="exportwatch",
        description="Open a project in the editor and copy its exports to the project output directory",
    )
    parser.add_argument("project", help="Full path to the .cprj project file")
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )
    return parser


def open_editor(settings: ProjectSettings, project_file: Path):
    """
    Start the editor, or ask the operator to confirm reusing a running one.

    Returns:
        (proceed, process handle or None when an existing editor is reused)
    """
    editor = Path(settings.editor_path)

    if not is_program_running(editor):
        return True, launch_editor(editor, project_file)

    print("***The editor is already running. Please close it first as the wrong project may be open.***")
    print("***If you are sure the correct project is open, press SPACE.***")
    return read_key() == SPACE, None


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    disable_quick_edit()

    project_file = Path(args.project).resolve()
    settings, settings_path = resolve_project_settings(project_file)

    try:
        check_tools(settings)
    except ToolNotFoundError as e:
        logger.error(str(e))
        logger.error(f"Please check your XML settings: {settings_path}")
        return 1

    proceed, editor_process = open_editor(settings, project_file)
    if not proceed:
        return 0

    output_directory = settings.output_path(project_file.parent)
    output_directory.mkdir(parents=True, exist_ok=True)
    logger.info(f"Output directory: {output_directory}")

    config = ExportWatchConfig(
        output_directory=output_directory,
        converter_path=Path(settings.converter_path),
        ignore_files=settings.ignore_files,
    )

    supervisor = WatchSupervisor(
        config,
        supervised_process=editor_process,
        cancel_requested=escape_pressed,
        on_watching=print_banner,
    )
    GracefulShutdown(supervisor)
    supervisor.run()

    logger.info("Watcher stopped")
    return 0


if __name__ == "__main__":
    sys.exit(main())
