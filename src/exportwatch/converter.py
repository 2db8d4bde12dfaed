"""Invocation of the external report converter."""

import logging
import os
import subprocess
from pathlib import Path
from typing import List, Sequence

from .config import CONVERSION_OUTPUT_SUFFIXES
from .exceptions import ConversionError

logger = logging.getLogger(__name__)


def conversion_outputs(copied_path: Path) -> List[Path]:
    """Derive the report paths the converter writes for a copied file."""
    return [copied_path.with_name(copied_path.name + suffix) for suffix in CONVERSION_OUTPUT_SUFFIXES]


class ConversionInvoker:
    """Runs the converter synchronously against a copied export file."""

    def __init__(self, converter_path: Path):
        """
        Initialize the invoker.

        Args:
            converter_path: Path to the converter executable
        """
        self.converter_path = Path(converter_path)

    def build_arguments(self, input_path: Path, outputs: Sequence[Path]) -> List[str]:
        """Build the converter's switches: one -I and one -O per output."""
        arguments = [f'-I"{input_path}"']
        arguments.extend(f'-O"{output}"' for output in outputs)
        return arguments

    def command_line(self, input_path: Path, outputs: Sequence[Path]) -> str:
        """Build the full command line as passed to the converter on Windows."""
        return " ".join([f'"{self.converter_path}"'] + self.build_arguments(input_path, outputs))

    def convert(self, input_path: Path, outputs: Sequence[Path]) -> int:
        """
        Run the converter and block until it exits.

        Args:
            input_path: Copied export file
            outputs: Report files the converter should produce

        Returns:
            The converter's exit code

        Raises:
            ConversionError: If the converter could not be started
        """
        if os.name == "nt":
            # Windows programs parse their own command line, so pass it verbatim.
            command = self.command_line(input_path, outputs)
            creationflags = subprocess.CREATE_NO_WINDOW
        else:
            command = [str(self.converter_path), f"-I{input_path}"]
            command.extend(f"-O{output}" for output in outputs)
            creationflags = 0

        logger.debug(f"Running converter: {command}")

        try:
            completed = subprocess.run(
                command,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                creationflags=creationflags,
                check=False,
            )
        except OSError as e:
            raise ConversionError(f"Failed to start converter '{self.converter_path}': {e}") from e

        return completed.returncode
