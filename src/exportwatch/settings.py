"""Per-project settings file: tool paths, output directory and ignore list."""

import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Tuple

from .exceptions import SettingsError

logger = logging.getLogger(__name__)

GENERIC_SETTINGS_FILENAME = "settings.xml"

DEFAULT_EDITOR_PATH = r"C:\Program Files (x86)\Curtis Instruments\Integrated Toolkit\Launchpad.exe"
DEFAULT_CONVERTER_PATH = r"C:\Program Files (x86)\Curtis Instruments\Device Profiler\DeviceProfiler.exe"
DEFAULT_IGNORE_FILES = ["live.cmnu", "systemfullmenu.cmnu", "factorymenu.cmnu"]

ROOT_TAG = "ProjectSettings"
EDITOR_TAG = "PathToLaunchpad"
CONVERTER_TAG = "PathToDeviceProfiler"
OUTPUT_DIRECTORY_TAG = "OutputDirectory"
IGNORE_FILE_TAG = "IgnoreFile"


@dataclass
class ProjectSettings:
    """
    Settings stored next to a project file.

    Attributes:
        output_directory: Output directory, relative to the project directory
        editor_path: Path to the editor executable
        converter_path: Path to the converter executable
        ignore_files: Filenames that are never copied (lowercase)
    """
    output_directory: str
    editor_path: str = DEFAULT_EDITOR_PATH
    converter_path: str = DEFAULT_CONVERTER_PATH
    ignore_files: List[str] = field(default_factory=lambda: list(DEFAULT_IGNORE_FILES))

    @classmethod
    def defaults_for(cls, project_file: Path) -> "ProjectSettings":
        """Build the default settings for a project file."""
        return cls(output_directory=project_file.stem)

    def output_path(self, project_directory: Path) -> Path:
        """The output directory always lives inside the project directory."""
        return project_directory / self.output_directory


def load_project_settings(path: Path) -> ProjectSettings:
    """
    Load settings from an XML file.

    Args:
        path: Settings file to read

    Returns:
        The parsed settings

    Raises:
        SettingsError: If the file is missing, malformed or incomplete
    """
    if not path.is_file():
        raise SettingsError(f"Settings file not found: {path}")

    try:
        root = ET.parse(str(path)).getroot()
    except (ET.ParseError, OSError) as e:
        raise SettingsError(f"Failed to parse settings file {path}: {e}") from e

    values = {}
    for tag in (OUTPUT_DIRECTORY_TAG, EDITOR_TAG, CONVERTER_TAG):
        element = root.find(tag)
        if element is None:
            raise SettingsError(f"Settings file {path} is missing <{tag}>")
        values[tag] = (element.text or "").strip()

    if not values[OUTPUT_DIRECTORY_TAG] or not values[EDITOR_TAG]:
        raise SettingsError(
            f"Settings file {path} must set <{OUTPUT_DIRECTORY_TAG}> and <{EDITOR_TAG}>"
        )

    ignore_files = [
        element.text.strip().lower()
        for element in root.findall(IGNORE_FILE_TAG)
        if element.text and element.text.strip()
    ]

    return ProjectSettings(
        output_directory=values[OUTPUT_DIRECTORY_TAG],
        editor_path=values[EDITOR_TAG],
        converter_path=values[CONVERTER_TAG],
        ignore_files=ignore_files,
    )


def write_project_settings(path: Path, settings: ProjectSettings) -> None:
    """
    Write settings to an XML file, replacing any existing file.

    Args:
        path: Settings file to write
        settings: Settings to store
    """
    root = ET.Element(ROOT_TAG)
    ET.SubElement(root, EDITOR_TAG).text = settings.editor_path
    ET.SubElement(root, CONVERTER_TAG).text = settings.converter_path
    ET.SubElement(root, OUTPUT_DIRECTORY_TAG).text = settings.output_directory
    for name in settings.ignore_files:
        ET.SubElement(root, IGNORE_FILE_TAG).text = name

    tree = ET.ElementTree(root)
    ET.indent(tree, space="  ")
    tree.write(str(path), encoding="utf-8", xml_declaration=True)


def resolve_project_settings(project_file: Path) -> Tuple[ProjectSettings, Path]:
    """
    Find the settings for a project, creating a default file if needed.

    Looks for settings.xml in the project directory, then <project>.xml.
    If neither can be used, default settings are written to <project>.xml.

    Args:
        project_file: The project file passed on the command line

    Returns:
        (settings, path of the settings file used)
    """
    project_directory = project_file.parent
    candidates = [
        project_directory / GENERIC_SETTINGS_FILENAME,
        project_directory / f"{project_file.stem}.xml",
    ]

    for candidate in candidates:
        try:
            settings = load_project_settings(candidate)
        except SettingsError as e:
            logger.debug(str(e))
            continue
        logger.info(f"Using settings: {candidate}")
        return settings, candidate

    settings_path = candidates[-1]
    settings = ProjectSettings.defaults_for(project_file)
    logger.info(f"Creating settings: {settings_path}")
    write_project_settings(settings_path, settings)
    return settings, settings_path
