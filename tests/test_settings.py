"""Tests for project settings module."""

import pytest
from pathlib import Path

from src.exportwatch.exceptions import SettingsError
from src.exportwatch.settings import (
    DEFAULT_CONVERTER_PATH,
    DEFAULT_EDITOR_PATH,
    DEFAULT_IGNORE_FILES,
    ProjectSettings,
    load_project_settings,
    resolve_project_settings,
    write_project_settings,
)


SETTINGS_XML = """<?xml version="1.0" encoding="utf-8" standalone="yes"?>
<ProjectSettings>
  <PathToLaunchpad>C:\\Tools\\Launchpad.exe</PathToLaunchpad>
  <PathToDeviceProfiler>C:\\Tools\\DeviceProfiler.exe</PathToDeviceProfiler>
  <OutputDirectory>Build</OutputDirectory>
  <IgnoreFile>Live.CMNU</IgnoreFile>
  <IgnoreFile>factorymenu.cmnu</IgnoreFile>
</ProjectSettings>
"""


class TestLoadProjectSettings:
    """Tests for load_project_settings."""

    def test_load_valid(self, tmp_path):
        path = tmp_path / "settings.xml"
        path.write_text(SETTINGS_XML, encoding="utf-8")

        settings = load_project_settings(path)

        assert settings.output_directory == "Build"
        assert settings.editor_path == "C:\\Tools\\Launchpad.exe"
        assert settings.converter_path == "C:\\Tools\\DeviceProfiler.exe"
        assert settings.ignore_files == ["live.cmnu", "factorymenu.cmnu"]

    def test_missing_file(self, tmp_path):
        with pytest.raises(SettingsError):
            load_project_settings(tmp_path / "settings.xml")

    def test_malformed_file(self, tmp_path):
        path = tmp_path / "settings.xml"
        path.write_text("<ProjectSettings><OutputDirectory>", encoding="utf-8")

        with pytest.raises(SettingsError):
            load_project_settings(path)

    def test_missing_element(self, tmp_path):
        path = tmp_path / "settings.xml"
        path.write_text(
            "<ProjectSettings><OutputDirectory>Build</OutputDirectory>"
            "<PathToLaunchpad>x.exe</PathToLaunchpad></ProjectSettings>",
            encoding="utf-8",
        )

        with pytest.raises(SettingsError):
            load_project_settings(path)

    def test_empty_output_directory(self, tmp_path):
        path = tmp_path / "settings.xml"
        path.write_text(
            "<ProjectSettings><OutputDirectory></OutputDirectory>"
            "<PathToLaunchpad>x.exe</PathToLaunchpad>"
            "<PathToDeviceProfiler>y.exe</PathToDeviceProfiler></ProjectSettings>",
            encoding="utf-8",
        )

        with pytest.raises(SettingsError):
            load_project_settings(path)

    def test_no_ignore_files(self, tmp_path):
        path = tmp_path / "settings.xml"
        path.write_text(
            "<ProjectSettings><OutputDirectory>Out</OutputDirectory>"
            "<PathToLaunchpad>x.exe</PathToLaunchpad>"
            "<PathToDeviceProfiler></PathToDeviceProfiler></ProjectSettings>",
            encoding="utf-8",
        )

        settings = load_project_settings(path)

        assert settings.ignore_files == []
        assert settings.converter_path == ""


class TestWriteProjectSettings:
    """Tests for write_project_settings."""

    def test_written_file_is_readable(self, tmp_path):
        path = tmp_path / "project.xml"
        settings = ProjectSettings(
            output_directory="Out",
            editor_path="editor.exe",
            converter_path="converter.exe",
            ignore_files=["live.cmnu"],
        )

        write_project_settings(path, settings)

        text = path.read_text(encoding="utf-8")
        assert text.startswith("<?xml")
        assert "<IgnoreFile>live.cmnu</IgnoreFile>" in text
        assert load_project_settings(path) == settings


class TestResolveProjectSettings:
    """Tests for resolve_project_settings."""

    def test_prefers_generic_settings(self, tmp_path):
        project = tmp_path / "Truck.cprj"
        (tmp_path / "settings.xml").write_text(SETTINGS_XML, encoding="utf-8")
        write_project_settings(tmp_path / "Truck.xml", ProjectSettings(output_directory="Other"))

        settings, path = resolve_project_settings(project)

        assert path == tmp_path / "settings.xml"
        assert settings.output_directory == "Build"

    def test_falls_back_to_project_settings(self, tmp_path):
        project = tmp_path / "Truck.cprj"
        write_project_settings(tmp_path / "Truck.xml", ProjectSettings(output_directory="Other"))

        settings, path = resolve_project_settings(project)

        assert path == tmp_path / "Truck.xml"
        assert settings.output_directory == "Other"

    def test_creates_defaults(self, tmp_path):
        project = tmp_path / "Truck.cprj"

        settings, path = resolve_project_settings(project)

        assert path == tmp_path / "Truck.xml"
        assert path.exists()
        assert settings.output_directory == "Truck"
        assert settings.editor_path == DEFAULT_EDITOR_PATH
        assert settings.converter_path == DEFAULT_CONVERTER_PATH
        assert settings.ignore_files == DEFAULT_IGNORE_FILES
        assert load_project_settings(path) == settings

    def test_regenerates_malformed_settings(self, tmp_path):
        project = tmp_path / "Truck.cprj"
        (tmp_path / "settings.xml").write_text("not xml", encoding="utf-8")
        (tmp_path / "Truck.xml").write_text("<ProjectSettings/>", encoding="utf-8")

        settings, path = resolve_project_settings(project)

        assert path == tmp_path / "Truck.xml"
        assert settings.output_directory == "Truck"
        assert load_project_settings(path).output_directory == "Truck"


class TestProjectSettings:
    """Tests for ProjectSettings class."""

    def test_output_path_is_inside_project(self, tmp_path):
        settings = ProjectSettings(output_directory="Build")
        assert settings.output_path(tmp_path) == tmp_path / "Build"

    def test_defaults_for(self):
        settings = ProjectSettings.defaults_for(Path("/projects/Truck.cprj"))
        assert settings.output_directory == "Truck"
        assert settings.ignore_files == ["live.cmnu", "systemfullmenu.cmnu", "factorymenu.cmnu"]
