"""Tests for config module."""

import tempfile
from pathlib import Path

from src.exportwatch.config import (
    ExportWatchConfig,
    default_watch_directory,
    normalize_ignore_files,
)


class TestExportWatchConfig:
    """Tests for ExportWatchConfig class."""

    def test_default_values(self, tmp_path):
        config = ExportWatchConfig(output_directory=tmp_path / "out", converter_path=tmp_path / "conv.exe")
        assert config.watch_directory == Path(tempfile.gettempdir()) / "C2IT"
        assert config.ignore_files == frozenset()
        assert config.recognized_extensions == (".cmnu", ".vcl")
        assert config.convertible_extension == ".cmnu"
        assert config.lock_timeout_ms == 5000
        assert config.lock_poll_interval_ms == 100
        assert config.drain_timeout_ms is None
        assert config.recursive is True

    def test_paths_are_coerced(self, tmp_path):
        config = ExportWatchConfig(
            output_directory=str(tmp_path / "out"),
            converter_path=str(tmp_path / "conv.exe"),
            watch_directory=str(tmp_path / "watch"),
        )
        assert config.output_directory == tmp_path / "out"
        assert config.converter_path == tmp_path / "conv.exe"
        assert config.watch_directory == tmp_path / "watch"

    def test_is_recognized_case_insensitive(self, tmp_path):
        config = ExportWatchConfig(tmp_path, tmp_path / "conv.exe")
        assert config.is_recognized(Path("/tmp/menu.cmnu")) is True
        assert config.is_recognized(Path("/tmp/MENU.CMNU")) is True
        assert config.is_recognized(Path("/tmp/report.Vcl")) is True
        assert config.is_recognized(Path("/tmp/notes.txt")) is False
        assert config.is_recognized(Path("/tmp/cmnu")) is False

    def test_is_convertible(self, tmp_path):
        config = ExportWatchConfig(tmp_path, tmp_path / "conv.exe")
        assert config.is_convertible(Path("/tmp/menu.CMNU")) is True
        assert config.is_convertible(Path("/tmp/report.vcl")) is False

    def test_is_ignored_case_insensitive(self, tmp_path):
        config = ExportWatchConfig(tmp_path, tmp_path / "conv.exe", ignore_files=["Live.cmnu"])
        assert config.is_ignored(Path("/tmp/a/live.cmnu")) is True
        assert config.is_ignored(Path("/tmp/b/LIVE.CMNU")) is True
        assert config.is_ignored(Path("/tmp/menu.cmnu")) is False

    def test_destination_for(self, tmp_path):
        config = ExportWatchConfig(tmp_path / "out", tmp_path / "conv.exe")
        assert config.destination_for("menu.cmnu") == tmp_path / "out" / "menu.cmnu"


class TestHelpers:
    """Tests for module-level helpers."""

    def test_default_watch_directory(self):
        assert default_watch_directory().name == "C2IT"
        assert default_watch_directory().parent == Path(tempfile.gettempdir())

    def test_normalize_ignore_files(self):
        result = normalize_ignore_files(["Live.CMNU", "  factorymenu.cmnu ", "", "   "])
        assert result == frozenset({"live.cmnu", "factorymenu.cmnu"})
