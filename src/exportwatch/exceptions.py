"""Custom exceptions for the exportwatch package."""


class ExportWatchError(Exception):
    """Base exception for all exportwatch errors."""
    pass


class SettingsError(ExportWatchError):
    """Project settings file is missing or cannot be parsed."""
    pass


class ToolNotFoundError(ExportWatchError):
    """A configured external executable does not exist."""

    def __init__(self, tool: str, path):
        super().__init__(f"Cannot find {tool} at '{path}'")
        self.tool = tool
        self.path = path


class ConversionError(ExportWatchError):
    """The external converter could not be started."""
    pass


class SupervisorAlreadyRunningError(ExportWatchError):
    """Supervisor is already running."""
    pass
