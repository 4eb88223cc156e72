"""Error taxonomy for the configurator.

Every fatal failure raised by a step derives from ``ConfiguratorError`` so the
top-level runner can report it and exit non-zero.  Prompt validation errors
never escape the collector and are therefore plain messages, not exceptions.
"""

from __future__ import annotations

from pathlib import Path


class ConfiguratorError(Exception):
    """Base class for errors that abort the installation pipeline."""


class ProcessError(ConfiguratorError):
    """Raised when an external command exits with a non-zero status."""

    def __init__(self, argv: list[str], returncode: int, stderr: str = "") -> None:
        self.argv = list(argv)
        self.returncode = returncode
        self.stderr = stderr
        message = f"Command failed with exit code {returncode}: {' '.join(self.argv)}"
        if stderr:
            message = f"{message}\n{stderr}"
        super().__init__(message)


class FetchError(ProcessError):
    """Raised when a remote template file cannot be downloaded."""

    def __init__(self, url: str, reason: str) -> None:
        self.url = url
        super().__init__(["GET", url], 1, reason)


class FileSystemError(ConfiguratorError):
    """Raised when reading, writing or deleting a project file fails."""

    def __init__(self, path: str | Path, message: str) -> None:
        self.path = Path(path)
        super().__init__(f"{message}: {self.path}")


class ManifestParseError(ConfiguratorError):
    """Raised when ``composer.json`` is missing or is not a JSON object."""

    def __init__(self, path: str | Path, message: str) -> None:
        self.path = Path(path)
        super().__init__(f"Cannot read composer manifest {self.path}: {message}")


class InstallationCancelled(Exception):
    """Raised when the operator aborts prompting (Ctrl-C or end of input)."""
