"""Configuration error types."""
from __future__ import annotations

from pathlib import Path

from certflow.core.errors import CertflowError


class SettingsError(CertflowError):
    """Raised when a settings file cannot be read or has the wrong shape.

    Parameters
    ----------
    message:
        What is wrong with the file.
    path:
        The offending file, if the settings came from disk.
    """

    def __init__(self, message: str, path: Path | None = None) -> None:
        self.path = path
        where = f"{path}: " if path is not None else ""
        super().__init__(f"{where}{message}")
