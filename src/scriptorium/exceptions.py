"""Centralized exceptions for Scriptorium.

Only fatal conditions are exceptions. Recoverable per-document problems
(malformed front matter, a page that fails to render) travel as explicit
outcome values so that one bad document never aborts the build.
"""

from pathlib import Path


class ScriptoriumError(Exception):
    """Base exception for all Scriptorium errors."""


class ConfigurationError(ScriptoriumError):
    """Raised when the site configuration cannot be loaded or is unusable."""

    def __init__(self, reason: str, path: Path | None = None) -> None:
        self.reason = reason
        self.path = path
        if path is None:
            super().__init__(f"Invalid configuration: {reason}")
        else:
            super().__init__(f"Invalid configuration at '{path}': {reason}")


class SourceDirectoryError(ScriptoriumError):
    """Raised when the source directory cannot be listed."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot list source directory '{path}': {reason}")


class OutputWriteError(ScriptoriumError):
    """Raised when a site-wide artifact (index, feed, asset) cannot be written."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot write '{path}': {reason}")
