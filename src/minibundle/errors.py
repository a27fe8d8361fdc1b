"""Error handling framework for minibundle."""

from __future__ import annotations

from enum import IntEnum
from typing import Any


class ExitCode(IntEnum):
    """minibundle CLI exit codes."""

    SUCCESS = 0
    CONFIG_ERROR = 1  # Configuration error (user fixable)
    BUILD_ERROR = 2  # Unreadable/unparseable source, cycle
    WRITE_ERROR = 3  # Build succeeded, artifact could not be written
    FATAL_ERROR = 4  # Unexpected crash


class BundleError(Exception):
    """Base exception for minibundle errors."""

    exit_code: ExitCode = ExitCode.FATAL_ERROR

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message)
        self.message = message
        self.context = context

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for JSON output."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "exit_code": self.exit_code,
            **self.context,
        }


class ConfigError(BundleError):
    """Configuration-related errors."""

    exit_code = ExitCode.CONFIG_ERROR


class SourceReadError(BundleError):
    """A source file could not be read."""

    exit_code = ExitCode.BUILD_ERROR
    kind = "ReadError"

    def __init__(self, path: str, reason: str | None = None, **context: Any) -> None:
        message = f"Cannot read {path}" + (f": {reason}" if reason else "")
        super().__init__(message, file_path=path, kind=self.kind, **context)
        self.file_path = path


class SourceNotFoundError(SourceReadError):
    """A source file does not exist."""

    kind = "FileNotFound"

    def __init__(self, path: str, **context: Any) -> None:
        super().__init__(path, "file not found", **context)


class ParseError(BundleError):
    """File parsing errors."""

    exit_code = ExitCode.BUILD_ERROR

    def __init__(self, message: str, file_path: str, line: int | None = None, **context: Any):
        super().__init__(message, file_path=file_path, line=line, **context)
        self.file_path = file_path
        self.line = line


class CircularDependencyError(BundleError):
    """A module depends on itself through a chain of imports.

    Only raised when path deduplication is disabled; with deduplication on,
    cycles resolve to the already-assigned module id.
    """

    exit_code = ExitCode.BUILD_ERROR

    def __init__(self, chain: list[str]) -> None:
        super().__init__(
            "Circular dependency: " + " -> ".join(chain),
            chain=chain,
        )
        self.chain = chain


class OutputWriteError(BundleError):
    """The bundle was built but could not be written."""

    exit_code = ExitCode.WRITE_ERROR

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Failed to write bundle to {path}: {reason}", output_path=path)
        self.output_path = path
