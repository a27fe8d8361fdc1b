"""Tests for the error hierarchy and exit codes."""

from __future__ import annotations

from minibundle.errors import (
    BundleError,
    CircularDependencyError,
    ConfigError,
    ExitCode,
    OutputWriteError,
    ParseError,
    SourceNotFoundError,
    SourceReadError,
)


class TestExitCodes:
    """Each error maps to a distinct CLI exit code."""

    def test_base_error_is_fatal(self) -> None:
        assert BundleError("boom").exit_code == ExitCode.FATAL_ERROR

    def test_config_error(self) -> None:
        assert ConfigError("bad").exit_code == ExitCode.CONFIG_ERROR

    def test_build_errors(self) -> None:
        """Read, parse and cycle failures are build errors."""
        for error in (
            SourceReadError("/a.js", "permission denied"),
            SourceNotFoundError("/a.js"),
            ParseError("bad syntax", "/a.js", 3),
            CircularDependencyError(["a.js", "b.js", "a.js"]),
        ):
            assert error.exit_code == ExitCode.BUILD_ERROR

    def test_write_error(self) -> None:
        assert OutputWriteError("/out/main.js", "read-only").exit_code == ExitCode.WRITE_ERROR


class TestErrorDetails:
    """Tests for messages and structured context."""

    def test_not_found_is_read_error(self) -> None:
        """FileNotFound is a specialized read error."""
        error = SourceNotFoundError("/src/a.js", importer="main.js", specifier="./a.js")

        assert isinstance(error, SourceReadError)
        assert error.kind == "FileNotFound"
        assert error.file_path == "/src/a.js"
        assert error.to_dict()["specifier"] == "./a.js"

    def test_read_error_kind(self) -> None:
        assert SourceReadError("/src/a.js").kind == "ReadError"

    def test_cycle_message(self) -> None:
        """The chain is spelled out in the message."""
        error = CircularDependencyError(["a.js", "b.js", "a.js"])
        assert error.message == "Circular dependency: a.js -> b.js -> a.js"
        assert error.to_dict()["chain"] == ["a.js", "b.js", "a.js"]

    def test_to_dict(self) -> None:
        """Serialized errors carry class name, message and exit code."""
        data = ParseError("Unexpected token", "/a.js", 7).to_dict()
        assert data["error"] == "ParseError"
        assert data["message"] == "Unexpected token"
        assert data["exit_code"] == ExitCode.BUILD_ERROR
        assert data["line"] == 7
