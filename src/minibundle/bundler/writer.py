"""Filesystem I/O for sources and bundle artifacts."""

from __future__ import annotations

from pathlib import Path

from minibundle.errors import OutputWriteError, SourceNotFoundError, SourceReadError
from minibundle.logging import get_logger


def read_source(path: str) -> str:
    """Read a module's source text.

    Raises:
        SourceNotFoundError: If the file does not exist
        SourceReadError: If the file exists but cannot be read as UTF-8 text
    """
    try:
        with open(path, encoding="utf-8") as f:
            return f.read()
    except FileNotFoundError:
        raise SourceNotFoundError(path) from None
    except IsADirectoryError:
        raise SourceReadError(path, "is a directory") from None
    except PermissionError:
        raise SourceReadError(path, "permission denied") from None
    except UnicodeDecodeError as e:
        raise SourceReadError(path, f"not valid UTF-8 ({e.reason})") from None
    except OSError as e:
        raise SourceReadError(path, e.strerror or str(e)) from None


def write_bundle(text: str, output_path: Path) -> Path:
    """Write the bundle, creating its directory if needed.

    Directory creation is best-effort; a failure there surfaces as the
    write failure that follows it.

    Raises:
        OutputWriteError: If the artifact cannot be written
    """
    logger = get_logger()

    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        logger.debug(f"Could not create {output_path.parent}: {e}")

    try:
        output_path.write_text(text, encoding="utf-8")
    except OSError as e:
        raise OutputWriteError(str(output_path), e.strerror or str(e)) from e

    logger.debug(f"Wrote {len(text)} characters to {output_path}")
    return output_path
