"""Centralized path definitions for minibundle.

A project is laid out as:

    <root>/
    ├── .minibundlerc.toml   # Optional configuration
    ├── src/main.js          # Default entry module
    └── minidist/main.js     # Default bundle artifact
"""

from __future__ import annotations

import os
from pathlib import Path

# Config file stays at project root (user-editable)
CONFIG_FILE = ".minibundlerc.toml"

DEFAULT_ENTRY = "./src/main.js"
DEFAULT_OUTPUT_DIR = "minidist"
DEFAULT_OUTPUT_FILE = "main.js"


def get_config_path(root: Path | str = ".") -> Path:
    """Get the configuration file path.

    Args:
        root: Project root directory (default: current directory)

    Returns:
        Path to the config file (.minibundlerc.toml)
    """
    return Path(root).resolve() / CONFIG_FILE


def resolve_entry(entry: Path | str, root: Path | str = ".") -> str:
    """Resolve an entry path against the project root.

    Absolute entries are only normalized.

    Returns:
        Absolute, normalized entry path
    """
    root_path = os.path.abspath(os.fspath(root))
    return os.path.normpath(os.path.join(root_path, os.fspath(entry)))


def get_output_path(
    root: Path | str = ".",
    directory: str = DEFAULT_OUTPUT_DIR,
    filename: str = DEFAULT_OUTPUT_FILE,
) -> Path:
    """Get the bundle artifact path.

    Args:
        root: Project root directory
        directory: Output directory (relative to root unless absolute)
        filename: Artifact file name

    Returns:
        Path to the bundle file
    """
    return Path(root).resolve() / directory / filename


def display_path(path: str, root: Path | str | None = None) -> str:
    """Render a module path relative to the root when it lives under it."""
    if root is None:
        return path
    root_path = os.path.abspath(os.fspath(root))
    try:
        if os.path.commonpath([root_path, path]) == root_path:
            return os.path.relpath(path, root_path).replace(os.sep, "/")
    except ValueError:
        # Different drives on Windows
        pass
    return path


__all__ = [
    "CONFIG_FILE",
    "DEFAULT_ENTRY",
    "DEFAULT_OUTPUT_DIR",
    "DEFAULT_OUTPUT_FILE",
    "get_config_path",
    "resolve_entry",
    "get_output_path",
    "display_path",
]
