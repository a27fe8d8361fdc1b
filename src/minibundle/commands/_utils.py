"""Shared helpers for minibundle commands."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from minibundle.config import BundleConfig


def apply_overrides(
    config: BundleConfig,
    *,
    root: Path | None = None,
    out_dir: str | None = None,
    filename: str | None = None,
    target: str | None = None,
    dedupe: bool | None = None,
    runtime_cache: bool | None = None,
) -> BundleConfig:
    """Return a copy of ``config`` with command-line overrides applied."""
    update: dict[str, Any] = {}
    if root is not None:
        update["root"] = str(root)

    output: dict[str, Any] = {}
    if out_dir is not None:
        output["directory"] = out_dir
    if filename is not None:
        output["filename"] = filename
    if output:
        update["output"] = config.output.model_copy(update=output)

    if target is not None:
        update["transform"] = config.transform.model_copy(update={"target": target})
    if dedupe is not None:
        update["resolve"] = config.resolve.model_copy(update={"dedupe": dedupe})
    if runtime_cache is not None:
        update["runtime"] = config.runtime.model_copy(update={"cache": runtime_cache})

    return config.model_copy(update=update) if update else config
