"""Build pipeline: graph, then emit, then write."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from minibundle.bundler.emitter import emit
from minibundle.bundler.graph import GraphBuilder
from minibundle.bundler.models import Graph
from minibundle.bundler.writer import write_bundle
from minibundle.config import BundleConfig
from minibundle.logging import get_logger
from minibundle.paths import get_output_path


@dataclass
class BundleResult:
    """Result of a bundle build."""

    output: str
    """The generated program."""

    graph: Graph
    """The module graph the program was emitted from."""

    output_path: Path | None = None
    """Where the bundle was written, if it was."""

    generated_at: str = field(default_factory=lambda: datetime.now(UTC).isoformat())
    """Timestamp of generation."""

    @property
    def module_count(self) -> int:
        return len(self.graph)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "output_path": str(self.output_path) if self.output_path else None,
            "module_count": self.module_count,
            "bytes": len(self.output.encode("utf-8")),
            "generated_at": self.generated_at,
            "graph": self.graph.to_dict(),
        }


def build_bundle(config: BundleConfig, entry: str | None = None) -> BundleResult:
    """Build the graph and emit the bundle without touching the output directory."""
    logger = get_logger()
    entry_path = entry or config.entry

    graph = GraphBuilder.from_config(config).build(entry_path)
    logger.info(f"Resolved {len(graph)} module(s) from {entry_path}")

    output = emit(
        graph,
        runtime_cache=config.runtime.cache,
        target=config.transform.target,
        root=config.root,
    )
    return BundleResult(output=output, graph=graph)


def bundle_project(
    config: BundleConfig,
    entry: str | None = None,
    *,
    write: bool = True,
) -> BundleResult:
    """Build, emit and (optionally) write a bundle.

    Build errors propagate before anything is written. A write failure
    raises OutputWriteError after a successful build.
    """
    result = build_bundle(config, entry)
    if write:
        output_path = get_output_path(config.root, config.output.directory, config.output.filename)
        result.output_path = write_bundle(result.output, output_path)
        get_logger().info(f"Bundle written to {output_path}")
    return result
