"""Bundle emitter: serialize a module graph into one self-contained program."""

from __future__ import annotations

import json
from pathlib import Path

from minibundle.bundler.models import Graph, Module
from minibundle.bundler.runtime import render_loader
from minibundle.codegen import validate_target
from minibundle.paths import display_path


class BundleEmitter:
    """Turns a Graph into bundle text.

    Emission is plain serialization: ids referenced by mappings are not
    checked against the registry.
    """

    def __init__(
        self,
        *,
        runtime_cache: bool = True,
        target: str = "es5",
        root: Path | str | None = None,
    ) -> None:
        self.runtime_cache = runtime_cache
        self.target = validate_target(target)
        self.root = root

    def emit(self, graph: Graph) -> str:
        registry = ",\n".join(self.registry_entry(module) for module in graph)
        return render_loader(registry, cache=self.runtime_cache, target=self.target)

    def registry_entry(self, module: Module) -> str:
        """``id: [function (require, module, exports) {...}, {mapping}]``"""
        banner = display_path(module.path, self.root)
        mapping = json.dumps(module.specifier_to_id, ensure_ascii=False)
        return (
            f"{module.id}: [function (require, module, exports) {{\n"
            f"// {banner}\n"
            f"{module.code}\n"
            f"}}, {mapping}]"
        )


def emit(
    graph: Graph,
    *,
    runtime_cache: bool = True,
    target: str = "es5",
    root: Path | str | None = None,
) -> str:
    """Serialize ``graph`` into bundle text. Pure; performs no I/O."""
    return BundleEmitter(runtime_cache=runtime_cache, target=target, root=root).emit(graph)
