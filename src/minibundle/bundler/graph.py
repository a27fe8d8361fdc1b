"""Graph builder: breadth-first discovery of every module reachable from the entry."""

from __future__ import annotations

import os
from collections import deque
from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING

from minibundle.bundler.models import BuildContext, Graph, Module
from minibundle.bundler.resolver import ModuleResolver
from minibundle.errors import CircularDependencyError, SourceNotFoundError
from minibundle.logging import get_logger
from minibundle.paths import display_path, resolve_entry

if TYPE_CHECKING:
    from minibundle.config import BundleConfig


class GraphBuilder:
    """Builds the module graph for an entry file.

    With ``dedupe`` on, every distinct absolute path is resolved exactly once
    and later references reuse its id, so shared and cyclic imports are fine.
    With ``dedupe`` off, every reference resolves a new module (diamonds yield
    duplicates) and a cycle raises CircularDependencyError.
    """

    def __init__(
        self,
        root: Path | str = ".",
        *,
        target: str = "es5",
        extensions: Sequence[str] = (".js", ".mjs"),
        dedupe: bool = True,
    ) -> None:
        """Initialize builder.

        Args:
            root: Project root; relative entry paths are resolved against it
            target: Target syntax version passed to the transform
            extensions: Extensions tried when a specifier does not name a file
            dedupe: Resolve each distinct path once
        """
        self.root = os.path.abspath(os.fspath(root))
        self.target = target
        self.extensions = tuple(extensions)
        self.dedupe = dedupe

    @classmethod
    def from_config(cls, config: BundleConfig) -> GraphBuilder:
        return cls(
            config.root,
            target=config.transform.target,
            extensions=config.resolve.extensions,
            dedupe=config.resolve.dedupe,
        )

    def build(self, entry_path: Path | str) -> Graph:
        """Resolve the entry and everything it transitively imports.

        Args:
            entry_path: Entry module path (relative to the root or absolute)

        Returns:
            Graph in discovery order, entry first with id 0
        """
        logger = get_logger()
        context = BuildContext()
        resolver = ModuleResolver(context, target=self.target)

        entry = context.add(resolver.resolve(self.locate(resolve_entry(entry_path, self.root))))
        ancestors: dict[int, tuple[str, ...]] = {entry.id: (entry.path,)}
        queue: deque[Module] = deque([entry])

        while queue:
            module = queue.popleft()
            dirname = os.path.dirname(module.path)

            for specifier in module.dependency_specifiers:
                if specifier in module.specifier_to_id:
                    continue

                dep_path = self.locate(os.path.normpath(os.path.join(dirname, specifier)))

                child = context.lookup(dep_path) if self.dedupe else None
                if child is None:
                    if not self.dedupe:
                        chain = ancestors[module.id]
                        if dep_path in chain:
                            raise CircularDependencyError(
                                [display_path(p, self.root) for p in (*chain, dep_path)]
                            )
                    child = self._resolve_dependency(resolver, dep_path, module, specifier)
                    context.add(child)
                    ancestors[child.id] = ancestors[module.id] + (dep_path,)
                    queue.append(child)

                module.specifier_to_id[specifier] = child.id

        logger.debug(f"Module graph has {len(context.graph)} modules")
        return context.graph

    def locate(self, path: str) -> str:
        """Apply extension fallback: ``path``, ``path + ext``, ``path/index + ext``.

        Returns the path unchanged when nothing matches, leaving the not-found
        error to the resolver.
        """
        if os.path.isfile(path):
            return path
        for ext in self.extensions:
            if os.path.isfile(path + ext):
                return path + ext
        for ext in self.extensions:
            candidate = os.path.join(path, "index" + ext)
            if os.path.isfile(candidate):
                return candidate
        return path

    def _resolve_dependency(
        self,
        resolver: ModuleResolver,
        path: str,
        importer: Module,
        specifier: str,
    ) -> Module:
        try:
            return resolver.resolve(path)
        except SourceNotFoundError as e:
            raise SourceNotFoundError(
                path,
                importer=display_path(importer.path, self.root),
                specifier=specifier,
            ) from e


def build_graph(entry_path: Path | str, root: Path | str = ".", **options: object) -> Graph:
    """Convenience wrapper around ``GraphBuilder(root, **options).build(entry_path)``."""
    return GraphBuilder(root, **options).build(entry_path)  # type: ignore[arg-type]
