"""Data models for the module graph.

A Graph is the ordered list of resolved modules; edges are not stored
separately but derived from each module's specifier-to-id mapping.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any


@dataclass
class Module:
    """One resolved source file.

    ``id`` is assigned when the module is constructed and never changes.
    ``specifier_to_id`` is filled in by the graph builder.
    """

    id: int
    path: str
    dependency_specifiers: list[str] = field(default_factory=list)
    code: str = ""
    specifier_to_id: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "path": self.path,
            "dependencies": self.dependency_specifiers,
            "mapping": self.specifier_to_id,
        }


@dataclass
class Graph:
    """Modules in discovery order; index 0 is the entry."""

    modules: list[Module] = field(default_factory=list)

    def __iter__(self) -> Iterator[Module]:
        return iter(self.modules)

    def __len__(self) -> int:
        return len(self.modules)

    def __getitem__(self, index: int) -> Module:
        return self.modules[index]

    @property
    def entry(self) -> Module:
        if not self.modules:
            raise IndexError("Graph is empty")
        return self.modules[0]

    def paths(self) -> list[str]:
        return [m.path for m in self.modules]

    def edges(self) -> list[tuple[int, str, int]]:
        """(source id, specifier, target id) triples in graph order."""
        return [
            (module.id, specifier, target)
            for module in self.modules
            for specifier, target in module.specifier_to_id.items()
        ]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "modules": [m.to_dict() for m in self.modules],
            "module_count": len(self.modules),
            "edge_count": len(self.edges()),
        }


class BuildContext:
    """State of a single build: the id counter, the graph, and the path memo.

    One context per build keeps id assignment deterministic and lets
    independent builds run in the same process.
    """

    def __init__(self) -> None:
        self._next_id = 0
        self.graph = Graph()
        self._by_path: dict[str, Module] = {}

    def next_id(self) -> int:
        module_id = self._next_id
        self._next_id += 1
        return module_id

    def add(self, module: Module) -> Module:
        """Append a module to the graph and remember its path."""
        self.graph.modules.append(module)
        self._by_path.setdefault(module.path, module)
        return module

    def lookup(self, path: str) -> Module | None:
        """The module already resolved for ``path``, if any."""
        return self._by_path.get(path)
