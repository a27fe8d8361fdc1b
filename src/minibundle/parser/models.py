"""Data models for extracted module declarations."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

DeclarationKind = Literal["import", "export_from", "export_all"]


@dataclass
class ImportDeclaration:
    """A static dependency declaration.

    ``import x from "./a.js"``, ``import "./a.js"``, ``export { x } from "./a.js"``
    and ``export * from "./a.js"`` are all static declarations. Dynamic
    ``import()`` and ``require()`` calls are not.
    """

    specifier: str
    kind: DeclarationKind = "import"
    names: list[str] = field(default_factory=list)  # Empty = side-effect only or star
    line_number: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "specifier": self.specifier,
            "kind": self.kind,
            "names": self.names,
            "line": self.line_number,
        }
