"""Shared fixtures for minibundle tests."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

ProjectFactory = Callable[[dict[str, str]], Path]


@pytest.fixture
def make_project(tmp_path: Path) -> ProjectFactory:
    """Write a set of files under a temporary project root.

    Usage:
        root = make_project({"src/main.js": "import './a.js';", "src/a.js": ""})
    """

    def _make(files: dict[str, str]) -> Path:
        root = tmp_path / "project"
        for rel, content in files.items():
            path = root / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content)
        root.mkdir(exist_ok=True)
        return root

    return _make


@pytest.fixture
def diamond_files() -> dict[str, str]:
    """main imports b and c; both import d."""
    return {
        "src/main.js": 'import { b } from "./b.js";\nimport { c } from "./c.js";\nexport const out = b + c;\n',
        "src/b.js": 'import { d } from "./d.js";\nexport const b = "b" + d;\n',
        "src/c.js": 'import { d } from "./d.js";\nexport const c = "c" + d;\n',
        "src/d.js": 'export const d = "d";\n',
    }
