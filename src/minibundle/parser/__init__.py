"""minibundle parser - Tree-sitter based JavaScript module parsing."""

from minibundle.parser.base import SourceTree, parse, visit
from minibundle.parser.javascript_extractor import (
    ImportCollector,
    collect_imports,
    collect_specifiers,
)
from minibundle.parser.models import ImportDeclaration

__all__ = [
    "parse",
    "visit",
    "SourceTree",
    "ImportCollector",
    "ImportDeclaration",
    "collect_imports",
    "collect_specifiers",
]
