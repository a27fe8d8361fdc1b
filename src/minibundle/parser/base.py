"""Tree-sitter parsing and AST traversal for JavaScript modules."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any, Literal

from tree_sitter import Language, Node, Parser, Tree

from minibundle.errors import ParseError
from minibundle.logging import get_logger

SourceType = Literal["module", "script"]

_MODULE_ONLY_STATEMENTS = ("import_statement", "export_statement")

# Language registry
_languages: dict[str, Language] = {}


def _get_language(lang: str = "javascript") -> Language:
    """Get or create Tree-sitter Language instance."""
    if lang not in _languages:
        import tree_sitter_javascript as tsjavascript

        _languages[lang] = Language(tsjavascript.language())
    return _languages[lang]


@dataclass
class SourceTree:
    """A parsed JavaScript source file."""

    tree: Tree
    source: bytes
    source_type: SourceType = "module"
    file_path: str = "<source>"

    @property
    def root(self) -> Node:
        return self.tree.root_node

    def text(self, node: Node) -> str:
        return get_node_text(node, self.source)


def parse(
    source_text: str,
    source_type: SourceType = "module",
    file_path: str | None = None,
) -> SourceTree:
    """Parse JavaScript source text.

    Args:
        source_text: Source code to parse
        source_type: "module" allows import/export declarations; "script"
            rejects them the way a classic script parser would
        file_path: Path reported in parse errors

    Returns:
        SourceTree wrapping the tree-sitter tree

    Raises:
        ParseError: If the source contains syntax errors
    """
    display = file_path or "<source>"
    source = source_text.encode("utf-8")

    parser = Parser(_get_language())
    tree = parser.parse(source)

    if tree.root_node.has_error:
        bad = first_error_node(tree.root_node)
        line = bad.start_point[0] + 1 if bad is not None else None
        get_logger().debug(f"Parse errors in {display} (line {line})")
        raise ParseError(f"Syntax error in {display}", file_path=display, line=line)

    if source_type == "script":
        for child in tree.root_node.children:
            if child.type in _MODULE_ONLY_STATEMENTS:
                raise ParseError(
                    f"'import' and 'export' may only appear in module code ({display})",
                    file_path=display,
                    line=child.start_point[0] + 1,
                )

    return SourceTree(tree=tree, source=source, source_type=source_type, file_path=display)


def iter_nodes(node: Node) -> Iterator[Node]:
    """Yield a subtree in document order (pre-order)."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children))


def visit(tree: SourceTree, visitor: Any) -> None:
    """Walk the tree in document order, dispatching to visitor methods.

    For a node of type ``import_statement`` the visitor's
    ``visit_import_statement(node, tree)`` is called if it exists. A method
    returning ``False`` stops descent into that node's children.
    """
    stack = [tree.root]
    while stack:
        node = stack.pop()
        handler = getattr(visitor, f"visit_{node.type}", None)
        if handler is not None and handler(node, tree) is False:
            continue
        stack.extend(reversed(node.children))


def first_error_node(node: Node) -> Node | None:
    """Find the first ERROR or MISSING node in document order."""
    for current in iter_nodes(node):
        if current.type == "ERROR" or current.is_missing:
            return current
    return None


def get_node_text(node: Node, source: bytes) -> str:
    """Extract text content of a node."""
    return source[node.start_byte : node.end_byte].decode("utf-8", errors="replace")


def find_children_by_type(node: Node, type_name: str) -> list[Node]:
    """Find all direct children with a specific type."""
    return [child for child in node.children if child.type == type_name]


def find_child_by_type(node: Node, type_name: str) -> Node | None:
    """Find first direct child with a specific type."""
    for child in node.children:
        if child.type == type_name:
            return child
    return None


def string_value(node: Node, source: bytes) -> str:
    """Extract string literal content, removing quotes and decoding escapes."""
    if node.type != "string":
        text = get_node_text(node, source)
        if text[:1] in ("'", '"', "`"):
            return text[1:-1]
        return text

    parts = []
    for child in node.named_children:
        text = get_node_text(child, source)
        parts.append(decode_escape(text) if child.type == "escape_sequence" else text)
    # Rejoin surrogate pairs written as two \u escapes
    return "".join(parts).encode("utf-16-le", "surrogatepass").decode("utf-16-le")


_SIMPLE_ESCAPES = {"b": "\b", "f": "\f", "n": "\n", "r": "\r", "t": "\t", "v": "\v"}
_LINE_CONTINUATIONS = ("\n", "\r\n", "\r", "\u2028", "\u2029")


def decode_escape(text: str) -> str:
    """Decode one JavaScript escape sequence such as ``\\n`` or ``\\u{1F600}``."""
    body = text[1:]
    if body.startswith("u{"):
        return chr(int(body[2:-1], 16))
    if body.startswith("u") and len(body) == 5:
        return chr(int(body[1:], 16))
    if body.startswith("x") and len(body) == 3:
        return chr(int(body[1:], 16))
    if body.isdigit() and all(c in "01234567" for c in body):
        return chr(int(body, 8))
    if body in _LINE_CONTINUATIONS:
        return ""
    return _SIMPLE_ESCAPES.get(body, body)
