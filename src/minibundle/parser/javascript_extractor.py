"""Static dependency extraction from JavaScript module ASTs."""

from __future__ import annotations

from tree_sitter import Node

from minibundle.parser.base import (
    SourceTree,
    find_child_by_type,
    find_children_by_type,
    get_node_text,
    string_value,
    visit,
)
from minibundle.parser.models import ImportDeclaration


class ImportCollector:
    """Visitor recording every static import/re-export declaration in order."""

    def __init__(self) -> None:
        self.declarations: list[ImportDeclaration] = []

    def visit_import_statement(self, node: Node, tree: SourceTree) -> bool:
        source_node = node.child_by_field_name("source")
        if source_node is None:
            return False

        names: list[str] = []
        clause = find_child_by_type(node, "import_clause")
        if clause is not None:
            for child in clause.children:
                if child.type == "identifier":
                    names.append("default")
                elif child.type == "namespace_import":
                    names.append("*")
                elif child.type == "named_imports":
                    for spec in find_children_by_type(child, "import_specifier"):
                        name_node = spec.child_by_field_name("name")
                        if name_node is not None:
                            names.append(string_value(name_node, tree.source))

        self.declarations.append(
            ImportDeclaration(
                specifier=string_value(source_node, tree.source),
                kind="import",
                names=names,
                line_number=node.start_point[0] + 1,
            )
        )
        return False

    def visit_export_statement(self, node: Node, tree: SourceTree) -> bool:
        source_node = node.child_by_field_name("source")
        if source_node is None:
            # Local export; nested declarations cannot contain imports
            return False

        clause = find_child_by_type(node, "export_clause")
        names: list[str] = []
        if clause is not None:
            for spec in find_children_by_type(clause, "export_specifier"):
                name_node = spec.child_by_field_name("name")
                if name_node is not None:
                    names.append(string_value(name_node, tree.source))
            kind = "export_from"
        elif find_child_by_type(node, "namespace_export") is not None:
            names.append("*")
            kind = "export_from"
        else:
            kind = "export_all"

        self.declarations.append(
            ImportDeclaration(
                specifier=string_value(source_node, tree.source),
                kind=kind,  # type: ignore[arg-type]
                names=names,
                line_number=node.start_point[0] + 1,
            )
        )
        return False


def collect_imports(tree: SourceTree) -> list[ImportDeclaration]:
    """Collect static dependency declarations in document order."""
    collector = ImportCollector()
    visit(tree, collector)
    return collector.declarations


def collect_specifiers(tree: SourceTree) -> list[str]:
    """Raw dependency specifiers in document order, duplicates preserved."""
    return [decl.specifier for decl in collect_imports(tree)]


def identifier_names(tree: SourceTree) -> set[str]:
    """All identifier-like names appearing anywhere in the module."""
    names: set[str] = set()

    class _Names:
        def visit_identifier(self, node: Node, t: SourceTree) -> None:
            names.add(get_node_text(node, t.source))

        visit_shorthand_property_identifier_pattern = visit_identifier
        visit_shorthand_property_identifier = visit_identifier

    visit(tree, _Names())
    return names
