"""Lower ES module syntax to the CommonJS wrapper idiom.

The generated code expects to run inside
``function (require, module, exports) { ... }``:

- ``import d, { a as b } from "./x.js"`` becomes a ``require("./x.js")``
  call bound to a fresh local. References to ``d`` and ``b`` in the body
  are rewritten to member accesses on that local, so imports stay live.
- Exported bindings become getters on ``exports`` declared ahead of the
  module body, so functions, classes and ``let`` bindings stay live.
- ``export default <expr>`` assigns ``exports["default"]``.
- Re-exports (``export ... from``, ``export * from``) require the source
  module and forward its bindings through getters.
- A leading ``#!`` line is dropped.

Only module syntax is rewritten. Everything else in the body is emitted
verbatim, so the input must already be valid in the target dialect.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field

from tree_sitter import Node

from minibundle.errors import ConfigError
from minibundle.parser.base import (
    SourceTree,
    find_child_by_type,
    find_children_by_type,
    string_value,
)
from minibundle.parser.javascript_extractor import identifier_names

TARGETS: tuple[str, ...] = ("es5", "es2015", "es2017", "es2020", "esnext")

_IDENTIFIER = re.compile(r"^[A-Za-z_$][\w$]*$")
_DECLARATION_NAME_TYPES = (
    "function_declaration",
    "generator_function_declaration",
    "class_declaration",
)
_NAMED_EXPRESSION_TYPES = ("function_expression", "function", "generator_function", "class")
_FUNCTION_TYPES = (
    "function_declaration",
    "generator_function_declaration",
    "function_expression",
    "function",
    "generator_function",
    "arrow_function",
    "method_definition",
)
_VARIABLE_DECLARATION_TYPES = ("lexical_declaration", "variable_declaration")


def validate_target(target: str) -> str:
    """Check a target name, raising ConfigError for unknown targets."""
    if target not in TARGETS:
        raise ConfigError(
            f"Unknown target '{target}'. Expected one of: {', '.join(TARGETS)}",
            target=target,
        )
    return target


def declaration_keyword(target: str) -> str:
    """Keyword used for generated bindings in the given target."""
    return "var" if validate_target(target) == "es5" else "const"


def member(obj: str, name: str) -> str:
    """Property access expression for ``obj.name``."""
    if name != "default" and _IDENTIFIER.match(name):
        return f"{obj}.{name}"
    return f"{obj}[{json.dumps(name)}]"


def export_getter(name: str, expr: str) -> str:
    return (
        f"Object.defineProperty(exports, {json.dumps(name)}, "
        f"{{ enumerable: true, get: function () {{ return {expr}; }} }});"
    )


def star_reexport(binding: str) -> str:
    return (
        f"Object.keys({binding}).forEach(function (key) {{\n"
        f'  if (key === "default" || key === "__esModule") return;\n'
        f"  if (Object.prototype.hasOwnProperty.call(exports, key)) return;\n"
        f"  Object.defineProperty(exports, key, "
        f"{{ enumerable: true, get: function () {{ return {binding}[key]; }} }});\n"
        f"}});"
    )


@dataclass
class _Edit:
    start: int
    end: int
    text: str = ""


@dataclass
class _Plan:
    getters: list[str] = field(default_factory=list)
    requires: list[str] = field(default_factory=list)
    edits: list[_Edit] = field(default_factory=list)
    has_exports: bool = False


class ModuleTransformer:
    """Rewrites one parsed module's import/export syntax."""

    def __init__(self, tree: SourceTree, target: str = "es5") -> None:
        self.tree = tree
        self.target = validate_target(target)
        self.keyword = declaration_keyword(target)
        self._taken: set[str] = identifier_names(tree)
        self._bindings: dict[str, str] = {}
        self._defaults: dict[str, str] = {}
        # Imported local name -> expression reading it through its binding
        self._imports: dict[str, str] = {}
        # (getter index, exported name, local name) for `export { local }`
        self._local_exports: list[tuple[int, str, str]] = []
        self._plan = _Plan()

    def transform(self) -> str:
        root = self.tree.root
        hash_bang = find_child_by_type(root, "hash_bang_line")
        if hash_bang is not None:
            self._plan.edits.append(_Edit(hash_bang.start_byte, hash_bang.end_byte))

        statements = [
            node for node in root.children if node.type in ("import_statement", "export_statement")
        ]
        if not statements:
            return self._apply_edits()

        for node in statements:
            if node.type == "import_statement":
                self._import(node)
            else:
                self._export(node)

        # Imports are hoisted, so export lists resolve once every import is known
        for index, exported, local in self._local_exports:
            self._plan.getters[index] = export_getter(exported, self._imports.get(local, local))
        if self._imports:
            self._rewrite_references()

        header = ['"use strict";']
        if self._plan.has_exports:
            header.append('Object.defineProperty(exports, "__esModule", { value: true });')
        header.extend(self._plan.getters)
        header.extend(self._plan.requires)

        body = self._apply_edits()
        return "\n".join(header) + "\n" + body

    def _apply_edits(self) -> str:
        source = self.tree.source
        for edit in sorted(self._plan.edits, key=lambda e: e.start, reverse=True):
            source = source[: edit.start] + edit.text.encode("utf-8") + source[edit.end :]
        return source.decode("utf-8")

    def _text(self, node: Node) -> str:
        return self.tree.text(node)

    def _name(self, node: Node) -> str:
        """Name of an identifier or string-literal module export name."""
        if node.type == "string":
            return string_value(node, self.tree.source)
        return self._text(node)

    def _unique(self, hint: str) -> str:
        base = "_" + hint
        candidate = base
        counter = 2
        while candidate in self._taken:
            candidate = f"{base}{counter}"
            counter += 1
        self._taken.add(candidate)
        return candidate

    def _binding_for(self, specifier: str) -> str:
        """Local holding the required module, emitting the require on first use."""
        if specifier in self._bindings:
            return self._bindings[specifier]
        name = self._unique(_hint_from_specifier(specifier))
        self._bindings[specifier] = name
        self._plan.requires.append(f"{self.keyword} {name} = require({json.dumps(specifier)});")
        return name

    def _default_holder(self, specifier: str, binding: str) -> str:
        """Local whose ``default`` is the module's default export.

        ES modules are used as-is; anything else is wrapped as ``{default: exports}``.
        """
        if specifier in self._defaults:
            return self._defaults[specifier]
        name = self._unique(_hint_from_specifier(specifier) + "Default")
        self._defaults[specifier] = name
        self._plan.requires.append(
            f"{self.keyword} {name} = {binding} && {binding}.__esModule "
            f'? {binding} : {{ "default": {binding} }};'
        )
        return name

    def _import(self, node: Node) -> None:
        self._plan.edits.append(_Edit(node.start_byte, node.end_byte))
        source_node = node.child_by_field_name("source")
        if source_node is None:
            return
        specifier = string_value(source_node, self.tree.source)
        binding = self._binding_for(specifier)
        clause = find_child_by_type(node, "import_clause")
        if clause is None:
            # Side-effect import
            return

        for child in clause.children:
            if child.type == "identifier":
                holder = self._default_holder(specifier, binding)
                self._imports[self._text(child)] = member(holder, "default")
            elif child.type == "namespace_import":
                local_node = find_child_by_type(child, "identifier")
                if local_node is not None:
                    self._plan.requires.append(
                        f"{self.keyword} {self._text(local_node)} = {binding};"
                    )
            elif child.type == "named_imports":
                for spec in find_children_by_type(child, "import_specifier"):
                    name_node = spec.child_by_field_name("name")
                    alias_node = spec.child_by_field_name("alias")
                    if name_node is None:
                        continue
                    imported = self._name(name_node)
                    local = self._text(alias_node) if alias_node is not None else imported
                    if imported == "default":
                        holder = self._default_holder(specifier, binding)
                        self._imports[local] = member(holder, "default")
                    else:
                        self._imports[local] = member(binding, imported)

    def _export(self, node: Node) -> None:
        self._plan.has_exports = True
        source_node = node.child_by_field_name("source")
        declaration = node.child_by_field_name("declaration")
        value = node.child_by_field_name("value")
        named_value = _named_expression(value) if value is not None else None
        is_default = find_child_by_type(node, "default") is not None

        if source_node is not None:
            self._plan.edits.append(_Edit(node.start_byte, node.end_byte))
            self._reexport(node, string_value(source_node, self.tree.source))
        elif declaration is not None:
            # Keep the declaration, drop the `export` / `export default` prefix
            self._plan.edits.append(_Edit(node.start_byte, declaration.start_byte))
            names = _declared_names(declaration, self.tree)
            if is_default and names:
                self._plan.getters.append(export_getter("default", names[0]))
            else:
                for name in names:
                    self._plan.getters.append(export_getter(name, name))
        elif named_value is not None:
            # `export default function name() {}` parsed as an expression
            self._plan.edits.append(_Edit(node.start_byte, value.start_byte))
            self._plan.getters.append(export_getter("default", self._text(named_value)))
        elif value is not None:
            # Keep the expression in place so references inside it are rewritten too
            self._plan.edits.append(_Edit(node.start_byte, value.start_byte, 'exports["default"] = '))
        else:
            self._plan.edits.append(_Edit(node.start_byte, node.end_byte))
            clause = find_child_by_type(node, "export_clause")
            if clause is None:
                return
            for spec in find_children_by_type(clause, "export_specifier"):
                name_node = spec.child_by_field_name("name")
                alias_node = spec.child_by_field_name("alias")
                if name_node is None:
                    continue
                local = self._name(name_node)
                exported = self._name(alias_node) if alias_node is not None else local
                self._local_exports.append((len(self._plan.getters), exported, local))
                self._plan.getters.append("")

    def _reexport(self, node: Node, specifier: str) -> None:
        binding = self._binding_for(specifier)
        clause = find_child_by_type(node, "export_clause")
        namespace = find_child_by_type(node, "namespace_export")
        if clause is not None:
            for spec in find_children_by_type(clause, "export_specifier"):
                name_node = spec.child_by_field_name("name")
                alias_node = spec.child_by_field_name("alias")
                if name_node is None:
                    continue
                imported = self._name(name_node)
                exported = self._name(alias_node) if alias_node is not None else imported
                self._plan.getters.append(export_getter(exported, member(binding, imported)))
        elif namespace is not None:
            exported_node = namespace.named_children[-1]
            self._plan.getters.append(export_getter(self._name(exported_node), binding))
        else:
            self._plan.requires.append(star_reexport(binding))

    def _rewrite_references(self) -> None:
        """Point every unshadowed use of an imported name at its binding."""
        imported = set(self._imports)
        stack: list[tuple[Node, frozenset[str]]] = [(self.tree.root, frozenset())]
        while stack:
            node, shadowed = stack.pop()
            if _is_removed_statement(node):
                continue

            declared = _scope_declarations(node, self.tree) & imported
            if declared:
                shadowed = shadowed | declared

            if node.type in ("identifier", "shorthand_property_identifier"):
                name = self._text(node)
                if name in self._imports and name not in shadowed:
                    self._plan.edits.append(
                        _Edit(node.start_byte, node.end_byte, self._reference(node, name))
                    )
                continue

            stack.extend((child, shadowed) for child in node.children)

    def _reference(self, node: Node, name: str) -> str:
        expr = self._imports[name]
        if node.type == "shorthand_property_identifier":
            return f"{name}: {expr}"
        parent = node.parent
        if (
            parent is not None
            and parent.type == "call_expression"
            and parent.child_by_field_name("function") == node
        ):
            # Call without the module object as `this`
            return f"(0, {expr})"
        return expr


def _is_removed_statement(node: Node) -> bool:
    """Statements replaced wholesale by the header."""
    if node.type == "import_statement":
        return True
    return (
        node.type == "export_statement"
        and node.child_by_field_name("declaration") is None
        and node.child_by_field_name("value") is None
    )


def _scope_declarations(node: Node, tree: SourceTree) -> set[str]:
    """Names a scope-introducing node binds for its whole subtree."""
    names: set[str] = set()
    if node.type in _FUNCTION_TYPES:
        if node.type in _NAMED_EXPRESSION_TYPES:
            name_node = node.child_by_field_name("name")
            if name_node is not None:
                names.add(tree.text(name_node))
        params = node.child_by_field_name("parameters")
        if params is not None:
            for param in params.named_children:
                names.update(_pattern_names(param, tree))
        param = node.child_by_field_name("parameter")
        if param is not None:
            names.update(_pattern_names(param, tree))
        body = node.child_by_field_name("body")
        if body is not None:
            names.update(_var_names(body, tree))
    elif node.type == "statement_block":
        names.update(_lexical_names(node.named_children, tree))
    elif node.type == "switch_body":
        for case in node.named_children:
            names.update(_lexical_names(case.named_children, tree))
    elif node.type == "for_statement":
        initializer = node.child_by_field_name("initializer")
        if initializer is not None and initializer.type in _VARIABLE_DECLARATION_TYPES:
            names.update(_declared_names(initializer, tree))
    elif node.type == "for_in_statement":
        left = node.child_by_field_name("left")
        if left is not None and _has_binding_keyword(node):
            names.update(_pattern_names(left, tree))
    elif node.type == "catch_clause":
        param = node.child_by_field_name("parameter")
        if param is not None:
            names.update(_pattern_names(param, tree))
    return names


def _has_binding_keyword(node: Node) -> bool:
    return any(child.type in ("var", "let", "const") for child in node.children)


def _lexical_names(statements: list[Node], tree: SourceTree) -> set[str]:
    names: set[str] = set()
    for statement in statements:
        if statement.type == "lexical_declaration" or statement.type in _DECLARATION_NAME_TYPES:
            names.update(_declared_names(statement, tree))
    return names


def _var_names(body: Node, tree: SourceTree) -> set[str]:
    """``var`` bindings hoisted to a function body."""
    names: set[str] = set()
    stack = [body]
    while stack:
        node = stack.pop()
        if node.type == "variable_declaration":
            names.update(_declared_names(node, tree))
        elif node.type == "for_in_statement" and any(c.type == "var" for c in node.children):
            left = node.child_by_field_name("left")
            if left is not None:
                names.update(_pattern_names(left, tree))
        stack.extend(child for child in node.children if child.type not in _FUNCTION_TYPES)
    return names


def _hint_from_specifier(specifier: str) -> str:
    """Derive a readable identifier from a specifier (``./foo-bar.js`` -> ``fooBar``)."""
    base = specifier.rstrip("/").rsplit("/", 1)[-1]
    for ext in (".mjs", ".cjs", ".js"):
        if base.endswith(ext):
            base = base[: -len(ext)]
            break
    parts = [p for p in re.split(r"[^A-Za-z0-9_$]+", base) if p]
    if not parts:
        return "module"
    hint = parts[0] + "".join(p[:1].upper() + p[1:] for p in parts[1:])
    if hint[0].isdigit():
        hint = "_" + hint
    return hint


def _named_expression(node: Node) -> Node | None:
    """Name node of a named function/class expression, else None."""
    if node.type in _NAMED_EXPRESSION_TYPES:
        return node.child_by_field_name("name")
    return None


def _declared_names(declaration: Node, tree: SourceTree) -> list[str]:
    """Names bound by a declaration (function, class, var/let/const)."""
    if declaration.type in _DECLARATION_NAME_TYPES:
        name_node = declaration.child_by_field_name("name")
        return [tree.text(name_node)] if name_node is not None else []

    names: list[str] = []
    for declarator in find_children_by_type(declaration, "variable_declarator"):
        target = declarator.child_by_field_name("name")
        if target is not None:
            names.extend(_pattern_names(target, tree))
    return names


def _pattern_names(node: Node, tree: SourceTree) -> list[str]:
    """Identifiers bound by a (possibly destructuring) binding pattern."""
    if node.type in ("identifier", "shorthand_property_identifier_pattern"):
        return [tree.text(node)]
    if node.type == "pair_pattern":
        value = node.child_by_field_name("value")
        return _pattern_names(value, tree) if value is not None else []
    if node.type in ("assignment_pattern", "object_assignment_pattern"):
        left = node.child_by_field_name("left")
        return _pattern_names(left, tree) if left is not None else []

    names: list[str] = []
    if node.type in ("object_pattern", "array_pattern", "rest_pattern"):
        for child in node.named_children:
            names.extend(_pattern_names(child, tree))
    return names


def transform(tree: SourceTree, target: str = "es5") -> str:
    """Produce wrapper-ready code for a parsed module.

    Args:
        tree: Parsed module
        target: Target syntax version (see ``TARGETS``)

    Returns:
        Source text using ``require``/``module``/``exports``
    """
    return ModuleTransformer(tree, target).transform()
