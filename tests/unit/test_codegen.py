"""Tests for ES module syntax lowering."""

from __future__ import annotations

import pytest

from minibundle.codegen import TARGETS, transform, validate_target
from minibundle.codegen.transform import _hint_from_specifier, member
from minibundle.errors import ConfigError
from minibundle.parser import parse


def lower(source: str, target: str = "es5") -> str:
    return transform(parse(source), target)


class TestTargets:
    """Tests for target validation."""

    def test_known_targets(self) -> None:
        """All listed targets validate."""
        for target in TARGETS:
            assert validate_target(target) == target

    def test_unknown_target(self) -> None:
        """Unknown targets raise ConfigError."""
        with pytest.raises(ConfigError):
            validate_target("es3")

    def test_es5_uses_var(self) -> None:
        """es5 bindings are declared with var."""
        code = lower('import a from "./a.js";\n')
        assert 'var _a = require("./a.js");' in code

    def test_later_targets_use_const(self) -> None:
        """Newer targets declare bindings with const."""
        code = lower('import a from "./a.js";\n', target="es2015")
        assert 'const _a = require("./a.js");' in code


class TestImports:
    """Tests for import declaration lowering."""

    def test_plain_code_unchanged(self) -> None:
        """Code without module syntax passes through untouched."""
        source = "console.log(1);\n"
        assert lower(source) == source

    def test_default_import(self) -> None:
        """Default imports read through an ES-module interop holder."""
        code = lower('import message from "./message.js";\nconsole.log(message);\n')

        assert code.startswith('"use strict";')
        assert 'var _message = require("./message.js");' in code
        assert (
            'var _messageDefault = _message && _message.__esModule '
            '? _message : { "default": _message };'
        ) in code
        assert 'console.log(_messageDefault["default"]);' in code
        assert "import " not in code
        assert "var message" not in code

    def test_named_imports(self) -> None:
        """Named imports become member accesses, not local copies."""
        code = lower('import { a, b as c } from "./lib.js";\nlog(a, c);\n')
        assert "log(_lib.a, _lib.b);" in code
        assert "var a" not in code
        assert "var c" not in code

    def test_namespace_import(self) -> None:
        """Namespace imports bind the whole exports object."""
        code = lower('import * as utils from "./utils.js";\n')
        assert 'var _utils = require("./utils.js");' in code
        assert "var utils = _utils;" in code

    def test_side_effect_import(self) -> None:
        """Side-effect imports still require the module."""
        code = lower('import "./polyfill.js";\n')
        assert 'require("./polyfill.js");' in code

    def test_repeated_specifier_required_once(self) -> None:
        """Two imports from one module share one require call."""
        code = lower('import a from "./x.js";\nimport { b } from "./x.js";\nf(a, b);\n')
        assert code.count('require("./x.js")') == 1
        assert 'f(_xDefault["default"], _x.b);' in code
        assert code.count("var _xDefault = ") == 1

    def test_generated_name_avoids_collisions(self) -> None:
        """Generated locals do not shadow names used by the module."""
        code = lower('import m from "./message.js";\nconst _message = 1;\n')
        assert 'var _message2 = require("./message.js");' in code

    def test_no_exports_marker_without_exports(self) -> None:
        """Modules that only import are not marked as ES modules."""
        code = lower('import "./a.js";\n')
        assert "__esModule" not in code


class TestExports:
    """Tests for export declaration lowering."""

    def test_export_const(self) -> None:
        """Exported declarations keep their body and gain a getter."""
        code = lower('export const name = "x";\n')

        assert 'Object.defineProperty(exports, "__esModule", { value: true });' in code
        assert (
            'Object.defineProperty(exports, "name", '
            "{ enumerable: true, get: function () { return name; } });"
        ) in code
        assert 'const name = "x";' in code
        assert "export " not in code

    def test_export_default_function(self) -> None:
        """Named default functions stay hoisted and export as default."""
        code = lower("export default function greet() { return 1; }\n")
        assert "function greet() { return 1; }" in code
        assert 'Object.defineProperty(exports, "default"' in code
        assert "return greet;" in code

    def test_export_default_expression(self) -> None:
        """Default expressions are assigned to exports.default."""
        code = lower("export default 40 + 2;\n")
        assert 'exports["default"] = 40 + 2;' in code

    def test_export_clause(self) -> None:
        """Export lists map exported names to locals."""
        code = lower("const a = 1;\nconst b = 2;\nexport { a, b as beta };\n")
        assert 'Object.defineProperty(exports, "a", ' in code
        assert 'Object.defineProperty(exports, "beta", ' in code
        assert "return b;" in code
        assert "export {" not in code

    def test_destructured_export(self) -> None:
        """Every name bound by a pattern is exported."""
        code = lower("export const { a, b: [c, ...d] } = obj;\n")
        for name in ("a", "c", "d"):
            assert f'Object.defineProperty(exports, "{name}", ' in code
        assert 'Object.defineProperty(exports, "b", ' not in code

    def test_named_reexport(self) -> None:
        """Re-exports forward through the required module."""
        code = lower('export { x as y } from "./x.js";\n')
        assert 'var _x = require("./x.js");' in code
        assert 'Object.defineProperty(exports, "y", ' in code
        assert "return _x.x;" in code

    def test_star_reexport(self) -> None:
        """export * copies every non-default binding."""
        code = lower('export * from "./star.js";\n')
        assert 'var _star = require("./star.js");' in code
        assert "Object.keys(_star).forEach(function (key) {" in code

    def test_namespace_reexport(self) -> None:
        """export * as ns exposes the whole module."""
        code = lower('export * as tools from "./tools.js";\n')
        assert 'Object.defineProperty(exports, "tools", ' in code
        assert "return _tools;" in code

    def test_getters_precede_requires(self) -> None:
        """Export getters are defined before dependencies run."""
        code = lower('import a from "./a.js";\nexport function f() { return a; }\n')
        assert code.index('Object.defineProperty(exports, "f"') < code.index('require("./a.js")')


class TestImportedReferences:
    """Tests for rewriting uses of imported names."""

    def test_reference_inside_function_stays_live(self) -> None:
        """Reads go through the module object at call time."""
        code = lower('import { count } from "./c.js";\nexport function read() { return count; }\n')
        assert "return _c.count;" in code

    def test_call_drops_module_receiver(self) -> None:
        """Imported functions are called without the module as ``this``."""
        code = lower('import { inc } from "./c.js";\ninc();\n')
        assert "(0, _c.inc)();" in code

    def test_shorthand_property(self) -> None:
        """Shorthand object properties keep their key."""
        code = lower('import { count } from "./c.js";\nlog({ count });\n')
        assert "log({ count: _c.count });" in code

    def test_property_names_untouched(self) -> None:
        """Member names and object keys that match an import are not references."""
        code = lower('import { count } from "./c.js";\nobj.count = { count: count };\n')
        assert "obj.count = { count: _c.count };" in code

    def test_parameter_shadows_import(self) -> None:
        code = lower('import { x } from "./m.js";\nfunction f(x) { return x; }\ng(x);\n')
        assert "function f(x) { return x; }" in code
        assert "g(_m.x);" in code

    def test_arrow_parameter_shadows_import(self) -> None:
        code = lower('import { x } from "./m.js";\nconst f = x => x + 1;\n')
        assert "const f = x => x + 1;" in code

    def test_block_declaration_shadows_import(self) -> None:
        """A let in an inner block hides the import only inside that block."""
        code = lower('import { x } from "./m.js";\n{ let x = 1; h(x); }\nh(x);\n')
        assert "{ let x = 1; h(x); }" in code
        assert code.count("h(_m.x);") == 1

    def test_hoisted_var_shadows_import(self) -> None:
        """A var anywhere in a function hides the import in the whole function."""
        code = lower('import { x } from "./m.js";\nfunction f() { h(x); if (y) { var x = 2; } }\n')
        assert "_m.x" not in code
        assert "h(x);" in code

    def test_catch_parameter_shadows_import(self) -> None:
        code = lower('import { x } from "./m.js";\ntry { t(); } catch (x) { h(x); }\n')
        assert "h(x);" in code
        assert "_m.x" not in code

    def test_reexported_import(self) -> None:
        """Export lists naming an import forward to the source module."""
        code = lower('export { x as y };\nimport { x } from "./m.js";\n')
        assert 'Object.defineProperty(exports, "y", ' in code
        assert "return _m.x;" in code

    def test_default_export_of_import(self) -> None:
        code = lower('import d from "./m.js";\nexport default d;\n')
        assert 'exports["default"] = _mDefault["default"];' in code

    def test_named_default_import(self) -> None:
        """``{ default as d }`` uses the same interop as a default import."""
        code = lower('import { default as d } from "./m.js";\nuse(d);\n')
        assert 'use(_mDefault["default"]);' in code


class TestHashBang:
    """Tests for leading ``#!`` lines."""

    def test_dropped_from_plain_code(self) -> None:
        code = lower("#!/usr/bin/env node\nconsole.log(1);\n")
        assert "#!" not in code
        assert "console.log(1);" in code

    def test_dropped_from_module(self) -> None:
        """The header never ends up above a hashbang line."""
        code = lower("#!/usr/bin/env node\nexport const a = 1;\n")
        assert "#!" not in code
        assert code.startswith('"use strict";')
        assert "const a = 1;" in code


class TestHelpers:
    """Tests for naming helpers."""

    @pytest.mark.parametrize(
        "specifier,expected",
        [
            ("./message.js", "message"),
            ("./foo-bar.js", "fooBar"),
            ("../lib/util.mjs", "util"),
            ("./1st.js", "_1st"),
            ("./", "module"),
        ],
    )
    def test_hint_from_specifier(self, specifier: str, expected: str) -> None:
        """Specifiers become readable identifiers."""
        assert _hint_from_specifier(specifier) == expected

    def test_member_access(self) -> None:
        """Identifier names use dot access; others use brackets."""
        assert member("_a", "x") == "_a.x"
        assert member("_a", "default") == '_a["default"]'
        assert member("_a", "not-valid") == '_a["not-valid"]'
