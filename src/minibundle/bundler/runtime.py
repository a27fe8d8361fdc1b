"""Runtime loader embedded in every bundle.

The loader receives the module registry ``{id: [wrapper, mapping]}`` and
executes module 0. ``require(id)`` calls the wrapper with a local resolver
that maps raw specifiers to ids through the module's own mapping.

Lookup failures throw an ``Error`` whose ``code`` is ``"MODULE_NOT_FOUND"``:
an unknown id carries ``moduleId``; a specifier missing from the mapping
carries ``specifier`` and ``parentId``.
"""

from __future__ import annotations

from string import Template

from minibundle.codegen import validate_target

_LOADER = Template(
    """(function (modules) {
$cache_decl
  function require(id) {
    if (!Object.prototype.hasOwnProperty.call(modules, id)) {
      $var missing = new Error("Cannot find module with id " + id);
      missing.code = "MODULE_NOT_FOUND";
      missing.moduleId = id;
      throw missing;
    }
$cache_hit
    $var fn = modules[id][0];
    $var mapping = modules[id][1];

    function localRequire(name) {
      if (!Object.prototype.hasOwnProperty.call(mapping, name)) {
        $var unresolved = new Error("Cannot find module '" + name + "' from module " + id);
        unresolved.code = "MODULE_NOT_FOUND";
        unresolved.specifier = name;
        unresolved.parentId = id;
        throw unresolved;
      }
      return require(mapping[name]);
    }

    $var module = { exports: {} };
$execute
    return module.exports;
  }

  return require(0);
})({
$registry
});
"""
)

_CACHE_DECL = "  $var cache = {};\n"

_CACHE_HIT = """\
    if (Object.prototype.hasOwnProperty.call(cache, id)) {
      return cache[id].exports;
    }
"""

# Cache before executing so cyclic requires see the partial exports
_EXECUTE_CACHED = """\
    cache[id] = module;
    try {
      fn(localRequire, module, module.exports);
    } catch (err) {
      delete cache[id];
      throw err;
    }
"""

_EXECUTE_UNCACHED = "    fn(localRequire, module, module.exports);\n"


def render_loader(registry: str, *, cache: bool = True, target: str = "es5") -> str:
    """Embed a registry object body in the runtime loader.

    Args:
        registry: Registry entries (``id: [fn, mapping]``), comma separated
        cache: Memoize module exports by id
        target: Target syntax version; ``es5`` uses ``var`` declarations

    Returns:
        The complete bundle program
    """
    keyword = "var" if validate_target(target) == "es5" else "const"
    cache_decl = Template(_CACHE_DECL).substitute(var=keyword) if cache else ""

    loader = _LOADER.safe_substitute(
        var=keyword,
        cache_decl=cache_decl,
        cache_hit=_CACHE_HIT if cache else "",
        execute=_EXECUTE_CACHED if cache else _EXECUTE_UNCACHED,
    )
    # Drop blank lines left by disabled sections; module code is inserted after
    loader = "\n".join(line for line in loader.split("\n") if line.strip() != "")
    return loader.replace("$registry", registry, 1) + "\n"
