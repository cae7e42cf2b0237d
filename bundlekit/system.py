"""
Module-loader shim

Runtime glue emitted around the modules of a bundle: a preamble that defines a
small ``System`` registry, a footer that instantiates the bundle entry, and an
export statement re-exposing the entry's names.
"""

from __future__ import annotations

import json
from collections.abc import Iterable

SYSTEM_LOADER = """\
/* bundlekit module loader */
const System = (() => {
  const __modules = Object.create(null);
  const __cache = Object.create(null);
  function register(id, deps, declare) { __modules[id] = { deps, declare }; }
  async function instantiate(id) {
    if (__cache[id]) return __cache[id];
    const mod = __modules[id];
    if (!mod) throw new Error("Missing module: " + id);
    const exports = Object.create(null);
    __cache[id] = exports;
    const _export = (name, value) => { exports[name] = value; return value; };
    const { setters = [], execute } = mod.declare(_export, { id });
    for (let i = 0; i < mod.deps.length; i++) {
      const dep = await instantiate(mod.deps[i]);
      if (setters[i]) setters[i](dep);
    }
    if (execute) await execute();
    return exports;
  }
  return { register, instantiate };
})();"""


def create_system_loader() -> str:
    """Bundle preamble"""
    return SYSTEM_LOADER


def create_instantiate_string(output: str) -> str:
    """Footer instantiating the bundle entry registered under ``output``"""
    return f"const __exp = await System.instantiate({json.dumps(output)});"


def create_system_exports(names: Iterable[str]) -> str:
    """
    Export statement for the entry's names.

    ``default`` is a reserved word and cannot be destructured, so it is exported
    from the namespace directly. ``*`` (or no names at all) re-exposes the
    namespace itself as the default export.
    """
    names = list(names)
    lines = []
    named = [name for name in names if name not in ("*", "default")]
    if named:
        lines.append("export const { " + ", ".join(named) + " } = __exp;")
    if "default" in names:
        lines.append("export default __exp.default;")
    elif "*" in names or not named:
        lines.append("export default __exp;")
    return "\n".join(lines)
