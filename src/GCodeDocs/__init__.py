"""GCodeDocs package facade with lazy loading.

``GCodeDocs`` pairs G-code files with the Marlin opcode documentation: the
``gcode`` subpackage tokenizes programs and restores document order, ``docs``
decodes documentation pages into a lookup table, and :mod:`GCodeDocs.display`
joins the two. Subpackages are imported on first attribute access so that the
CLI only pays for what it uses.
"""

from __future__ import annotations

from importlib import import_module
from types import ModuleType
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:  # pragma: no cover - import-time hints only
    from . import display as display  # noqa: F401 (re-exported at runtime)
    from . import docs as docs  # noqa: F401 (re-exported at runtime)
    from . import gcode as gcode  # noqa: F401 (re-exported at runtime)
    from . import settings as settings  # noqa: F401 (re-exported at runtime)

__version__ = "0.1.0"

_LAZY_ATTR_MODULES: dict[str, str] = {
    "display": "GCodeDocs.display",
    "docs": "GCodeDocs.docs",
    "gcode": "GCodeDocs.gcode",
    "settings": "GCodeDocs.settings",
}

_MODULE_CACHE: dict[str, ModuleType] = {}


def _load_module(name: str) -> ModuleType:
    """Load a module by name, using cache for performance."""
    if name in _MODULE_CACHE:
        return _MODULE_CACHE[name]

    module = import_module(_LAZY_ATTR_MODULES[name])
    globals()[name] = module
    _MODULE_CACHE[name] = module
    return module


__all__ = [
    "__version__",
    "build_registry",
    "display",
    "docs",
    "gcode",
    "settings",
]


def __getattr__(name: str) -> Any:
    """Dynamically import submodules only when they are requested."""

    if name in _LAZY_ATTR_MODULES:
        return _load_module(name)
    raise AttributeError(f"module 'GCodeDocs' has no attribute '{name}'")


def __dir__() -> list[str]:
    """Ensure lazily exposed attributes appear in :func:`dir` results."""

    return sorted(set(globals()) | set(_LAZY_ATTR_MODULES))


def build_registry(*args, **kwargs):
    """Proxy to :func:`GCodeDocs.docs.registry.build_registry` with lazy loading."""

    function = _load_module("docs").build_registry
    globals()["build_registry"] = function
    return function(*args, **kwargs)
