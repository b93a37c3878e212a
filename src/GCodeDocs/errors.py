# === NAVMAP v1 ===
# {
#   "module": "GCodeDocs.errors",
#   "purpose": "Exception types and formatting helpers shared by GCodeDocs components.",
#   "sections": [
#     {
#       "id": "gcodedocserror",
#       "name": "GCodeDocsError",
#       "anchor": "class-gcodedocserror",
#       "kind": "class"
#     },
#     {
#       "id": "decodeerror",
#       "name": "DecodeError",
#       "anchor": "class-decodeerror",
#       "kind": "class"
#     },
#     {
#       "id": "registrybuilderror",
#       "name": "RegistryBuildError",
#       "anchor": "class-registrybuilderror",
#       "kind": "class"
#     },
#     {
#       "id": "duplicatecodeerror",
#       "name": "DuplicateCodeError",
#       "anchor": "class-duplicatecodeerror",
#       "kind": "class"
#     },
#     {
#       "id": "gcodefileerror",
#       "name": "GCodeFileError",
#       "anchor": "class-gcodefileerror",
#       "kind": "class"
#     },
#     {
#       "id": "format-error",
#       "name": "format_error",
#       "anchor": "function-format-error",
#       "kind": "function"
#     }
#   ]
# }
# === /NAVMAP ===

"""Exception types and formatting helpers shared by GCodeDocs components.

Two families of failure exist. Per-document decode failures
(:class:`DecodeError`) are recovered inside the registry builder: the document
is logged and skipped. Configuration-level failures
(:class:`RegistryBuildError`, :class:`GCodeFileError`) abort the run and are
rendered by the CLI through :func:`format_error` so terminal output stays
predictable for both humans and automation.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

__all__ = [
    "DecodeError",
    "DuplicateCodeError",
    "GCodeDocsError",
    "GCodeFileError",
    "RegistryBuildError",
    "format_error",
]


class GCodeDocsError(Exception):
    """Base class for every error raised by GCodeDocs."""

    stage: str = "gcodedocs"
    hint: Optional[str] = None


@dataclass(slots=True)
class DecodeError(GCodeDocsError, ValueError):
    """Raised when a documentation file cannot be decoded into a record."""

    message: str
    source: Optional[str] = None
    field: Optional[str] = None
    hint: Optional[str] = None
    stage: str = "docs"

    def __post_init__(self) -> None:  # pragma: no cover - simple wiring
        ValueError.__init__(self, self.message)

    def __str__(self) -> str:
        location = f"{self.source}: " if self.source else ""
        field = f" (field '{self.field}')" if self.field else ""
        return f"{location}{self.message}{field}"


@dataclass(slots=True)
class RegistryBuildError(GCodeDocsError, RuntimeError):
    """Raised when the documentation directory itself cannot be scanned."""

    message: str
    directory: Optional[str] = None
    hint: Optional[str] = None
    stage: str = "registry"

    def __post_init__(self) -> None:  # pragma: no cover - simple wiring
        RuntimeError.__init__(self, self.message)

    def __str__(self) -> str:
        return self.message


@dataclass(slots=True)
class DuplicateCodeError(RegistryBuildError):
    """Raised under the ``error`` duplicate policy when two documents share a code."""

    code: str = ""
    sources: tuple[str, ...] = ()


@dataclass(slots=True)
class GCodeFileError(GCodeDocsError, RuntimeError):
    """Raised when the G-code input file cannot be read."""

    message: str
    path: Optional[str] = None
    hint: Optional[str] = None
    stage: str = "gcode"

    def __post_init__(self) -> None:  # pragma: no cover - simple wiring
        RuntimeError.__init__(self, self.message)

    def __str__(self) -> str:
        return self.message


def format_error(error: BaseException) -> str:
    """Return a consistent error string for CLI consumption."""

    stage = getattr(error, "stage", None) or "gcodedocs"
    hint = getattr(error, "hint", None)
    suffix = f" Hint: {hint}" if hint else ""
    message = str(error).rstrip(".")
    return f"[{stage}] {message}.{suffix}".strip()
