# === NAVMAP v1 ===
# {
#   "module": "GCodeDocs.docs.registry",
#   "purpose": "Build the read-only code -> documentation lookup table from a directory.",
#   "sections": [
#     {
#       "id": "duplicatecodepolicy",
#       "name": "DuplicateCodePolicy",
#       "anchor": "class-duplicatecodepolicy",
#       "kind": "class"
#     },
#     {
#       "id": "documentfailure",
#       "name": "DocumentFailure",
#       "anchor": "class-documentfailure",
#       "kind": "class"
#     },
#     {
#       "id": "codeconflict",
#       "name": "CodeConflict",
#       "anchor": "class-codeconflict",
#       "kind": "class"
#     },
#     {
#       "id": "documentationregistry",
#       "name": "DocumentationRegistry",
#       "anchor": "class-documentationregistry",
#       "kind": "class"
#     },
#     {
#       "id": "iter-document-paths",
#       "name": "iter_document_paths",
#       "anchor": "function-iter-document-paths",
#       "kind": "function"
#     },
#     {
#       "id": "load-document",
#       "name": "_load_document",
#       "anchor": "function-load-document",
#       "kind": "function"
#     },
#     {
#       "id": "build-registry",
#       "name": "build_registry",
#       "anchor": "function-build-registry",
#       "kind": "function"
#     }
#   ]
# }
# === /NAVMAP ===

"""Build the read-only ``code -> documentation`` lookup table from a directory.

The builder lists the documentation directory once (failure to do so is a
configuration error and aborts the build), parses every matching file, and fans
each record out to all of the codes it declares. A file that cannot be read or
decoded is logged, recorded in :attr:`DocumentationRegistry.failures`, and
skipped; the rest of the directory is still processed.

Files are merged in sorted filename order regardless of how many workers parsed
them, so duplicate-code resolution is the same on every platform. What happens
on a duplicate is chosen explicitly through :class:`DuplicateCodePolicy`.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from concurrent import futures
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Dict, List, Optional, Sequence, Tuple, Union

from GCodeDocs.docs.parser import ParsedOpcodeDocument, parse_opcode_file
from GCodeDocs.docs.records import OpcodeDescription
from GCodeDocs.errors import DecodeError, DuplicateCodeError, RegistryBuildError
from GCodeDocs.logging import StructuredLogger, log_event

__all__ = [
    "DEFAULT_EXTENSION",
    "CodeConflict",
    "DocumentFailure",
    "DocumentationRegistry",
    "DuplicateCodePolicy",
    "build_registry",
    "iter_document_paths",
]

DEFAULT_EXTENSION = ".md"


class DuplicateCodePolicy(str, Enum):
    """What to do when two documents declare the same code."""

    FIRST_WINS = "first_wins"
    LAST_WINS = "last_wins"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class DocumentFailure:
    """A documentation file that was skipped during the build."""

    path: Path
    error: str
    error_code: str


@dataclass(frozen=True, slots=True)
class CodeConflict:
    """A code declared by more than one document."""

    code: str
    kept: Path
    discarded: Path


class DocumentationRegistry(Mapping[str, OpcodeDescription]):
    """Immutable mapping from opcode code to its shared documentation record."""

    def __init__(
        self,
        entries: Mapping[str, OpcodeDescription],
        *,
        bodies: Optional[Mapping[str, str]] = None,
        sources: Optional[Mapping[str, Path]] = None,
        failures: Sequence[DocumentFailure] = (),
        conflicts: Sequence[CodeConflict] = (),
        directory: Optional[Path] = None,
    ) -> None:
        self._entries = MappingProxyType(dict(entries))
        self._bodies = MappingProxyType(dict(bodies or {}))
        self._sources = MappingProxyType(dict(sources or {}))
        self.failures: Tuple[DocumentFailure, ...] = tuple(failures)
        self.conflicts: Tuple[CodeConflict, ...] = tuple(conflicts)
        self.directory = directory

    def __getitem__(self, code: str) -> OpcodeDescription:
        return self._entries[code]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(codes={len(self)}, records={len(self.records())}, "
            f"failures={len(self.failures)}, conflicts={len(self.conflicts)})"
        )

    def lookup(self, code: str) -> Optional[OpcodeDescription]:
        """Return the record documenting ``code`` or ``None``."""

        return self._entries.get(code)

    def body(self, code: str) -> Optional[str]:
        """Return the markdown body of the page documenting ``code``."""

        return self._bodies.get(code)

    def source(self, code: str) -> Optional[Path]:
        """Return the file the mapping for ``code`` was read from."""

        return self._sources.get(code)

    @property
    def sources(self) -> Mapping[str, Path]:
        return self._sources

    def codes(self) -> Tuple[str, ...]:
        return tuple(sorted(self._entries))

    def records(self) -> Tuple[OpcodeDescription, ...]:
        """Unique records in first-seen order."""

        seen: Dict[int, OpcodeDescription] = {}
        for record in self._entries.values():
            seen.setdefault(id(record), record)
        return tuple(seen.values())


def iter_document_paths(directory: Path, extension: str = DEFAULT_EXTENSION) -> List[Path]:
    """Return the regular files in ``directory`` carrying ``extension``, sorted by name.

    Raises:
        RegistryBuildError: If ``directory`` is missing, not a directory, or
            cannot be listed.
    """

    directory = Path(directory)
    try:
        entries = list(directory.iterdir())
    except FileNotFoundError as exc:
        raise RegistryBuildError(
            f"Documentation directory {directory} does not exist",
            directory=str(directory),
            hint="Pass --docs-dir or set GCODEDOCS_DOCS_DIR",
        ) from exc
    except NotADirectoryError as exc:
        raise RegistryBuildError(
            f"Documentation path {directory} is not a directory", directory=str(directory)
        ) from exc
    except OSError as exc:
        raise RegistryBuildError(
            f"Cannot list documentation directory {directory}: {exc}", directory=str(directory)
        ) from exc

    suffix = extension.lower()
    documents = [
        entry for entry in entries if entry.suffix.lower() == suffix and entry.is_file()
    ]
    return sorted(documents, key=lambda path: path.name)


_LoadResult = Union[ParsedOpcodeDocument, DocumentFailure]


def _load_document(path: Path) -> _LoadResult:
    """Parse ``path``, converting per-file failures into :class:`DocumentFailure`."""

    try:
        return parse_opcode_file(path)
    except DecodeError as exc:
        return DocumentFailure(path=path, error=str(exc), error_code="DECODE_ERROR")
    except UnicodeDecodeError as exc:
        return DocumentFailure(path=path, error=f"{path}: {exc}", error_code="ENCODING_ERROR")
    except OSError as exc:
        return DocumentFailure(path=path, error=f"{path}: {exc}", error_code="READ_ERROR")


def _parse_all(paths: Sequence[Path], workers: int) -> List[_LoadResult]:
    """Parse ``paths`` and return results in input order."""

    if workers <= 1 or len(paths) <= 1:
        return [_load_document(path) for path in paths]
    with futures.ThreadPoolExecutor(
        max_workers=workers, thread_name_prefix="gcodedocs-registry"
    ) as executor:
        return list(executor.map(_load_document, paths))


def build_registry(
    directory: Union[str, Path],
    *,
    extension: str = DEFAULT_EXTENSION,
    duplicate_policy: Union[DuplicateCodePolicy, str] = DuplicateCodePolicy.FIRST_WINS,
    workers: int = 1,
    logger: Optional[logging.Logger] = None,
) -> DocumentationRegistry:
    """Scan ``directory`` and build a :class:`DocumentationRegistry`.

    Args:
        directory: Directory holding one documentation page per file.
        extension: File extension of documentation pages (case-insensitive).
        duplicate_policy: Resolution applied when a code is declared twice.
        workers: Number of threads used to parse files; ``1`` parses inline.
        logger: Optional logger; defaults to this module's structured logger.

    Returns:
        The populated, read-only registry.

    Raises:
        RegistryBuildError: If the directory cannot be listed.
        DuplicateCodeError: Under :attr:`DuplicateCodePolicy.ERROR` when two
            documents declare the same code.
    """

    policy = DuplicateCodePolicy(duplicate_policy)
    log = logger or StructuredLogger(logging.getLogger(__name__), {"stage": "registry"})
    root = Path(directory)
    if not extension.startswith("."):
        extension = f".{extension}"

    paths = iter_document_paths(root, extension)
    log_event(
        log, "debug", "Scanning documentation directory", directory=str(root), files=len(paths)
    )

    entries: Dict[str, OpcodeDescription] = {}
    bodies: Dict[str, str] = {}
    sources: Dict[str, Path] = {}
    failures: List[DocumentFailure] = []
    conflicts: List[CodeConflict] = []

    for path, result in zip(paths, _parse_all(paths, workers)):
        if isinstance(result, DocumentFailure):
            failures.append(result)
            log_event(
                log,
                "warning",
                "Skipping documentation file",
                doc_path=str(path),
                error=result.error,
                error_code=result.error_code,
            )
            continue

        for code, record in result.code_entries():
            previous = sources.get(code)
            if previous is not None:
                if policy is DuplicateCodePolicy.ERROR:
                    raise DuplicateCodeError(
                        f"Code {code} is documented by both {previous.name} and {path.name}",
                        directory=str(root),
                        code=code,
                        sources=(str(previous), str(path)),
                    )
                keep_new = policy is DuplicateCodePolicy.LAST_WINS
                conflict = CodeConflict(
                    code=code,
                    kept=path if keep_new else previous,
                    discarded=previous if keep_new else path,
                )
                conflicts.append(conflict)
                log_event(
                    log,
                    "warning",
                    "Duplicate documentation code",
                    code=code,
                    kept=str(conflict.kept),
                    discarded=str(conflict.discarded),
                    error_code="DUPLICATE_CODE",
                )
                if not keep_new:
                    continue
            entries[code] = record
            bodies[code] = result.body
            sources[code] = path

    log_event(
        log,
        "info",
        "Documentation registry built",
        directory=str(root),
        codes=len(entries),
        failures=len(failures),
        conflicts=len(conflicts),
    )
    return DocumentationRegistry(
        entries,
        bodies=bodies,
        sources=sources,
        failures=failures,
        conflicts=conflicts,
        directory=root,
    )
