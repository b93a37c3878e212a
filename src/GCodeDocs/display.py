# === NAVMAP v1 ===
# {
#   "module": "GCodeDocs.display",
#   "purpose": "Combine ordered display items with documentation lookups.",
#   "sections": [
#     {
#       "id": "displayline",
#       "name": "DisplayLine",
#       "anchor": "class-displayline",
#       "kind": "class"
#     },
#     {
#       "id": "render-item",
#       "name": "render_item",
#       "anchor": "function-render-item",
#       "kind": "function"
#     },
#     {
#       "id": "assemble",
#       "name": "assemble",
#       "anchor": "function-assemble",
#       "kind": "function"
#     },
#     {
#       "id": "assemble-file",
#       "name": "assemble_file",
#       "anchor": "function-assemble-file",
#       "kind": "function"
#     }
#   ]
# }
# === /NAVMAP ===

"""Combine ordered display items with documentation lookups.

A missing documentation entry is an ordinary outcome: the instruction is shown
with :data:`UNKNOWN_MARKER` instead of a title.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Literal, Optional, Union

from GCodeDocs.docs.records import OpcodeDescription
from GCodeDocs.errors import GCodeFileError
from GCodeDocs.gcode.lines import DisplayLineIterator
from GCodeDocs.gcode.models import CommentItem, DisplayItem, SourceLine
from GCodeDocs.gcode.tokenizer import parse

__all__ = ["UNKNOWN_MARKER", "DisplayLine", "assemble", "assemble_file", "render_item"]

UNKNOWN_MARKER = "Unknown"


@dataclass(frozen=True, slots=True)
class DisplayLine:
    """Rendered line ready for the presentation layer."""

    kind: Literal["comment", "instruction"]
    line: int
    text: str
    annotation: Optional[str] = None
    code: Optional[str] = None
    record: Optional[OpcodeDescription] = None

    @property
    def is_known(self) -> bool:
        return self.record is not None

    def __str__(self) -> str:
        if self.kind == "comment":
            return f"; {self.text}"
        return f"{self.text} -- {self.annotation}"


def render_item(item: DisplayItem, registry: Mapping[str, OpcodeDescription]) -> DisplayLine:
    """Render one display item, looking instructions up in ``registry``."""

    if isinstance(item, CommentItem):
        return DisplayLine(kind="comment", line=item.line, text=item.comment.value)

    record = registry.get(item.code)
    return DisplayLine(
        kind="instruction",
        line=item.line,
        text=str(item.instruction),
        annotation=record.title if record is not None else UNKNOWN_MARKER,
        code=item.code,
        record=record,
    )


def assemble(
    lines: Iterable[SourceLine], registry: Mapping[str, OpcodeDescription]
) -> Iterator[DisplayLine]:
    """Yield rendered lines for ``lines`` in document order."""

    for item in DisplayLineIterator(lines):
        yield render_item(item, registry)


def assemble_file(
    path: Union[str, Path], registry: Mapping[str, OpcodeDescription]
) -> Iterator[DisplayLine]:
    """Read, tokenize and assemble the G-code file at ``path``.

    Raises:
        GCodeFileError: If the file cannot be read.
    """

    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        raise GCodeFileError(
            f"Cannot read G-code file {path}: {exc.strerror or exc}", path=str(path)
        ) from exc
    return assemble(parse(text), registry)
