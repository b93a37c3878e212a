# === NAVMAP v1 ===
# {
#   "module": "GCodeDocs.gcode.__init__",
#   "purpose": "G-code namespace: source-line models, tokenizer and ordered merge.",
#   "sections": []
# }
# === /NAVMAP ===

"""G-code namespace: source-line models, tokenizer and ordered merge.

Downstream code can import from ``GCodeDocs.gcode`` to access:
- The immutable token types (:class:`Comment`, :class:`Instruction`, ...)
- :func:`parse`, which groups physical lines into :class:`SourceLine` records
- :class:`DisplayLineIterator`, which restores document order for display

Example:
    from GCodeDocs.gcode import iter_display_items, parse

    for item in iter_display_items(parse(text)):
        print(item.kind, item.line)
"""

from __future__ import annotations

from GCodeDocs.gcode.lines import DisplayLineIterator, iter_display_items
from GCodeDocs.gcode.models import (
    Argument,
    Comment,
    CommentItem,
    DisplayItem,
    Instruction,
    InstructionItem,
    SourceLine,
    Span,
    format_code,
)
from GCodeDocs.gcode.tokenizer import parse, tokenize_line

__all__ = [
    "Argument",
    "Comment",
    "CommentItem",
    "DisplayItem",
    "DisplayLineIterator",
    "Instruction",
    "InstructionItem",
    "SourceLine",
    "Span",
    "format_code",
    "iter_display_items",
    "parse",
    "tokenize_line",
]
