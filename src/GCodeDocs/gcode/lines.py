# === NAVMAP v1 ===
# {
#   "module": "GCodeDocs.gcode.lines",
#   "purpose": "Merge per-line comment and instruction collections back into document order.",
#   "sections": [
#     {
#       "id": "displaylineiterator",
#       "name": "DisplayLineIterator",
#       "anchor": "class-displaylineiterator",
#       "kind": "class"
#     },
#     {
#       "id": "iter-display-items",
#       "name": "iter_display_items",
#       "anchor": "function-iter-display-items",
#       "kind": "function"
#     }
#   ]
# }
# === /NAVMAP ===

"""Merge per-line comment and instruction collections back into document order.

The tokenizer hands out :class:`~GCodeDocs.gcode.models.SourceLine` records
that separate comments from instructions, and a single source line may carry
comments that physically sit on earlier lines. :class:`DisplayLineIterator`
re-interleaves both streams so that consumers see display items ordered by
line number, with comments emitted before instructions that share their line.

The iterator is lazy and single-pass: it pulls one source line only when no
buffered item can be emitted yet, so arbitrarily long (or unbounded) inputs can
be streamed without materialising them.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable, Iterator
from typing import Deque, Optional

from GCodeDocs.gcode.models import (
    Comment,
    CommentItem,
    DisplayItem,
    Instruction,
    InstructionItem,
    SourceLine,
)

__all__ = ["DisplayLineIterator", "iter_display_items"]


class DisplayLineIterator(Iterator[DisplayItem]):
    """Lazy iterator yielding comments and instructions in document order.

    Examples:
        >>> from GCodeDocs.gcode.models import Comment, Instruction, SourceLine, Span
        >>> line = SourceLine(
        ...     span=Span(line=1),
        ...     comments=(Comment(line=1, value="home"),),
        ...     instructions=(Instruction("G", 28, span=Span(line=1)),),
        ... )
        >>> [item.kind for item in DisplayLineIterator([line])]
        ['comment', 'instruction']
    """

    def __init__(self, lines: Iterable[SourceLine]) -> None:
        self._source: Optional[Iterator[SourceLine]] = iter(lines)
        self._comments: Deque[Comment] = deque()
        self._instructions: Deque[Instruction] = deque()

    def __iter__(self) -> "DisplayLineIterator":
        return self

    def __next__(self) -> DisplayItem:
        while True:
            # 0 when nothing is pending so buffered comments wait for the next refill.
            next_line = self._instructions[0].line if self._instructions else 0

            if self._comments and self._comments[0].line <= next_line:
                return CommentItem(self._comments.popleft())

            if self._instructions:
                return InstructionItem.from_instruction(self._instructions.popleft())

            if not self._refill():
                if self._comments:
                    return CommentItem(self._comments.popleft())
                raise StopIteration

    def _refill(self) -> bool:
        """Append the next source line to the buffers; ``False`` once exhausted."""

        if self._source is None:
            return False
        try:
            line = next(self._source)
        except StopIteration:
            self._source = None
            return False
        self._comments.extend(line.comments)
        self._instructions.extend(line.instructions)
        return True

    @property
    def pending(self) -> int:
        """Number of buffered items not yet emitted."""

        return len(self._comments) + len(self._instructions)


def iter_display_items(lines: Iterable[SourceLine]) -> Iterator[DisplayItem]:
    """Yield display items from ``lines`` in document order."""

    yield from DisplayLineIterator(lines)
