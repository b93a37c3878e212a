# === NAVMAP v1 ===
# {
#   "module": "GCodeDocs.gcode.models",
#   "purpose": "Immutable value types describing tokenized G-code source lines.",
#   "sections": [
#     {
#       "id": "span",
#       "name": "Span",
#       "anchor": "class-span",
#       "kind": "class"
#     },
#     {
#       "id": "comment",
#       "name": "Comment",
#       "anchor": "class-comment",
#       "kind": "class"
#     },
#     {
#       "id": "argument",
#       "name": "Argument",
#       "anchor": "class-argument",
#       "kind": "class"
#     },
#     {
#       "id": "instruction",
#       "name": "Instruction",
#       "anchor": "class-instruction",
#       "kind": "class"
#     },
#     {
#       "id": "format-code",
#       "name": "format_code",
#       "anchor": "function-format-code",
#       "kind": "function"
#     },
#     {
#       "id": "sourceline",
#       "name": "SourceLine",
#       "anchor": "class-sourceline",
#       "kind": "class"
#     },
#     {
#       "id": "commentitem",
#       "name": "CommentItem",
#       "anchor": "class-commentitem",
#       "kind": "class"
#     },
#     {
#       "id": "instructionitem",
#       "name": "InstructionItem",
#       "anchor": "class-instructionitem",
#       "kind": "class"
#     }
#   ]
# }
# === /NAVMAP ===

"""Immutable value types describing tokenized G-code source lines.

The tokenizer groups physical lines into :class:`SourceLine` records that keep
comments and instructions in two separate tuples. Downstream consumers (the
merge iterator and the display assembler) only ever read these values, so every
type here is a frozen, slotted dataclass that can be shared freely.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Union

__all__ = [
    "Argument",
    "Comment",
    "CommentItem",
    "DisplayItem",
    "Instruction",
    "InstructionItem",
    "SourceLine",
    "Span",
    "format_code",
]


@dataclass(frozen=True, slots=True)
class Span:
    """Source position of a token: 1-based line plus half-open character offsets."""

    line: int
    start: int = 0
    end: int = 0

    def __len__(self) -> int:
        return max(self.end - self.start, 0)


@dataclass(frozen=True, slots=True)
class Comment:
    """Comment text with its delimiters stripped."""

    line: int
    value: str
    span: Span | None = None


@dataclass(frozen=True, slots=True)
class Argument:
    """Word attached to an instruction, e.g. ``X10.5`` or an ``M117`` message.

    ``value`` is ``None`` for bare axis flags such as the ``X`` in ``G28 X``.
    """

    letter: str
    value: float | str | None = None
    span: Span | None = None

    def __str__(self) -> str:
        if self.value is None:
            return self.letter
        if isinstance(self.value, str):
            return self.value
        number = self.value
        if float(number).is_integer():
            return f"{self.letter}{int(number)}"
        return f"{self.letter}{number:g}"


def format_code(mnemonic: str, major: int, minor: int = 0) -> str:
    """Return the display code for an opcode (``G1`` or ``G2.3``)."""

    if minor == 0:
        return f"{mnemonic}{major}"
    return f"{mnemonic}{major}.{minor}"


@dataclass(frozen=True, slots=True)
class Instruction:
    """Single G-code instruction word plus its arguments."""

    mnemonic: str
    major: int
    minor: int = 0
    span: Span = field(default_factory=lambda: Span(line=0))
    arguments: tuple[Argument, ...] = ()

    @property
    def line(self) -> int:
        """Line number the instruction was read from."""

        return self.span.line

    @property
    def code(self) -> str:
        """Derived display code used as the documentation lookup key."""

        return format_code(self.mnemonic, self.major, self.minor)

    def __str__(self) -> str:
        parts = [self.code, *(str(argument) for argument in self.arguments)]
        return " ".join(part for part in parts if part)


@dataclass(frozen=True, slots=True)
class SourceLine:
    """One logical line produced by the tokenizer.

    ``comments`` may include comment-only lines that preceded the instructions;
    both tuples are in arrival order.
    """

    span: Span
    comments: tuple[Comment, ...] = ()
    instructions: tuple[Instruction, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.comments and not self.instructions


@dataclass(frozen=True, slots=True)
class CommentItem:
    """Display item wrapping a comment."""

    comment: Comment
    kind: Literal["comment"] = "comment"

    @property
    def line(self) -> int:
        return self.comment.line


@dataclass(frozen=True, slots=True)
class InstructionItem:
    """Display item wrapping an instruction and its derived code."""

    code: str
    instruction: Instruction
    kind: Literal["instruction"] = "instruction"

    @property
    def line(self) -> int:
        return self.instruction.line

    @classmethod
    def from_instruction(cls, instruction: Instruction) -> "InstructionItem":
        return cls(code=instruction.code, instruction=instruction)


DisplayItem = Union[CommentItem, InstructionItem]
