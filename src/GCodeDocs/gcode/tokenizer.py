# === NAVMAP v1 ===
# {
#   "module": "GCodeDocs.gcode.tokenizer",
#   "purpose": "Tokenize Marlin-flavoured G-code text into SourceLine records.",
#   "sections": [
#     {
#       "id": "split-code-number",
#       "name": "_split_code_number",
#       "anchor": "function-split-code-number",
#       "kind": "function"
#     },
#     {
#       "id": "tokenize-line",
#       "name": "tokenize_line",
#       "anchor": "function-tokenize-line",
#       "kind": "function"
#     },
#     {
#       "id": "parse",
#       "name": "parse",
#       "anchor": "function-parse",
#       "kind": "function"
#     }
#   ]
# }
# === /NAVMAP ===

"""Tokenize Marlin-flavoured G-code text into :class:`SourceLine` records.

The grammar is intentionally forgiving: a word is a letter followed by an
optional number, ``G`` and ``M`` words always open a new instruction while
``T`` and ``D`` words only do so when they lead a physical line (``M104 T0``
keeps ``T0`` as an argument). ``N`` line numbers and ``*`` checksums are
dropped. Comments are either ``;`` to end of line or ``( ... )`` inline.

Lines holding only comments are buffered and attached to the next line that
carries instructions, so a single :class:`SourceLine` may span several physical
lines. Anything the scanner does not recognise is skipped and reported at debug
level; validating G-code is out of scope.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator
from typing import List, Optional, Tuple

from GCodeDocs.gcode.models import Argument, Comment, Instruction, SourceLine, Span

__all__ = [
    "COMMAND_LETTERS",
    "LEADING_COMMAND_LETTERS",
    "STRING_ARGUMENT_CODES",
    "parse",
    "tokenize_line",
]

_LOGGER = logging.getLogger(__name__)

COMMAND_LETTERS: frozenset[str] = frozenset({"G", "M"})
LEADING_COMMAND_LETTERS: frozenset[str] = frozenset({"T", "D"})
STRING_ARGUMENT_CODES: frozenset[str] = frozenset(
    {"M23", "M28", "M30", "M32", "M117", "M118", "M928"}
)

_TOKEN_RE = re.compile(
    r"""
    (?P<ws>\s+)
  | ;(?P<semi>.*)
  | \((?P<paren>[^)]*)\)?
  | (?P<checksum>\*\d*)
  | (?P<letter>[A-Za-z])[ \t]*(?P<number>[+-]?(?:\d+(?:\.\d*)?|\.\d+))?
    """,
    re.VERBOSE,
)


def _split_code_number(text: str) -> Optional[Tuple[int, int]]:
    """Return ``(major, minor)`` for a command number such as ``29.1``."""

    if not text or text[0] in "+-":
        return None
    integral, _, fractional = text.partition(".")
    major = int(integral) if integral else 0
    minor = int(fractional) if fractional else 0
    return major, minor


def tokenize_line(
    text: str, *, line: int, offset: int = 0
) -> Tuple[List[Comment], List[Instruction]]:
    """Split one physical line into its comments and instructions.

    Args:
        text: Line content without the trailing newline.
        line: 1-based line number recorded on every token.
        offset: Position of ``text`` within the whole document.

    Returns:
        ``(comments, instructions)`` in arrival order.
    """

    comments: List[Comment] = []
    instructions: List[Instruction] = []

    mnemonic: Optional[str] = None
    major = minor = 0
    start = 0
    arguments: List[Argument] = []

    def _close(end: int) -> None:
        nonlocal mnemonic, arguments
        if mnemonic is None:
            return
        instructions.append(
            Instruction(
                mnemonic=mnemonic,
                major=major,
                minor=minor,
                span=Span(line=line, start=offset + start, end=offset + end),
                arguments=tuple(arguments),
            )
        )
        mnemonic = None
        arguments = []

    last_end = 0
    pos = 0
    length = len(text)
    while pos < length:
        match = _TOKEN_RE.match(text, pos)
        if match is None:
            _LOGGER.debug("Skipping unexpected character %r at line %d", text[pos], line)
            pos += 1
            continue

        token_start, pos = match.span()
        if match.group("ws") is not None or match.group("checksum") is not None:
            continue

        semi = match.group("semi")
        paren = match.group("paren")
        if semi is not None or paren is not None:
            note = (semi if semi is not None else paren).strip()
            comments.append(
                Comment(line=line, value=note, span=Span(line, offset + token_start, offset + pos))
            )
            continue

        letter = match.group("letter").upper()
        number = match.group("number")

        if letter == "N":
            continue

        opens = letter in COMMAND_LETTERS or (
            letter in LEADING_COMMAND_LETTERS and mnemonic is None and not instructions
        )
        code_number = _split_code_number(number) if opens and number else None
        if code_number is not None:
            _close(last_end)
            mnemonic = letter
            major, minor = code_number
            start = token_start
            last_end = pos
            if f"{letter}{major}" in STRING_ARGUMENT_CODES and minor == 0:
                stop = text.find(";", pos)
                stop = length if stop < 0 else stop
                message = text[pos:stop].strip()
                if message:
                    arguments.append(
                        Argument(
                            letter="",
                            value=message,
                            span=Span(line, offset + pos, offset + stop),
                        )
                    )
                    last_end = pos = stop
            continue

        if mnemonic is None:
            _LOGGER.debug("Dropping orphan word %s%s at line %d", letter, number or "", line)
            continue

        value: float | None = float(number) if number else None
        arguments.append(
            Argument(
                letter=letter,
                value=value,
                span=Span(line, offset + token_start, offset + pos),
            )
        )
        last_end = pos

    _close(last_end)
    return comments, instructions


def parse(text: str) -> Iterator[SourceLine]:
    """Yield :class:`SourceLine` records for ``text`` lazily.

    Comment-only lines are attached to the next line that carries instructions;
    trailing comments at the end of the document form a final comment-only
    source line.
    """

    pending: List[Comment] = []
    pending_start: Optional[int] = None
    pending_line = 0
    pending_end = 0
    offset = 0

    for number, raw in enumerate(text.splitlines(keepends=True), start=1):
        body = raw.rstrip("\r\n")
        comments, instructions = tokenize_line(body, line=number, offset=offset)
        end = offset + len(body)
        if instructions:
            first = pending_start if pending_start is not None else offset
            yield SourceLine(
                span=Span(line=number, start=first, end=end),
                comments=tuple(pending + comments),
                instructions=tuple(instructions),
            )
            pending = []
            pending_start = None
        elif comments:
            if pending_start is None:
                pending_start = offset
            pending.extend(comments)
            pending_line = number
            pending_end = end
        offset += len(raw)

    if pending:
        yield SourceLine(
            span=Span(line=pending_line, start=pending_start or 0, end=pending_end),
            comments=tuple(pending),
        )
