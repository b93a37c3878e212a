"""Tests for rendering display items against the documentation registry."""

from __future__ import annotations

import pytest

from GCodeDocs.display import UNKNOWN_MARKER, assemble, assemble_file, render_item
from GCodeDocs.docs.records import OpcodeDescription
from GCodeDocs.docs.registry import build_registry
from GCodeDocs.errors import GCodeFileError, format_error
from GCodeDocs.gcode.models import (
    Argument,
    Comment,
    CommentItem,
    Instruction,
    InstructionItem,
    SourceLine,
    Span,
)
from GCodeDocs.gcode.tokenizer import parse


def make_record(title: str, *codes: str) -> OpcodeDescription:
    return OpcodeDescription(tag=codes[0].lower(), title=title, brief=title, codes=list(codes))


def test_comment_renders_with_semicolon() -> None:
    line = render_item(CommentItem(Comment(line=4, value="layer 1")), {})

    assert line.kind == "comment"
    assert line.line == 4
    assert str(line) == "; layer 1"
    assert not line.is_known


def test_known_instruction_renders_title() -> None:
    record = make_record("Linear Move", "G0", "G1")
    instruction = Instruction(
        "G", 1, span=Span(line=2), arguments=(Argument("X", 10.0), Argument("F", 1500.5))
    )

    line = render_item(InstructionItem.from_instruction(instruction), {"G1": record})

    assert str(line) == "G1 X10 F1500.5 -- Linear Move"
    assert line.record is record
    assert line.code == "G1"


def test_unknown_instruction_is_not_an_error() -> None:
    instruction = Instruction("M", 9999, span=Span(line=1))

    line = render_item(InstructionItem.from_instruction(instruction), {})

    assert line.annotation == UNKNOWN_MARKER
    assert str(line) == "M9999 -- Unknown"
    assert line.record is None


def test_subcode_lookup_uses_formatted_code() -> None:
    record = make_record("Bed Leveling (Unified)", "G29.1")
    instruction = Instruction("G", 29, 1, span=Span(line=1))

    line = render_item(InstructionItem.from_instruction(instruction), {"G29.1": record})

    assert line.code == "G29.1"
    assert line.annotation == "Bed Leveling (Unified)"


def test_assemble_keeps_document_order() -> None:
    registry = {"G28": make_record("Auto Home", "G28")}
    lines = [
        SourceLine(
            span=Span(line=2),
            comments=(Comment(line=1, value="start"), Comment(line=2, value="home")),
            instructions=(Instruction("G", 28, span=Span(line=2)),),
        )
    ]

    assert [str(line) for line in assemble(lines, registry)] == [
        "; start",
        "; home",
        "G28 -- Auto Home",
    ]


def test_assemble_file_end_to_end(docs_dir, gcode_file) -> None:
    registry = build_registry(docs_dir)

    rendered = [str(line) for line in assemble_file(gcode_file, registry)]

    assert rendered == [
        "; generated by slicer",
        "; home all axes",
        "G28 -- Auto Home",
        "; prime the nozzle",
        "M104 S200 -- Set Hotend Temperature",
        "G1 X10 Y10 F3000 -- Linear Move",
        "M9999 P1 -- Unknown",
        "; done",
    ]


def test_assemble_matches_parse(docs_dir, gcode_file) -> None:
    registry = build_registry(docs_dir)
    text = gcode_file.read_text(encoding="utf-8")

    from_text = [str(line) for line in assemble(parse(text), registry)]
    from_file = [str(line) for line in assemble_file(gcode_file, registry)]

    assert from_text == from_file


def test_assemble_file_missing_input(tmp_path) -> None:
    with pytest.raises(GCodeFileError) as excinfo:
        assemble_file(tmp_path / "missing.gcode", {})

    assert excinfo.value.stage == "gcode"
    assert format_error(excinfo.value).startswith("[gcode] Cannot read G-code file")
