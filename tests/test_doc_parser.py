"""Tests for front matter splitting and single-document decoding."""

from __future__ import annotations

import pytest

from GCodeDocs.docs.frontmatter import split_front_matter
from GCodeDocs.docs.parser import parse_opcode_document, parse_opcode_file
from GCodeDocs.errors import DecodeError

DOCUMENT = """---
tag: g000
title: Linear Move
brief: Add a straight line movement to the planner
codes: [G0, G1]
---

Body *markdown* text.
"""


def test_split_front_matter_returns_header_and_body() -> None:
    matter = split_front_matter(DOCUMENT)

    assert matter.data["title"] == "Linear Move"
    assert matter.content == "\nBody *markdown* text.\n"


def test_split_tolerates_bom_and_leading_blank_lines() -> None:
    matter = split_front_matter("\ufeff\n\n---\ntitle: x\n---\nbody")

    assert matter.data == {"title": "x"}
    assert matter.content == "body"


def test_empty_header_is_an_empty_mapping() -> None:
    assert split_front_matter("---\n---\n").data == {}


@pytest.mark.parametrize(
    "text, message",
    [
        ("# Title only\n", "Missing front matter header"),
        ("", "Missing front matter header"),
        ("---\ntitle: x\n", "Unterminated front matter header"),
        ("---\ntitle: [unclosed\n---\n", "Invalid YAML"),
        ("---\nsince: 2020-13-01\n---\n", "Invalid YAML"),
        ("---\n- a\n- b\n---\n", "must be a mapping"),
    ],
)
def test_bad_front_matter_raises_decode_error(text: str, message: str) -> None:
    with pytest.raises(DecodeError) as excinfo:
        split_front_matter(text, source="page.md")

    assert message in str(excinfo.value)
    assert str(excinfo.value).startswith("page.md: ")


def test_parse_document_fans_out_to_shared_record() -> None:
    document = parse_opcode_document(DOCUMENT, source="g000.md")

    entries = document.code_entries()

    assert [code for code, _ in entries] == ["G0", "G1"]
    assert entries[0][1] is entries[1][1]
    assert entries[0][1] is document.record
    assert "Body" in document.body
    assert document.source == "g000.md"


def test_parse_document_rejects_empty_codes() -> None:
    text = DOCUMENT.replace("codes: [G0, G1]", "codes: []")

    with pytest.raises(DecodeError) as excinfo:
        parse_opcode_document(text, source="g000.md")

    assert excinfo.value.field == "codes"
    assert excinfo.value.stage == "docs"


def test_parse_document_reports_missing_required_field() -> None:
    text = DOCUMENT.replace("title: Linear Move\n", "")

    with pytest.raises(DecodeError) as excinfo:
        parse_opcode_document(text)

    assert excinfo.value.field == "title"
    assert "Invalid front matter" in str(excinfo.value)


def test_parse_file_reads_utf8(tmp_path) -> None:
    path = tmp_path / "m117.md"
    path.write_text(DOCUMENT.replace("Linear Move", "Déplacement"), encoding="utf-8")

    document = parse_opcode_file(path)

    assert document.record.title == "Déplacement"
    assert document.source == str(path)


def test_parse_file_propagates_read_errors(tmp_path) -> None:
    with pytest.raises(OSError):
        parse_opcode_file(tmp_path / "missing.md")
