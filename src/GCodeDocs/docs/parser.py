# === NAVMAP v1 ===
# {
#   "module": "GCodeDocs.docs.parser",
#   "purpose": "Decode single documentation files into shared OpcodeDescription records.",
#   "sections": [
#     {
#       "id": "parsedopcodedocument",
#       "name": "ParsedOpcodeDocument",
#       "anchor": "class-parsedopcodedocument",
#       "kind": "class"
#     },
#     {
#       "id": "describe-validation-error",
#       "name": "_describe_validation_error",
#       "anchor": "function-describe-validation-error",
#       "kind": "function"
#     },
#     {
#       "id": "parse-opcode-document",
#       "name": "parse_opcode_document",
#       "anchor": "function-parse-opcode-document",
#       "kind": "function"
#     },
#     {
#       "id": "parse-opcode-file",
#       "name": "parse_opcode_file",
#       "anchor": "function-parse-opcode-file",
#       "kind": "function"
#     }
#   ]
# }
# === /NAVMAP ===

"""Decode single documentation files into shared ``OpcodeDescription`` records.

Parsing is pure: :func:`parse_opcode_document` works on text already in memory
and reports every schema problem as a :class:`~GCodeDocs.errors.DecodeError`.
:func:`parse_opcode_file` adds the file read; I/O errors are left to the caller
so the registry builder can tell unreadable files from malformed ones.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple

from pydantic import ValidationError

from GCodeDocs.docs.frontmatter import split_front_matter
from GCodeDocs.docs.records import OpcodeDescription, validate_opcode_description
from GCodeDocs.errors import DecodeError

__all__ = ["ParsedOpcodeDocument", "parse_opcode_document", "parse_opcode_file"]


@dataclass(frozen=True, slots=True)
class ParsedOpcodeDocument:
    """Decoded record together with the markdown body it came with."""

    record: OpcodeDescription
    body: str
    source: Optional[str] = None

    def code_entries(self) -> List[Tuple[str, OpcodeDescription]]:
        """Return one ``(code, record)`` pair per declared code.

        Every pair references the same record instance.
        """

        return [(code, self.record) for code in self.record.codes]


def _describe_validation_error(exc: ValidationError) -> Tuple[str, Optional[str]]:
    """Return a one-line message and the first offending field."""

    errors = exc.errors()
    if not errors:
        return str(exc), None
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    message = first.get("msg", "invalid value")
    if len(errors) > 1:
        message = f"{message} (+{len(errors) - 1} more)"
    return message, location or None


def parse_opcode_document(text: str, *, source: Optional[str] = None) -> ParsedOpcodeDocument:
    """Decode ``text`` into a record and its markdown body.

    Args:
        text: Complete document text (front matter followed by markdown).
        source: Optional label (usually the file path) used in error messages.

    Returns:
        The parsed document.

    Raises:
        DecodeError: If the front matter is missing or fails schema validation,
            including a header that declares no codes.
    """

    matter = split_front_matter(text, source=source)
    try:
        record = validate_opcode_description(matter.data)
    except ValidationError as exc:
        message, field = _describe_validation_error(exc)
        raise DecodeError(f"Invalid front matter: {message}", source=source, field=field) from exc
    return ParsedOpcodeDocument(record=record, body=matter.content, source=source)


def parse_opcode_file(path: Path) -> ParsedOpcodeDocument:
    """Read ``path`` as UTF-8 and decode it.

    Raises:
        OSError: If the file cannot be read.
        UnicodeDecodeError: If the file is not valid UTF-8.
        DecodeError: If the content cannot be decoded.
    """

    text = Path(path).read_text(encoding="utf-8")
    return parse_opcode_document(text, source=str(path))
