# === NAVMAP v1 ===
# {
#   "module": "GCodeDocs.docs.__init__",
#   "purpose": "Documentation namespace: front matter schema, parser and registry.",
#   "sections": []
# }
# === /NAVMAP ===

"""Documentation namespace: front matter schema, parser and registry.

Example:
    from GCodeDocs.docs import build_registry

    registry = build_registry("docs/gcode")
    record = registry.lookup("G1")
"""

from __future__ import annotations

from GCodeDocs.docs.frontmatter import FrontMatter, split_front_matter
from GCodeDocs.docs.parser import ParsedOpcodeDocument, parse_opcode_document, parse_opcode_file
from GCodeDocs.docs.records import (
    Example,
    OpcodeDescription,
    Parameter,
    ParameterValue,
    validate_opcode_description,
)
from GCodeDocs.docs.registry import (
    DEFAULT_EXTENSION,
    CodeConflict,
    DocumentationRegistry,
    DocumentFailure,
    DuplicateCodePolicy,
    build_registry,
    iter_document_paths,
)

__all__ = [
    "DEFAULT_EXTENSION",
    "CodeConflict",
    "DocumentFailure",
    "DocumentationRegistry",
    "DuplicateCodePolicy",
    "Example",
    "FrontMatter",
    "OpcodeDescription",
    "Parameter",
    "ParameterValue",
    "ParsedOpcodeDocument",
    "build_registry",
    "iter_document_paths",
    "parse_opcode_document",
    "parse_opcode_file",
    "split_front_matter",
    "validate_opcode_description",
]
