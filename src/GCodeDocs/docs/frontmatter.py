"""Split YAML front matter from the markdown body of a documentation file.

Marlin documentation pages start with a ``---`` delimited YAML block followed
by free-form markdown. Only the header is interpreted here; the body is handed
back untouched so an external renderer can deal with it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

import yaml

from GCodeDocs.errors import DecodeError

__all__ = ["FRONT_MATTER_DELIMITER", "FrontMatter", "split_front_matter"]

FRONT_MATTER_DELIMITER = "---"


@dataclass(frozen=True, slots=True)
class FrontMatter:
    """Decoded metadata mapping plus the raw markdown body."""

    data: Dict[str, Any]
    content: str


def split_front_matter(text: str, *, source: Optional[str] = None) -> FrontMatter:
    """Return the YAML header and body of ``text``.

    Raises:
        DecodeError: If the header is missing, unterminated, not valid YAML, or
            does not decode to a mapping.
    """

    lines = text.lstrip("\ufeff").splitlines(keepends=True)
    index = 0
    while index < len(lines) and not lines[index].strip():
        index += 1

    if index >= len(lines) or lines[index].strip() != FRONT_MATTER_DELIMITER:
        raise DecodeError(
            "Missing front matter header",
            source=source,
            hint=f"Start the document with a '{FRONT_MATTER_DELIMITER}' delimited YAML block",
        )

    header_start = index + 1
    for closing in range(header_start, len(lines)):
        if lines[closing].strip() == FRONT_MATTER_DELIMITER:
            break
    else:
        raise DecodeError("Unterminated front matter header", source=source)

    header = "".join(lines[header_start:closing])
    try:
        data = yaml.safe_load(header)
    except (yaml.YAMLError, ValueError) as exc:
        raise DecodeError(f"Invalid YAML in front matter: {exc}", source=source) from exc

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise DecodeError(
            f"Front matter must be a mapping; received {type(data).__name__}",
            source=source,
        )

    body = "".join(lines[closing + 1 :])
    return FrontMatter(data=data, content=body)
