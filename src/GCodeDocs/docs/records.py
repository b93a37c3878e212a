# === NAVMAP v1 ===
# {
#   "module": "GCodeDocs.docs.records",
#   "purpose": "Pydantic schema for G-code documentation front matter.",
#   "sections": [
#     {
#       "id": "as-tuple",
#       "name": "_as_tuple",
#       "anchor": "function-as-tuple",
#       "kind": "function"
#     },
#     {
#       "id": "parametervalue",
#       "name": "ParameterValue",
#       "anchor": "class-parametervalue",
#       "kind": "class"
#     },
#     {
#       "id": "parameter",
#       "name": "Parameter",
#       "anchor": "class-parameter",
#       "kind": "class"
#     },
#     {
#       "id": "example",
#       "name": "Example",
#       "anchor": "class-example",
#       "kind": "class"
#     },
#     {
#       "id": "opcodedescription",
#       "name": "OpcodeDescription",
#       "anchor": "class-opcodedescription",
#       "kind": "class"
#     },
#     {
#       "id": "validate-opcode-description",
#       "name": "validate_opcode_description",
#       "anchor": "function-validate-opcode-description",
#       "kind": "function"
#     }
#   ]
# }
# === /NAVMAP ===

"""Pydantic schema for G-code documentation front matter.

Each documentation page declares a YAML header describing one or more opcode
codes. Authors are inconsistent about scalars versus lists (``group: motion``
versus ``group: [motion, planner]``) and YAML happily turns ``since: 2.0`` into
a float, so the models below normalise both before validation. Records are
frozen: the registry shares one instance between every code it documents.
"""

from __future__ import annotations

from datetime import date
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

__all__ = [
    "Example",
    "OpcodeDescription",
    "Parameter",
    "ParameterValue",
    "validate_opcode_description",
]


def _as_text(value: Any) -> Any:
    """Render numeric and date YAML scalars as strings; leave everything else alone."""

    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, date):
        return value.isoformat()
    return value


def _as_tuple(value: Any) -> Any:
    """Wrap single values so "single or list" fields always validate as tuples."""

    if value is None:
        return None
    if isinstance(value, (list, tuple)):
        return tuple(value)
    return (value,)


def _as_text_tuple(value: Any) -> Any:
    wrapped = _as_tuple(value)
    if wrapped is None:
        return None
    return tuple(_as_text(item) for item in wrapped)


class ParameterValue(BaseModel):
    """Allowed value of a parameter, e.g. ``tag: pos`` with ``type: float``."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    tag: Optional[str] = Field(None, description="Placeholder name for the value")
    type_: Optional[str] = Field(None, alias="type", description="Type label (float, int, ...)")

    @field_validator("tag", "type_", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> Any:
        return _as_text(value)


class Parameter(BaseModel):
    """Single documented parameter of an opcode."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    tag: str = Field(..., min_length=1, description="Parameter letter or name")
    optional: bool = Field(False, description="Whether the parameter may be omitted")
    since: Optional[str] = Field(None, description="Firmware version introducing it")
    description: Optional[str] = Field(None, description="Human-readable description")
    requires: Optional[str] = Field(None, description="Build option the parameter depends on")
    values: Optional[tuple[ParameterValue, ...]] = Field(None, description="Allowed values")

    @field_validator("tag", "since", "requires", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> Any:
        return _as_text(value)

    @field_validator("optional", mode="before")
    @classmethod
    def _coerce_optional(cls, value: Any) -> Any:
        return False if value is None else value

    @field_validator("values", mode="before")
    @classmethod
    def _coerce_values(cls, value: Any) -> Any:
        return _as_tuple(value)


class Example(BaseModel):
    """Usage example: optional prose before and after a code listing."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    pre: Optional[tuple[str, ...]] = None
    code: Optional[tuple[str, ...]] = None
    post: Optional[tuple[str, ...]] = None

    @field_validator("pre", "code", "post", mode="before")
    @classmethod
    def _single_or_list(cls, value: Any) -> Any:
        return _as_text_tuple(value)


class OpcodeDescription(BaseModel):
    """Decoded front matter of one documentation page.

    Attributes:
        tag: Page identifier (``g000``).
        title: Short title shown next to matching instructions.
        brief: One-sentence summary.
        codes: Every opcode code the page documents; never empty.

    Examples:
        >>> record = OpcodeDescription(
        ...     tag="g000", title="Linear Move", brief="Move in a line", codes=["G0", "G1"]
        ... )
        >>> record.codes
        ('G0', 'G1')
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    tag: str = Field(..., min_length=1, description="Page identifier")
    title: str = Field(..., description="Title displayed next to instructions")
    brief: str = Field(..., description="One-line summary")
    author: Optional[str] = Field(None, description="Page author")
    experimental: Optional[bool] = Field(None, description="Feature flagged as experimental")
    since: Optional[str] = Field(None, description="Firmware version introducing the code")
    requires: Optional[str] = Field(None, description="Build option required by the code")
    parameters: Optional[tuple[Parameter, ...]] = Field(None, description="Ordered parameters")
    videos: Optional[tuple[str, ...]] = Field(None, description="Related video links")
    group: Optional[tuple[str, ...]] = Field(None, description="Topic groups")
    codes: tuple[str, ...] = Field(..., min_length=1, description="Documented opcode codes")
    notes: Optional[tuple[str, ...]] = Field(None, description="Additional notes")
    examples: Optional[tuple[Example, ...]] = Field(None, description="Usage examples")

    @field_validator("tag", "title", "brief", "author", "since", "requires", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> Any:
        return _as_text(value)

    @field_validator("videos", "group", "notes", mode="before")
    @classmethod
    def _coerce_text_lists(cls, value: Any) -> Any:
        return _as_text_tuple(value)

    @field_validator("parameters", "examples", mode="before")
    @classmethod
    def _coerce_model_lists(cls, value: Any) -> Any:
        return _as_tuple(value)

    @field_validator("codes", mode="before")
    @classmethod
    def _coerce_codes(cls, value: Any) -> Any:
        """Accept a single code, normalise case and drop blanks and duplicates.

        Raises:
            ValueError: If ``codes`` is not a string or a list, or holds
                anything other than strings and numbers.
        """

        if value is None:
            return value
        if isinstance(value, (str, int, float)):
            value = [value]
        if not isinstance(value, (list, tuple)):
            raise ValueError("codes must be a string or a list of strings")
        seen: dict[str, None] = {}
        for item in value:
            if isinstance(item, bool) or not isinstance(item, (str, int, float)):
                raise ValueError(f"codes entries must be strings; got {type(item).__name__}")
            code = str(item).strip().upper()
            if code:
                seen.setdefault(code, None)
        return tuple(seen)

    @property
    def primary_code(self) -> str:
        """First declared code, used as the page's display name."""

        return self.codes[0]

    @property
    def parameter_tags(self) -> tuple[str, ...]:
        return tuple(parameter.tag for parameter in self.parameters or ())


def validate_opcode_description(data: dict) -> OpcodeDescription:
    """Validate a front matter mapping into an :class:`OpcodeDescription`.

    Raises:
        pydantic.ValidationError: If required fields are missing, values have the
            wrong type, or ``codes`` is empty.
    """

    return OpcodeDescription.model_validate(data)
