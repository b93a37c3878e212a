"""Tests for structured logging helpers and error formatting."""

from __future__ import annotations

import io
import json
import logging

import pytest

from GCodeDocs.errors import DecodeError, DuplicateCodeError, RegistryBuildError, format_error
from GCodeDocs.logging import (
    ConsoleFormatter,
    JSONFormatter,
    StructuredLogger,
    get_logger,
    log_event,
)


@pytest.fixture
def captured():
    stream = io.StringIO()
    logger = logging.getLogger("tests.gcodedocs.structured")
    handler = logging.StreamHandler(stream)
    handler.setFormatter(JSONFormatter())
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    yield logger, stream
    logger.removeHandler(handler)


def test_log_event_adds_stage_and_error_code(captured) -> None:
    logger, stream = captured
    structured = StructuredLogger(logger, {"stage": "registry"})

    log_event(structured, "warning", "Skipping documentation file", doc_path="a.md")

    payload = json.loads(stream.getvalue())
    assert payload["message"] == "Skipping documentation file"
    assert payload["level"] == "WARNING"
    assert payload["stage"] == "registry"
    assert payload["error_code"] == "UNKNOWN"
    assert payload["doc_path"] == "a.md"


def test_log_event_uppercases_error_code(captured) -> None:
    logger, stream = captured

    log_event(logger, "error", "Failed", error_code="decode_error")

    payload = json.loads(stream.getvalue())
    assert payload["error_code"] == "DECODE_ERROR"
    assert payload["stage"] == "unknown"


def test_log_event_rejects_unknown_level(captured) -> None:
    logger, _ = captured
    with pytest.raises(AttributeError):
        log_event(logger, "loud", "nope")


def test_child_and_bind_merge_fields(captured) -> None:
    logger, stream = captured
    parent = StructuredLogger(logger, {"stage": "registry"})
    child = parent.child(doc_path="g000.md").bind(codes=2)

    log_event(child, "info", "Parsed")

    payload = json.loads(stream.getvalue())
    assert payload["doc_path"] == "g000.md"
    assert payload["codes"] == 2
    assert "doc_path" not in parent.base_fields


def test_console_formatter_appends_fields() -> None:
    record = logging.LogRecord("x", logging.INFO, __file__, 1, "Built", None, None)
    record.extra_fields = {"codes": 3}

    assert ConsoleFormatter().format(record) == "INFO: Built [codes=3]"


def test_get_logger_installs_single_handler() -> None:
    name = "tests.gcodedocs.managed"
    first = get_logger(name, "DEBUG")
    second = get_logger(name, "WARNING", log_format="json")
    try:
        assert len(first.logger.handlers) == 1
        assert second.logger.level == logging.WARNING
        assert isinstance(second.logger.handlers[0].formatter, JSONFormatter)
    finally:
        for handler in list(first.logger.handlers):
            first.logger.removeHandler(handler)


def test_format_error_includes_stage_and_hint() -> None:
    error = RegistryBuildError("Documentation directory x does not exist", hint="Pass --docs-dir")

    assert format_error(error) == (
        "[registry] Documentation directory x does not exist. Hint: Pass --docs-dir"
    )
    assert format_error(ValueError("plain")) == "[gcodedocs] plain."


def test_decode_error_message_mentions_source_and_field() -> None:
    error = DecodeError("Invalid front matter", source="g000.md", field="codes")

    assert str(error) == "g000.md: Invalid front matter (field 'codes')"
    assert isinstance(error, ValueError)


def test_duplicate_code_error_is_a_registry_error() -> None:
    error = DuplicateCodeError("G1 twice", code="G1", sources=("a.md", "b.md"))

    assert isinstance(error, RegistryBuildError)
    assert error.stage == "registry"
    assert str(error) == "G1 twice"
