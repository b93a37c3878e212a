"""
Structured logging utilities shared by the registry builder and the CLI.

Components log through :class:`StructuredLogger` so that per-document failures
carry machine-readable fields (``doc_path``, ``error_code``, ...). The fields
are rendered inline on the console or as one JSON object per line when the JSON
format is selected.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

__all__ = [
    "ConsoleFormatter",
    "JSONFormatter",
    "StructuredLogger",
    "get_logger",
    "log_event",
]

_MANAGED_FLAG = "_gcodedocs_managed"


class JSONFormatter(logging.Formatter):
    """Formatter emitting one JSON object per log record."""

    def format(self, record: logging.LogRecord) -> str:
        """Render ``record`` as a JSON string including structured fields."""

        now = datetime.now(timezone.utc)
        payload: Dict[str, Any] = {
            "timestamp": now.isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        extra_fields = getattr(record, "extra_fields", None)
        if isinstance(extra_fields, dict):
            payload.update(extra_fields)
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


class ConsoleFormatter(logging.Formatter):
    """Human-readable formatter appending structured fields as ``key=value`` pairs."""

    def __init__(self) -> None:
        super().__init__("%(levelname)s: %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        base = super().format(record)
        extra_fields = getattr(record, "extra_fields", None)
        if not isinstance(extra_fields, dict) or not extra_fields:
            return base
        rendered = " ".join(f"{key}={value}" for key, value in extra_fields.items())
        return f"{base} [{rendered}]"


class StructuredLogger(logging.LoggerAdapter):
    """Logger adapter that enriches structured logs with shared context."""

    def __init__(
        self, logger: logging.Logger, base_fields: Optional[Dict[str, Any]] = None
    ) -> None:
        super().__init__(logger, {})
        self.base_fields: Dict[str, Any] = dict(base_fields or {})

    def process(self, msg: str, kwargs: Dict[str, Any]) -> tuple[str, Dict[str, Any]]:
        """Merge adapter context into ``extra`` metadata for structured output."""

        extra = kwargs.setdefault("extra", {})
        fields = dict(self.base_fields)
        extra_fields = extra.get("extra_fields")
        if isinstance(extra_fields, dict):
            fields.update(extra_fields)
        extra["extra_fields"] = fields
        kwargs["extra"] = extra
        return msg, kwargs

    def bind(self, **fields: object) -> "StructuredLogger":
        """Attach additional persistent fields to the adapter and return ``self``."""

        self.base_fields.update({k: v for k, v in fields.items() if v is not None})
        return self

    def child(self, **fields: object) -> "StructuredLogger":
        """Create a new adapter inheriting context with optional overrides."""

        merged = dict(self.base_fields)
        merged.update({k: v for k, v in fields.items() if v is not None})
        return StructuredLogger(self.logger, merged)


def get_logger(
    name: str,
    level: str = "INFO",
    *,
    log_format: str = "console",
    base_fields: Optional[Dict[str, Any]] = None,
) -> StructuredLogger:
    """Return a structured logger writing to stderr in ``log_format``."""

    logger = logging.getLogger(name)
    formatter: logging.Formatter = (
        JSONFormatter() if str(log_format).lower() == "json" else ConsoleFormatter()
    )
    managed = [handler for handler in logger.handlers if getattr(handler, _MANAGED_FLAG, False)]
    if managed:
        for handler in managed:
            handler.setFormatter(formatter)
            if isinstance(handler, logging.StreamHandler):
                handler.setStream(sys.stderr)
    elif not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(formatter)
        setattr(handler, _MANAGED_FLAG, True)
        logger.addHandler(handler)
        logger.propagate = False
    logger.setLevel(getattr(logging, str(level).upper(), logging.INFO))
    return StructuredLogger(logger, base_fields)


def log_event(logger: logging.Logger, level: str, message: str, **fields: object) -> None:
    """Emit a structured log record using the ``extra_fields`` convention.

    Warnings and errors always carry ``stage`` and an upper-cased
    ``error_code`` (``UNKNOWN`` when not supplied).
    """

    normalised_level = str(level).lower()
    base_stage = getattr(logger, "base_fields", {}).get("stage")
    if "stage" not in fields and (base_stage or normalised_level in {"warning", "error"}):
        fields["stage"] = base_stage or "unknown"
    if normalised_level in {"warning", "error"}:
        error_code = fields.get("error_code")
        fields["error_code"] = str(error_code).upper() if error_code else "UNKNOWN"

    emitter = getattr(logger, normalised_level, None)
    if not callable(emitter):
        raise AttributeError(f"Logger has no level '{level}'")
    emitter(message, extra={"extra_fields": fields})
