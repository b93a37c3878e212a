# === NAVMAP v1 ===
# {
#   "module": "GCodeDocs.settings",
#   "purpose": "Pydantic v2 settings for the GCodeDocs viewer and registry builder.",
#   "sections": [
#     {
#       "id": "loglevel",
#       "name": "LogLevel",
#       "anchor": "class-loglevel",
#       "kind": "class"
#     },
#     {
#       "id": "logformat",
#       "name": "LogFormat",
#       "anchor": "class-logformat",
#       "kind": "class"
#     },
#     {
#       "id": "configfilesettingssource",
#       "name": "ConfigFileSettingsSource",
#       "anchor": "class-configfilesettingssource",
#       "kind": "class"
#     },
#     {
#       "id": "viewersettings",
#       "name": "ViewerSettings",
#       "anchor": "class-viewersettings",
#       "kind": "class"
#     },
#     {
#       "id": "load-settings",
#       "name": "load_settings",
#       "anchor": "function-load-settings",
#       "kind": "function"
#     }
#   ]
# }
# === /NAVMAP ===

"""
Pydantic v2 settings for the GCodeDocs viewer and registry builder.

Settings are layered as CLI overrides > environment (``GCODEDOCS_`` prefix) >
config file (YAML or TOML) > defaults. The config file is plugged in as a
custom pydantic-settings source so the precedence is handled in one place.
"""

from __future__ import annotations

import contextvars
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Type

from pydantic import Field, field_validator
from pydantic.fields import FieldInfo
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from GCodeDocs.config_loaders import ConfigLoadError, load_config_mapping
from GCodeDocs.docs.registry import DEFAULT_EXTENSION, DuplicateCodePolicy

__all__ = [
    "ConfigFileSettingsSource",
    "LogFormat",
    "LogLevel",
    "ViewerSettings",
    "load_settings",
]

_CONFIG_FILE: contextvars.ContextVar[Optional[Path]] = contextvars.ContextVar(
    "gcodedocs_config_file", default=None
)


class LogLevel(str, Enum):
    """Supported logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


class LogFormat(str, Enum):
    """Supported log output formats."""

    CONSOLE = "console"
    JSON = "json"


class ConfigFileSettingsSource(PydanticBaseSettingsSource):
    """Settings source reading values from a YAML/TOML config file."""

    def __init__(self, settings_cls: Type[BaseSettings], path: Optional[Path]) -> None:
        super().__init__(settings_cls)
        self.path = path
        self._data: Dict[str, Any] = {}
        if path is None:
            return
        data = load_config_mapping(path)
        unknown = sorted(key for key in data if key not in settings_cls.model_fields)
        if unknown:
            raise ConfigLoadError(
                f"Unknown configuration fields in {path}: {', '.join(unknown)}"
            )
        docs_dir = data.get("docs_dir")
        if docs_dir is not None and not Path(str(docs_dir)).expanduser().is_absolute():
            data["docs_dir"] = Path(path).parent / str(docs_dir)
        self._data = data

    def get_field_value(self, field: FieldInfo, field_name: str) -> Tuple[Any, str, bool]:
        return self._data.get(field_name), field_name, False

    def __call__(self) -> Dict[str, Any]:
        return dict(self._data)


class ViewerSettings(BaseSettings):
    """Configuration shared by the CLI commands."""

    model_config = SettingsConfigDict(
        env_prefix="GCODEDOCS_",
        case_sensitive=False,
        extra="ignore",
    )

    docs_dir: Path = Field(
        Path("docs/gcode"),
        validate_default=True,
        description="Directory holding one markdown page per opcode",
    )
    docs_extension: str = Field(DEFAULT_EXTENSION, description="Extension of documentation pages")
    duplicate_policy: DuplicateCodePolicy = Field(
        DuplicateCodePolicy.FIRST_WINS,
        description="Resolution when two pages declare the same code",
    )
    workers: int = Field(1, ge=1, description="Threads used to parse documentation pages")
    log_level: LogLevel = Field(LogLevel.INFO, description="Root logging level")
    log_format: LogFormat = Field(LogFormat.CONSOLE, description="Console text or JSON lines")
    preview_limit: Optional[int] = Field(
        None, ge=1, description="Maximum number of display lines printed by 'view'"
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: Type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> Tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            ConfigFileSettingsSource(settings_cls, _CONFIG_FILE.get()),
        )

    @field_validator("docs_dir", mode="before")
    @classmethod
    def expand_paths(cls, v: Any) -> Any:
        """Expand user home and make absolute."""
        if isinstance(v, str):
            return Path(v).expanduser().resolve()
        if isinstance(v, Path):
            return v.expanduser().resolve()
        return v

    @field_validator("docs_extension")
    @classmethod
    def normalize_extension(cls, value: str) -> str:
        value = value.strip().lower()
        if not value or value == ".":
            raise ValueError("docs_extension must not be empty")
        return value if value.startswith(".") else f".{value}"

    @field_validator("log_level", mode="before")
    @classmethod
    def upper_log_level(cls, value: Any) -> Any:
        return value.upper() if isinstance(value, str) else value

    def registry_options(self) -> Dict[str, Any]:
        """Keyword arguments for :func:`GCodeDocs.docs.registry.build_registry`."""

        return {
            "extension": self.docs_extension,
            "duplicate_policy": self.duplicate_policy,
            "workers": self.workers,
        }


def load_settings(config_path: Optional[Path] = None, **overrides: Any) -> ViewerSettings:
    """Build :class:`ViewerSettings` from overrides, environment and ``config_path``.

    ``None`` overrides are ignored so unset CLI options fall through to the
    lower layers.

    Raises:
        ConfigLoadError: If the config file cannot be read or has unknown keys.
        pydantic.ValidationError: If a value fails validation.
    """

    explicit = {key: value for key, value in overrides.items() if value is not None}
    token = _CONFIG_FILE.set(Path(config_path) if config_path is not None else None)
    try:
        return ViewerSettings(**explicit)
    finally:
        _CONFIG_FILE.reset(token)
