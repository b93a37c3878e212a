# === NAVMAP v1 ===
# {
#   "module": "GCodeDocs.config_loaders",
#   "purpose": "Loaders that hydrate GCodeDocs settings from YAML and TOML files.",
#   "sections": [
#     {
#       "id": "configloaderror",
#       "name": "ConfigLoadError",
#       "anchor": "class-configloaderror",
#       "kind": "class"
#     },
#     {
#       "id": "load-yaml-mapping",
#       "name": "load_yaml_mapping",
#       "anchor": "function-load-yaml-mapping",
#       "kind": "function"
#     },
#     {
#       "id": "load-toml-mapping",
#       "name": "load_toml_mapping",
#       "anchor": "function-load-toml-mapping",
#       "kind": "function"
#     },
#     {
#       "id": "load-config-mapping",
#       "name": "load_config_mapping",
#       "anchor": "function-load-config-mapping",
#       "kind": "function"
#     }
#   ]
# }
# === /NAVMAP ===

"""Loaders that hydrate GCodeDocs settings from YAML and TOML files.

Operators can keep the documentation directory, duplicate policy and logging
options in a small config file instead of repeating CLI flags. This module only
deserialises those files into plain mappings and wraps parser errors with
readable messages; validation happens in :mod:`GCodeDocs.settings`.
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict

import yaml

__all__ = [
    "ConfigLoadError",
    "load_config_mapping",
    "load_toml_mapping",
    "load_yaml_mapping",
]


@dataclass(slots=True)
class ConfigLoadError(RuntimeError):
    """Raised when configuration documents cannot be deserialized."""

    message: str
    stage: str = "config"

    def __str__(self) -> str:  # pragma: no cover - dataclass convenience
        return self.message


def load_yaml_mapping(raw: str) -> Any:
    """Deserialize a YAML configuration payload."""

    try:
        return yaml.safe_load(raw)
    except (yaml.YAMLError, ValueError) as exc:
        raise ConfigLoadError(f"Failed to parse YAML configuration payload: {exc}") from exc


def load_toml_mapping(raw: str) -> Any:
    """Deserialize a TOML configuration payload."""

    try:
        return tomllib.loads(raw)
    except (tomllib.TOMLDecodeError, ValueError, TypeError) as exc:
        raise ConfigLoadError(f"Failed to parse TOML configuration payload: {exc}") from exc


def load_config_mapping(path: Path) -> Dict[str, Any]:
    """Load a configuration mapping from ``path`` (``.yaml``/``.yml``/``.toml``).

    A ``[gcodedocs]`` table (or top-level ``gcodedocs`` key) is unwrapped so
    settings can live alongside other tools' configuration.
    """

    path = Path(path)
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigLoadError(f"Cannot read configuration file {path}: {exc}") from exc

    suffix = path.suffix.lower()
    if suffix == ".toml":
        data = load_toml_mapping(raw)
    elif suffix in {".yaml", ".yml"}:
        data = load_yaml_mapping(raw)
    else:
        raise ConfigLoadError(
            f"Unsupported configuration format {suffix or '<none>'} for {path}; "
            "use .toml, .yaml or .yml"
        )

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigLoadError(
            f"Configuration file {path} must contain a mapping; received {type(data).__name__}."
        )
    section = data.get("gcodedocs")
    if isinstance(section, dict):
        return dict(section)
    return data
