from __future__ import annotations

import codecs
import json
import os
import re
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.config_models import (
    DEFAULT_DATE_PATTERN,
    DEFAULT_EXPORT_LABEL,
    DEFAULT_HEADER_MARKERS,
    HeaderRules,
    TrackerConfig,
)

"""Config loader.

Responsibilities:
- Load YAML config (config/packtrack.yml by default)
- Validate it against the bundled JSON schema
- Apply defaults for missing keys
- Apply environment overrides (PACKTRACK_STATE_DIR / PACKTRACK_EXPORT_DIR /
  PACKTRACK_LOGS_DIR); the environment wins over YAML
"""

__all__ = [
    "ConfigError",
    "DEFAULT_CONFIG_PATH",
    "SCHEMA_PATH",
    "load_config",
]

DEFAULT_CONFIG_PATH = Path("config/packtrack.yml")
SCHEMA_PATH = Path(__file__).with_name("config_schema.json")

ENV_OVERRIDES = {
    "PACKTRACK_STATE_DIR": "state_directory",
    "PACKTRACK_EXPORT_DIR": "export_directory",
    "PACKTRACK_LOGS_DIR": "logs_directory",
}


class ConfigError(Exception):
    pass


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the bundled JSON schema.

    Raises:
        ConfigError: schema file missing/invalid, or the data violates it
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")
    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config root must be a mapping: {path}")
    return data


def load_config(path: Path | None = None, env: dict[str, str] | None = None) -> TrackerConfig:
    """Load and validate the tracker configuration.

    Args:
        path: explicit config path. When None the default path is used and a
            missing file means built-in defaults; an explicit missing path is
            an error.
        env: environment mapping (defaults to os.environ)
    """
    env = os.environ if env is None else env

    if path is None:
        data = _read_yaml(DEFAULT_CONFIG_PATH) if DEFAULT_CONFIG_PATH.exists() else {}
    else:
        if not path.exists():
            raise ConfigError(f"config file not found: {path}")
        data = _read_yaml(path)

    _validate_config_schema(data)

    for var, key in ENV_OVERRIDES.items():
        value = env.get(var)
        if value:
            data[key] = value

    date_pattern = data.get("date_pattern", DEFAULT_DATE_PATTERN)
    try:
        re.compile(date_pattern)
    except re.error as e:
        raise ConfigError(f"invalid date_pattern: {e}") from e

    encoding = data.get("encoding", "utf-8-sig")
    try:
        codecs.lookup(encoding)
    except LookupError as e:
        raise ConfigError(f"unknown encoding: {encoding}") from e

    markers = tuple(m.lower() for m in data.get("header_markers", DEFAULT_HEADER_MARKERS))
    return TrackerConfig(
        state_directory=data.get("state_directory", ".packtrack"),
        export_directory=data.get("export_directory", "exports"),
        logs_directory=data.get("logs_directory", "logs"),
        encoding=encoding,
        max_workers=data.get("max_workers", 4),
        export_label=data.get("export_label", DEFAULT_EXPORT_LABEL),
        header_rules=HeaderRules(markers=markers, date_pattern=date_pattern),
    )
