from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.config_models import ConvertConfig

"""Config loader.

Responsibilities:
- Load the YAML conversion config (config/convert.yml by default)
- Validate it against config_schema.json (shipped next to this module)
- Apply defaults (output_directory=".", tag_with_sheet_name=true, escape_values=false)

Per-sheet sections are kept raw here; the orchestrator turns them into
SheetConfig objects once the workbook's sheets are known.
"""

DEFAULT_CONFIG_PATH = Path("config/convert.yml")
SCHEMA_PATH = Path(__file__).with_name("config_schema.json")


class ConfigError(Exception):
    pass


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: If the schema file is missing or invalid, or if the
            config data fails validation (unknown keys, wrong types, unknown
            field slot names in a mapping...).
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


def load_config(path: Path) -> ConvertConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config root must be a mapping: {path}")

    _validate_config_schema(data)

    return ConvertConfig(
        source_file=data.get("source_file"),
        output_directory=data.get("output_directory", "."),
        tag_with_sheet_name=data.get("tag_with_sheet_name", True),
        escape_values=data.get("escape_values", False),
        sheets=dict(data.get("sheets") or {}),
    )
