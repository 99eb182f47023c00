from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from src.models.config_models import DEFAULT_FILENAME_PREFIX, DEFAULT_SHEET_NAME, SplitterConfig

"""Config loader.

Responsibilities:
- Load YAML config/splitter.yml (missing default file = all defaults)
- Validate keys/types against specs/contracts/config_schema.json
- Apply environment overrides (SPLITTER_DATE_COLUMN / SPLITTER_FILENAME_PREFIX)
"""

# src/config/loader.py -> src/config -> src -> repo_root
_repo_root = Path(__file__).parent.parent.parent
SCHEMA_PATH = _repo_root / "specs" / "contracts" / "config_schema.json"

DEFAULT_CONFIG_PATH = Path("config/splitter.yml")

ENV_DATE_COLUMN = "SPLITTER_DATE_COLUMN"
ENV_FILENAME_PREFIX = "SPLITTER_FILENAME_PREFIX"


class ConfigError(Exception):
    pass


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against JSON schema.

    Raises:
        ConfigError: schema file missing / not valid JSON, or the config
            data fails validation (unknown keys, wrong types, ...)
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


def load_config(path: Path | None = None) -> SplitterConfig:
    """Load and resolve configuration.

    Args:
        path: Explicit config file (must exist). None means the default
            config/splitter.yml, which may be absent.

    Raises:
        ConfigError: explicit file missing, invalid YAML, schema violation
    """
    if path is not None and not path.exists():
        raise ConfigError(f"config file not found: {path}")
    cfg_path = path or DEFAULT_CONFIG_PATH
    data = _read_yaml(cfg_path) if cfg_path.exists() else {}

    # 環境変数が YAML より優先 (上書き後の値をスキーマで検証する)
    for key, env in (("date_column", ENV_DATE_COLUMN), ("filename_prefix", ENV_FILENAME_PREFIX)):
        if os.getenv(env):
            data[key] = os.environ[env]
    _validate_config_schema(data)

    return SplitterConfig(
        date_column=data.get("date_column"),
        filename_prefix=data.get("filename_prefix", DEFAULT_FILENAME_PREFIX),
        output_sheet_name=data.get("output_sheet_name", DEFAULT_SHEET_NAME),
        output_directory=data.get("output_directory", "."),
    )
