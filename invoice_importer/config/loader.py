from __future__ import annotations

import os
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import jsonschema
import yaml
from dotenv import load_dotenv
from jsonschema.exceptions import ValidationError

from ..contracts import load_schema
from ..models.config_models import ApiConfig, ImportConfig, ImportOptions

"""Config loader.

Responsibilities:
- Load YAML config (default ``config/import.yml``)
- Validate against ``contracts/config_schema.json`` (unknown keys rejected)
- Apply defaults (timezone=UTC, keep_na_strings=["NA"], ...)
- Apply environment overrides for the API connection

Resolution order for the API connection, highest first:
    1. variables loaded from ``.env`` (``load_env_file`` overrides the process env)
    2. variables already present in the process environment
    3. the ``api`` section of the YAML file
"""

__all__ = [
    "ConfigError",
    "DEFAULT_CONFIG_PATH",
    "apply_env_overrides",
    "load_config",
    "load_env_file",
]

DEFAULT_CONFIG_PATH = Path("config/import.yml")

ENV_API_URL = "EXPORTPRO_API_URL"
ENV_API_TOKEN = "EXPORTPRO_API_TOKEN"
ENV_API_TIMEOUT = "EXPORTPRO_API_TIMEOUT"


class ConfigError(Exception):
    pass


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the bundled JSON schema.

    Raises:
        ConfigError: If the config data fails schema validation (missing
            required keys, wrong types or keys the schema does not know).
    """
    schema = load_schema("config_schema")
    try:
        jsonschema.validate(data, schema)
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def load_env_file(path: Path, override: bool = True) -> bool:
    """Load a ``.env`` file with python-dotenv.

    Returns True when the file existed and was read.
    """
    if not path.exists():
        return False
    return load_dotenv(dotenv_path=path, override=override)


def apply_env_overrides(cfg: ImportConfig) -> ImportConfig:
    """Return a copy of ``cfg`` with EXPORTPRO_API_* variables applied."""
    api = cfg.api
    base_url = os.getenv(ENV_API_URL) or api.base_url
    token = os.getenv(ENV_API_TOKEN) or api.token
    timeout = api.timeout_seconds
    raw_timeout = os.getenv(ENV_API_TIMEOUT)
    if raw_timeout:
        try:
            timeout = float(raw_timeout)
        except ValueError as e:
            raise ConfigError(f"{ENV_API_TIMEOUT} must be a number, got {raw_timeout!r}") from e
        if timeout <= 0:
            raise ConfigError(f"{ENV_API_TIMEOUT} must be positive, got {raw_timeout!r}")
    return ImportConfig(
        api=ApiConfig(base_url=base_url, timeout_seconds=timeout, token=token),
        options=cfg.options,
        timezone=cfg.timezone,
        error_log_dir=cfg.error_log_dir,
    )


def load_config(path: Path) -> ImportConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config root must be a mapping, got {type(data).__name__}")

    _validate_config_schema(data)

    api_raw = data["api"]
    api = ApiConfig(
        base_url=api_raw["base_url"],
        timeout_seconds=float(api_raw.get("timeout_seconds", ApiConfig.timeout_seconds)),
        token=api_raw.get("token"),
    )
    import_raw = data.get("import", {})
    defaults = ImportOptions()
    options = ImportOptions(
        keep_na_strings=list(import_raw.get("keep_na_strings", defaults.keep_na_strings)),
        strict_header=bool(import_raw.get("strict_header", defaults.strict_header)),
    )
    timezone = data.get("timezone", "UTC")
    try:
        ZoneInfo(timezone)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ConfigError(f"unknown timezone: {timezone}") from e
    return ImportConfig(
        api=api,
        options=options,
        timezone=timezone,
        error_log_dir=data.get("error_log_dir", "logs"),
    )
