"""
Config Loader — Load store configuration from env vars or a file.

Supports two env modes:
1. Master JSON key: single BLOBCACHE_CONFIG env var with all settings
2. Individual keys: separate BLOBCACHE_* env vars (fallback)

## Usage

    # Option 1: Master config
    export BLOBCACHE_CONFIG='{"backend": "http", "url": "https://...", "api_key": "xxx"}'

    # Option 2: Individual keys
    export BLOBCACHE_BACKEND=json_file
    export BLOBCACHE_PATH=state/cache.json

The loader reads the master config first, then fills any missing setting
from the individual keys. A YAML or JSON file can be loaded explicitly
with load_config_file().
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Literal, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError

from ..errors import ConfigError

logger = logging.getLogger(__name__)

MASTER_ENV_VAR = "BLOBCACHE_CONFIG"

# Setting name → individual env var
ENV_VARS = {
    "backend": "BLOBCACHE_BACKEND",
    "path": "BLOBCACHE_PATH",
    "url": "BLOBCACHE_URL",
    "api_key": "BLOBCACHE_API_KEY",
    "timeout": "BLOBCACHE_TIMEOUT",
}

BackendKind = Literal["memory", "json_file", "http"]


class StoreConfig(BaseModel):
    """Which durable backend to use and how to reach it."""

    backend: BackendKind = "json_file"
    path: str = "state/blobcache.json"
    url: Optional[str] = None
    api_key: Optional[str] = None
    timeout: float = Field(default=30, gt=0)

    def to_env_dict(self) -> Dict[str, str]:
        """Convert to environment variable format, skipping unset values."""
        values = self.model_dump()
        return {
            env_var: str(values[setting])
            for setting, env_var in ENV_VARS.items()
            if values[setting] is not None
        }

    def with_overrides(self, **overrides: Any) -> "StoreConfig":
        """Return a validated copy with the non-None overrides applied."""
        data = self.model_dump()
        data.update({k: v for k, v in overrides.items() if v is not None})
        return _build_config(data, source="overrides")

    def to_public_dict(self) -> Dict[str, Any]:
        """Settings safe to print (API key masked)."""
        data = self.model_dump()
        if data["api_key"]:
            data["api_key"] = "***"
        return data


def _build_config(data: Dict[str, Any], source: str) -> StoreConfig:
    try:
        return StoreConfig(**data)
    except ValidationError as e:
        raise ConfigError(
            f"Invalid store configuration from {source}",
            {"errors": [f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()]},
        ) from e


def _parse_master_config(raw: str) -> Dict[str, Any]:
    """Parse master config JSON, accepting lower-case or env-style keys."""
    data = json.loads(raw)
    if not isinstance(data, dict):
        raise ValueError("master config must be a JSON object")

    parsed: Dict[str, Any] = {}
    for setting, env_var in ENV_VARS.items():
        value = data.get(setting)
        if value is None:
            value = data.get(env_var)
        if value is not None:
            parsed[setting] = value
    return parsed


def load_config() -> StoreConfig:
    """
    Load configuration from master key or individual env vars.

    Priority:
    1. BLOBCACHE_CONFIG (master JSON)
    2. Individual BLOBCACHE_* environment variables

    Returns:
        Validated StoreConfig

    Raises:
        ConfigError: If the merged settings are invalid
    """
    data: Dict[str, Any] = {}

    master_config = os.environ.get(MASTER_ENV_VAR)
    if master_config:
        try:
            data = _parse_master_config(master_config)
            logger.info(f"Loaded configuration from {MASTER_ENV_VAR}")
        except json.JSONDecodeError as e:
            logger.error(f"Invalid {MASTER_ENV_VAR} JSON: {e}")
        except ValueError as e:
            logger.error(f"Failed to parse {MASTER_ENV_VAR}: {e}")

    # Fill in from individual env vars
    for setting, env_var in ENV_VARS.items():
        if data.get(setting) is None and os.environ.get(env_var):
            data[setting] = os.environ[env_var]

    return _build_config(data, source="environment")


def load_config_file(path: Path) -> StoreConfig:
    """
    Load configuration from a YAML or JSON file.

    Args:
        path: Config file (.json is parsed as JSON, anything else as YAML)

    Raises:
        ConfigError: If the file is missing, unparseable, or invalid
    """
    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as f:
            if path.suffix == ".json":
                data = json.load(f)
            else:
                data = yaml.safe_load(f)
    except FileNotFoundError as e:
        raise ConfigError(f"Config file not found: {path}") from e
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e
    except (json.JSONDecodeError, UnicodeDecodeError, yaml.YAMLError) as e:
        raise ConfigError(f"Cannot parse config file {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")

    logger.debug(f"Loaded configuration from {path}")
    return _build_config(data, source=str(path))
