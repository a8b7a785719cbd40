from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

"""Config loader.

Responsibilities:
- Load the YAML config (default config/upload.yml)
- Validate it against the bundled JSON schema
- Apply defaults for optional keys
- Apply environment overrides (SKU_UPLOAD_BASE_URL, SKU_UPLOAD_API_TOKEN,
  SKU_UPLOAD_CART_ID); the environment always wins over the file
"""

__all__ = [
    "ConfigError",
    "DEFAULT_CONFIG_PATH",
    "ServiceConfig",
    "UploadConfig",
    "load_config",
]

SCHEMA_PATH = Path(__file__).with_name("config_schema.json")
DEFAULT_CONFIG_PATH = Path("config/upload.yml")

ENV_BASE_URL = "SKU_UPLOAD_BASE_URL"
ENV_API_TOKEN = "SKU_UPLOAD_API_TOKEN"
ENV_CART_ID = "SKU_UPLOAD_CART_ID"


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class ServiceConfig:
    base_url: str
    validate_path: str = "/csv/validate"
    submit_path: str = "/cart/items"
    cart_path: str | None = None  # 指定時のみ HTTP でカート ID を取得
    timeout_seconds: float = 30.0
    api_token: str | None = None  # 環境変数からのみ


@dataclass(frozen=True)
class UploadConfig:
    service: ServiceConfig
    cart_id: str | None = None
    error_log_directory: str = "./logs"


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the bundled JSON schema.

    Raises:
        ConfigError: If the schema file is missing or invalid, or the data
            fails validation (missing keys, wrong types, unknown keys)
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


def load_config(path: Path = DEFAULT_CONFIG_PATH) -> UploadConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(
            f"config validation failed: top level must be a mapping, got {type(data).__name__}"
        )

    _validate_config_schema(data)

    svc_raw = data["service"]
    service = ServiceConfig(
        base_url=os.getenv(ENV_BASE_URL) or svc_raw["base_url"],
        validate_path=svc_raw.get("validate_path", "/csv/validate"),
        submit_path=svc_raw.get("submit_path", "/cart/items"),
        cart_path=svc_raw.get("cart_path"),
        timeout_seconds=float(svc_raw.get("timeout_seconds", 30.0)),
        api_token=os.getenv(ENV_API_TOKEN) or None,
    )
    return UploadConfig(
        service=service,
        cart_id=os.getenv(ENV_CART_ID) or data.get("cart_id"),
        error_log_directory=data.get("error_log_directory", "./logs"),
    )
