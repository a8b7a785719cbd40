from __future__ import annotations

from pathlib import Path

import pytest

from sku_upload.config.loader import ConfigError, load_config


def test_load_config_success(write_config: Path):
    cfg = load_config(write_config)
    assert cfg.service.base_url == "https://shop.example.com/api"
    assert cfg.service.timeout_seconds == 5.0
    assert cfg.service.cart_path is None
    assert cfg.service.api_token is None
    assert cfg.cart_id == "cart-001"
    assert cfg.error_log_directory == "./logs"


def test_load_config_defaults(temp_workdir: Path):
    p = temp_workdir / "config" / "upload.yml"
    p.write_text("service:\n  base_url: http://localhost:8000\n", encoding="utf-8")
    cfg = load_config(p)
    assert cfg.service.validate_path == "/csv/validate"
    assert cfg.service.submit_path == "/cart/items"
    assert cfg.service.timeout_seconds == 30.0
    assert cfg.cart_id is None


def test_load_config_missing_file(temp_workdir: Path):
    with pytest.raises(ConfigError, match="config file not found"):
        load_config(temp_workdir / "config" / "not_exists.yml")


def test_load_config_invalid_yaml(write_config: Path):
    write_config.write_text("service: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="invalid yaml"):
        load_config(write_config)


def test_load_config_missing_required(write_config: Path):
    write_config.write_text("cart_id: abc\n", encoding="utf-8")
    with pytest.raises(ConfigError) as e:
        load_config(write_config)
    assert "config validation failed" in str(e.value) and "required property" in str(e.value)


def test_load_config_extra_field(write_config: Path):
    text = write_config.read_text(encoding="utf-8") + "\nextra_field: not_allowed\n"
    write_config.write_text(text, encoding="utf-8")
    with pytest.raises(ConfigError, match="config validation failed"):
        load_config(write_config)


def test_load_config_wrong_type(write_config: Path):
    text = write_config.read_text(encoding="utf-8").replace("timeout_seconds: 5", "timeout_seconds: soon")
    write_config.write_text(text, encoding="utf-8")
    with pytest.raises(ConfigError, match="config validation failed"):
        load_config(write_config)


def test_environment_overrides(write_config: Path, monkeypatch):
    monkeypatch.setenv("SKU_UPLOAD_BASE_URL", "https://staging.example.com")
    monkeypatch.setenv("SKU_UPLOAD_API_TOKEN", "secret")
    monkeypatch.setenv("SKU_UPLOAD_CART_ID", "cart-env")
    cfg = load_config(write_config)
    assert cfg.service.base_url == "https://staging.example.com"
    assert cfg.service.api_token == "secret"
    assert cfg.cart_id == "cart-env"
