# Shared pytest fixtures
from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from sku_upload.logging.init import reset_logging
from sku_upload.models import RemoteValidationResponse, ValidationOutcome


@pytest.fixture(autouse=True)
def _clean_logging():
    # ハンドラが前テストの stdout を掴んだままにならないよう毎回リセット
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def temp_workdir(tmp_path: Path, monkeypatch) -> Path:
    (tmp_path / "config").mkdir()
    (tmp_path / "data").mkdir()
    monkeypatch.chdir(tmp_path)
    for var in ("SKU_UPLOAD_BASE_URL", "SKU_UPLOAD_API_TOKEN", "SKU_UPLOAD_CART_ID"):
        monkeypatch.delenv(var, raising=False)
    return tmp_path


@pytest.fixture()
def sample_config_yaml() -> str:
    return """service:
  base_url: https://shop.example.com/api
  validate_path: /csv/validate
  submit_path: /cart/items
  timeout_seconds: 5
cart_id: cart-001
error_log_directory: ./logs
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "upload.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def write_csv(temp_workdir: Path) -> Callable[[str, str], Path]:
    def _write(name: str, text: str) -> Path:
        p = temp_workdir / "data" / name
        p.write_text(text, encoding="utf-8")
        return p
    return _write


@pytest.fixture()
def validation_client() -> MagicMock:
    client = MagicMock()
    client.validate.return_value = RemoteValidationResponse(errors=(), filtered_csv=None)
    return client


@pytest.fixture()
def submission_client() -> MagicMock:
    client = MagicMock()
    client.submit.return_value = ValidationOutcome(success=True, errors=())
    return client
