from __future__ import annotations

from pathlib import Path

import pytest

from sku_upload.models import FileReadError, UploadedFile


def test_from_path_guesses_media_type(temp_workdir: Path):
    p = temp_workdir / "data" / "items.csv"
    p.write_text("SKU,Quantity\nA1,1\n", encoding="utf-8")
    upload = UploadedFile.from_path(p)
    assert upload.name == "items.csv"
    assert upload.media_type == "text/csv"
    assert upload.is_csv
    assert upload.read_text() == "SKU,Quantity\nA1,1\n"


def test_read_text_strips_bom():
    upload = UploadedFile(name="a.csv", content="\ufeffSKU,Quantity\n".encode("utf-8"))
    assert upload.read_text() == "SKU,Quantity\n"


def test_read_text_invalid_utf8():
    upload = UploadedFile(name="a.csv", content=b"\xff\xfe\x00bad")
    with pytest.raises(FileReadError):
        upload.read_text()


def test_read_text_missing_path(temp_workdir: Path):
    upload = UploadedFile.from_path(temp_workdir / "nope.csv")
    with pytest.raises(FileReadError):
        upload.read_text()


def test_read_text_without_content_or_path():
    with pytest.raises(FileReadError):
        UploadedFile(name="a.csv").read_text()
