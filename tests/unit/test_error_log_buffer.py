from __future__ import annotations

import json
from pathlib import Path

from sku_upload.logging.error_log import ErrorLogBuffer, ErrorRecord
from sku_upload.models import ErrorCode, ErrorStage, RowError, RunStatus, WorkflowResult

KEYS = {"timestamp", "file", "row", "stage", "error_type", "sku", "message"}


def _err(row: int | None, reason: str) -> RowError:
    return RowError(row, "A1", reason, ErrorStage.STRUCTURAL, ErrorCode.NON_INTEGER_QUANTITY)


def test_error_record_from_row_error():
    rec = ErrorRecord.from_row_error("items.csv", _err(4, "Quantity must be an integer"))
    data = json.loads(rec.to_json_line())
    assert set(data.keys()) == KEYS
    assert data["row"] == 4
    assert data["stage"] == "structural"
    assert data["error_type"] == "NON_INTEGER_QUANTITY"
    assert data["timestamp"].endswith("Z")


def test_error_record_unknown_row_is_minus_one():
    rec = ErrorRecord.from_row_error("items.csv", _err(None, "Validation error: down"))
    assert rec.row == -1


def test_error_log_buffer_flush(temp_workdir: Path):
    buf = ErrorLogBuffer(temp_workdir / "logs")
    result = WorkflowResult(
        parsed_rows=(),
        errors=(_err(2, "a"), _err(3, "b")),
        submission_outcome=None,
        status=RunStatus.COMPLETED_WITH_ERRORS,
    )
    assert buf.extend_from_result("items.csv", result) == 2
    path = buf.flush()
    assert path is not None and path.exists()
    assert path.name.startswith("errors-") and path.suffix == ".log"
    lines = path.read_text(encoding="utf-8").strip().splitlines()
    assert len(lines) == 2
    assert all(set(json.loads(raw)) == KEYS for raw in lines)
    assert len(buf) == 0


def test_error_log_buffer_empty_flush_writes_nothing(temp_workdir: Path):
    buf = ErrorLogBuffer(temp_workdir / "logs")
    assert buf.flush() is None
    assert not (temp_workdir / "logs").exists()


def test_error_log_buffer_multiple_flushes_append(temp_workdir: Path):
    buf = ErrorLogBuffer(temp_workdir / "logs")
    buf.append(ErrorRecord.from_row_error("f.csv", _err(2, "a")))
    path = buf.flush()
    size1 = path.stat().st_size
    buf.append(ErrorRecord.from_row_error("f.csv", _err(3, "b")))
    path2 = buf.flush()
    assert path == path2
    assert path2.stat().st_size > size1
