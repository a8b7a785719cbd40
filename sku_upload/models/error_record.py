from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

from .row_error import RowError

"""ErrorRecord model for error logging (row=-1 support).

ErrorRecord is the JSON Lines representation of a RowError written to the
error log. row=-1 is the sentinel for errors not tied to a specific line
(file-level errors and call-level failures).
"""

__all__ = [
    "ErrorRecord",
]

UNKNOWN_ROW = -1


@dataclass(frozen=True)
class ErrorRecord:
    """Structured error record for JSON Lines logging.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        file: Uploaded filename
        row: Row number (1-based). -1 when the row is unknown
        stage: structural / business_rule / submission
        error_type: Error classification in UPPER_SNAKE_CASE format
        sku: SKU of the offending line (may be empty)
        message: Human-readable reason
    """
    timestamp: str  # ISO8601 UTC
    file: str
    row: int  # 行番号。不明な場合 -1
    stage: str
    error_type: str  # UPPER_SNAKE
    sku: str
    message: str

    @staticmethod
    def from_row_error(file: str, error: RowError) -> ErrorRecord:
        """Create a new ErrorRecord for a RowError with current UTC timestamp."""
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return ErrorRecord(
            timestamp=ts,
            file=file,
            row=error.row_index if error.row_index is not None else UNKNOWN_ROW,
            stage=error.stage.value,
            error_type=error.code.value,
            sku=error.sku,
            message=error.reason,
        )

    def to_json_line(self) -> str:
        # 追加キー阻止: dataclass -> dict して json.dumps
        return json.dumps(asdict(self), ensure_ascii=False)
