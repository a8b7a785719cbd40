from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

"""RowError model and error taxonomy.

Every problem found by any stage of an upload run is reported as a RowError.
row_index is None when the error is not tied to a specific line (file-level
errors and call-level failures).
"""

__all__ = [
    "ErrorCode",
    "ErrorStage",
    "RowError",
]


class ErrorStage(Enum):
    """Stage that produced an error."""
    STRUCTURAL = "structural"
    BUSINESS_RULE = "business_rule"
    SUBMISSION = "submission"


class ErrorCode(Enum):
    """Error classification in UPPER_SNAKE_CASE."""
    UNSUPPORTED_FILE_TYPE = "UNSUPPORTED_FILE_TYPE"
    FILE_READ_FAILURE = "FILE_READ_FAILURE"
    EMPTY_FILE = "EMPTY_FILE"
    INVALID_HEADER = "INVALID_HEADER"
    NO_DATA_ROWS = "NO_DATA_ROWS"
    FIELD_COUNT_MISMATCH = "FIELD_COUNT_MISMATCH"
    MISSING_SKU = "MISSING_SKU"
    MISSING_QUANTITY = "MISSING_QUANTITY"
    NON_INTEGER_QUANTITY = "NON_INTEGER_QUANTITY"
    REMOTE_VALIDATION_FAILURE = "REMOTE_VALIDATION_FAILURE"
    BUSINESS_RULE_VIOLATION = "BUSINESS_RULE_VIOLATION"
    SUBMISSION_CALL_FAILURE = "SUBMISSION_CALL_FAILURE"
    SUBMISSION_ROW_VIOLATION = "SUBMISSION_ROW_VIOLATION"


@dataclass(frozen=True)
class RowError:
    """A single row-addressable error.

    Attributes:
        row_index: 1-based original line number, None when unknown
        sku: SKU of the offending line (may be empty)
        reason: Human-readable message
        stage: Stage that produced the error
        code: Taxonomy member
    """
    row_index: int | None
    sku: str
    reason: str
    stage: ErrorStage
    code: ErrorCode

    @staticmethod
    def structural(row_index: int | None, code: ErrorCode, reason: str, sku: str = "") -> RowError:
        return RowError(
            row_index=row_index,
            sku=sku,
            reason=reason,
            stage=ErrorStage.STRUCTURAL,
            code=code,
        )
