from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .outcomes import ValidationOutcome
from .row import Row
from .row_error import RowError

"""WorkflowResult and CompletionNotice models.

A WorkflowResult is the terminal artifact of a single upload run. It is
rebuilt from scratch on every run; nothing accumulates across runs.

State transitions of a run:
    Idle -> Reading -> LocallyValidating -> (Rejected | RemotelyValidating)
         -> (Submitting | Done) -> Idle
"""

__all__ = [
    "CompletionNotice",
    "NoticeSeverity",
    "RunStatus",
    "WorkflowResult",
]

NOTICE_TITLE = "File Processing Complete"


class RunStatus(Enum):
    """Terminal status of a run.

    - REJECTED: file-level structural error, no remote call was made
    - FAILED: a remote call (validation or submission) failed as a call
    - COMPLETED_WITH_ERRORS: row-level errors or an unsuccessful submission
    - COMPLETED: no errors at all
    """
    REJECTED = "rejected"
    FAILED = "failed"
    COMPLETED_WITH_ERRORS = "completed_with_errors"
    COMPLETED = "completed"


class NoticeSeverity(Enum):
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class CompletionNotice:
    """One-shot completion signal raised once per run."""
    title: str
    message: str
    severity: NoticeSeverity


@dataclass(frozen=True)
class WorkflowResult:
    parsed_rows: tuple[Row, ...]
    errors: tuple[RowError, ...]
    submission_outcome: ValidationOutcome | None
    status: RunStatus

    def completion_notice(self) -> CompletionNotice:
        """Build the completion notice with a severity matching the outcome."""
        if self.status is RunStatus.COMPLETED:
            return CompletionNotice(
                NOTICE_TITLE, "Uploaded file processed successfully.", NoticeSeverity.SUCCESS
            )
        if self.status is RunStatus.COMPLETED_WITH_ERRORS:
            return CompletionNotice(
                NOTICE_TITLE,
                f"Uploaded file processed with {len(self.errors)} error(s).",
                NoticeSeverity.WARNING,
            )
        if self.status is RunStatus.REJECTED:
            reason = self.errors[0].reason if self.errors else "unknown reason"
            return CompletionNotice(
                NOTICE_TITLE, f"Uploaded file was rejected: {reason}", NoticeSeverity.ERROR
            )
        return CompletionNotice(
            NOTICE_TITLE, "Uploaded file could not be processed.", NoticeSeverity.ERROR
        )
