"""Domain models for the SKU upload workflow."""

from .error_record import ErrorRecord
from .outcomes import RemoteValidationResponse, ValidationOutcome
from .row import Row
from .row_error import ErrorCode, ErrorStage, RowError
from .upload import FileReadError, UploadedFile
from .workflow_result import CompletionNotice, NoticeSeverity, RunStatus, WorkflowResult

__all__ = [
    # Upload input
    "UploadedFile",
    "FileReadError",
    # Row level
    "Row",
    "RowError",
    "ErrorCode",
    "ErrorStage",
    "ErrorRecord",
    # Collaborator responses
    "RemoteValidationResponse",
    "ValidationOutcome",
    # Run result
    "WorkflowResult",
    "RunStatus",
    "CompletionNotice",
    "NoticeSeverity",
]
