from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Generic, TypeVar

from ..clients.base import CartContextProvider, RemoteCallError, SubmissionClient, ValidationClient
from ..models.outcomes import ValidationOutcome
from ..models.row import Row
from ..models.row_error import ErrorCode, ErrorStage, RowError
from ..models.upload import FileReadError, UploadedFile
from ..models.workflow_result import RunStatus, WorkflowResult
from ..parsing.row_parser import FIELD_DELIMITER, parse_line
from ..parsing.tokenizer import tokenize
from ..validation.local_validator import (
    LocalValidationReport,
    check_file_type,
    validate_csv,
    validate_row,
)

"""Upload workflow orchestration.

One run is a linear pipeline of stages:

    read -> local validation -> remote validation -> submission

Each stage returns a StageResult that either carries its value to the next
stage or halts the run with a terminal WorkflowResult. Remote calls happen
strictly one after another and are never retried.

Error merge rules:
- structural row errors come first, then business-rule errors
- submission row errors are placed before everything collected so far
- a failed submission call appends one synthetic error
- a failed validation call replaces everything with one synthetic error
- the first error per (row_index, stage) wins
"""

__all__ = [
    "StageResult",
    "merge_errors",
    "run_local_validation",
    "run_workflow",
]

logger = logging.getLogger(__name__)

T = TypeVar("T")

UNKNOWN_ERROR = "Unknown error"


@dataclass(frozen=True)
class StageResult(Generic[T]):
    """Tagged result of one pipeline stage: a value, or a terminal result."""
    value: T | None = None
    halt: WorkflowResult | None = None

    @property
    def ok(self) -> bool:
        return self.halt is None


@dataclass(frozen=True)
class _RemoteVerdict:
    business_errors: tuple[RowError, ...]
    submit_text: str | None  # None = 送信対象なし


def merge_errors(*groups: tuple[RowError, ...] | list[RowError]) -> tuple[RowError, ...]:
    """Concatenate error groups in order, keeping the first error per (row_index, stage)."""
    seen: set[tuple[int | None, ErrorStage]] = set()
    merged: list[RowError] = []
    for group in groups:
        for err in group:
            key = (err.row_index, err.stage)
            if key in seen:
                continue
            seen.add(key)
            merged.append(err)
    return tuple(merged)


def _failure_detail(exc: Exception) -> str:
    detail = exc.detail if isinstance(exc, RemoteCallError) else str(exc)
    return detail or UNKNOWN_ERROR


def _rejected(error: RowError) -> WorkflowResult:
    return WorkflowResult(
        parsed_rows=(), errors=(error,), submission_outcome=None, status=RunStatus.REJECTED
    )


def _status_for(errors: tuple[RowError, ...], outcome: ValidationOutcome | None) -> RunStatus:
    if errors or (outcome is not None and not outcome.success):
        return RunStatus.COMPLETED_WITH_ERRORS
    return RunStatus.COMPLETED


def _eligible_text(text: str, report: LocalValidationReport) -> str | None:
    """Original text, or the header plus structurally valid lines when some rows failed."""
    if not report.row_errors:
        return text
    valid = report.valid_candidates()
    if not valid:
        return None
    lines = [report.header or "SKU,Quantity"]
    lines.extend(FIELD_DELIMITER.join(c.fields) for c in valid)
    return "\n".join(lines)


def _drop_structural_failures(csv_text: str | None, report: LocalValidationReport) -> str | None:
    """Remove lines failing the per-row checks from service-provided text.

    The header line is kept; None when no data line survives. Text from a
    structurally clean file is returned unchanged.
    """
    if not csv_text or not report.row_errors:
        return csv_text
    lines = tokenize(csv_text)
    kept = [line.text for line in lines[1:] if validate_row(parse_line(line)) is None]
    if not kept:
        return None
    return "\n".join([lines[0].text, *kept])


def _resolve_cart_id(upload: UploadedFile, provider: CartContextProvider) -> str | None:
    try:
        return provider.get_cart_id()
    except Exception as e:  # 取得失敗は送信スキップとして扱う
        logger.error(f"{upload.name}: cart lookup failed: {e}")
        return None


def _read_stage(upload: UploadedFile) -> StageResult[str]:
    type_error = check_file_type(upload)
    if type_error is not None:
        logger.warning(f"{upload.name}: rejected, media_type={upload.media_type}")
        return StageResult(halt=_rejected(type_error))
    try:
        text = upload.read_text()
    except FileReadError as e:
        logger.error(f"{upload.name}: {e}")
        return StageResult(
            halt=_rejected(
                RowError.structural(None, ErrorCode.FILE_READ_FAILURE, "Failed to read file")
            )
        )
    return StageResult(value=text)


def _local_stage(upload: UploadedFile, text: str) -> StageResult[LocalValidationReport]:
    report = validate_csv(text)
    if report.rejected:
        logger.warning(f"{upload.name}: {report.file_errors[0].reason}")
        return StageResult(halt=_rejected(report.file_errors[0]))
    logger.debug(
        f"{upload.name}: rows={len(report.candidates)} structural_errors={len(report.row_errors)}"
    )
    return StageResult(value=report)


def _remote_stage(
    upload: UploadedFile,
    client: ValidationClient,
    text: str,
    report: LocalValidationReport,
    rows: tuple[Row, ...],
) -> StageResult[_RemoteVerdict]:
    try:
        response = client.validate(text)
    except Exception as e:  # クライアント実装を問わず呼び出し失敗として扱う
        logger.error(f"{upload.name}: validation call failed: {e}")
        error = RowError(
            row_index=None,
            sku="",
            reason=f"Validation error: {_failure_detail(e)}",
            stage=ErrorStage.BUSINESS_RULE,
            code=ErrorCode.REMOTE_VALIDATION_FAILURE,
        )
        return StageResult(
            halt=WorkflowResult(
                parsed_rows=rows, errors=(error,), submission_outcome=None, status=RunStatus.FAILED
            )
        )

    if not response.errors:
        if response.filtered_csv:
            submit_text = _drop_structural_failures(response.filtered_csv, report)
        else:
            submit_text = _eligible_text(text, report)
    else:
        # 部分失敗: サービスが返した有効行のみ送信を続行
        logger.info(f"{upload.name}: {len(response.errors)} business-rule error(s)")
        submit_text = _drop_structural_failures(response.filtered_csv, report)
    return StageResult(value=_RemoteVerdict(response.errors, submit_text))


def _submit_stage(
    upload: UploadedFile,
    client: SubmissionClient,
    cart_id: str | None,
    submit_text: str | None,
    rows: tuple[Row, ...],
    collected: tuple[RowError, ...],
) -> WorkflowResult:
    if not cart_id or not submit_text:
        reason = "no cart id" if not cart_id else "nothing eligible"
        logger.info(f"{upload.name}: submission skipped ({reason})")
        return WorkflowResult(
            parsed_rows=rows,
            errors=collected,
            submission_outcome=None,
            status=_status_for(collected, None),
        )

    try:
        outcome = client.submit(cart_id, submit_text)
    except Exception as e:  # クライアント実装を問わず呼び出し失敗として扱う
        logger.error(f"{upload.name}: submission call failed: {e}")
        failure = RowError(
            row_index=None,
            sku="",
            reason=f"Error adding items to cart: {_failure_detail(e)}",
            stage=ErrorStage.SUBMISSION,
            code=ErrorCode.SUBMISSION_CALL_FAILURE,
        )
        return WorkflowResult(
            parsed_rows=rows,
            errors=merge_errors(collected, (failure,)),
            submission_outcome=ValidationOutcome(success=False, errors=(failure,)),
            status=RunStatus.FAILED,
        )

    errors = merge_errors(outcome.errors, collected)
    logger.info(
        f"{upload.name}: submitted cart={cart_id} success={outcome.success} "
        f"submission_errors={len(outcome.errors)}"
    )
    return WorkflowResult(
        parsed_rows=rows,
        errors=errors,
        submission_outcome=outcome,
        status=_status_for(errors, outcome),
    )


def run_local_validation(upload: UploadedFile) -> WorkflowResult:
    """Run only the offline stages (read + local validation)."""
    read = _read_stage(upload)
    if not read.ok:
        return read.halt
    local = _local_stage(upload, read.value)
    if not local.ok:
        return local.halt
    report = local.value
    return WorkflowResult(
        parsed_rows=report.rows(),
        errors=merge_errors(report.row_errors),
        submission_outcome=None,
        status=_status_for(report.row_errors, None),
    )


def run_workflow(
    upload: UploadedFile,
    validation_client: ValidationClient,
    submission_client: SubmissionClient,
    cart_id: str | None = None,
    *,
    cart_provider: CartContextProvider | None = None,
) -> WorkflowResult:
    """Process one uploaded file end to end and return its terminal result.

    This function has no side effects besides the remote calls and logging;
    running it twice with identical inputs and collaborator responses yields
    equal results.

    Args:
        upload: File to process
        validation_client: Business-rule validation service
        submission_client: Cart service
        cart_id: Target cart
        cart_provider: Consulted only when submission is about to happen and
            cart_id is None; submission is skipped when no cart id is available
            or the lookup raises

    Returns:
        WorkflowResult for the run (never raises for run-level failures)
    """
    read = _read_stage(upload)
    if not read.ok:
        return read.halt
    text = read.value

    local = _local_stage(upload, text)
    if not local.ok:
        return local.halt
    report = local.value
    rows = report.rows()

    remote = _remote_stage(upload, validation_client, text, report, rows)
    if not remote.ok:
        return remote.halt
    verdict = remote.value

    collected = merge_errors(report.row_errors, verdict.business_errors)
    if cart_id is None and cart_provider is not None and verdict.submit_text:
        cart_id = _resolve_cart_id(upload, cart_provider)
    return _submit_stage(upload, submission_client, cart_id, verdict.submit_text, rows, collected)
