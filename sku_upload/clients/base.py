from __future__ import annotations

from typing import Any, Protocol

from ..models.outcomes import RemoteValidationResponse, ValidationOutcome
from ..models.row_error import ErrorCode, ErrorStage, RowError

"""Collaborator contracts for the remote stages of an upload run.

Clients either return a well-formed response or raise RemoteCallError. A
response that reports row errors is not a failure of the call.
"""

__all__ = [
    "CartContextProvider",
    "RemoteCallError",
    "StaticCartProvider",
    "SubmissionClient",
    "ValidationClient",
    "row_errors_from_payload",
]


class RemoteCallError(Exception):
    """Raised when a remote call fails instead of returning a response.

    detail is the message reported by the service, if any.
    """

    def __init__(self, detail: str | None = None, status_code: int | None = None) -> None:
        super().__init__(detail or "remote call failed")
        self.detail = detail
        self.status_code = status_code


class ValidationClient(Protocol):
    def validate(self, csv_content: str) -> RemoteValidationResponse: ...


class SubmissionClient(Protocol):
    def submit(self, cart_id: str, csv_content: str) -> ValidationOutcome: ...


class CartContextProvider(Protocol):
    def get_cart_id(self) -> str | None: ...


class StaticCartProvider:
    """Cart provider returning a fixed cart id (or None)."""

    def __init__(self, cart_id: str | None) -> None:
        self.cart_id = cart_id or None

    def get_cart_id(self) -> str | None:
        return self.cart_id


def _row_number(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().lstrip("-").isdigit():
        return int(value.strip())
    return None


def row_errors_from_payload(
    items: Any, stage: ErrorStage, code: ErrorCode
) -> tuple[RowError, ...]:
    """Convert service error entries {rowNumber, sku, reason} into RowErrors.

    Missing row numbers become None, missing SKUs become "" and missing
    reasons become "Unknown error". Non-list payloads yield no errors.
    """
    if not isinstance(items, list):
        return ()
    errors: list[RowError] = []
    for item in items:
        if not isinstance(item, dict):
            continue
        errors.append(
            RowError(
                row_index=_row_number(item.get("rowNumber")),
                sku=str(item.get("sku") or ""),
                reason=str(item.get("reason") or "Unknown error"),
                stage=stage,
                code=code,
            )
        )
    return tuple(errors)
