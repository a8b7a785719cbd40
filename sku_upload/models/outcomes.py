from __future__ import annotations

from dataclasses import dataclass

from .row_error import RowError

"""Response models returned by the remote collaborators.

RemoteValidationResponse is what the validation service answers for a CSV,
ValidationOutcome is what the cart service answers for a submission.
"""

__all__ = [
    "RemoteValidationResponse",
    "ValidationOutcome",
]


@dataclass(frozen=True)
class RemoteValidationResponse:
    """Business-rule validation answer for one CSV text."""
    errors: tuple[RowError, ...] = ()
    filtered_csv: str | None = None  # サービスが再シリアライズした有効行のみの CSV


@dataclass(frozen=True)
class ValidationOutcome:
    """Result of adding line items to a cart."""
    success: bool
    errors: tuple[RowError, ...] = ()
