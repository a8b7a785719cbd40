from __future__ import annotations

from dataclasses import dataclass, field

from ..models.row import Row
from ..models.row_error import ErrorCode, RowError
from ..models.upload import UploadedFile
from ..parsing.row_parser import (
    FIELD_DELIMITER,
    INTEGER_PATTERN,
    RowCandidate,
    parse_line,
    to_row,
)
from ..parsing.tokenizer import Line, tokenize

"""Local (offline) structural validation of uploaded CSV text.

File-level checks are terminal and short-circuit in this order:
    1. file type            -> "File not supported" (checked before reading)
    2. no non-blank lines   -> "Empty file"
    3. header != SKU,Quantity (case-insensitive, trimmed) -> "Invalid header..."
    4. header only          -> "File must contain at least one data row"

Per-row checks never reject the file. Each data line gets at most one error
(the first failing check) and every line is still parsed for display.
"""

__all__ = [
    "EXPECTED_HEADER",
    "LocalValidationReport",
    "StructuralFileError",
    "check_file_type",
    "validate_csv",
    "validate_header",
    "validate_row",
]

EXPECTED_HEADER = ("sku", "quantity")
EXPECTED_FIELD_COUNT = len(EXPECTED_HEADER)


class StructuralFileError(Exception):
    """Raised when the file as a whole fails a structural check."""

    def __init__(self, error: RowError) -> None:
        super().__init__(error.reason)
        self.error = error


@dataclass(frozen=True)
class LocalValidationReport:
    """Outcome of local validation.

    file_errors is non-empty only for terminal file-level failures, in which
    case candidates and row_errors are empty.
    """
    header: str | None = None
    file_errors: tuple[RowError, ...] = ()
    row_errors: tuple[RowError, ...] = ()
    candidates: tuple[RowCandidate, ...] = field(default=())

    @property
    def rejected(self) -> bool:
        return bool(self.file_errors)

    @property
    def invalid_rows(self) -> frozenset[int]:
        return frozenset(e.row_index for e in self.row_errors if e.row_index is not None)

    def rows(self) -> tuple[Row, ...]:
        return tuple(to_row(c) for c in self.candidates)

    def valid_candidates(self) -> tuple[RowCandidate, ...]:
        bad = self.invalid_rows
        return tuple(c for c in self.candidates if c.row_index not in bad)


def check_file_type(upload: UploadedFile) -> RowError | None:
    if upload.is_csv:
        return None
    return RowError.structural(None, ErrorCode.UNSUPPORTED_FILE_TYPE, "File not supported")


def _header_error(header: Line) -> RowError | None:
    names = tuple(h.strip().lower() for h in header.text.split(FIELD_DELIMITER))
    if names == EXPECTED_HEADER:
        return None
    return RowError.structural(
        None, ErrorCode.INVALID_HEADER, 'Invalid header. Expected "SKU,Quantity"'
    )


def validate_header(text: str) -> RowError | None:
    """Check only the header line of text. Returns None when it is valid or absent."""
    lines = tokenize(text)
    if not lines:
        return None
    return _header_error(lines[0])


def _check_structure(lines: list[Line]) -> None:
    if not lines:
        raise StructuralFileError(RowError.structural(None, ErrorCode.EMPTY_FILE, "Empty file"))
    header_error = _header_error(lines[0])
    if header_error is not None:
        raise StructuralFileError(header_error)
    if len(lines) < 2:
        raise StructuralFileError(
            RowError.structural(
                None, ErrorCode.NO_DATA_ROWS, "File must contain at least one data row"
            )
        )


def validate_row(candidate: RowCandidate) -> RowError | None:
    """Return the first structural error of a data row, or None."""
    idx = candidate.row_index
    if candidate.field_count != EXPECTED_FIELD_COUNT:
        return RowError.structural(
            idx,
            ErrorCode.FIELD_COUNT_MISMATCH,
            f"Invalid number of fields. Expected {EXPECTED_FIELD_COUNT}, got {candidate.field_count}",
        )
    sku = candidate.sku
    if sku == "":
        return RowError.structural(idx, ErrorCode.MISSING_SKU, "SKU is required")
    qty = candidate.quantity_text
    if qty == "":
        return RowError.structural(idx, ErrorCode.MISSING_QUANTITY, "Quantity is required", sku=sku)
    if not INTEGER_PATTERN.match(qty):
        return RowError.structural(
            idx, ErrorCode.NON_INTEGER_QUANTITY, "Quantity must be an integer", sku=sku
        )
    return None


def validate_csv(text: str) -> LocalValidationReport:
    """Run the file-level checks (2-4) and the per-row checks on decoded text."""
    lines = tokenize(text)
    try:
        _check_structure(lines)
    except StructuralFileError as e:
        return LocalValidationReport(file_errors=(e.error,))

    candidates = tuple(parse_line(line) for line in lines[1:])
    row_errors = []
    for candidate in candidates:
        err = validate_row(candidate)
        if err is not None:
            row_errors.append(err)
    return LocalValidationReport(
        header=lines[0].text, row_errors=tuple(row_errors), candidates=candidates
    )
