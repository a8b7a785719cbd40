from .local_validator import (
    LocalValidationReport,
    StructuralFileError,
    check_file_type,
    validate_csv,
    validate_header,
    validate_row,
)

__all__ = [
    "LocalValidationReport",
    "StructuralFileError",
    "check_file_type",
    "validate_csv",
    "validate_header",
    "validate_row",
]
