"""Validation logic for uploaded CSV files."""

from .core import (
    FORMAT_ERROR_MESSAGE,
    CsvHeaderValidator,
    RawFile,
    SchemaFieldSet,
    ValidationResult,
    check_file_extension,
    normalize_header,
    row_limit_message,
    validate_csv_headers,
)

__all__ = [
    "FORMAT_ERROR_MESSAGE",
    "CsvHeaderValidator",
    "RawFile",
    "SchemaFieldSet",
    "ValidationResult",
    "check_file_extension",
    "normalize_header",
    "row_limit_message",
    "validate_csv_headers",
]
