"""Header validation for uploaded CSV files.

A file is accepted when its extension is CSV, it has no more lines than the
row limit, and every header in its first line names a field of the target
entity type. Headers and schema fields are compared after normalization
(surrounding whitespace trimmed, lowercased).
"""
import asyncio
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, FrozenSet, Iterable, Optional, Tuple, Union

from csv_importer.config.settings import DEFAULT_ROW_LIMIT
from csv_importer.errors import FormatError, SchemaMismatchError, SizeLimitError
from csv_importer.logging_config import get_logger

logger = get_logger(name=__name__)

CSV_EXTENSION = ".csv"

FORMAT_ERROR_MESSAGE = "Invalid file format. Please upload a CSV file."


# ============================================================================
# Data classes
# ============================================================================


@dataclass(frozen=True)
class RawFile:
    """A selected file, held only for the duration of one validation attempt."""

    filename: str
    content: bytes

    async def read_text(self) -> str:
        return await asyncio.to_thread(decode_csv_bytes, self.content)

    @classmethod
    async def from_path(cls, path: Union[str, Path]) -> "RawFile":
        path = Path(path)
        content = await asyncio.to_thread(path.read_bytes)
        return cls(filename=path.name, content=content)


@dataclass(frozen=True)
class SchemaFieldSet:
    """Field identifiers of one target entity type, in source order."""

    entity_type: str = ""
    fields: Tuple[str, ...] = ()

    def normalized(self) -> FrozenSet[str]:
        return frozenset(normalize_header(name) for name in self.fields)

    @property
    def is_empty(self) -> bool:
        return not self.fields

    def __len__(self) -> int:
        return len(self.fields)


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    normalized_headers: Tuple[str, ...] = ()
    invalid_headers: Tuple[str, ...] = ()
    error_messages: Tuple[str, ...] = ()
    error_code: Optional[str] = None
    row_count: int = 0

    @classmethod
    def rejected(cls, code: str, message: str, *, row_count: int = 0) -> "ValidationResult":
        """Build an invalid result that never inspected the header row."""
        return cls(valid=False, error_messages=(message,), error_code=code, row_count=row_count)

    def raise_for_status(self) -> None:
        """Raise the typed error matching an invalid result; no-op when valid."""
        if self.valid:
            return
        message = self.error_messages[0] if self.error_messages else "Invalid file."
        if self.error_code == SizeLimitError.code:
            raise SizeLimitError(message, details={"row_count": self.row_count})
        if self.error_code == SchemaMismatchError.code:
            raise SchemaMismatchError(message, invalid_headers=self.invalid_headers)
        raise FormatError(message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "valid": self.valid,
            "normalizedHeaders": list(self.normalized_headers),
            "invalidHeaders": list(self.invalid_headers),
            "errorMessages": list(self.error_messages),
            "errorCode": self.error_code,
            "rowCount": self.row_count,
        }


# ============================================================================
# Helpers
# ============================================================================


def normalize_header(name: str) -> str:
    """Trim surrounding whitespace and lowercase a header or field name."""
    return name.strip().lower()


def decode_csv_bytes(content: bytes) -> str:
    try:
        return content.decode("utf-8-sig")
    except UnicodeDecodeError:
        return content.decode("latin-1")


def check_file_extension(filename: str, *, case_sensitive: bool = False) -> None:
    """Reject files whose name does not end in ``.csv``.

    Raises:
        FormatError: with the fixed format message.
    """
    name = filename if case_sensitive else filename.lower()
    if not name.endswith(CSV_EXTENSION):
        raise FormatError(FORMAT_ERROR_MESSAGE, details={"filename": filename})


def row_limit_message(row_limit: int) -> str:
    return f"The file contains more than {row_limit:,} rows."


# ============================================================================
# Validator
# ============================================================================


class CsvHeaderValidator:
    """Checks the shape of CSV text against a schema.

    ``validate`` is a pure function of its inputs: the same content and schema
    always produce an equal result.
    """

    def __init__(self, row_limit: int = DEFAULT_ROW_LIMIT) -> None:
        self.row_limit = row_limit

    def validate(
        self,
        content: str,
        schema: Union[SchemaFieldSet, Iterable[str]],
    ) -> ValidationResult:
        lines = content.split("\n")
        row_count = len(lines)

        # Row limit short-circuits header inspection
        if row_count > self.row_limit:
            logger.debug("Rejected file with {} rows (limit {})", row_count, self.row_limit)
            return ValidationResult.rejected(
                SizeLimitError.code,
                row_limit_message(self.row_limit),
                row_count=row_count,
            )

        if not isinstance(schema, SchemaFieldSet):
            schema = SchemaFieldSet(fields=tuple(schema))
        known_fields = schema.normalized()

        headers = tuple(normalize_header(token) for token in lines[0].split(","))
        invalid = tuple(header for header in headers if header not in known_fields)

        if invalid:
            return ValidationResult(
                valid=False,
                normalized_headers=headers,
                invalid_headers=invalid,
                error_messages=(f"Invalid headers: {', '.join(invalid)}",),
                error_code=SchemaMismatchError.code,
                row_count=row_count,
            )

        return ValidationResult(valid=True, normalized_headers=headers, row_count=row_count)


def validate_csv_headers(
    content: str,
    schema: Union[SchemaFieldSet, Iterable[str]],
    row_limit: int = DEFAULT_ROW_LIMIT,
) -> ValidationResult:
    """Validate ``content`` against ``schema`` with a one-off validator."""
    return CsvHeaderValidator(row_limit=row_limit).validate(content, schema)
