"""CSV import component: header validation and submission to an import processor."""

from .errors import (
    FormatError,
    ImportPreconditionError,
    ImporterError,
    InvalidStateTransition,
    ProcessingError,
    SchemaFetchError,
    SchemaMismatchError,
    SizeLimitError,
    UploadDisabledError,
)
from .importer import CsvImporter
from .models import (
    ImporterConfig,
    ImporterStatus,
    ImportOutcome,
    ImportRequest,
    NavigationAction,
    Notification,
)
from .state import ImportState, ImportStateMachine
from .validation import (
    CsvHeaderValidator,
    RawFile,
    SchemaFieldSet,
    ValidationResult,
    check_file_extension,
    validate_csv_headers,
)

__all__ = [
    "CsvImporter",
    "CsvHeaderValidator",
    "RawFile",
    "SchemaFieldSet",
    "ValidationResult",
    "check_file_extension",
    "validate_csv_headers",
    "ImporterConfig",
    "ImporterStatus",
    "ImportOutcome",
    "ImportRequest",
    "NavigationAction",
    "Notification",
    "ImportState",
    "ImportStateMachine",
    # Errors
    "ImporterError",
    "FormatError",
    "SizeLimitError",
    "SchemaMismatchError",
    "SchemaFetchError",
    "ProcessingError",
    "ImportPreconditionError",
    "UploadDisabledError",
    "InvalidStateTransition",
]
