"""Typed errors raised by the importer and its collaborator gateways."""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence


class ImporterError(Exception):
    """Base error carrying a human-readable message and a stable code."""

    code = "IMPORTER_ERROR"

    def __init__(
        self,
        message: str,
        *,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


# ============================================================================
# File validation
# ============================================================================


class FormatError(ImporterError):
    """The file extension is not recognized as CSV."""

    code = "FORMAT_ERROR"


class SizeLimitError(ImporterError):
    """The file has more lines than the configured row limit."""

    code = "SIZE_LIMIT_ERROR"


class SchemaMismatchError(ImporterError):
    """One or more headers are absent from the target schema."""

    code = "SCHEMA_MISMATCH_ERROR"

    def __init__(self, message: str, *, invalid_headers: Sequence[str] = ()) -> None:
        super().__init__(message, details={"invalid_headers": list(invalid_headers)})
        self.invalid_headers: List[str] = list(invalid_headers)


# ============================================================================
# Collaborator faults
# ============================================================================


class GatewayError(ImporterError):
    """A collaborator HTTP call failed at the transport or protocol level."""

    code = "GATEWAY_ERROR"

    def __init__(
        self,
        message: str,
        *,
        upstream_status: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, details=details)
        self.upstream_status = upstream_status


class SchemaFetchError(GatewayError):
    """Field metadata for the target entity type could not be retrieved."""

    code = "SCHEMA_FETCH_ERROR"


class ProcessingError(GatewayError):
    """The import processor could not be reached or did not answer properly."""

    code = "PROCESSING_ERROR"


# ============================================================================
# Caller errors
# ============================================================================


class ImportPreconditionError(ImporterError):
    """Submission attempted without a valid file."""

    code = "IMPORT_PRECONDITION"


class UploadDisabledError(ImporterError):
    """File selection attempted while uploads are disabled."""

    code = "UPLOAD_DISABLED"


class InvalidStateTransition(ImporterError):
    code = "INVALID_STATE_TRANSITION"
