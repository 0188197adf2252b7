"""Pydantic models exchanged with the host and the import processor."""

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from csv_importer.errors import ImportPreconditionError, ProcessingError
from csv_importer.validation import ValidationResult

GENERIC_PROCESSING_ERROR = "An error occurred while processing the CSV file."


class ImporterConfig(BaseModel):
    """Inputs supplied by the host when an importer is instantiated."""

    model_config = ConfigDict(populate_by_name=True)

    target_entity_type: str = Field(alias="objectApiName", min_length=1)
    is_file_valid: bool = Field(default=False, alias="isFileValid")
    import_complete: bool = Field(default=False, alias="importComplete")
    batch_id: Optional[str] = Field(default=None, alias="batchId")


class ImportRequest(BaseModel):
    """Validated CSV content bound for the import processor."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    content: str = Field(alias="csvContent")
    target_entity_type: str = Field(alias="objectApiName")
    batch_id: Optional[str] = Field(default=None, alias="batchId")

    @classmethod
    def for_validated_file(
        cls,
        content: Optional[str],
        validation: Optional[ValidationResult],
        target_entity_type: str,
        batch_id: Optional[str] = None,
    ) -> "ImportRequest":
        """Build a request, refusing content whose latest validation failed."""
        if content is None or validation is None or not validation.valid:
            raise ImportPreconditionError("Only a validated CSV file can be imported.")
        return cls(content=content, target_entity_type=target_entity_type, batch_id=batch_id)

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True)


class ImportOutcome(BaseModel):
    """Terminal result of one import attempt."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    success: bool
    error_messages: List[str] = Field(default_factory=list, alias="errorMessages")
    message: str = ""

    @classmethod
    def from_error(cls, exc: ProcessingError) -> "ImportOutcome":
        message = exc.message or GENERIC_PROCESSING_ERROR
        return cls(success=False, error_messages=[message], message=message)


class Notification(BaseModel):
    """A toast-style status message for the user."""

    model_config = ConfigDict(frozen=True)

    title: str
    message: str
    variant: Literal["success", "error"]

    @classmethod
    def success(cls, message: str, title: str = "Success") -> "Notification":
        return cls(title=title, message=message, variant="success")

    @classmethod
    def error(cls, message: str, title: str = "Error") -> "Notification":
        return cls(title=title, message=message, variant="error")


class NavigationAction(BaseModel):
    kind: Literal["finish", "redirect"]
    url: Optional[str] = None


class HeaderDisplay(BaseModel):
    """Declarative header shown above the import step."""

    icon_name: str
    title_text: str
    logo_link: Optional[str] = None


class ImporterStatus(BaseModel):
    """Snapshot of an importer's state and the flags derived from it."""

    state: str
    target_entity_type: str
    batch_id: Optional[str]
    is_file_valid: bool
    import_complete: bool
    import_in_progress: bool
    show_import_button: bool
    disable_upload_input: bool
    disable_import_button: bool
    is_batch_id_null: bool
    schema_field_count: int
    error_messages: List[str]
