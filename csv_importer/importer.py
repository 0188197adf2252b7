"""CSV import component.

Drives one import attempt end to end:

1. ``connect`` fetches the field names of the target entity type
2. ``select_file`` checks the extension, reads the file and validates headers
3. ``submit`` forwards validated content to the import processor
4. ``advance`` hands control back to the host workflow

Each validation and import attempt emits exactly one notification.
"""
from typing import List, Optional

from csv_importer.config.settings import Settings, get_settings
from csv_importer.errors import (
    FormatError,
    ImportPreconditionError,
    ProcessingError,
    SchemaFetchError,
    SchemaMismatchError,
    SizeLimitError,
    UploadDisabledError,
)
from csv_importer.logging_config import get_logger
from csv_importer.models import (
    GENERIC_PROCESSING_ERROR,
    ImporterConfig,
    ImporterStatus,
    ImportOutcome,
    ImportRequest,
    NavigationAction,
    Notification,
)
from csv_importer.navigation import WorkflowNavigator, build_batch_review_url
from csv_importer.notifications import NotificationSink
from csv_importer.processor import ImportProcessor
from csv_importer.schema_source import SchemaSource
from csv_importer.state import ImportState, ImportStateMachine
from csv_importer.validation import (
    CsvHeaderValidator,
    RawFile,
    SchemaFieldSet,
    ValidationResult,
    check_file_extension,
)

logger = get_logger(name=__name__)

SCHEMA_FETCH_ERROR_TITLE = "Error fetching object fields"
FILE_VALID_MESSAGE = "File is valid and ready for processing."
ROW_LIMIT_NOTIFICATION = "File exceeds row limit."
IMPORT_SUCCESS_MESSAGE = "CSV Imported Successfully!"


class CsvImporter:
    """One instance per host component; owns its file, validation and outcome."""

    def __init__(
        self,
        config: ImporterConfig,
        *,
        schema_source: SchemaSource,
        processor: ImportProcessor,
        notifier: NotificationSink,
        navigator: WorkflowNavigator,
        settings: Optional[Settings] = None,
    ) -> None:
        self.config = config
        self.settings = settings or get_settings()
        self._schema_source = schema_source
        self._processor = processor
        self._notifier = notifier
        self._navigator = navigator
        self._validator = CsvHeaderValidator(row_limit=self.settings.row_limit)
        self._log = logger.bind(entity=config.target_entity_type)

        initial = ImportState.SUCCEEDED if config.import_complete else ImportState.IDLE
        self._machine = ImportStateMachine(
            initial,
            allow_reupload_after_failure=self.settings.allow_reupload_after_failure,
        )

        self.schema = SchemaFieldSet(entity_type=config.target_entity_type)
        self.file_content: Optional[str] = None
        self.last_validation: Optional[ValidationResult] = None
        self.last_outcome: Optional[ImportOutcome] = None
        self.error_messages: List[str] = []

    def bind_log_context(self, **extra) -> None:
        """Attach extra fields (e.g. a session id) to this importer's log records."""
        self._log = self._log.bind(**extra)

    # ==================== Schema ====================

    async def connect(self) -> SchemaFieldSet:
        """Fetch the schema once; a failure leaves it empty and is reported."""
        entity_type = self.config.target_entity_type
        try:
            self.schema = await self._schema_source.fetch_fields(entity_type)
        except SchemaFetchError as exc:
            self._log.warning("Schema fetch failed: {}", exc.message)
            self._notifier.notify(Notification.error(exc.message, title=SCHEMA_FETCH_ERROR_TITLE))
        return self.schema

    # ==================== Validation ====================

    async def select_file(self, raw_file: RawFile) -> ValidationResult:
        """Validate a newly chosen file and record the result."""
        if not self._machine.upload_enabled:
            raise UploadDisabledError(self._machine.upload_blocked_reason())
        self._machine.transition(ImportState.FILE_SELECTED)
        self.file_content = None

        try:
            check_file_extension(
                raw_file.filename,
                case_sensitive=self.settings.csv_extension_case_sensitive,
            )
        except FormatError as exc:
            self._log.info("Rejected {}: {}", raw_file.filename, exc.message)
            result = ValidationResult.rejected(exc.code, exc.message)
            self._record_validation(result)
            self._notifier.notify(Notification.error(exc.message))
            return result

        content = await raw_file.read_text()
        result = self._validator.validate(content, self.schema)
        self._record_validation(result)

        try:
            result.raise_for_status()
        except SizeLimitError as exc:
            self._log.info("Rejected {}: {} rows", raw_file.filename, exc.details["row_count"])
            notification = Notification.error(ROW_LIMIT_NOTIFICATION)
        except SchemaMismatchError as exc:
            self._log.info("Rejected {}: unknown headers {}", raw_file.filename, exc.invalid_headers)
            notification = Notification.error("; ".join(result.error_messages))
        else:
            self._log.info("Validated {}: {} rows", raw_file.filename, result.row_count)
            self.file_content = content
            notification = Notification.success(FILE_VALID_MESSAGE)

        self._notifier.notify(notification)
        return result

    def _record_validation(self, result: ValidationResult) -> None:
        self.last_validation = result
        self.error_messages = list(result.error_messages)
        self._machine.transition(ImportState.VALID if result.valid else ImportState.INVALID)

    # ==================== Import ====================

    async def submit(self) -> ImportOutcome:
        """Send the validated file to the import processor.

        Every processor failure, expected or not, ends as a failed outcome.

        Raises:
            ImportPreconditionError: no valid file, or an import is running or done.
        """
        if not self._machine.submit_enabled:
            raise ImportPreconditionError(
                f"Cannot import while in state {self._machine.state.value}."
            )
        request = ImportRequest.for_validated_file(
            self.file_content,
            self.last_validation,
            self.config.target_entity_type,
            self.config.batch_id,
        )

        self._machine.transition(ImportState.SUBMITTING)
        outcome: Optional[ImportOutcome] = None
        try:
            outcome = await self._processor.process(request)
        except ProcessingError as exc:
            self._log.error("Import processing failed: {}", exc.message)
            outcome = ImportOutcome.from_error(exc)
        except Exception:
            self._log.exception("Import processor raised an unexpected error")
            outcome = ImportOutcome(
                success=False,
                error_messages=[GENERIC_PROCESSING_ERROR],
                message=GENERIC_PROCESSING_ERROR,
            )
        finally:
            succeeded = outcome is not None and outcome.success
            self._machine.transition(ImportState.SUCCEEDED if succeeded else ImportState.FAILED)

        self.last_outcome = outcome
        if outcome.success:
            self._log.info("Import completed")
            self._notifier.notify(Notification.success(IMPORT_SUCCESS_MESSAGE))
        else:
            self.error_messages = list(outcome.error_messages)
            message = outcome.message or "; ".join(outcome.error_messages) or GENERIC_PROCESSING_ERROR
            self._notifier.notify(Notification.error(message))
        return outcome

    # ==================== Workflow ====================

    def advance(self) -> NavigationAction:
        """Finish the host workflow, or redirect to the batch review page."""
        batch_id = self.config.batch_id
        if not batch_id:
            self._navigator.finish()
            return NavigationAction(kind="finish")

        url = build_batch_review_url(batch_id, self.settings.batch_review_url_template)
        self._navigator.redirect(url)
        return NavigationAction(kind="redirect", url=url)

    # ==================== Derived state ====================

    @property
    def state(self) -> ImportState:
        return self._machine.state

    @property
    def is_file_valid(self) -> bool:
        if self.last_validation is None:
            return self.config.is_file_valid
        return self._machine.has_valid_file

    @property
    def import_complete(self) -> bool:
        return self._machine.complete

    @property
    def import_in_progress(self) -> bool:
        return self._machine.in_progress

    @property
    def show_import_button(self) -> bool:
        return self._machine.state in (
            ImportState.VALID,
            ImportState.SUBMITTING,
            ImportState.FAILED,
        )

    @property
    def disable_upload_input(self) -> bool:
        return not self._machine.upload_enabled

    @property
    def disable_import_button(self) -> bool:
        return self.import_in_progress or not self.show_import_button

    @property
    def is_batch_id_null(self) -> bool:
        return not self.config.batch_id

    def status(self) -> ImporterStatus:
        return ImporterStatus(
            state=self.state.value,
            target_entity_type=self.config.target_entity_type,
            batch_id=self.config.batch_id,
            is_file_valid=self.is_file_valid,
            import_complete=self.import_complete,
            import_in_progress=self.import_in_progress,
            show_import_button=self.show_import_button,
            disable_upload_input=self.disable_upload_input,
            disable_import_button=self.disable_import_button,
            is_batch_id_null=self.is_batch_id_null,
            schema_field_count=len(self.schema),
            error_messages=list(self.error_messages),
        )
