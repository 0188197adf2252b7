"""Finite-state model of one import attempt.

    IDLE -> FILE_SELECTED -> VALID | INVALID
    VALID -> SUBMITTING -> SUCCEEDED | FAILED
    FAILED -> SUBMITTING

A new file may be selected from VALID and INVALID, and from FAILED only when
re-upload after failure is enabled. SUCCEEDED is terminal.
"""
from enum import Enum
from typing import Dict, FrozenSet

from csv_importer.errors import InvalidStateTransition
from csv_importer.logging_config import get_logger

logger = get_logger(name=__name__)


class ImportState(str, Enum):
    IDLE = "idle"
    FILE_SELECTED = "file_selected"
    VALID = "valid"
    INVALID = "invalid"
    SUBMITTING = "submitting"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


TRANSITIONS: Dict[ImportState, FrozenSet[ImportState]] = {
    ImportState.IDLE: frozenset({ImportState.FILE_SELECTED}),
    ImportState.FILE_SELECTED: frozenset({ImportState.VALID, ImportState.INVALID}),
    ImportState.VALID: frozenset({ImportState.FILE_SELECTED, ImportState.SUBMITTING}),
    ImportState.INVALID: frozenset({ImportState.FILE_SELECTED}),
    ImportState.SUBMITTING: frozenset({ImportState.SUCCEEDED, ImportState.FAILED}),
    ImportState.FAILED: frozenset({ImportState.SUBMITTING, ImportState.FILE_SELECTED}),
    ImportState.SUCCEEDED: frozenset(),
}


class ImportStateMachine:
    """Owns the current state of one importer instance and guards transitions."""

    def __init__(
        self,
        initial: ImportState = ImportState.IDLE,
        *,
        allow_reupload_after_failure: bool = False,
    ) -> None:
        self._state = initial
        self.allow_reupload_after_failure = allow_reupload_after_failure

    @property
    def state(self) -> ImportState:
        return self._state

    def can_transition(self, target: ImportState) -> bool:
        if target not in TRANSITIONS[self._state]:
            return False
        if self._state is ImportState.FAILED and target is ImportState.FILE_SELECTED:
            return self.allow_reupload_after_failure
        return True

    def transition(self, target: ImportState) -> ImportState:
        if not self.can_transition(target):
            raise InvalidStateTransition(
                f"Cannot move from {self._state.value} to {target.value}",
                details={"from": self._state.value, "to": target.value},
            )
        logger.debug("Import state {} -> {}", self._state.value, target.value)
        self._state = target
        return target

    # ==================== Derived flags ====================

    @property
    def in_progress(self) -> bool:
        return self._state is ImportState.SUBMITTING

    @property
    def complete(self) -> bool:
        return self._state is ImportState.SUCCEEDED

    @property
    def upload_enabled(self) -> bool:
        return self.can_transition(ImportState.FILE_SELECTED)

    @property
    def submit_enabled(self) -> bool:
        return self.can_transition(ImportState.SUBMITTING)

    @property
    def has_valid_file(self) -> bool:
        """The most recent validation passed and its content is still held."""
        return self._state in (
            ImportState.VALID,
            ImportState.SUBMITTING,
            ImportState.SUCCEEDED,
            ImportState.FAILED,
        )

    def upload_blocked_reason(self) -> str:
        if self._state is ImportState.FILE_SELECTED:
            return "File upload is disabled while a file is still being validated."
        if self._state is ImportState.SUBMITTING:
            return "File upload is disabled while an import is in progress."
        if self._state is ImportState.SUCCEEDED:
            return "File upload is disabled once the import is complete."
        if self._state is ImportState.FAILED:
            return "File upload is disabled after a failed import."
        return "File upload is disabled."
