"""Tests for the import state machine."""

import pytest

from csv_importer.errors import InvalidStateTransition
from csv_importer.state import ImportState, ImportStateMachine


def _walk(machine, *states):
    for state in states:
        machine.transition(state)
    return machine


class TestTransitions:
    def test_happy_path(self):
        machine = _walk(
            ImportStateMachine(),
            ImportState.FILE_SELECTED,
            ImportState.VALID,
            ImportState.SUBMITTING,
            ImportState.SUCCEEDED,
        )

        assert machine.complete is True
        assert machine.in_progress is False
        assert machine.upload_enabled is False
        assert machine.submit_enabled is False

    def test_cannot_submit_from_invalid(self):
        machine = _walk(ImportStateMachine(), ImportState.FILE_SELECTED, ImportState.INVALID)

        assert machine.submit_enabled is False
        with pytest.raises(InvalidStateTransition):
            machine.transition(ImportState.SUBMITTING)

    def test_invalid_file_can_be_replaced(self):
        machine = _walk(ImportStateMachine(), ImportState.FILE_SELECTED, ImportState.INVALID)

        assert machine.upload_enabled is True
        machine.transition(ImportState.FILE_SELECTED)
        assert machine.state is ImportState.FILE_SELECTED

    def test_succeeded_is_terminal(self):
        machine = ImportStateMachine(ImportState.SUCCEEDED)

        for target in ImportState:
            assert machine.can_transition(target) is False

    def test_submitting_blocks_upload_and_resubmit(self):
        machine = _walk(
            ImportStateMachine(),
            ImportState.FILE_SELECTED,
            ImportState.VALID,
            ImportState.SUBMITTING,
        )

        assert machine.in_progress is True
        assert machine.upload_enabled is False
        assert machine.submit_enabled is False


class TestReuploadAfterFailure:
    def _failed(self, allow):
        return _walk(
            ImportStateMachine(allow_reupload_after_failure=allow),
            ImportState.FILE_SELECTED,
            ImportState.VALID,
            ImportState.SUBMITTING,
            ImportState.FAILED,
        )

    def test_failed_allows_resubmit(self):
        machine = self._failed(allow=False)

        assert machine.submit_enabled is True
        assert machine.has_valid_file is True

    def test_failed_blocks_upload_by_default(self):
        machine = self._failed(allow=False)

        assert machine.upload_enabled is False
        with pytest.raises(InvalidStateTransition):
            machine.transition(ImportState.FILE_SELECTED)

    def test_failed_allows_upload_when_enabled(self):
        machine = self._failed(allow=True)

        assert machine.upload_enabled is True
        machine.transition(ImportState.FILE_SELECTED)


class TestUploadBlockedReason:
    """The refusal message names why upload is currently blocked."""

    @pytest.mark.parametrize(
        "path, fragment",
        [
            ((ImportState.FILE_SELECTED,), "still being validated"),
            ((ImportState.FILE_SELECTED, ImportState.VALID, ImportState.SUBMITTING), "in progress"),
            (
                (ImportState.FILE_SELECTED, ImportState.VALID, ImportState.SUBMITTING, ImportState.SUCCEEDED),
                "import is complete",
            ),
            (
                (ImportState.FILE_SELECTED, ImportState.VALID, ImportState.SUBMITTING, ImportState.FAILED),
                "after a failed import",
            ),
        ],
    )
    def test_reason_matches_state(self, path, fragment):
        machine = _walk(ImportStateMachine(), *path)

        assert machine.upload_enabled is False
        assert fragment in machine.upload_blocked_reason()

    def test_initially_complete(self):
        machine = ImportStateMachine(ImportState.SUCCEEDED)

        assert "import is complete" in machine.upload_blocked_reason()
