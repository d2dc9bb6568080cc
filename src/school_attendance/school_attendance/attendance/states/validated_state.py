from __future__ import annotations

from ...access.policy import Capability
from ...core.enums import CellState
from ...core.exceptions import AuthorizationError
from .base import AttendanceCellState, SubmitMode

LOCKED_MESSAGE = "Absensi untuk tanggal ini telah divalidasi dan tidak dapat diubah lagi oleh peran Anda."


class ValidatedCellState(AttendanceCellState):
    """Locked. Only the override capability (Admin) may still edit; validation stays."""

    state = CellState.VALIDATED

    def decide_submit(self, *, capability: Capability) -> SubmitMode:
        if not capability.override:
            raise AuthorizationError(LOCKED_MESSAGE)
        return SubmitMode.UPDATE

    def decide_edit(self, *, capability: Capability) -> None:
        if not capability.override:
            raise AuthorizationError(LOCKED_MESSAGE)

    def decide_validate(self, *, capability: Capability) -> bool:
        return False
