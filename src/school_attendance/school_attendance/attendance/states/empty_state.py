from __future__ import annotations

from ...access.policy import Capability
from ...core.enums import CellState
from ...core.exceptions import ValidationError
from .base import AttendanceCellState, SubmitMode


class EmptyCellState(AttendanceCellState):
    """No record yet: only a first submission is possible."""

    state = CellState.EMPTY

    def decide_submit(self, *, capability: Capability) -> SubmitMode:
        return SubmitMode.CREATE

    def decide_edit(self, *, capability: Capability) -> None:
        raise ValidationError("Belum ada data absensi untuk diubah")

    def decide_validate(self, *, capability: Capability) -> bool:
        raise ValidationError("Belum ada data absensi untuk divalidasi")
