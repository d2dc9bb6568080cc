from __future__ import annotations

from ...access.policy import Capability
from ...core.enums import CellState
from .base import AttendanceCellState, SubmitMode


class DraftCellState(AttendanceCellState):
    """Records exist and are not validated yet: editable, validatable."""

    state = CellState.DRAFT

    def decide_submit(self, *, capability: Capability) -> SubmitMode:
        return SubmitMode.UPDATE

    def decide_edit(self, *, capability: Capability) -> None:
        return None

    def decide_validate(self, *, capability: Capability) -> bool:
        return True
