from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import CellState
from .states.base import AttendanceCellState
from .states.draft_state import DraftCellState
from .states.empty_state import EmptyCellState
from .states.validated_state import ValidatedCellState


@dataclass
class CellStateFactory:
    """Factory Pattern: map a derived cell state to its behaviour object."""

    def for_state(self, state: CellState) -> AttendanceCellState:
        if state == CellState.EMPTY:
            return EmptyCellState()
        if state == CellState.VALIDATED:
            return ValidatedCellState()
        return DraftCellState()
