from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum

from ...access.policy import Capability
from ...core.enums import CellState


class SubmitMode(str, Enum):
    CREATE = "create"
    UPDATE = "update"


class AttendanceCellState(ABC):
    """State Pattern: what a (class, date) cell allows in its current lifecycle state.

    Role/scope checks happen in the policy before a state is consulted; states
    only decide what the lifecycle permits.
    """

    state: CellState

    @abstractmethod
    def decide_submit(self, *, capability: Capability) -> SubmitMode:
        raise NotImplementedError

    @abstractmethod
    def decide_edit(self, *, capability: Capability) -> None:
        """Raise when existing records of the cell may not be edited."""

        raise NotImplementedError

    @abstractmethod
    def decide_validate(self, *, capability: Capability) -> bool:
        """True when validation must be applied, False for a no-op."""

        raise NotImplementedError
