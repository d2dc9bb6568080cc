from __future__ import annotations

from typing import Protocol, Sequence

from .model import CaseNote


class CaseNoteRepository(Protocol):
    def list_all(self) -> Sequence[CaseNote]:
        raise NotImplementedError
