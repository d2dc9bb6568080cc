from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import Role
from .model import StaffUser


class UserRepository(Protocol):
    """Repository interface for login accounts.

    Note (DIP): services depend on this protocol, not on a concrete database.
    """

    def list_all(self) -> Sequence[StaffUser]:
        raise NotImplementedError

    def get_by_id(self, user_id: int) -> Optional[StaffUser]:
        raise NotImplementedError

    def get_by_username(self, username: str) -> Optional[StaffUser]:
        raise NotImplementedError

    def get_by_student_id(self, student_id: int) -> Optional[StaffUser]:
        raise NotImplementedError

    def create_user(
        self,
        *,
        username: str,
        full_name: str,
        password_hash: str,
        role: Role,
        class_label: Optional[str] = None,
        student_id: Optional[int] = None,
    ) -> int:
        raise NotImplementedError

    def update_user(
        self,
        *,
        user_id: int,
        username: str,
        full_name: str,
        role: Role,
        class_label: Optional[str] = None,
        password_hash: Optional[str] = None,
    ) -> bool:
        """`password_hash=None` keeps the stored password."""

        raise NotImplementedError

    def delete_by_id(self, user_id: int) -> bool:
        raise NotImplementedError
