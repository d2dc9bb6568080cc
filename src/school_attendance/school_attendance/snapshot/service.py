from __future__ import annotations

from datetime import date
from typing import Optional

from ..access.policy import AccessPolicy, Actor
from ..attendance.repository import AttendanceRepository
from ..attendance.store import AttendanceStore
from ..case_notes.repository import CaseNoteRepository
from ..common.datetime_utils import today_local
from ..core.enums import Role
from ..periods.repository import PeriodRepository
from ..periods.resolver import default_selection
from ..settings.repository import SettingsRepository
from ..students.repository import StudentRepository
from ..users.repository import UserRepository

CASE_NOTES_SCREEN = "Catatan Kasus"


class SnapshotService:
    """Fetch-all read model: everything the caller may see, in one payload.

    Returned after every successful mutation so clients never show stale data.
    """

    def __init__(
        self,
        *,
        students: StudentRepository,
        users: UserRepository,
        attendance: AttendanceRepository,
        periods: PeriodRepository,
        case_notes: CaseNoteRepository,
        settings: SettingsRepository,
        policy: AccessPolicy | None = None,
    ):
        self._students = students
        self._users = users
        self._attendance = attendance
        self._periods = periods
        self._case_notes = case_notes
        self._settings = settings
        self._policy = policy or AccessPolicy()

    def build(self, actor: Actor, *, today: Optional[date] = None) -> dict:
        store = AttendanceStore(self._attendance.list_all(), self._students.list_all())
        students = self._policy.visible_students(actor, store.students)
        visible_ids = {s.student_id for s in students}

        if actor.role == Role.ADMIN:
            users = list(self._users.list_all())
        else:
            users = [u for u in self._users.list_all() if u.user_id == getattr(actor, "user_id", None)]

        if CASE_NOTES_SCREEN in self._policy.screens(actor):
            case_notes = [c for c in self._case_notes.list_all() if c.student_id in visible_ids]
        else:
            case_notes = []

        periods = list(self._periods.list_all())
        active = default_selection(periods, today or today_local())

        return {
            "siswa": [s.to_dict() for s in students],
            "users": [u.to_dict() for u in users],
            "absensi": [r.to_dict() for r in self._policy.visible_records(actor, store)],
            "tahun_ajaran": [p.to_dict() for p in periods],
            "catatan_kasus": [c.to_dict() for c in case_notes],
            "settings": self._settings.get_all(),
            "active_period": active.to_dict() if active else None,
        }
