"""Example: drive the service layer directly (no Flask).

Controllers stay thin; the attendance rules live in the services.
"""

import importlib
from datetime import date

from config import get_settings_module

from src.school_attendance.school_attendance.container import build_container
from src.school_attendance.school_attendance.core.enums import Role
from src.school_attendance.school_attendance.users.service import SessionUser


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)

    print(container.period_service.active_selection())

    bk = SessionUser(user_id=2, full_name="Bu Susi (BK)", role=Role.COUNSELING_TEACHER)
    for card in container.attendance_service.validation_board(bk, work_date=date.today()):
        print(card.to_dict())


if __name__ == "__main__":
    main()
