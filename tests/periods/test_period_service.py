from datetime import date

import pytest

from src.school_attendance.school_attendance.core.enums import Role, Semester
from src.school_attendance.school_attendance.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from src.school_attendance.school_attendance.periods.service import PeriodInput


def _payload(**overrides):
    payload = {
        "tahun_ajaran": "2026/2027",
        "semester_ganjil_start": "2026-07-13",
        "semester_ganjil_end": "2026-12-18",
        "semester_genap_start": "2027-01-04",
        "semester_genap_end": "2027-06-18",
    }
    payload.update(overrides)
    return payload


def test_admin_creates_period_and_it_resolves(services):
    svc = services.period_service
    svc.create(current_role=Role.ADMIN, data=PeriodInput.from_payload(_payload()))

    match = svc.resolve(date(2027, 2, 1))
    assert match.label == "2026/2027"
    assert match.semester == Semester.EVEN


def test_non_admin_cannot_create_period(services):
    with pytest.raises(AuthorizationError):
        services.period_service.create(current_role=Role.COUNSELING_TEACHER, data=PeriodInput.from_payload(_payload()))


def test_missing_label_is_rejected():
    with pytest.raises(ValidationError):
        PeriodInput.from_payload(_payload(tahun_ajaran=""))


def test_bad_date_is_rejected():
    with pytest.raises(ValidationError):
        PeriodInput.from_payload(_payload(semester_genap_end="18-06-2027"))


def test_semester_end_before_start_is_rejected(services):
    data = PeriodInput.from_payload(_payload(semester_ganjil_end="2026-07-01"))

    with pytest.raises(ValidationError):
        services.period_service.create(current_role=Role.ADMIN, data=data)


def test_overlapping_semesters_in_one_period_are_rejected(services):
    data = PeriodInput.from_payload(_payload(semester_genap_start="2026-12-01"))

    with pytest.raises(ValidationError):
        services.period_service.create(current_role=Role.ADMIN, data=data)


def test_update_unknown_period(services):
    with pytest.raises(NotFoundError):
        services.period_service.update(current_role=Role.ADMIN, period_id=99, data=PeriodInput.from_payload(_payload()))


def test_delete_period_leaves_a_gap(services):
    svc = services.period_service
    svc.delete(current_role=Role.ADMIN, period_id=1)

    assert svc.resolve(date(2024, 9, 2)) is None
    with pytest.raises(NotFoundError):
        svc.delete(current_role=Role.ADMIN, period_id=1)


def test_active_selection_uses_today(services):
    match = services.period_service.active_selection(today=date(2024, 9, 2))

    assert match.label == "2024/2025"
    assert match.semester == Semester.ODD
