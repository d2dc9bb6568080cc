from datetime import date

import pytest

from src.school_attendance.school_attendance.core.enums import Gender, Role, Semester
from src.school_attendance.school_attendance.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    NotFoundError,
    ValidationError,
)
from src.school_attendance.school_attendance.students.service import NewStudent
from src.school_attendance.school_attendance.users.service import NewStaff, SessionUser


def test_staff_login(services):
    user = services.auth_service.authenticate("walikelas", "walikelas123")

    assert user.role == Role.HOMEROOM_TEACHER
    assert user.class_label == "VII-A"
    assert user.student_id is None


def test_wrong_password_and_unknown_user(services):
    with pytest.raises(AuthenticationError):
        services.auth_service.authenticate("admin", "wrong")
    with pytest.raises(AuthenticationError):
        services.auth_service.authenticate("nobody", "admin123")


def test_student_login_checks_password_on_student_row(services):
    user = services.auth_service.authenticate("1001", "password123")

    assert user.role == Role.CLASS_REPRESENTATIVE
    assert user.student_id == 1
    assert user.class_label == "VII-A"

    with pytest.raises(AuthenticationError):
        services.auth_service.authenticate("1002", "")


def test_session_round_trip():
    user = SessionUser(7, "X", Role.STUDENT, class_label="VII-B", student_id=4)

    assert SessionUser.from_session(user.to_session()) == user


def test_admin_creates_homeroom_teacher_with_class(services):
    svc = services.user_service
    with pytest.raises(ValidationError):
        svc.create_staff(
            current_role=Role.ADMIN, username="wk2", full_name="Bu Ani", password="secret1", role=Role.HOMEROOM_TEACHER
        )

    svc.create_staff(
        current_role=Role.ADMIN,
        username="wk2",
        full_name="Bu Ani",
        password="secret1",
        role=Role.HOMEROOM_TEACHER,
        class_label="VII-B",
    )
    assert services.auth_service.authenticate("wk2", "secret1").class_label == "VII-B"


def test_staff_accounts_rules(services):
    svc = services.user_service
    with pytest.raises(AuthorizationError):
        svc.create_staff(current_role=Role.PRINCIPAL, username="x", full_name="X", password="secret1", role=Role.TEACHER)
    with pytest.raises(ValidationError):
        svc.create_staff(current_role=Role.ADMIN, username="guru", full_name="X", password="secret1", role=Role.TEACHER)
    with pytest.raises(ValidationError):
        svc.create_staff(current_role=Role.ADMIN, username="x", full_name="X", password="secret1", role=Role.STUDENT)


def test_delete_user(services):
    svc = services.user_service
    with pytest.raises(ValidationError):
        svc.delete_user(current_role=Role.ADMIN, current_user_id=1, user_id=1)
    with pytest.raises(NotFoundError):
        svc.delete_user(current_role=Role.ADMIN, current_user_id=1, user_id=999)

    svc.delete_user(current_role=Role.ADMIN, current_user_id=1, user_id=5)
    assert all(u.user_id != 5 for u in svc.list_users())


def test_new_student_gets_a_login(services):
    services.student_service.create_student(
        current_role=Role.ADMIN,
        data=NewStudent(
            nis="4001",
            full_name="Hana Putri",
            class_label="ix-a",
            gender=Gender.FEMALE,
            birth_date=date(2010, 4, 2),
            password="rahasia1",
        ),
    )

    user = services.auth_service.authenticate("4001", "rahasia1")
    assert user.role == Role.STUDENT
    assert user.class_label == "IX-A"
    assert services.student_service.list_classes() == ["VII-A", "VII-B", "VIII-A", "IX-A"]


def test_duplicate_nis_is_rejected(services):
    with pytest.raises(ValidationError):
        services.student_service.create_student(
            current_role=Role.ADMIN,
            data=NewStudent(nis="1001", full_name="Dup", class_label="VII-A", gender=Gender.MALE, birth_date=None, password="rahasia1"),
        )


def test_deleting_student_removes_their_records(services, repos, actors):
    services.attendance_service.submit(actors["bk"], work_date=date(2024, 9, 2), class_label="VIII-A", entries=[])
    services.student_service.delete_student(current_role=Role.ADMIN, student_id=6)

    assert repos["attendance_repo"].list_all() == []
    with pytest.raises(NotFoundError):
        services.student_service.delete_student(current_role=Role.ADMIN, student_id=6)


def _student_form(**overrides):
    fields = dict(
        nis="1003",
        full_name="Dewi Anggraini",
        class_label="VII-A",
        gender=Gender.FEMALE,
        birth_date=date(2012, 3, 15),
        password="",
        is_class_representative=False,
    )
    fields.update(overrides)
    return NewStudent(**fields)


def test_moving_a_student_keeps_stamped_period_on_old_records(services, repos, actors):
    monday = date(2024, 9, 2)
    services.attendance_service.submit(actors["homeroom"], work_date=monday, class_label="VII-A", entries=[])

    services.student_service.update_student(
        current_role=Role.ADMIN, student_id=3, data=_student_form(class_label="vii-b")
    )

    moved = [r for r in repos["attendance_repo"].list_all() if r.student_id == 3]
    assert [(r.period_label, r.semester) for r in moved] == [("2024/2025", Semester.ODD)]
    by_class = services.attendance_service.load_store().records_by_class(monday)
    assert [r.student_id for r in by_class["VII-B"]] == [3]
    assert sorted(r.student_id for r in by_class["VII-A"]) == [1, 2]


def test_student_edit_keeps_password_and_syncs_login(services, repos):
    services.student_service.update_student(
        current_role=Role.ADMIN, student_id=3, data=_student_form(nis="1033", is_class_representative=True)
    )

    user = services.auth_service.authenticate("1033", "password123")
    assert user.role == Role.CLASS_REPRESENTATIVE
    assert user.student_id == 3
    assert repos["users_repo"].get_by_student_id(3).username == "1033"

    with pytest.raises(ValidationError):
        services.student_service.update_student(current_role=Role.ADMIN, student_id=3, data=_student_form(nis="1001"))
    with pytest.raises(NotFoundError):
        services.student_service.update_student(current_role=Role.ADMIN, student_id=99, data=_student_form())
    with pytest.raises(AuthorizationError):
        services.student_service.update_student(current_role=Role.TEACHER, student_id=3, data=_student_form())


def test_bulk_student_import_is_checked_before_any_insert(services, repos):
    rows = [
        _student_form(nis="5001", full_name="Joko", class_label="IX-B", password="rahasia1"),
        _student_form(nis="5001", full_name="Kiki", class_label="IX-B", password="rahasia1"),
    ]
    with pytest.raises(ValidationError):
        services.student_service.bulk_create(current_role=Role.ADMIN, rows=rows)
    assert repos["students_repo"].get_by_nis("5001") is None

    ids = services.student_service.bulk_create(current_role=Role.ADMIN, rows=rows[:1])
    assert len(ids) == 1
    assert services.auth_service.authenticate("5001", "rahasia1").class_label == "IX-B"


def test_update_staff_user(services):
    svc = services.user_service
    svc.update_user(
        current_role=Role.ADMIN,
        user_id=5,
        data=NewStaff(username="guru", full_name="Pak Guru", password="", role=Role.HOMEROOM_TEACHER, class_label="viii-a"),
    )

    user = services.auth_service.authenticate("guru", "guru123")
    assert (user.role, user.class_label) == (Role.HOMEROOM_TEACHER, "VIII-A")

    with pytest.raises(ValidationError):
        svc.update_user(
            current_role=Role.ADMIN,
            user_id=5,
            data=NewStaff(username="admin", full_name="X", password="", role=Role.TEACHER),
        )
    with pytest.raises(ValidationError):
        svc.update_user(
            current_role=Role.ADMIN,
            user_id=102,
            data=NewStaff(username="1002", full_name="X", password="", role=Role.TEACHER),
        )


def test_bulk_staff_import(services):
    ids = services.user_service.create_staff_many(
        current_role=Role.ADMIN,
        rows=[
            NewStaff(username="guru2", full_name="Bu Rina", password="secret1", role=Role.TEACHER),
            NewStaff(username="bk2", full_name="Pak Dodi", password="secret1", role=Role.COUNSELING_TEACHER),
        ],
    )

    assert len(ids) == 2
    assert services.auth_service.authenticate("bk2", "secret1").role == Role.COUNSELING_TEACHER
