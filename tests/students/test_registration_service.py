from __future__ import annotations

from dataclasses import replace

import pytest

from mess_system.core.enums import RegistrationStatus, Role
from mess_system.core.exceptions import AuthenticationError, AuthorizationError, ValidationError
from mess_system.students.service import AuthService, RegistrationService, SignupForm


def _form(**overrides) -> SignupForm:
    form = SignupForm(
        name="Ravi Kumar",
        email="Ravi.K@nitw.ac.in",
        password="secret123",
        confirm_password="secret123",
        roll_no="21EC2002",
        branch="ECE",
        hostel_name="MegaH",
        mess_name="krishna",
        room_no="B-12",
        phone="9000000001",
        photo="data:image/jpeg;base64,/9j/AAAA",
    )
    return replace(form, **overrides)


def test_register_creates_pending_student(students_repo, fixed_now):
    svc = RegistrationService(students_repo, email_domain="nitw.ac.in")

    student_id = svc.register(_form(), now=fixed_now)

    s = students_repo.get_by_id(student_id)
    assert s.registration_status == RegistrationStatus.PENDING
    assert s.email == "ravi.k@nitw.ac.in"
    assert s.password_hash != "secret123"
    assert [p.student_id for p in svc.list_by_status(RegistrationStatus.PENDING)] == [student_id]


@pytest.mark.parametrize(
    "overrides, message",
    [
        ({"email": "ravi@gmail.com"}, "Please use your nitw.ac.in email address"),
        ({"confirm_password": "secret124"}, "Passwords do not match"),
        ({"password": "abc", "confirm_password": "abc"}, "Password must be at least 6 characters"),
        ({"phone": "12345"}, "Please enter a valid 10-digit phone number"),
        ({"branch": "ARTS"}, "Branch is not a valid option"),
        ({"name": "  "}, "Name is required"),
        ({"photo": None}, "Photo is required"),
    ],
)
def test_register_validation(students_repo, overrides, message):
    svc = RegistrationService(students_repo, email_domain="nitw.ac.in")

    with pytest.raises(ValidationError) as exc:
        svc.register(_form(**overrides))
    assert str(exc.value) == message


def test_register_rejects_duplicate_email_and_roll(students_repo, add_student):
    existing = add_student(roll_no="21EC2002", email="ravi.k@nitw.ac.in", status=RegistrationStatus.REJECTED)
    svc = RegistrationService(students_repo, email_domain="nitw.ac.in")

    with pytest.raises(ValidationError, match="Email already registered"):
        svc.register(_form())

    with pytest.raises(ValidationError, match="Roll number already registered"):
        svc.register(_form(email="other@nitw.ac.in", roll_no=existing.roll_no))


def test_approve_and_reject_flow(students_repo, add_student, fixed_now):
    a = add_student(roll_no="21CS1001", status=RegistrationStatus.PENDING)
    b = add_student(roll_no="21CS1002", status=RegistrationStatus.PENDING)
    svc = RegistrationService(students_repo)

    approved = svc.approve(current_role=Role.ADMIN, student_id=a.student_id, now=fixed_now)
    rejected = svc.reject(current_role=Role.ADMIN, student_id=b.student_id)

    assert approved.registration_status == RegistrationStatus.APPROVED
    assert approved.approved_at == fixed_now
    assert rejected.registration_status == RegistrationStatus.REJECTED
    assert svc.list_by_status(RegistrationStatus.PENDING) == []

    with pytest.raises(ValidationError):
        svc.reject(current_role=Role.ADMIN, student_id=a.student_id)


def test_only_admin_can_decide(students_repo, add_student):
    s = add_student(status=RegistrationStatus.PENDING)
    svc = RegistrationService(students_repo)

    with pytest.raises(AuthorizationError):
        svc.approve(current_role=Role.STUDENT, student_id=s.student_id)

    assert students_repo.get_by_id(s.student_id).registration_status == RegistrationStatus.PENDING


def test_search_roster_filters_approved_only(students_repo, add_student):
    add_student(roll_no="21CS1001", name="Asha Rao")
    add_student(roll_no="21CS1002", name="Bala Iyer")
    add_student(roll_no="21CS1003", name="Asha Menon", status=RegistrationStatus.PENDING)
    svc = RegistrationService(students_repo)

    assert [s.roll_no for s in svc.search_roster(term="asha")] == ["21CS1001"]
    assert len(svc.search_roster(branch="CSE", hostel="UMH")) == 2
    assert svc.search_roster(hostel="LH") == []


def test_admin_login_uses_configured_credentials(students_repo):
    auth = AuthService(students_repo, admin_email="admin@nitw.ac.in", admin_password="admin@123")

    user = auth.authenticate("ADMIN@nitw.ac.in", "admin@123", role=Role.ADMIN)
    assert user.role == Role.ADMIN

    with pytest.raises(AuthenticationError):
        auth.authenticate("admin@nitw.ac.in", "wrong", role=Role.ADMIN)


@pytest.mark.parametrize(
    "status, message",
    [
        (RegistrationStatus.PENDING, "Your registration is pending approval from admin."),
        (RegistrationStatus.REJECTED, "Your registration was rejected."),
    ],
)
def test_student_login_blocked_until_approved(students_repo, add_student, status, message):
    s = add_student(status=status)
    auth = AuthService(students_repo, admin_email="admin@nitw.ac.in", admin_password="admin@123")

    with pytest.raises(AuthenticationError) as exc:
        auth.authenticate(s.email, "secret123", role=Role.STUDENT)
    assert str(exc.value) == message


def test_student_login(students_repo, add_student):
    s = add_student()
    auth = AuthService(students_repo, admin_email="admin@nitw.ac.in", admin_password="admin@123")

    user = auth.authenticate(s.email, "secret123", role=Role.STUDENT)
    assert user.student_id == s.student_id
    assert user.role == Role.STUDENT

    with pytest.raises(AuthenticationError, match="Invalid email or password"):
        auth.authenticate(s.email, "nope", role=Role.STUDENT)
