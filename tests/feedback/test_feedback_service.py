from __future__ import annotations

from datetime import datetime

import pytest

from mess_system.core.enums import FeedbackStatus, RegistrationStatus, Role
from mess_system.core.exceptions import AuthorizationError, ValidationError
from mess_system.feedback.memory_feedback_repository import InMemoryFeedbackRepository
from mess_system.feedback.service import FeedbackService


def _svc(students_repo):
    return FeedbackService(InMemoryFeedbackRepository(), students_repo)


def test_student_submits_pending_feedback(students_repo, add_student, fixed_now):
    s = add_student()
    svc = _svc(students_repo)

    entry = svc.submit(
        current_role=Role.STUDENT,
        student_id=s.student_id,
        category="hygiene",
        message="  Tables were not wiped after lunch. ",
        now=fixed_now,
    )

    assert entry.status == FeedbackStatus.PENDING
    assert entry.student_id == s.roll_no
    assert entry.student_name == s.name
    assert entry.message == "Tables were not wiped after lunch."
    assert entry.as_dict()["created_at"] == "2026-03-02T08:00:00"


@pytest.mark.parametrize(
    "category, message, error",
    [
        ("", "hi", "Please select a feedback category"),
        ("gossip", "hi", "Please select a feedback category"),
        ("service", "   ", "Please enter your feedback message"),
    ],
)
def test_submit_validation(students_repo, add_student, category, message, error):
    s = add_student()

    with pytest.raises(ValidationError) as exc:
        _svc(students_repo).submit(current_role=Role.STUDENT, student_id=s.student_id, category=category, message=message)
    assert str(exc.value) == error


def test_only_approved_students_submit(students_repo, add_student):
    pending = add_student(status=RegistrationStatus.PENDING)
    svc = _svc(students_repo)

    with pytest.raises(AuthorizationError):
        svc.submit(current_role=Role.STUDENT, student_id=pending.student_id, category="service", message="x")
    with pytest.raises(AuthorizationError):
        svc.submit(current_role=Role.ADMIN, student_id=pending.student_id, category="service", message="x")


def test_admin_lists_filters_and_toggles(students_repo, add_student):
    s = add_student()
    svc = _svc(students_repo)
    first = svc.submit(
        current_role=Role.STUDENT,
        student_id=s.student_id,
        category="complaint",
        message="Cold rotis",
        now=datetime(2026, 3, 2, 13, 0),
    )
    second = svc.submit(
        current_role=Role.STUDENT,
        student_id=s.student_id,
        category="suggestion",
        message="More fruit at breakfast",
        now=datetime(2026, 3, 3, 8, 0),
    )

    resolved = svc.toggle(current_role=Role.ADMIN, feedback_id=first.feedback_id)

    assert resolved.status == FeedbackStatus.RESOLVED
    assert [f.feedback_id for f in svc.list_feedback(current_role=Role.ADMIN)] == [second.feedback_id, first.feedback_id]
    assert [f.feedback_id for f in svc.list_feedback(current_role=Role.ADMIN, status="pending")] == [second.feedback_id]
    assert [f.feedback_id for f in svc.list_feedback(current_role=Role.ADMIN, status="resolved")] == [first.feedback_id]

    reopened = svc.toggle(current_role=Role.ADMIN, feedback_id=first.feedback_id)
    assert reopened.status == FeedbackStatus.PENDING


def test_admin_only_review(students_repo):
    svc = _svc(students_repo)

    with pytest.raises(AuthorizationError):
        svc.list_feedback(current_role=Role.STUDENT)
    with pytest.raises(AuthorizationError):
        svc.toggle(current_role=Role.STUDENT, feedback_id=1)
    with pytest.raises(ValidationError):
        svc.toggle(current_role=Role.ADMIN, feedback_id=99)
    with pytest.raises(ValidationError):
        svc.list_feedback(current_role=Role.ADMIN, status="closed")
