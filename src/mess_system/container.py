from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from .attendance.aggregator import HeadCountAggregator
from .attendance.ledger import AttendanceLedger
from .attendance.memory_repository import InMemoryHeadCounts, InMemoryScanLedger
from .attendance.mysql_attendance_repository import MySQLHeadCountRepository, MySQLScanLedgerRepository
from .attendance.repository import HeadCountRepository, ScanLedgerRepository
from .attendance.service import ScanService, ScanSession
from .core.constants import DEFAULT_EMAIL_DOMAIN
from .core.exceptions import ValidationError
from .database.connection import DatabaseConnection, DBConfig
from .feedback.memory_feedback_repository import InMemoryFeedbackRepository
from .feedback.mysql_feedback_repository import MySQLFeedbackRepository
from .feedback.repository import FeedbackRepository
from .feedback.service import FeedbackService
from .meals.classifier import MealWindowClassifier, parse_meal_windows
from .menu.memory_menu_repository import InMemoryMenuRepository
from .menu.mysql_menu_repository import MySQLMenuRepository
from .menu.repository import MenuRepository
from .menu.service import MenuService
from .reports.service import ReportService
from .students.credential import CredentialService
from .students.memory_student_repository import InMemoryStudentRepository
from .students.mysql_student_repository import MySQLStudentRepository
from .students.repository import StudentRepository
from .students.roster import RosterLookup
from .students.service import AuthService, RegistrationService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    students_repo: StudentRepository
    scans_repo: ScanLedgerRepository
    head_counts_repo: HeadCountRepository
    menu_repo: MenuRepository
    feedback_repo: FeedbackRepository

    classifier: MealWindowClassifier
    roster: RosterLookup
    aggregator: HeadCountAggregator
    ledger: AttendanceLedger

    auth_service: AuthService
    registration_service: RegistrationService
    credential_service: CredentialService
    scan_service: ScanService
    scan_session: ScanSession
    menu_service: MenuService
    report_service: ReportService
    feedback_service: FeedbackService


def build_container(settings: Mapping[str, Any]) -> Container:
    backend = str(settings.get("STORAGE_BACKEND", "mysql")).lower()

    conn: Optional[DatabaseConnection] = None
    if backend == "mysql":
        conn = DatabaseConnection.get_instance(DBConfig.from_dict(dict(settings["DB_CONFIG"])))
        students_repo = MySQLStudentRepository(conn)
        scans_repo = MySQLScanLedgerRepository(conn)
        head_counts_repo = MySQLHeadCountRepository(conn)
        menu_repo = MySQLMenuRepository(conn)
        feedback_repo = MySQLFeedbackRepository(conn)
    elif backend == "memory":
        students_repo = InMemoryStudentRepository()
        scans_repo = InMemoryScanLedger()
        head_counts_repo = InMemoryHeadCounts()
        menu_repo = InMemoryMenuRepository()
        feedback_repo = InMemoryFeedbackRepository()
    else:
        raise ValidationError(f"Unknown STORAGE_BACKEND: {backend!r}")

    classifier = MealWindowClassifier(parse_meal_windows(settings.get("MEAL_WINDOWS")))
    roster = RosterLookup(students_repo)
    aggregator = HeadCountAggregator(scans_repo, head_counts_repo)
    ledger = AttendanceLedger(scans_repo, head_counts_repo, aggregator=aggregator)
    scan_service = ScanService(roster, classifier, ledger)

    return Container(
        conn=conn,
        students_repo=students_repo,
        scans_repo=scans_repo,
        head_counts_repo=head_counts_repo,
        menu_repo=menu_repo,
        feedback_repo=feedback_repo,
        classifier=classifier,
        roster=roster,
        aggregator=aggregator,
        ledger=ledger,
        auth_service=AuthService(
            students_repo,
            admin_email=str(settings.get("ADMIN_EMAIL", "")),
            admin_password=str(settings.get("ADMIN_PASSWORD", "")),
        ),
        registration_service=RegistrationService(
            students_repo,
            email_domain=str(settings.get("ALLOWED_EMAIL_DOMAIN") or DEFAULT_EMAIL_DOMAIN),
        ),
        credential_service=CredentialService(),
        scan_service=scan_service,
        scan_session=ScanSession(scan_service),
        menu_service=MenuService(menu_repo, classifier),
        report_service=ReportService(scans_repo, head_counts_repo),
        feedback_service=FeedbackService(feedback_repo, students_repo),
    )
