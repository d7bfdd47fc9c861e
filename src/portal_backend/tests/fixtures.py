"""
Seed helpers for the test suite.

Each helper commits what it creates so the rows are visible to requests
going through the TestClient.
"""

import re
from datetime import date, timedelta
from typing import Dict, Optional
from unittest.mock import MagicMock
from uuid import uuid4
from sqlalchemy import event
from sqlalchemy.orm import Session

from portal_backend.interface.tokens import encrypt_secret
from portal_backend.model import (
    AcademicSession,
    AuthSession,
    Course,
    CourseOffering,
    CourseOfferingProgram,
    CourseOfferingStaff,
    PaymentReceipt,
    Profile,
    Program,
    Staff,
    Student,
    StudentRegistration,
    User
)
from portal_backend.model.base import utcnow
from portal_backend.repositories.auth import AuthSessionRepository
from portal_backend.settings import settings

DEFAULT_PASSWORD = "secret"


def short_id() -> str:
    return uuid4().hex[:8]


def make_user(
    db: Session,
    role: Optional[str],
    unit: Optional[str] = None,
    email: Optional[str] = None,
    password: str = DEFAULT_PASSWORD,
    first_name: str = "Test",
    last_name: str = "User",
    secret_key: Optional[str] = None
) -> User:
    """Create a user and, unless ``role`` is None, its profile."""
    user = User(
        email=email or f"{short_id()}@portal.test",
        password=encrypt_secret(password, secret_key or settings.TOKEN_SECRET)
    )
    db.add(user)
    db.flush()

    if role is not None:
        db.add(Profile(
            id=user.id,
            email=user.email,
            first_name=first_name,
            last_name=last_name,
            main_role=role,
            unit=unit
        ))

    db.commit()
    return user


def make_staff(
    db: Session,
    role: str = "academic_staff",
    staff_code: Optional[str] = None,
    status: str = "active",
    first_name: str = "Lecturer",
    last_name: Optional[str] = None
) -> Staff:
    user = make_user(db, role, first_name=first_name, last_name=last_name or short_id())
    staff = Staff(profile_id=user.id, staff_code=staff_code or f"STF-{short_id()}", status=status)
    db.add(staff)
    db.commit()
    return staff


def make_program(db: Session, name: Optional[str] = None) -> Program:
    program = Program(name=name or f"Program {short_id()}")
    db.add(program)
    db.commit()
    return program


def make_session(db: Session, name: Optional[str] = None, is_active: bool = False, created_at=None) -> AcademicSession:
    session = AcademicSession(name=name or f"Session {short_id()}", is_active=is_active)
    if created_at is not None:
        session.created_at = created_at
    db.add(session)
    db.commit()
    return session


def make_course(db: Session, code: Optional[str] = None) -> Course:
    course = Course(code=code or f"CSC{short_id()}", title="Introduction to Computing", credits=3)
    db.add(course)
    db.commit()
    return course


def make_offering(
    db: Session,
    session: Optional[AcademicSession] = None,
    program: Optional[Program] = None,
    course: Optional[Course] = None,
    semester: str = "first",
    level: Optional[str] = "100",
    is_published: bool = False,
    linked_programs=(),
    created_at=None
) -> CourseOffering:
    offering = CourseOffering(
        course_id=(course or make_course(db)).id,
        session_id=(session or make_session(db)).id,
        program_id=program.id if program is not None else None,
        semester=semester,
        level=level,
        is_published=is_published
    )
    if created_at is not None:
        offering.created_at = created_at
    db.add(offering)
    db.flush()

    for linked in linked_programs:
        db.add(CourseOfferingProgram(course_offering_id=offering.id, program_id=linked.id))

    db.commit()
    return offering


def assign(db: Session, offering: CourseOffering, staff: Staff) -> None:
    db.add(CourseOfferingStaff(course_offering_id=offering.id, staff_id=staff.id))
    db.commit()


def make_student(
    db: Session,
    program: Optional[Program] = None,
    session: Optional[AcademicSession] = None,
    level: Optional[str] = "100",
    status: Optional[str] = "active",
    registered: bool = True,
    matric_no: Optional[str] = None,
    first_name: str = "Student"
) -> Student:
    """Create a student with its user and profile; registers it for ``session``."""
    user = make_user(db, "student", first_name=first_name, last_name=short_id())
    student = Student(
        profile_id=user.id,
        matric_no=matric_no or f"MAT/{short_id()}",
        program_id=program.id if program is not None else None,
        course_session_id=session.id if session is not None else None,
        level=level,
        status=status
    )
    db.add(student)
    db.flush()

    if registered and session is not None:
        db.add(StudentRegistration(student_id=student.id, session_id=session.id))

    db.commit()
    return student


def make_receipt(
    db: Session,
    student: Student,
    session: Optional[AcademicSession] = None,
    status: str = "pending",
    semester: Optional[str] = "first",
    payment_type: str = "school_fees",
    amount_paid: float = 50000.0,
    transaction_reference: Optional[str] = None,
    created_at=None
) -> PaymentReceipt:
    receipt = PaymentReceipt(
        student_id=student.id,
        session_id=session.id if session is not None else None,
        semester=semester,
        payment_type=payment_type,
        amount_paid=amount_paid,
        payment_date=date(2026, 9, 1),
        transaction_reference=transaction_reference or f"TRX-{short_id()}",
        status=status
    )
    if created_at is not None:
        receipt.created_at = created_at
    db.add(receipt)
    db.commit()
    return receipt


def bearer(db: Session, user: User) -> Dict[str, str]:
    session = AuthSessionRepository(db).issue(user.id, 1)
    return {"Authorization": f"Bearer {session.token}"}


def expired_bearer(db: Session, user: User) -> Dict[str, str]:
    session = AuthSession(
        user_id=user.id,
        token=f"expired-{short_id()}",
        expires_at=utcnow() - timedelta(minutes=5)
    )
    db.add(session)
    db.commit()
    return {"Authorization": f"Bearer {session.token}"}


def fresh(db: Session, model, entity_id: str):
    """Reload a row, dropping whatever the session cached before the request."""
    db.expire_all()
    return db.get(model, entity_id)


class StatementRecorder:
    """Collects the SQL text of every statement executed on an engine."""

    def __init__(self, engine):
        self.engine = engine
        self.statements = []

    def _record(self, conn, cursor, statement, parameters, context, executemany):
        self.statements.append(statement)

    def __enter__(self):
        event.listen(self.engine, "before_cursor_execute", self._record)
        return self

    def __exit__(self, *args):
        event.remove(self.engine, "before_cursor_execute", self._record)

    def selecting_from(self, table: str):
        pattern = re.compile(rf"\bFROM {table}\b")
        return [s for s in self.statements if pattern.search(s)]


def mock_session() -> MagicMock:
    """A Session double whose every query returns nothing."""
    db = MagicMock(spec=Session)

    query_mock = MagicMock()
    query_mock.filter = MagicMock(return_value=query_mock)
    query_mock.join = MagicMock(return_value=query_mock)
    query_mock.options = MagicMock(return_value=query_mock)
    query_mock.order_by = MagicMock(return_value=query_mock)
    query_mock.first = MagicMock(return_value=None)
    query_mock.all = MagicMock(return_value=[])
    query_mock.scalar = MagicMock(return_value=None)

    db.query = MagicMock(return_value=query_mock)
    return db
