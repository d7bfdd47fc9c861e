"""
Repositories for course offerings and the records hanging off them:
staff assignments, enrollments, results, sessions and programs.

Composite-key writes (staff assignment, enrollment, result) are issued as
single INSERT ... ON CONFLICT statements against the table's unique
constraint, using the dialect of the bound engine.
"""

import logging
from typing import Any, Dict, List, Optional
from sqlalchemy import or_, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from .base import BaseRepository, RepositoryError, raw_message
from ..model.academics import (
    AcademicSession,
    CourseOffering,
    CourseOfferingProgram,
    CourseOfferingStaff,
    Enrollment,
    Program,
    Result
)
from ..model.base import utcnow
from ..model.people import Staff, Student

logger = logging.getLogger(__name__)

RESULT_FIELDS = (
    "ca_score",
    "exam_score",
    "total_score",
    "grade_letter",
    "grade_points",
    "remark",
)


def dialect_insert(db: Session, model):
    dialect = db.get_bind().dialect.name

    if dialect == "postgresql":
        return postgresql.insert(model.__table__)
    elif dialect == "sqlite":
        return sqlite.insert(model.__table__)

    raise RepositoryError(f"Conflict-aware insert is not supported on {dialect}")


class CourseOfferingRepository(BaseRepository[CourseOffering]):
    """Repository for CourseOffering rows and their staff assignments."""

    def __init__(self, db: Session):
        super().__init__(db, CourseOffering)

    def get_detail(self, offering_id: str) -> Optional[CourseOffering]:
        return (
            self.db.query(CourseOffering)
            .options(joinedload(CourseOffering.course), joinedload(CourseOffering.session))
            .filter(CourseOffering.id == offering_id)
            .first()
        )

    def count_staff(self, offering_id: str) -> int:
        return self.db.query(CourseOfferingStaff).filter(
            CourseOfferingStaff.course_offering_id == offering_id
        ).count()

    def count_enrollments(self, offering_id: str) -> int:
        return self.db.query(Enrollment).filter(
            Enrollment.course_offering_id == offering_id
        ).count()

    def set_published(self, offering: CourseOffering, is_published: bool) -> CourseOffering:
        offering = self.apply(offering, {"is_published": is_published})
        logger.info(f"Course offering {offering.id} is_published={is_published}")
        return offering

    def assigned_staff_ids(self, offering_id: str) -> List[str]:
        rows = (
            self.db.query(CourseOfferingStaff.staff_id)
            .filter(CourseOfferingStaff.course_offering_id == offering_id)
            .all()
        )
        return [row.staff_id for row in rows]

    def assign_staff(self, offering_id: str, staff_ids: List[str]) -> int:
        """
        Insert (offering, staff) pairs, skipping pairs that already exist.

        Returns:
            Number of newly assigned staff
        """
        if not staff_ids:
            return 0

        stmt = dialect_insert(self.db, CourseOfferingStaff).on_conflict_do_nothing(
            index_elements=["course_offering_id", "staff_id"]
        )

        assigned = 0
        try:
            for staff_id in staff_ids:
                result = self.db.execute(
                    stmt.values(course_offering_id=offering_id, staff_id=staff_id)
                )
                assigned += result.rowcount or 0
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise RepositoryError(raw_message(e))

        logger.info(f"Assigned {assigned} staff to course offering {offering_id}")
        return assigned

    def is_open_to_program(self, offering: CourseOffering, program_id: Optional[str]) -> bool:
        if program_id is None:
            return False
        if offering.program_id == program_id:
            return True
        return self.db.query(CourseOfferingProgram.id).filter(
            CourseOfferingProgram.course_offering_id == offering.id,
            CourseOfferingProgram.program_id == program_id
        ).first() is not None

    def find_available(self, session_id: str, program_id: str) -> List[CourseOffering]:
        """Published offerings of a session that are open to a program."""
        linked = select(CourseOfferingProgram.course_offering_id).where(
            CourseOfferingProgram.program_id == program_id
        )

        return (
            self.db.query(CourseOffering)
            .options(
                joinedload(CourseOffering.course),
                joinedload(CourseOffering.session),
                joinedload(CourseOffering.staff_assignments)
                .joinedload(CourseOfferingStaff.staff)
                .joinedload(Staff.profile)
            )
            .filter(
                CourseOffering.session_id == session_id,
                CourseOffering.is_published.is_(True),
                or_(CourseOffering.program_id == program_id, CourseOffering.id.in_(linked))
            )
            .order_by(CourseOffering.semester.asc(), CourseOffering.created_at.desc())
            .all()
        )


class EnrollmentRepository(BaseRepository[Enrollment]):
    """Repository for Enrollment pairs; the pair is unique at storage level."""

    def __init__(self, db: Session):
        super().__init__(db, Enrollment)

    def enroll(self, student_id: str, course_offering_id: str) -> bool:
        """
        Insert an enrollment pair.

        Returns:
            True when a row was created, False when the pair already existed
        """
        stmt = (
            dialect_insert(self.db, Enrollment)
            .values(student_id=student_id, course_offering_id=course_offering_id)
            .on_conflict_do_nothing(index_elements=["student_id", "course_offering_id"])
        )

        try:
            result = self.db.execute(stmt)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise RepositoryError(raw_message(e))

        created = (result.rowcount or 0) > 0
        logger.info(f"Enrollment {student_id}/{course_offering_id} created={created}")
        return created

    def withdraw(self, student_id: str, course_offering_id: str) -> int:
        return self.delete_by(student_id=student_id, course_offering_id=course_offering_id)

    def roster(self, course_offering_id: str) -> List[Enrollment]:
        return (
            self.db.query(Enrollment)
            .options(joinedload(Enrollment.student).joinedload(Student.profile))
            .filter(Enrollment.course_offering_id == course_offering_id)
            .order_by(Enrollment.enrolled_at.asc())
            .all()
        )

    def for_student(self, student_id: str, session_id: Optional[str] = None) -> List[Enrollment]:
        query = (
            self.db.query(Enrollment)
            .join(CourseOffering, CourseOffering.id == Enrollment.course_offering_id)
            .options(
                joinedload(Enrollment.course_offering).joinedload(CourseOffering.course),
                joinedload(Enrollment.course_offering).joinedload(CourseOffering.session)
            )
            .filter(Enrollment.student_id == student_id)
        )

        if session_id:
            query = query.filter(CourseOffering.session_id == session_id)

        return query.order_by(Enrollment.enrolled_at.desc()).all()


class ResultRepository(BaseRepository[Result]):
    """Repository for Result rows keyed by (student, offering)."""

    def __init__(self, db: Session):
        super().__init__(db, Result)

    def upsert(self, values: Dict[str, Any], entered_by: str) -> None:
        """
        Insert or overwrite the result of a (student, offering) pair.

        ``entered_by`` always comes from the authenticated caller, never
        from ``values``.
        """
        row = {key: values.get(key) for key in RESULT_FIELDS}
        row.update(
            student_id=values["student_id"],
            course_offering_id=values["course_offering_id"],
            entered_by=entered_by
        )

        stmt = dialect_insert(self.db, Result).values(**row)
        stmt = stmt.on_conflict_do_update(
            index_elements=["student_id", "course_offering_id"],
            set_={
                **{key: stmt.excluded[key] for key in RESULT_FIELDS},
                "entered_by": stmt.excluded.entered_by,
                "updated_at": utcnow(),
            }
        )

        try:
            self.db.execute(stmt)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise RepositoryError(raw_message(e))

        logger.info(f"Result upserted for {row['student_id']}/{row['course_offering_id']} by {entered_by}")


class AcademicSessionRepository(BaseRepository[AcademicSession]):

    def __init__(self, db: Session):
        super().__init__(db, AcademicSession)

    def list_recent(self, limit: int) -> List[AcademicSession]:
        """Active sessions first, then newest first."""
        return (
            self.db.query(AcademicSession)
            .order_by(AcademicSession.is_active.desc(), AcademicSession.created_at.desc())
            .limit(limit)
            .all()
        )


class ProgramRepository(BaseRepository[Program]):

    def __init__(self, db: Session):
        super().__init__(db, Program)

    def list_by_name(self) -> List[Program]:
        return self.db.query(Program).order_by(Program.name.asc()).all()
