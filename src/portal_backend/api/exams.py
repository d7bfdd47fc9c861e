import logging
from typing import Annotated
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from portal_backend.api.exceptions import ForbiddenException, NotFoundException
from portal_backend.database import get_db
from portal_backend.interface.offerings import (
    CourseOfferingDetail,
    CourseOfferingGet,
    EnrollmentDelete,
    EnrollmentPair,
    ResultSubmit
)
from portal_backend.interface.students import RosterEntry, RosterStudent
from portal_backend.permissions.guards import EXAMS_ACCESS
from portal_backend.permissions.principal import Principal
from portal_backend.permissions.query_builders import OfferingVisibilityQueryBuilder
from portal_backend.repositories.academics import (
    CourseOfferingRepository,
    EnrollmentRepository,
    ResultRepository
)
from portal_backend.repositories.people import StudentRepository

exams_router = APIRouter()
logger = logging.getLogger(__name__)


def require_visible(db: Session, principal: Principal, offering_id: str) -> None:
    """Academic staff may only touch offerings they are assigned to."""
    if not OfferingVisibilityQueryBuilder(db).can_view(principal, offering_id):
        raise ForbiddenException()


@exams_router.get("/course-offerings")
def list_course_offerings(principal: Annotated[Principal, Depends(EXAMS_ACCESS)], db: Session = Depends(get_db)):

    query = OfferingVisibilityQueryBuilder(db).build(principal)

    if query is None:
        return {"offerings": []}

    return {"offerings": [CourseOfferingGet.model_validate(o) for o in query.all()]}


@exams_router.get("/course-offerings/{offering_id}")
def get_course_offering(
    offering_id: str,
    principal: Annotated[Principal, Depends(EXAMS_ACCESS)],
    db: Session = Depends(get_db)
):
    if not OfferingVisibilityQueryBuilder(db).can_view(principal, offering_id):
        raise NotFoundException("Course offering not found")

    offerings = CourseOfferingRepository(db)
    offering = offerings.get_detail(offering_id)

    if offering is None:
        raise NotFoundException("Course offering not found")

    detail = CourseOfferingDetail.model_validate(offering)
    detail.enrollment_count = offerings.count_enrollments(offering_id)

    return {"offering": detail}


@exams_router.get("/eligible-students/{offering_id}")
def list_eligible_students(
    offering_id: str,
    principal: Annotated[Principal, Depends(EXAMS_ACCESS)],
    db: Session = Depends(get_db)
):
    require_visible(db, principal, offering_id)

    offering = CourseOfferingRepository(db).get_by_id_optional(offering_id)

    if offering is None:
        raise NotFoundException("Course offering not found")

    students = StudentRepository(db).find_eligible_for_offering(offering)

    return {"students": [RosterStudent.model_validate(s) for s in students]}


@exams_router.get("/enrollments/{offering_id}")
def get_roster(
    offering_id: str,
    principal: Annotated[Principal, Depends(EXAMS_ACCESS)],
    db: Session = Depends(get_db)
):
    require_visible(db, principal, offering_id)

    roster = EnrollmentRepository(db).roster(offering_id)

    return {"roster": [RosterEntry.model_validate(e) for e in roster]}


@exams_router.post("/enrollments")
def create_enrollment(
    payload: EnrollmentPair,
    principal: Annotated[Principal, Depends(EXAMS_ACCESS)],
    db: Session = Depends(get_db)
):
    require_visible(db, principal, payload.course_offering_id)

    created = EnrollmentRepository(db).enroll(payload.student_id, payload.course_offering_id)

    if not created:
        return {"success": True, "already_enrolled": True}

    return {"success": True}


@exams_router.delete("/enrollments")
def delete_enrollment(
    payload: EnrollmentDelete,
    principal: Annotated[Principal, Depends(EXAMS_ACCESS)],
    db: Session = Depends(get_db)
):
    enrollments = EnrollmentRepository(db)

    if payload.enrollment_id is not None:
        enrollment = enrollments.get_by_id_optional(payload.enrollment_id)
        deleted = 0
        if enrollment is not None:
            require_visible(db, principal, enrollment.course_offering_id)
            deleted = enrollments.delete_by(id=payload.enrollment_id)
    else:
        require_visible(db, principal, payload.course_offering_id)
        deleted = enrollments.withdraw(payload.student_id, payload.course_offering_id)

    logger.info(f"Enrollment delete by {principal.user_id} removed {deleted} row(s)")

    return {"success": True}


@exams_router.post("/results")
def submit_result(
    payload: ResultSubmit,
    principal: Annotated[Principal, Depends(EXAMS_ACCESS)],
    db: Session = Depends(get_db)
):
    require_visible(db, principal, payload.course_offering_id)

    ResultRepository(db).upsert(payload.model_dump(), entered_by=principal.get_user_id_or_throw())

    return {"success": True}
