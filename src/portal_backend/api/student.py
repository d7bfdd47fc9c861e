from typing import Annotated, Optional
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from portal_backend.api.exceptions import BadRequestException, ForbiddenException, NotFoundException
from portal_backend.database import get_db
from portal_backend.interface.offerings import (
    AcademicSessionGet,
    AvailableOffering,
    CourseGet,
    Lecturer,
    StudentEnrollmentGet
)
from portal_backend.model.academics import CourseOffering
from portal_backend.permissions.guards import STUDENT_ACCESS
from portal_backend.permissions.principal import Principal
from portal_backend.repositories.academics import CourseOfferingRepository, EnrollmentRepository
from portal_backend.repositories.people import StudentRepository

student_router = APIRouter()


def available_offering(offering: CourseOffering) -> AvailableOffering:
    return AvailableOffering(
        id=offering.id,
        semester=offering.semester,
        level=offering.level,
        session=AcademicSessionGet.model_validate(offering.session),
        course=CourseGet.model_validate(offering.course),
        lecturers=[
            Lecturer(id=a.staff.id, name=a.staff.profile.full_name)
            for a in offering.staff_assignments
        ]
    )


@student_router.get("/enrollments")
def list_my_enrollments(
    principal: Annotated[Principal, Depends(STUDENT_ACCESS)],
    session_id: Optional[str] = None,
    db: Session = Depends(get_db)
):
    student = principal.get_student_or_throw()
    enrollments = EnrollmentRepository(db).for_student(student.id, session_id)

    return {"enrollments": [StudentEnrollmentGet.model_validate(e) for e in enrollments]}


@student_router.get("/enrollments/available")
def list_available_offerings(
    principal: Annotated[Principal, Depends(STUDENT_ACCESS)],
    session_id: Optional[str] = None,
    db: Session = Depends(get_db)
):
    session_id = (session_id or "").strip()
    if not session_id:
        return {"offerings": []}

    student = principal.get_student_or_throw()
    if student.program_id is None:
        raise BadRequestException("Invalid student context")

    if not StudentRepository(db).is_registered(student.id, session_id):
        return {"offerings": []}

    offerings = CourseOfferingRepository(db).find_available(session_id, student.program_id)

    return {"offerings": [available_offering(o) for o in offerings]}


@student_router.post("/enrollments/{offering_id}")
def enroll_myself(
    offering_id: str,
    principal: Annotated[Principal, Depends(STUDENT_ACCESS)],
    db: Session = Depends(get_db)
):
    student = principal.get_student_or_throw()
    if student.program_id is None:
        raise BadRequestException("Student is missing program_id")

    offerings = CourseOfferingRepository(db)
    offering = offerings.get_by_id_optional(offering_id)

    if offering is None:
        raise NotFoundException("Course offering not found")

    if not offering.is_published:
        raise ForbiddenException("Course offering is not published")

    if not StudentRepository(db).is_registered(student.id, offering.session_id):
        raise ForbiddenException("You are not registered for this session.")

    if not offerings.is_open_to_program(offering, student.program_id):
        raise ForbiddenException("You are not eligible for this course offering.")

    if not EnrollmentRepository(db).enroll(student.id, offering.id):
        return {"ok": True, "already_enrolled": True}

    return {"ok": True}


@student_router.delete("/enrollments/{offering_id}")
def withdraw_myself(
    offering_id: str,
    principal: Annotated[Principal, Depends(STUDENT_ACCESS)],
    db: Session = Depends(get_db)
):
    student = principal.get_student_or_throw()
    EnrollmentRepository(db).withdraw(student.id, offering_id)

    return {"ok": True}
