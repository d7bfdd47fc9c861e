from typing import Annotated
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from portal_backend.api.exceptions import NotFoundException
from portal_backend.api.utils import whitelisted_updates
from portal_backend.database import get_db
from portal_backend.interface.profiles import ProfileDetailsUpdate, ProfileGet
from portal_backend.interface.students import (
    StudentAcademicGet,
    StudentAcademicUpdate,
    StudentGuardianGet,
    StudentGuardianUpdate
)
from portal_backend.permissions.guards import ADMIN_ACCESS
from portal_backend.permissions.principal import Principal
from portal_backend.repositories.people import ProfileRepository, StudentRepository

student_admin_router = APIRouter()


def existing_student(student_id: str, students: StudentRepository):
    student = students.get_by_id_optional(student_id)
    if student is None:
        raise NotFoundException("Student not found")
    return student


@student_admin_router.get("/{student_id}/academic")
def get_student_academic(
    student_id: str,
    principal: Annotated[Principal, Depends(ADMIN_ACCESS)],
    db: Session = Depends(get_db)
):
    student = existing_student(student_id, StudentRepository(db))
    return {"academic": StudentAcademicGet.model_validate(student)}


@student_admin_router.patch("/{student_id}/academic")
def update_student_academic(
    student_id: str,
    payload: StudentAcademicUpdate,
    principal: Annotated[Principal, Depends(ADMIN_ACCESS)],
    db: Session = Depends(get_db)
):
    students = StudentRepository(db)
    student = existing_student(student_id, students)

    students.apply(student, whitelisted_updates(payload))

    return {"success": True}


@student_admin_router.get("/{student_id}/guardian")
def get_student_guardian(
    student_id: str,
    principal: Annotated[Principal, Depends(ADMIN_ACCESS)],
    db: Session = Depends(get_db)
):
    student = existing_student(student_id, StudentRepository(db))
    return {"guardian": StudentGuardianGet.model_validate(student)}


@student_admin_router.patch("/{student_id}/guardian")
def update_student_guardian(
    student_id: str,
    payload: StudentGuardianUpdate,
    principal: Annotated[Principal, Depends(ADMIN_ACCESS)],
    db: Session = Depends(get_db)
):
    students = StudentRepository(db)
    student = existing_student(student_id, students)

    students.apply(student, whitelisted_updates(payload))

    return {"success": True}


@student_admin_router.get("/{student_id}/profile")
def get_student_profile(
    student_id: str,
    principal: Annotated[Principal, Depends(ADMIN_ACCESS)],
    db: Session = Depends(get_db)
):
    profile = StudentRepository(db).profile_of(student_id)

    if profile is None:
        raise NotFoundException("Student not found")

    return {"profile": ProfileGet.model_validate(profile)}


@student_admin_router.patch("/{student_id}/profile")
def update_student_profile(
    student_id: str,
    payload: ProfileDetailsUpdate,
    principal: Annotated[Principal, Depends(ADMIN_ACCESS)],
    db: Session = Depends(get_db)
):
    """
    Any personal profile column may be patched; role, unit, onboarding state
    and bookkeeping columns are not part of the payload model, and unknown
    keys are dropped.
    """
    profile = StudentRepository(db).profile_of(student_id)

    if profile is None:
        raise NotFoundException("Student not found")

    ProfileRepository(db).apply(profile, whitelisted_updates(payload))

    return {"success": True}
