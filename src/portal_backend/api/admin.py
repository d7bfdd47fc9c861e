import logging
from typing import Annotated
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from portal_backend.api.exceptions import BadRequestException, NotFoundException
from portal_backend.api.utils import clamp, unique_uuids
from portal_backend.database import get_db
from portal_backend.interface.offerings import (
    AcademicSessionList,
    AssignStaffRequest,
    EligibleStaff,
    PublishToggle
)
from portal_backend.permissions.guards import ADMIN_ACCESS, ADMIN_OR_BURSARY
from portal_backend.permissions.principal import Principal
from portal_backend.repositories.academics import AcademicSessionRepository, CourseOfferingRepository
from portal_backend.repositories.people import StaffRepository

admin_router = APIRouter()
logger = logging.getLogger(__name__)

SESSIONS_DEFAULT_LIMIT = 50
SESSIONS_MAX_LIMIT = 200


def existing_offering(offering_id: str, offerings: CourseOfferingRepository):
    offering = offerings.get_by_id_optional(offering_id)
    if offering is None:
        raise NotFoundException("Course offering not found")
    return offering


@admin_router.patch("/course-offerings/{offering_id}/publish")
def publish_course_offering(
    offering_id: str,
    payload: PublishToggle,
    principal: Annotated[Principal, Depends(ADMIN_ACCESS)],
    db: Session = Depends(get_db)
):
    offerings = CourseOfferingRepository(db)
    offering = existing_offering(offering_id, offerings)

    # staff check must run before the write
    if payload.is_published and offerings.count_staff(offering_id) == 0:
        raise BadRequestException("Cannot publish without assigned staff")

    offering = offerings.set_published(offering, payload.is_published)

    return {"success": True, "id": offering.id, "is_published": offering.is_published}


@admin_router.get("/course-offerings/{offering_id}/assign-staff")
def list_offering_staff(
    offering_id: str,
    principal: Annotated[Principal, Depends(ADMIN_ACCESS)],
    db: Session = Depends(get_db)
):
    offerings = CourseOfferingRepository(db)
    existing_offering(offering_id, offerings)

    eligible = [
        EligibleStaff(
            id=staff.id,
            staff_code=staff.staff_code,
            designation=staff.designation,
            name=staff.profile.full_name
        )
        for staff in StaffRepository(db).find_eligible_academic()
    ]

    return {
        "assigned_staff_ids": offerings.assigned_staff_ids(offering_id),
        "eligible_staff": eligible,
    }


@admin_router.post("/course-offerings/{offering_id}/assign-staff")
def assign_offering_staff(
    offering_id: str,
    payload: AssignStaffRequest,
    principal: Annotated[Principal, Depends(ADMIN_ACCESS)],
    db: Session = Depends(get_db)
):
    offerings = CourseOfferingRepository(db)
    existing_offering(offering_id, offerings)

    staff_ids = unique_uuids(payload.staff_ids)
    if not staff_ids:
        raise BadRequestException("No valid staff UUIDs provided")

    eligible = StaffRepository(db).find_eligible_academic(staff_ids)
    if not eligible:
        raise BadRequestException("Selected staff are not eligible")

    assigned = offerings.assign_staff(offering_id, [staff.id for staff in eligible])

    return {"ok": True, "assigned": assigned}


@admin_router.get("/sessions")
def list_sessions(
    principal: Annotated[Principal, Depends(ADMIN_OR_BURSARY)],
    limit: int = SESSIONS_DEFAULT_LIMIT,
    db: Session = Depends(get_db)
):
    sessions = AcademicSessionRepository(db).list_recent(clamp(limit, 1, SESSIONS_MAX_LIMIT))

    return {"ok": True, "sessions": [AcademicSessionList.model_validate(s) for s in sessions]}
