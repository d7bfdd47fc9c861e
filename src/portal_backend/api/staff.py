import logging
from typing import Annotated
from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from portal_backend.api.exceptions import NotFoundException
from portal_backend.api.utils import whitelisted_updates
from portal_backend.database import get_db
from portal_backend.interface.auth import PasswordUpdate
from portal_backend.interface.profiles import ProfileDetailsUpdate
from portal_backend.permissions.auth import user_repository
from portal_backend.permissions.guards import ADMIN_ACCESS
from portal_backend.permissions.principal import Principal
from portal_backend.repositories.people import ProfileRepository, StaffRepository

staff_router = APIRouter()
logger = logging.getLogger(__name__)


@staff_router.patch("/{staff_id}/profile")
def update_staff_profile(
    staff_id: str,
    payload: ProfileDetailsUpdate,
    principal: Annotated[Principal, Depends(ADMIN_ACCESS)],
    db: Session = Depends(get_db)
):
    profile = StaffRepository(db).profile_of(staff_id)

    if profile is None:
        raise NotFoundException("Staff not found")

    ProfileRepository(db).apply(profile, whitelisted_updates(payload))

    return {"success": True}


@staff_router.patch("/{profile_id}/set-test-password")
def set_test_password(
    profile_id: str,
    payload: PasswordUpdate,
    request: Request,
    principal: Annotated[Principal, Depends(ADMIN_ACCESS)],
    db: Session = Depends(get_db)
):
    users = user_repository(request, db)
    user = users.get_by_id_optional(profile_id)

    if user is None:
        # also accept the staff row id
        staff = StaffRepository(db).get_by_id_optional(profile_id)
        user = users.get_by_id_optional(staff.profile_id) if staff is not None else None

    if user is None:
        raise NotFoundException("User not found")

    users.set_password(user, payload.password)
    logger.info(f"Password of user {user.id} reset by {principal.user_id}")

    return {"success": True}
