from typing import Annotated
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from portal_backend.api.exceptions import NotFoundException
from portal_backend.api.utils import whitelisted_updates
from portal_backend.database import get_db
from portal_backend.interface.profiles import ProfileGet, ProfileMeUpdate
from portal_backend.permissions.guards import AUTHENTICATED
from portal_backend.permissions.principal import Principal
from portal_backend.repositories.people import ProfileRepository

profile_router = APIRouter()


def own_profile(principal: Principal, profiles: ProfileRepository):
    profile = profiles.get_by_id_optional(principal.get_user_id_or_throw())
    if profile is None:
        raise NotFoundException("Profile not found")
    return profile


@profile_router.get("/me")
def get_my_profile(principal: Annotated[Principal, Depends(AUTHENTICATED)], db: Session = Depends(get_db)):

    profile = own_profile(principal, ProfileRepository(db))

    return {"profile": ProfileGet.model_validate(profile)}


@profile_router.patch("/me")
def update_my_profile(
    payload: ProfileMeUpdate,
    principal: Annotated[Principal, Depends(AUTHENTICATED)],
    db: Session = Depends(get_db)
):
    profiles = ProfileRepository(db)
    profile = own_profile(principal, profiles)

    profile = profiles.apply(profile, whitelisted_updates(payload))

    return {"profile": ProfileGet.model_validate(profile)}
