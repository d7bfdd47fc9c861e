from typing import Annotated
from fastapi import APIRouter, Depends, status
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session

from portal_backend.database import get_db
from portal_backend.permissions.pages import RequireRole, dashboard_location
from portal_backend.permissions.principal import MainRole, Principal
from portal_backend.repositories.people import ProfileRepository

dashboard_router = APIRouter()


@dashboard_router.get("")
def dashboard_root(location: Annotated[str, Depends(dashboard_location)]):
    return RedirectResponse(location, status_code=status.HTTP_307_TEMPORARY_REDIRECT)


def dashboard_endpoint(role: MainRole):

    def dashboard(principal: Annotated[Principal, Depends(RequireRole(role))], db: Session = Depends(get_db)):
        profile = ProfileRepository(db).get_by_id(principal.get_user_id_or_throw())
        return {
            "dashboard": role.value,
            "user_id": principal.user_id,
            "name": profile.full_name,
            "unit": profile.unit,
        }

    dashboard.__name__ = f"{role.value}_dashboard"
    return dashboard


for _role in MainRole:
    dashboard_router.add_api_route(f"/{_role.value}", dashboard_endpoint(_role), methods=["GET"])
