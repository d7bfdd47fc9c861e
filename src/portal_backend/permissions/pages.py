"""
Page guards for dashboard routes. Unlike API guards they never fail the
request: unauthenticated callers go to the sign-in page and callers with
the wrong role go back to the dashboard router.
"""

from urllib.parse import urlencode
from fastapi import Depends, Request
from sqlalchemy.orm import Session

from portal_backend.api.exceptions import RedirectException
from portal_backend.database import get_db
from portal_backend.permissions.auth import resolve_identity
from portal_backend.permissions.principal import MainRole, Principal
from portal_backend.repositories.people import ProfileRepository

LOGIN_PATH = "/login"
DASHBOARD_PATH = "/dashboard"


def login_location(request: Request) -> str:
    return f"{LOGIN_PATH}?{urlencode({'next': request.url.path})}"


class RequireRole:

    def __init__(self, role: MainRole):
        self.role = role

    def __call__(self, request: Request, db: Session = Depends(get_db)) -> Principal:
        user_id = resolve_identity(request, db)
        if user_id is None:
            raise RedirectException(login_location(request))

        profile = ProfileRepository(db).find_role(user_id)
        if profile is None or profile.main_role != self.role.value:
            raise RedirectException(DASHBOARD_PATH)

        return Principal(user_id=user_id, main_role=profile.main_role, unit=profile.unit)


def dashboard_location(request: Request, db: Session = Depends(get_db)) -> str:
    """Where ``/dashboard`` sends the caller: their own role's root page."""
    user_id = resolve_identity(request, db)
    if user_id is None:
        return login_location(request)

    profile = ProfileRepository(db).find_role(user_id)
    if profile is None:
        return LOGIN_PATH

    return f"{DASHBOARD_PATH}/{profile.main_role}"
