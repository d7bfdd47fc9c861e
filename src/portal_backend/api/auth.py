import logging
from typing import Annotated
from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.orm import Session

from portal_backend.api.exceptions import UnauthorizedException
from portal_backend.database import get_db
from portal_backend.interface.auth import LoginRequest, LoginResponse
from portal_backend.permissions.auth import app_settings, session_cookie_name, session_token, user_repository
from portal_backend.permissions.guards import AUTHENTICATED
from portal_backend.permissions.principal import Principal
from portal_backend.repositories.auth import AuthSessionRepository
from portal_backend.repositories.people import ProfileRepository

auth_router = APIRouter()
logger = logging.getLogger(__name__)


@auth_router.post("/login", response_model=LoginResponse)
def login(credentials: LoginRequest, request: Request, response: Response, db: Session = Depends(get_db)):

    user = user_repository(request, db).verify_credentials(credentials.email, credentials.password)

    if user is None:
        logger.warning(f"Failed login for {credentials.email}")
        raise UnauthorizedException("Invalid credentials")

    profile = ProfileRepository(db).find_role(user.id)

    if profile is None:
        raise UnauthorizedException()

    ttl_hours = app_settings(request).SESSION_TTL_HOURS
    session = AuthSessionRepository(db).issue(user.id, ttl_hours)

    response.set_cookie(
        key=session_cookie_name(request),
        value=session.token,
        max_age=ttl_hours * 3600,
        httponly=True,
        samesite="lax"
    )

    logger.info(f"User {user.id} logged in as {profile.main_role}")

    return LoginResponse(
        access_token=session.token,
        expires_at=session.expires_at,
        main_role=profile.main_role
    )


@auth_router.post("/logout")
def logout(
    principal: Annotated[Principal, Depends(AUTHENTICATED)],
    request: Request,
    response: Response,
    db: Session = Depends(get_db)
):
    token = session_token(request)

    if token is not None:
        AuthSessionRepository(db).revoke(token)

    response.delete_cookie(session_cookie_name(request))
    logger.info(f"User {principal.user_id} logged out")

    return {"success": True}


@auth_router.post("/onboarding/complete")
def complete_onboarding(principal: Annotated[Principal, Depends(AUTHENTICATED)], db: Session = Depends(get_db)):

    profiles = ProfileRepository(db)
    profiles.complete_onboarding(profiles.get_by_id(principal.get_user_id_or_throw()))

    return {"ok": True}
