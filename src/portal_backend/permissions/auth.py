"""
Identity resolution for inbound requests.

A caller identifies itself with a session token (``Authorization: Bearer``
or the session cookie) or with ``Authorization: Basic`` credentials. The
resolver only answers "which user is this?"; role checks live in guards.
"""

import base64
import binascii
import logging
from typing import Optional, Union
from pydantic import BaseModel
from fastapi import Request
from fastapi.security import HTTPBasicCredentials
from fastapi.security.utils import get_authorization_scheme_param
from sqlalchemy.orm import Session

from portal_backend.repositories.auth import AuthSessionRepository
from portal_backend.repositories.people import UserRepository
from portal_backend.settings import PortalSettings

logger = logging.getLogger(__name__)


class SessionTokenCredentials(BaseModel):
    """Session token taken from a Bearer header or the session cookie"""
    token: str
    source: str = "bearer"


Credentials = Union[SessionTokenCredentials, HTTPBasicCredentials]


def app_settings(request: Request) -> PortalSettings:
    """Settings resolved once by ``create_app`` and kept on the application."""
    return request.app.state.settings


def session_cookie_name(request: Request) -> str:
    return app_settings(request).SESSION_COOKIE_NAME


def user_repository(request: Request, db: Session) -> UserRepository:
    return UserRepository(db, app_settings(request).TOKEN_SECRET)


def parse_credentials(request: Request) -> Optional[Credentials]:
    """Read the request credential; the Authorization header wins over the cookie."""

    authorization = request.headers.get("Authorization")

    if authorization:
        scheme, param = get_authorization_scheme_param(authorization)

        if not param:
            return None

        if scheme.lower() == "bearer":
            return SessionTokenCredentials(token=param, source="bearer")

        elif scheme.lower() == "basic":
            try:
                data = base64.b64decode(param).decode("utf-8")
            except (ValueError, UnicodeDecodeError, binascii.Error) as e:
                logger.warning(f"Failed to decode Basic auth: {e}")
                return None

            username, separator, password = data.partition(":")
            if not separator:
                return None
            return HTTPBasicCredentials(username=username, password=password)

        logger.warning(f"Unsupported auth scheme: {scheme}")
        return None

    cookie = request.cookies.get(session_cookie_name(request))
    if cookie:
        return SessionTokenCredentials(token=cookie, source="cookie")

    return None


def resolve_identity(request: Request, db: Session) -> Optional[str]:
    """
    Return the authenticated user id, or None when the request carries no
    valid credential. Never raises for bad credentials.
    """
    credentials = parse_credentials(request)

    if credentials is None:
        return None

    if isinstance(credentials, SessionTokenCredentials):
        return AuthSessionRepository(db).find_active_user_id(credentials.token)

    elif isinstance(credentials, HTTPBasicCredentials):
        user = user_repository(request, db).verify_credentials(credentials.username, credentials.password)
        return user.id if user is not None else None

    return None


def session_token(request: Request) -> Optional[str]:
    credentials = parse_credentials(request)
    if isinstance(credentials, SessionTokenCredentials):
        return credentials.token
    return None
