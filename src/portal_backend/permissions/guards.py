"""
API access guards.

A guard composes identity resolution, the profile role lookup and, for the
student surface, the caller's own Student row into one decision. The
decision is a tagged value, ``Granted`` or ``Denied``; the FastAPI
dependency turns ``Denied`` into the terminal HTTP error so handlers only
ever receive a granted Principal.

Evaluation order is fixed: identity, profile, role, student row. A step
only runs when every earlier step passed.
"""

import logging
from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterable, Optional, Union
from fastapi import Depends, Request, status
from sqlalchemy.orm import Session

from portal_backend.api.exceptions import InternalServerException, response_to_http_exception
from portal_backend.database import get_db
from portal_backend.interface.profiles import ProfileRole
from portal_backend.permissions.auth import resolve_identity
from portal_backend.permissions.principal import MainRole, Principal, StudentContext, Unit
from portal_backend.repositories.people import ProfileRepository, StudentRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Granted:
    principal: Principal

    @property
    def role(self) -> Optional[MainRole]:
        return self.principal.main_role


@dataclass(frozen=True)
class Denied:
    status_code: int
    message: str


GuardResult = Union[Granted, Denied]

UNAUTHORIZED = Denied(status.HTTP_401_UNAUTHORIZED, "Unauthorized")
FORBIDDEN = Denied(status.HTTP_403_FORBIDDEN, "Forbidden")
STUDENT_NOT_FOUND = Denied(status.HTTP_404_NOT_FOUND, "Student record not found")
STUDENT_INACTIVE = Denied(status.HTTP_403_FORBIDDEN, "Student is not active")


class AccessGuard:
    """
    Role policy usable as a FastAPI dependency.

    Args:
        name: Policy name used in log lines
        roles: Main roles allowed regardless of unit
        unit_roles: Main roles allowed only for the listed units
        requires_student: Resolve the caller's own Student row
        any_role: Allow every provisioned role
    """

    def __init__(
        self,
        name: str,
        roles: Iterable[MainRole] = (),
        unit_roles: Optional[Dict[MainRole, Iterable[Unit]]] = None,
        requires_student: bool = False,
        any_role: bool = False
    ):
        self.name = name
        self.roles: FrozenSet[MainRole] = frozenset(roles)
        self.unit_roles: Dict[MainRole, FrozenSet[Unit]] = {
            role: frozenset(units) for role, units in (unit_roles or {}).items()
        }
        self.requires_student = requires_student
        self.any_role = any_role

    def allows(self, profile: ProfileRole) -> bool:
        if self.any_role:
            return True

        try:
            role = MainRole(profile.main_role)
        except ValueError:
            return False

        if role in self.roles:
            return True

        units = self.unit_roles.get(role)
        return units is not None and profile.unit is not None and profile.unit in {u.value for u in units}

    def evaluate(self, request: Request, db: Session) -> GuardResult:
        user_id = resolve_identity(request, db)
        if user_id is None:
            return UNAUTHORIZED

        profile = ProfileRepository(db).find_role(user_id)
        if profile is None:
            return UNAUTHORIZED

        if not self.allows(profile):
            return FORBIDDEN

        principal = Principal(
            user_id=user_id,
            main_role=profile.main_role,
            unit=profile.unit
        )

        if self.requires_student:
            student = StudentRepository(db).find_by_profile(user_id)
            if student is None:
                return STUDENT_NOT_FOUND
            if student.status and student.status != "active":
                return STUDENT_INACTIVE
            principal.student = StudentContext.model_validate(student)

        return Granted(principal)

    def __call__(self, request: Request, db: Session = Depends(get_db)) -> Principal:
        result = self.evaluate(request, db)

        if isinstance(result, Granted):
            return result.principal

        elif isinstance(result, Denied):
            logger.warning(
                f"{self.name} denied {request.method} {request.url.path}: "
                f"{result.status_code} {result.message}"
            )
            raise response_to_http_exception(result.status_code, result.message)

        raise InternalServerException(f"Unhandled guard result {result!r}")


ADMIN_ACCESS = AccessGuard("admin", roles=[MainRole.ADMIN])

ADMIN_OR_BURSARY = AccessGuard(
    "admin_or_bursary",
    roles=[MainRole.ADMIN, MainRole.NON_ACADEMIC_STAFF]
)

EXAMS_ACCESS = AccessGuard(
    "exams",
    roles=[MainRole.ADMIN, MainRole.ACADEMIC_STAFF],
    unit_roles={MainRole.NON_ACADEMIC_STAFF: [Unit.EXAMS]}
)

STUDENT_ACCESS = AccessGuard("student", roles=[MainRole.STUDENT], requires_student=True)

AUTHENTICATED = AccessGuard("authenticated", any_role=True)
