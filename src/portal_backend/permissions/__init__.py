"""
Authorization for the portal API.

Main components:
- principal: the authenticated caller and its role record
- auth: identity resolution from session tokens and Basic credentials
- guards: API access policies producing Granted / Denied results
- pages: redirecting guards for dashboard routes
- query_builders: role-scoped course offering queries
"""

from .principal import Principal, MainRole, Unit, StudentContext
from .guards import (
    AccessGuard,
    Granted,
    Denied,
    GuardResult,
    ADMIN_ACCESS,
    ADMIN_OR_BURSARY,
    EXAMS_ACCESS,
    STUDENT_ACCESS,
    AUTHENTICATED,
)
from .pages import RequireRole, dashboard_location
from .query_builders import OfferingVisibilityQueryBuilder

__all__ = [
    "Principal",
    "MainRole",
    "Unit",
    "StudentContext",
    "AccessGuard",
    "Granted",
    "Denied",
    "GuardResult",
    "ADMIN_ACCESS",
    "ADMIN_OR_BURSARY",
    "EXAMS_ACCESS",
    "STUDENT_ACCESS",
    "AUTHENTICATED",
    "RequireRole",
    "dashboard_location",
    "OfferingVisibilityQueryBuilder",
]
