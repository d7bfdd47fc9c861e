"""
Repository pattern implementation for direct database access.

Handlers receive repositories built around the request-scoped session;
they never issue queries themselves.
"""

from .base import (
    BaseRepository,
    RepositoryError,
    NotFoundError,
    DuplicateError
)
from .auth import AuthSessionRepository
from .people import UserRepository, ProfileRepository, StaffRepository, StudentRepository
from .academics import (
    CourseOfferingRepository,
    EnrollmentRepository,
    ResultRepository,
    AcademicSessionRepository,
    ProgramRepository
)
from .finance import PaymentReceiptRepository

__all__ = [
    "BaseRepository",
    "RepositoryError",
    "NotFoundError",
    "DuplicateError",
    "AuthSessionRepository",
    "UserRepository",
    "ProfileRepository",
    "StaffRepository",
    "StudentRepository",
    "CourseOfferingRepository",
    "EnrollmentRepository",
    "ResultRepository",
    "AcademicSessionRepository",
    "ProgramRepository",
    "PaymentReceiptRepository",
]
