from .base import Base, metadata
from .auth import User, AuthSession
from .people import Profile, Staff, Student, MAIN_ROLES, UNITS
from .academics import (
    Program,
    Department,
    AcademicSession,
    Course,
    CourseOffering,
    CourseOfferingProgram,
    CourseOfferingStaff,
    StudentRegistration,
    Enrollment,
    Result
)
from .finance import PaymentReceipt, FEE_TYPES, RECEIPT_STATUSES, SEMESTERS

# Import all models to ensure relationships are properly set up
from . import auth, people, academics, finance

__all__ = [
    'Base',
    'metadata',
    # Auth models
    'User',
    'AuthSession',
    # People
    'Profile',
    'Staff',
    'Student',
    'MAIN_ROLES',
    'UNITS',
    # Academic models
    'Program',
    'Department',
    'AcademicSession',
    'Course',
    'CourseOffering',
    'CourseOfferingProgram',
    'CourseOfferingStaff',
    'StudentRegistration',
    'Enrollment',
    'Result',
    # Finance
    'PaymentReceipt',
    'FEE_TYPES',
    'RECEIPT_STATUSES',
    'SEMESTERS',
]
