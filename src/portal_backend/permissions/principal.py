from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict
from portal_backend.api.exceptions import NotFoundException


class MainRole(str, Enum):
    ADMIN = "admin"
    STUDENT = "student"
    ACADEMIC_STAFF = "academic_staff"
    NON_ACADEMIC_STAFF = "non_academic_staff"


class Unit(str, Enum):
    ADMISSIONS = "admissions"
    BURSARY = "bursary"
    EXAMS = "exams"


class StudentContext(BaseModel):
    """The caller's own Student row, resolved by the student guard"""

    id: str
    status: Optional[str] = None
    program_id: Optional[str] = None
    level: Optional[str] = None
    course_session_id: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class Principal(BaseModel):
    """Authenticated caller together with the role record that gates it"""

    user_id: Optional[str] = None
    main_role: Optional[MainRole] = None
    unit: Optional[Unit] = None
    student: Optional[StudentContext] = None

    @property
    def is_academic_staff(self) -> bool:
        return self.main_role == MainRole.ACADEMIC_STAFF

    def get_user_id_or_throw(self) -> str:
        """Get user ID or raise exception"""
        if self.user_id is None:
            raise NotFoundException("User ID not found")
        return self.user_id

    def get_student_or_throw(self) -> StudentContext:
        if self.student is None:
            raise NotFoundException("Student record not found")
        return self.student
