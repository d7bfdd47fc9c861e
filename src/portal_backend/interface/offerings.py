from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field, StrictBool, model_validator
from typing import Any, List, Optional


class CourseGet(BaseModel):
    id: str
    code: str
    title: str
    credits: Optional[int] = None

    model_config = ConfigDict(from_attributes=True)


class AcademicSessionGet(BaseModel):
    id: str
    name: str
    is_active: bool = False

    model_config = ConfigDict(from_attributes=True)


class AcademicSessionList(BaseModel):
    id: str
    name: str

    model_config = ConfigDict(from_attributes=True)


class CourseOfferingGet(BaseModel):
    id: str
    course_id: str
    session_id: str
    program_id: Optional[str] = None
    semester: str
    level: Optional[str] = None
    is_published: bool
    created_at: Optional[datetime] = None
    course: Optional[CourseGet] = None
    session: Optional[AcademicSessionGet] = None

    model_config = ConfigDict(from_attributes=True)


class CourseOfferingDetail(CourseOfferingGet):
    enrollment_count: int = 0


class PublishToggle(BaseModel):
    is_published: StrictBool


class AssignStaffRequest(BaseModel):
    staff_ids: List[Any] = Field(default_factory=list)


class EligibleStaff(BaseModel):
    id: str
    staff_code: str
    designation: Optional[str] = None
    name: str


class EnrollmentPair(BaseModel):
    student_id: str = Field(min_length=1, max_length=36)
    course_offering_id: str = Field(min_length=1, max_length=36)


class EnrollmentDelete(BaseModel):
    """Delete one enrollment either by its id or by the (student, offering) pair"""
    enrollment_id: Optional[str] = Field(None, max_length=36)
    student_id: Optional[str] = Field(None, max_length=36)
    course_offering_id: Optional[str] = Field(None, max_length=36)

    @model_validator(mode='after')
    def require_key(self):
        if self.enrollment_id is None and (self.student_id is None or self.course_offering_id is None):
            raise ValueError('enrollment_id or student_id and course_offering_id are required')
        return self


class ResultSubmit(BaseModel):
    student_id: str = Field(min_length=1, max_length=36)
    course_offering_id: str = Field(min_length=1, max_length=36)
    ca_score: Optional[float] = None
    exam_score: Optional[float] = None
    total_score: Optional[float] = None
    grade_letter: Optional[str] = Field(None, max_length=4)
    grade_points: Optional[float] = None
    remark: Optional[str] = Field(None, max_length=255)


class StudentEnrollmentGet(BaseModel):
    id: str
    course_offering_id: str
    enrolled_at: Optional[datetime] = None
    course_offering: Optional[CourseOfferingGet] = None

    model_config = ConfigDict(from_attributes=True)


class ProgramGet(BaseModel):
    id: str
    name: str

    model_config = ConfigDict(from_attributes=True)


class Lecturer(BaseModel):
    id: str
    name: str


class AvailableOffering(BaseModel):
    id: str
    semester: str
    level: Optional[str] = None
    session: Optional[AcademicSessionGet] = None
    course: Optional[CourseGet] = None
    lecturers: List[Lecturer] = Field(default_factory=list)
