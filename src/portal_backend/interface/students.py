from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional


class StudentAcademicGet(BaseModel):
    program_id: Optional[str] = None
    department_id: Optional[str] = None
    level: Optional[str] = None
    course_session_id: Optional[str] = None
    status: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class StudentAcademicUpdate(BaseModel):
    program_id: Optional[str] = Field(None, max_length=36)
    department_id: Optional[str] = Field(None, max_length=36)
    level: Optional[str] = Field(None, max_length=32)
    course_session_id: Optional[str] = Field(None, max_length=36)
    status: Optional[str] = Field(None, max_length=32)


class StudentGuardianGet(BaseModel):
    guardian_first_name: Optional[str] = None
    guardian_last_name: Optional[str] = None
    guardian_phone: Optional[str] = None
    guardian_status: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class StudentGuardianUpdate(BaseModel):
    guardian_first_name: Optional[str] = Field(None, max_length=255)
    guardian_last_name: Optional[str] = Field(None, max_length=255)
    guardian_phone: Optional[str] = Field(None, max_length=40)
    guardian_status: Optional[str] = Field(None, max_length=64)


class RosterStudentProfile(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class RosterStudent(BaseModel):
    id: str
    matric_no: Optional[str] = None
    profile: Optional[RosterStudentProfile] = None

    model_config = ConfigDict(from_attributes=True)


class RosterEntry(BaseModel):
    id: str
    enrolled_at: Optional[datetime] = None
    student: RosterStudent

    model_config = ConfigDict(from_attributes=True)
