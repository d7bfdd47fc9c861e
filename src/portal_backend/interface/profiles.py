from datetime import date, datetime
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional


class ProfileRole(BaseModel):
    """The minimal projection guards need: never more than id, role and unit"""
    id: str
    main_role: str
    unit: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class ProfileGet(BaseModel):
    id: str = Field(description="Profile unique identifier, equal to the user id")
    first_name: Optional[str] = None
    middle_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    gender: Optional[str] = None
    date_of_birth: Optional[date] = None
    nin: Optional[str] = None
    state_of_origin: Optional[str] = None
    lga_of_origin: Optional[str] = None
    religion: Optional[str] = None
    main_role: str
    unit: Optional[str] = None
    onboarding_status: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class ProfileDetailsUpdate(BaseModel):
    """Personal details an admin may edit on a staff or student profile"""
    first_name: Optional[str] = Field(None, max_length=255)
    middle_name: Optional[str] = Field(None, max_length=255)
    last_name: Optional[str] = Field(None, max_length=255)
    email: Optional[str] = Field(None, max_length=320)
    phone: Optional[str] = Field(None, max_length=40)
    address: Optional[str] = Field(None, max_length=500)
    gender: Optional[str] = Field(None, max_length=32)
    date_of_birth: Optional[date] = None
    nin: Optional[str] = Field(None, max_length=32)
    state_of_origin: Optional[str] = Field(None, max_length=80)
    lga_of_origin: Optional[str] = Field(None, max_length=80)
    religion: Optional[str] = Field(None, max_length=80)


class ProfileMeUpdate(BaseModel):
    phone: Optional[str] = Field(None, max_length=40)
    address: Optional[str] = Field(None, max_length=500)
    state_of_origin: Optional[str] = Field(None, max_length=80)
    lga_of_origin: Optional[str] = Field(None, max_length=80)

    @field_validator('phone', 'address', 'state_of_origin', 'lga_of_origin', mode='before')
    @classmethod
    def empty_to_none(cls, v):
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v
