from datetime import datetime
from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    email: str = Field(min_length=3, max_length=320)
    password: str = Field(min_length=1)


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_at: datetime
    main_role: str


class PasswordUpdate(BaseModel):
    password: str = Field(min_length=1, max_length=255)
