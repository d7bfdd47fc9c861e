from datetime import date, datetime
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import List, Optional


class ReceiptAction(str, Enum):
    APPROVE = "approve"
    ACCEPT = "accept"
    REJECT = "reject"


class ReceiptQuery(BaseModel):
    status: Optional[str] = None
    semester: Optional[str] = None
    session: Optional[str] = None
    search: Optional[str] = None
    page: int = 1
    limit: int = 20

    @field_validator('status', 'semester', 'session')
    @classmethod
    def all_means_unfiltered(cls, v):
        if v is None:
            return None
        v = v.strip()
        return None if v in ("", "all") else v

    @field_validator('search')
    @classmethod
    def trim_search(cls, v):
        if v is None:
            return None
        v = v.strip()[:80]
        return v or None

    @field_validator('page')
    @classmethod
    def clamp_page(cls, v):
        return max(1, v)

    @field_validator('limit')
    @classmethod
    def clamp_limit(cls, v):
        return min(max(1, v), 100)


class ReceiptStudent(BaseModel):
    id: str
    matric_no: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class ReceiptGet(BaseModel):
    id: str
    student_id: str
    session_id: Optional[str] = None
    semester: Optional[str] = None
    payment_type: str
    amount_paid: float
    approved_amount: Optional[float] = None
    payment_date: date
    transaction_reference: Optional[str] = None
    status: str
    remarks: Optional[str] = None
    verified_by: Optional[str] = None
    verified_at: Optional[datetime] = None
    rejected_by: Optional[str] = None
    rejected_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    student: Optional[ReceiptStudent] = None

    model_config = ConfigDict(from_attributes=True)


class ReceiptReview(BaseModel):
    action: ReceiptAction
    remarks: Optional[str] = Field(None, max_length=1024)
    approved_amount: Optional[float] = Field(None, gt=0)

    @field_validator('remarks', mode='before')
    @classmethod
    def trim_remarks(cls, v):
        if isinstance(v, str):
            return v.strip() or None
        return v


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int


class ReceiptListResponse(BaseModel):
    ok: bool = True
    fee_types: List[str]
    receipts: List[ReceiptGet]
    pagination: Pagination
