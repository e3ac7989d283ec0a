# app/schemas/assignment.py
from pydantic import BaseModel, ConfigDict, EmailStr
from typing import List, Literal, Optional

from mentorfeed.app.schemas.common import UtcDatetime
from mentorfeed.app.schemas.user import UserBrief


class AssignIn(BaseModel):
    mentee_id: str
    mentor_id: str
    event_id: str


class AssignmentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    assignment_id: str
    event_id: str
    mentee: UserBrief
    mentor: UserBrief
    assigned_at: UtcDatetime | None = None


class MenteeForMentorOut(BaseModel):
    assignment_id: str
    mentee: UserBrief
    mentee_company_name: str | None = None
    event_id: str
    event_name: str
    event_start_date: UtcDatetime
    event_end_date: UtcDatetime


class BulkAssignRow(BaseModel):
    mentee_email: EmailStr
    mentor_email: EmailStr


class BulkAssignIn(BaseModel):
    event_id: str
    assignments: List[BulkAssignRow]


class BulkRowResult(BaseModel):
    mentee_email: str
    mentor_email: str
    status: Literal["created", "invited_mentee", "invited_mentor", "error"]
    assignment_id: Optional[str] = None
    error: Optional[str] = None
    warning: Optional[str] = None


class BulkAssignOut(BaseModel):
    results: List[BulkRowResult]
    errors: List[BulkRowResult]
    total_processed: int
    success_count: int
    error_count: int
