"""Pydantic-schemas for organizer reports.
"""
# app/schemas/report.py
from pydantic import BaseModel
from typing import List

from mentorfeed.app.schemas.common import UtcDatetime
from mentorfeed.app.schemas.user import UserBrief


class ReportEvent(BaseModel):
    event_id: str
    name: str
    start_date: UtcDatetime
    end_date: UtcDatetime
    feedback_form_id: str
    feedback_form_name: str


class ReportStats(BaseModel):
    total_assignments: int
    total_submissions: int
    submission_rate: float
    pending_submissions: int


class BreakdownItem(BaseModel):
    mentor: UserBrief
    mentee: UserBrief
    submitted: bool
    submission_date: UtcDatetime | None = None


class MentorStat(BaseModel):
    mentor: UserBrief
    assigned: int
    submitted: int
    submission_rate: float


class SubmissionRatesOut(BaseModel):
    event: ReportEvent
    stats: ReportStats
    breakdown: List[BreakdownItem]
    mentor_stats: List[MentorStat]


class RemindersOut(BaseModel):
    pending: int
    sent: int
    failed: int
