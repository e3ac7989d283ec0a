# app/schemas/event.py
from pydantic import BaseModel, Field
from typing import List, Optional

from mentorfeed.app.schemas.common import AwareUtcDatetime, UtcDatetime
from mentorfeed.app.schemas.user import UserBrief


class EventCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=1000)
    start_date: AwareUtcDatetime
    end_date: AwareUtcDatetime
    feedback_form_id: str


class EventUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=1000)
    start_date: Optional[AwareUtcDatetime] = None
    end_date: Optional[AwareUtcDatetime] = None


class EventOut(BaseModel):
    event_id: str
    name: str
    description: str | None = None
    start_date: UtcDatetime
    end_date: UtcDatetime
    organizer: UserBrief
    feedback_form_id: str
    feedback_form_name: str | None = None
    assignment_count: int = 0
    submission_count: int = 0


class EventsPage(BaseModel):
    events: List[EventOut]
    next_cursor: str | None = None
