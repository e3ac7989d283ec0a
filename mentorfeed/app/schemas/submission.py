# app/schemas/submission.py
from pydantic import BaseModel
from typing import Any, Dict, List, Optional

from mentorfeed.app.schemas.common import UtcDatetime
from mentorfeed.app.schemas.user import UserBrief


class SubmitIn(BaseModel):
    mentee_id: str
    event_id: str
    # question id -> answer value
    answers: Dict[str, Any]


class SubmissionOut(BaseModel):
    submission_id: str
    event_id: str
    event_name: str
    feedback_form_id: str
    mentee: UserBrief
    mentor: UserBrief
    answers: Dict[str, Any]
    submission_date: UtcDatetime
    questions: Optional[List[Dict[str, Any]]] = None
