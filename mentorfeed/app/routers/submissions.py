# app/routers/submissions.py
from typing import List, Optional
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from mentorfeed.app.core.security import get_current_principal, require_roles
from mentorfeed.app.schemas.submission import SubmissionOut, SubmitIn
from mentorfeed.app.services import submissions
from mentorfeed.app.services.authorization import MENTEE, MENTOR, Principal
from mentorfeed.app.services.notification import NotificationService, get_notification_service
from mentorfeed.db.session import get_db

router = APIRouter()


@router.post("/api/submissions", response_model=SubmissionOut)
async def submit_feedback(
    payload: SubmitIn,
    principal: Principal = Depends(require_roles(*MENTOR)),
    db: Session = Depends(get_db),
    notifier: NotificationService = Depends(get_notification_service),
):
    """Submit or replace feedback for one of the caller's mentees.

    The mentee is notified after the write; a failed notification does not
    undo the submission.

    Errors:
        400: A required answer is missing, or a rating or option is invalid.
        404: The caller is not assigned to this mentee for this event.
    """
    submission = submissions.submit_feedback(db, principal, payload.mentee_id, payload.event_id, payload.answers)
    await submissions.notify_feedback_received(notifier, submission)
    return submissions.submission_out(submission)


@router.get("/api/mentee/submissions", response_model=List[SubmissionOut])
async def list_submissions_for_mentee(
    event_id: Optional[str] = None,
    mentor_id: Optional[str] = None,
    principal: Principal = Depends(require_roles(*MENTEE)),
    db: Session = Depends(get_db),
):
    rows = submissions.list_submissions_for_mentee(db, principal, event_id=event_id, mentor_id=mentor_id)
    return [submissions.submission_out(s) for s in rows]


@router.get("/api/mentor/submissions", response_model=List[SubmissionOut])
async def list_mentor_submissions(
    event_id: Optional[str] = None,
    principal: Principal = Depends(require_roles(*MENTOR)),
    db: Session = Depends(get_db),
):
    return [submissions.submission_out(s) for s in submissions.list_mentor_submissions(db, principal, event_id=event_id)]


@router.get("/api/submissions/{submission_id}", response_model=SubmissionOut)
async def get_submission(
    submission_id: str,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    """One submission with the form's questions, for rendering answers next to labels."""
    return submissions.submission_out(submissions.get_submission(db, principal, submission_id), with_questions=True)
