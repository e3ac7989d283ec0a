# app/services/submissions.py
from datetime import datetime, timezone
from typing import Any, Mapping, Optional
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from mentorfeed.app.core.errors import NotAssigned, NotFound
from mentorfeed.app.core.logging import get_logs_writer_logger
from mentorfeed.app.schemas.question import question_adapter
from mentorfeed.app.schemas.submission import SubmissionOut
from mentorfeed.app.schemas.user import UserBrief
from mentorfeed.app.services.answer_validation import validate_answers
from mentorfeed.app.services.authorization import Principal, Role, authorize
from mentorfeed.app.services.links import dashboard_url
from mentorfeed.app.services.notification import NotificationService, notify_safely
from mentorfeed.db.models import FeedbackSubmission, MenteeAssignment

logger = get_logs_writer_logger()


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _triple(mentee_id: str, mentor_id: str, event_id: str):
    return select(FeedbackSubmission).where(
        FeedbackSubmission.mentee_id == mentee_id,
        FeedbackSubmission.mentor_id == mentor_id,
        FeedbackSubmission.event_id == event_id,
    )


def submission_out(submission: FeedbackSubmission, with_questions: bool = False) -> SubmissionOut:
    return SubmissionOut(
        submission_id=submission.submission_id,
        event_id=submission.event_id,
        event_name=submission.event.name,
        feedback_form_id=submission.feedback_form_id,
        mentee=UserBrief.model_validate(submission.mentee),
        mentor=UserBrief.model_validate(submission.mentor),
        answers=dict(submission.answers or {}),
        submission_date=submission.submission_date,
        questions=list(submission.feedback_form.questions) if with_questions else None,
    )


def submit_feedback(
    db: Session,
    principal: Principal,
    mentee_id: str,
    event_id: str,
    answers: Mapping[str, Any],
    now: Optional[datetime] = None,
) -> FeedbackSubmission:
    """Record the caller's feedback for one mentee in one event.

    The (mentee, mentor, event) triple holds at most one submission: a second
    submit replaces the answers and refreshes `submission_date`.

    Raises:
        NotAssigned: The caller is not this mentee's mentor for the event.
        MissingRequiredAnswer, InvalidRatingValue, InvalidOptionValue: Bad answers.
    """
    assignment = db.execute(
        select(MenteeAssignment).where(
            MenteeAssignment.mentee_id == mentee_id,
            MenteeAssignment.mentor_id == principal.user_id,
            MenteeAssignment.event_id == event_id,
        )
    ).scalar_one_or_none()
    if not assignment:
        raise NotAssigned()

    event = assignment.event
    questions = [question_adapter.validate_python(q) for q in event.feedback_form.questions]
    validate_answers(questions, answers)

    now = now or utcnow()
    answers = dict(answers)
    submission = db.execute(_triple(mentee_id, principal.user_id, event_id)).scalar_one_or_none()
    if submission is None:
        submission = FeedbackSubmission(
            mentee_id=mentee_id,
            mentor_id=principal.user_id,
            event_id=event_id,
            feedback_form_id=event.feedback_form_id,
            answers=answers,
            submission_date=now,
        )
        db.add(submission)
        try:
            db.commit()
        except IntegrityError:
            # lost the insert race: replace the row the other writer created
            db.rollback()
            submission = db.execute(_triple(mentee_id, principal.user_id, event_id)).scalar_one()
            submission.answers = answers
            submission.submission_date = now
            db.commit()
    else:
        submission.answers = answers
        submission.submission_date = now
        db.commit()

    db.refresh(submission)
    logger.info(
        f"submission.saved submission_id={submission.submission_id} event_id={event_id} "
        f"mentee_id={mentee_id} mentor_id={principal.user_id}"
    )
    return submission


async def notify_feedback_received(notifier: NotificationService, submission: FeedbackSubmission) -> bool:
    mentee, mentor = submission.mentee, submission.mentor
    return await notify_safely(notifier, mentee.email, "feedback_notification", {
        "mentee_name": mentee.name,
        "mentor_name": mentor.name or mentor.email,
        "email": mentee.email,
        "event_name": submission.event.name,
        "dashboard_url": dashboard_url(Role.mentee.value),
    })


def list_submissions_for_mentee(
    db: Session, principal: Principal, event_id: Optional[str] = None, mentor_id: Optional[str] = None
) -> list[FeedbackSubmission]:
    stmt = select(FeedbackSubmission).where(FeedbackSubmission.mentee_id == principal.user_id)
    if event_id:
        stmt = stmt.where(FeedbackSubmission.event_id == event_id)
    if mentor_id:
        stmt = stmt.where(FeedbackSubmission.mentor_id == mentor_id)
    stmt = stmt.order_by(FeedbackSubmission.submission_date.desc(), FeedbackSubmission.submission_id)
    return list(db.execute(stmt).scalars().all())


def get_submission(db: Session, principal: Principal, submission_id: str) -> FeedbackSubmission:
    """The mentee it is about, the organizer of its event, or an admin."""
    submission = db.get(FeedbackSubmission, submission_id)
    if not submission:
        raise NotFound("Submission not found")
    authorize(
        principal,
        {Role.mentee, Role.organizer, Role.admin},
        owner_id=submission.mentee_id,
        parent_owner_id=submission.event.organizer_id,
        message="You can only view your own feedback",
    )
    return submission


def list_mentor_submissions(db: Session, principal: Principal, event_id: Optional[str] = None) -> list[FeedbackSubmission]:
    stmt = select(FeedbackSubmission).where(FeedbackSubmission.mentor_id == principal.user_id)
    if event_id:
        stmt = stmt.where(FeedbackSubmission.event_id == event_id)
    stmt = stmt.order_by(FeedbackSubmission.submission_date.desc(), FeedbackSubmission.submission_id)
    return list(db.execute(stmt).scalars().all())
