# app/services/reports.py
from sqlalchemy import select
from sqlalchemy.orm import Session

from mentorfeed.app.core.logging import get_logs_writer_logger
from mentorfeed.app.schemas.report import (
    BreakdownItem, MentorStat, RemindersOut, ReportEvent, ReportStats, SubmissionRatesOut,
)
from mentorfeed.app.schemas.user import UserBrief
from mentorfeed.app.services.authorization import ORGANIZER, Principal, authorize
from mentorfeed.app.services.events import get_event_or_404
from mentorfeed.app.services.links import feedback_url
from mentorfeed.app.services.notification import NotificationService, notify_safely
from mentorfeed.db.models import Event, FeedbackSubmission, MenteeAssignment

logger = get_logs_writer_logger()


def _rate(part: int, total: int) -> float:
    return round(part / total * 100, 2) if total else 0.0


def _pairs(db: Session, event: Event):
    """Yield (assignment, submission or None) for every assignment of the event."""
    assignments = db.execute(
        select(MenteeAssignment)
        .where(MenteeAssignment.event_id == event.event_id)
        .order_by(MenteeAssignment.assigned_at, MenteeAssignment.assignment_id)
    ).scalars().all()
    submitted = {
        (s.mentee_id, s.mentor_id): s
        for s in db.execute(select(FeedbackSubmission).where(FeedbackSubmission.event_id == event.event_id)).scalars()
    }
    for a in assignments:
        yield a, submitted.get((a.mentee_id, a.mentor_id))


def submission_rates(db: Session, principal: Principal, event_id: str) -> SubmissionRatesOut:
    event = get_event_or_404(db, event_id)
    authorize(principal, ORGANIZER, owner_id=event.organizer_id, message="You can only view reports for your own events")

    breakdown: list[BreakdownItem] = []
    per_mentor: dict[str, dict] = {}
    for a, s in _pairs(db, event):
        breakdown.append(BreakdownItem(
            mentor=UserBrief.model_validate(a.mentor),
            mentee=UserBrief.model_validate(a.mentee),
            submitted=s is not None,
            submission_date=s.submission_date if s else None,
        ))
        stat = per_mentor.setdefault(a.mentor_id, {"mentor": a.mentor, "assigned": 0, "submitted": 0})
        stat["assigned"] += 1
        stat["submitted"] += 1 if s else 0

    total = len(breakdown)
    done = sum(1 for b in breakdown if b.submitted)
    return SubmissionRatesOut(
        event=ReportEvent(
            event_id=event.event_id,
            name=event.name,
            start_date=event.start_date,
            end_date=event.end_date,
            feedback_form_id=event.feedback_form_id,
            feedback_form_name=event.feedback_form.name,
        ),
        stats=ReportStats(
            total_assignments=total,
            total_submissions=done,
            submission_rate=_rate(done, total),
            pending_submissions=total - done,
        ),
        breakdown=breakdown,
        mentor_stats=[
            MentorStat(
                mentor=UserBrief.model_validate(stat["mentor"]),
                assigned=stat["assigned"],
                submitted=stat["submitted"],
                submission_rate=_rate(stat["submitted"], stat["assigned"]),
            )
            for stat in per_mentor.values()
        ],
    )


async def send_reminders(db: Session, principal: Principal, event_id: str, notifier: NotificationService) -> RemindersOut:
    """Remind the mentor of every assignment that has no submission yet."""
    event = get_event_or_404(db, event_id)
    authorize(principal, ORGANIZER, owner_id=event.organizer_id, message="You can only send reminders for your own events")

    pending = [a for a, s in _pairs(db, event) if s is None]
    sent = 0
    for a in pending:
        delivered = await notify_safely(notifier, a.mentor.email, "feedback_reminder", {
            "mentor_name": a.mentor.name,
            "email": a.mentor.email,
            "mentee_name": a.mentee.name or a.mentee.email,
            "event_name": event.name,
            "feedback_url": feedback_url(event.event_id, a.mentee_id),
        })
        sent += 1 if delivered else 0

    logger.info(f"event.reminders event_id={event_id} pending={len(pending)} sent={sent} by={principal.user_id}")
    return RemindersOut(pending=len(pending), sent=sent, failed=len(pending) - sent)
