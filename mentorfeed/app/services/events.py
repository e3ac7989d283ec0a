# app/services/events.py
from datetime import datetime
from typing import Optional
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from mentorfeed.app.core.config import settings
from mentorfeed.app.core.errors import InvalidDateRange, NotFound
from mentorfeed.app.core.logging import get_logs_writer_logger
from mentorfeed.app.schemas.common import as_utc
from mentorfeed.app.schemas.event import EventCreate, EventOut, EventUpdate
from mentorfeed.app.schemas.user import UserBrief
from mentorfeed.app.services.authorization import ORGANIZER, Principal, authorize
from mentorfeed.app.services.pagination import paginate
from mentorfeed.db.models import Event, FeedbackForm, FeedbackSubmission, MenteeAssignment

logger = get_logs_writer_logger()


def get_event_or_404(db: Session, event_id: str) -> Event:
    event = db.get(Event, event_id)
    if not event:
        raise NotFound("Event not found")
    return event


def check_date_range(start: datetime, end: datetime) -> None:
    if as_utc(end) < as_utc(start):
        raise InvalidDateRange()


def event_out(db: Session, event: Event) -> EventOut:
    assignments = db.scalar(
        select(func.count()).select_from(MenteeAssignment).where(MenteeAssignment.event_id == event.event_id)
    )
    submissions = db.scalar(
        select(func.count()).select_from(FeedbackSubmission).where(FeedbackSubmission.event_id == event.event_id)
    )
    return EventOut(
        event_id=event.event_id,
        name=event.name,
        description=event.description,
        start_date=event.start_date,
        end_date=event.end_date,
        organizer=UserBrief.model_validate(event.organizer),
        feedback_form_id=event.feedback_form_id,
        feedback_form_name=event.feedback_form.name if event.feedback_form else None,
        assignment_count=assignments or 0,
        submission_count=submissions or 0,
    )


def create_event(db: Session, principal: Principal, payload: EventCreate) -> Event:
    check_date_range(payload.start_date, payload.end_date)
    if not db.get(FeedbackForm, payload.feedback_form_id):
        raise NotFound("Feedback form not found")

    event = Event(
        name=payload.name,
        description=payload.description,
        start_date=payload.start_date,
        end_date=payload.end_date,
        organizer_id=principal.user_id,
        feedback_form_id=payload.feedback_form_id,
    )
    db.add(event)
    db.commit()
    db.refresh(event)
    logger.info(f"event.created event_id={event.event_id} form_id={event.feedback_form_id} by={principal.user_id}")
    return event


def list_my_events(db: Session, principal: Principal, limit: Optional[int] = None, cursor: Optional[str] = None):
    stmt = select(Event).where(Event.organizer_id == principal.user_id)
    return paginate(db, stmt, Event, Event.event_id, Event.start_date, cursor, limit or settings.PAGE_SIZE_DEFAULT)


def get_event(db: Session, event_id: str) -> Event:
    return get_event_or_404(db, event_id)


def update_event(db: Session, principal: Principal, event_id: str, payload: EventUpdate) -> Event:
    """Edit name, description and dates. The form binding never changes."""
    event = get_event_or_404(db, event_id)
    authorize(principal, ORGANIZER, owner_id=event.organizer_id, message="You can only edit your own events")

    fields = payload.model_dump(exclude_unset=True)
    start = fields.get("start_date") or event.start_date
    end = fields.get("end_date") or event.end_date
    check_date_range(start, end)

    if fields.get("name") is not None:
        event.name = fields["name"]
    if "description" in fields:
        event.description = fields["description"]
    if fields.get("start_date") is not None:
        event.start_date = fields["start_date"]
    if fields.get("end_date") is not None:
        event.end_date = fields["end_date"]

    db.commit()
    db.refresh(event)
    logger.info(f"event.updated event_id={event_id} by={principal.user_id}")
    return event


def delete_event(db: Session, principal: Principal, event_id: str) -> None:
    event = get_event_or_404(db, event_id)
    authorize(principal, ORGANIZER, owner_id=event.organizer_id, message="You can only delete your own events")
    db.delete(event)
    db.commit()
    logger.info(f"event.deleted event_id={event_id} by={principal.user_id}")
