"""Mentor/mentee pairing per event.

An assignment is identified by (mentee, mentor, event); writing the same
triple twice leaves exactly one row. Bulk assignment works row by row, each
row in its own transaction, and reports every row's outcome.
"""
# app/services/assignments.py
import logging
from typing import Iterable, Optional
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from mentorfeed.app.core.errors import FeedbackAppError, InvalidAssignee, NotFound
from mentorfeed.app.core.logging import get_logs_writer_logger
from mentorfeed.app.schemas.assignment import BulkAssignOut, BulkAssignRow, BulkRowResult, MenteeForMentorOut
from mentorfeed.app.schemas.user import UserBrief
from mentorfeed.app.services.authorization import ORGANIZER, Principal, Role, authorize
from mentorfeed.app.services.events import get_event_or_404
from mentorfeed.app.services.links import dashboard_url, sign_in_url
from mentorfeed.app.services.notification import NotificationService, notify_safely
from mentorfeed.app.services.users import find_by_email
from mentorfeed.db.models import Event, MenteeAssignment, User

logger = get_logs_writer_logger()
log = logging.getLogger(__name__)


def _triple(mentee_id: str, mentor_id: str, event_id: str):
    return select(MenteeAssignment).where(
        MenteeAssignment.mentee_id == mentee_id,
        MenteeAssignment.mentor_id == mentor_id,
        MenteeAssignment.event_id == event_id,
    )


def check_assignees(mentee: Optional[User], mentor: Optional[User]) -> None:
    if not mentee or Role.mentee.value not in mentee.roles:
        raise InvalidAssignee("Invalid mentee: user must have the mentee role", field="mentee_id")
    if not mentor or Role.mentor.value not in mentor.roles:
        raise InvalidAssignee("Invalid mentor: user must have the mentor role", field="mentor_id")


def upsert_assignment(db: Session, mentee_id: str, mentor_id: str, event_id: str) -> tuple[MenteeAssignment, bool]:
    """Insert the triple or keep the existing row; commits.

    Returns:
        tuple: (assignment, created).
    """
    existing = db.execute(_triple(mentee_id, mentor_id, event_id)).scalar_one_or_none()
    if existing:
        return existing, False

    assignment = MenteeAssignment(mentee_id=mentee_id, mentor_id=mentor_id, event_id=event_id)
    db.add(assignment)
    try:
        db.commit()
    except IntegrityError:
        # a concurrent writer inserted the same triple first
        db.rollback()
        return db.execute(_triple(mentee_id, mentor_id, event_id)).scalar_one(), False
    db.refresh(assignment)
    return assignment, True


def assign(db: Session, principal: Principal, mentee_id: str, mentor_id: str, event_id: str) -> MenteeAssignment:
    event = get_event_or_404(db, event_id)
    authorize(principal, ORGANIZER, owner_id=event.organizer_id, message="You can only assign mentees to your own events")

    check_assignees(db.get(User, mentee_id), db.get(User, mentor_id))

    assignment, created = upsert_assignment(db, mentee_id, mentor_id, event_id)
    if created:
        logger.info(
            f"assignment.created assignment_id={assignment.assignment_id} event_id={event_id} "
            f"mentee_id={mentee_id} mentor_id={mentor_id} by={principal.user_id}"
        )
    return assignment


def _invitation_params(event: Event, role: Role) -> dict:
    return {
        "event_name": event.name,
        "role": role.value,
        "role_display": role.value.capitalize(),
        "start_date": event.start_date,
        "end_date": event.end_date,
        "sign_in_url": sign_in_url(),
    }


def _assignment_params(event: Event, user: User, role: Role, partner: User) -> dict:
    partner_role = Role.mentee if role is Role.mentor else Role.mentor
    return {
        "name": user.name,
        "email": user.email,
        "role_display": role.value.capitalize(),
        "partner_role": partner_role.value.capitalize(),
        "partner_name": partner.name or partner.email,
        "event_name": event.name,
        "start_date": event.start_date,
        "end_date": event.end_date,
        "dashboard_url": dashboard_url(role.value),
    }


async def _process_row(
    db: Session, principal: Principal, event: Event, row: BulkAssignRow, notifier: NotificationService
) -> BulkRowResult:
    mentee_email, mentor_email = str(row.mentee_email), str(row.mentor_email)
    result = BulkRowResult(mentee_email=mentee_email, mentor_email=mentor_email, status="created")

    mentee = find_by_email(db, mentee_email)
    mentor = find_by_email(db, mentor_email)

    if not mentee or not mentor:
        role, email = (Role.mentee, mentee_email) if not mentee else (Role.mentor, mentor_email)
        result.status = "invited_mentee" if role is Role.mentee else "invited_mentor"
        delivered = await notify_safely(notifier, email, "assignment_invitation", _invitation_params(event, role))
        if not delivered:
            result.warning = "Invitation could not be delivered"
        logger.info(f"assignment.invited event_id={event.event_id} email={email} role={role.value} by={principal.user_id}")
        return result

    check_assignees(mentee, mentor)
    assignment, created = upsert_assignment(db, mentee.user_id, mentor.user_id, event.event_id)
    result.assignment_id = assignment.assignment_id
    if created:
        logger.info(
            f"assignment.created assignment_id={assignment.assignment_id} event_id={event.event_id} "
            f"mentee_id={mentee.user_id} mentor_id={mentor.user_id} by={principal.user_id}"
        )

    sent_mentee = await notify_safely(
        notifier, mentee.email, "assignment_notification", _assignment_params(event, mentee, Role.mentee, mentor)
    )
    sent_mentor = await notify_safely(
        notifier, mentor.email, "assignment_notification", _assignment_params(event, mentor, Role.mentor, mentee)
    )
    if not (sent_mentee and sent_mentor):
        result.warning = "Assignment created but notification could not be delivered"
    return result


async def bulk_assign(
    db: Session, principal: Principal, event_id: str, rows: Iterable[BulkAssignRow], notifier: NotificationService
) -> BulkAssignOut:
    """Assign many (mentee email, mentor email) pairs to one event.

    Rows are independent: a failing row becomes an `error` result and the
    remaining rows are still processed. Unknown emails get an invitation
    instead of an assignment.
    """
    event = get_event_or_404(db, event_id)
    authorize(principal, ORGANIZER, owner_id=event.organizer_id, message="You can only assign mentees to your own events")

    results: list[BulkRowResult] = []
    errors: list[BulkRowResult] = []
    rows = list(rows)
    for row in rows:
        try:
            results.append(await _process_row(db, principal, event, row, notifier))
        except FeedbackAppError as e:
            errors.append(BulkRowResult(mentee_email=str(row.mentee_email), mentor_email=str(row.mentor_email), status="error", error=e.message))
        except SQLAlchemyError as e:
            db.rollback()
            log.warning("Bulk assignment row %s -> %s failed: %s", row.mentee_email, row.mentor_email, e)
            errors.append(BulkRowResult(mentee_email=str(row.mentee_email), mentor_email=str(row.mentor_email), status="error", error="Failed to process assignment"))

    return BulkAssignOut(
        results=results,
        errors=errors,
        total_processed=len(rows),
        success_count=len(results),
        error_count=len(errors),
    )


def remove_assignment(db: Session, principal: Principal, assignment_id: str) -> None:
    assignment = db.get(MenteeAssignment, assignment_id)
    if not assignment:
        raise NotFound("Assignment not found")
    authorize(
        principal, ORGANIZER, owner_id=assignment.event.organizer_id,
        message="You can only remove assignments from your own events",
    )
    db.delete(assignment)
    db.commit()
    logger.info(f"assignment.removed assignment_id={assignment_id} by={principal.user_id}")


def list_assignments_for_event(db: Session, principal: Principal, event_id: str) -> list[MenteeAssignment]:
    event = get_event_or_404(db, event_id)
    authorize(principal, ORGANIZER, owner_id=event.organizer_id, message="You can only view assignments for your own events")
    stmt = (
        select(MenteeAssignment)
        .where(MenteeAssignment.event_id == event_id)
        .order_by(MenteeAssignment.assigned_at.desc(), MenteeAssignment.assignment_id)
    )
    return list(db.execute(stmt).scalars().all())


def list_mentees_for_mentor(db: Session, principal: Principal, event_id: Optional[str] = None) -> list[MenteeForMentorOut]:
    stmt = select(MenteeAssignment).join(Event).where(MenteeAssignment.mentor_id == principal.user_id)
    if event_id:
        stmt = stmt.where(MenteeAssignment.event_id == event_id)
    stmt = stmt.order_by(Event.start_date.desc(), MenteeAssignment.assignment_id)

    out = []
    for a in db.execute(stmt).scalars().all():
        out.append(MenteeForMentorOut(
            assignment_id=a.assignment_id,
            mentee=UserBrief.model_validate(a.mentee),
            mentee_company_name=a.mentee.company_name,
            event_id=a.event_id,
            event_name=a.event.name,
            event_start_date=a.event.start_date,
            event_end_date=a.event.end_date,
        ))
    return out
