# app/routers/assignments.py
from typing import List, Optional
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from mentorfeed.app.core.security import require_roles
from mentorfeed.app.schemas.assignment import AssignIn, AssignmentOut, BulkAssignIn, BulkAssignOut, MenteeForMentorOut
from mentorfeed.app.services import assignments
from mentorfeed.app.services.authorization import MENTOR, ORGANIZER, Principal
from mentorfeed.app.services.notification import NotificationService, get_notification_service
from mentorfeed.db.session import get_db

router = APIRouter()


@router.post("/api/assignments", response_model=AssignmentOut)
async def assign(
    payload: AssignIn,
    principal: Principal = Depends(require_roles(*ORGANIZER)),
    db: Session = Depends(get_db),
):
    """Pair a mentee with a mentor for an event. Repeating the call is a no-op.

    Errors:
        400: The mentee or mentor lacks the matching role.
        403: The event belongs to another organizer.
        404: The event was not found.
    """
    return assignments.assign(db, principal, payload.mentee_id, payload.mentor_id, payload.event_id)


@router.post("/api/assignments/bulk", response_model=BulkAssignOut)
async def bulk_assign(
    payload: BulkAssignIn,
    principal: Principal = Depends(require_roles(*ORGANIZER)),
    db: Session = Depends(get_db),
    notifier: NotificationService = Depends(get_notification_service),
):
    return await assignments.bulk_assign(db, principal, payload.event_id, payload.assignments, notifier)


@router.delete("/api/assignments/{assignment_id}")
async def remove_assignment(
    assignment_id: str,
    principal: Principal = Depends(require_roles(*ORGANIZER)),
    db: Session = Depends(get_db),
):
    assignments.remove_assignment(db, principal, assignment_id)
    return {"ok": True}


@router.get("/api/events/{event_id}/assignments", response_model=List[AssignmentOut])
async def list_assignments_for_event(
    event_id: str,
    principal: Principal = Depends(require_roles(*ORGANIZER)),
    db: Session = Depends(get_db),
):
    return assignments.list_assignments_for_event(db, principal, event_id)


@router.get("/api/mentor/mentees", response_model=List[MenteeForMentorOut])
async def list_mentees_for_mentor(
    event_id: Optional[str] = None,
    principal: Principal = Depends(require_roles(*MENTOR)),
    db: Session = Depends(get_db),
):
    return assignments.list_mentees_for_mentor(db, principal, event_id=event_id)
