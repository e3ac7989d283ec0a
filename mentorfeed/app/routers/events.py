# app/routers/events.py
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from mentorfeed.app.core.security import get_current_principal, require_roles
from mentorfeed.app.schemas.event import EventCreate, EventOut, EventsPage, EventUpdate
from mentorfeed.app.services import events
from mentorfeed.app.services.authorization import ORGANIZER, Principal
from mentorfeed.db.session import get_db

router = APIRouter()


@router.post("/api/events", response_model=EventOut, status_code=201)
async def create_event(
    payload: EventCreate,
    principal: Principal = Depends(require_roles(*ORGANIZER)),
    db: Session = Depends(get_db),
):
    """Create an event bound to a feedback form.

    Errors:
        400: The end is before the start.
        404: The feedback form was not found.
    """
    return events.event_out(db, events.create_event(db, principal, payload))


@router.get("/api/events/mine", response_model=EventsPage)
async def list_my_events(
    limit: Optional[int] = Query(None, ge=1, le=100),
    cursor: Optional[str] = None,
    principal: Principal = Depends(require_roles(*ORGANIZER)),
    db: Session = Depends(get_db),
):
    rows, next_cursor = events.list_my_events(db, principal, limit=limit, cursor=cursor)
    return EventsPage(events=[events.event_out(db, e) for e in rows], next_cursor=next_cursor)


@router.get("/api/events/{event_id}", response_model=EventOut)
async def get_event(
    event_id: str,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    return events.event_out(db, events.get_event(db, event_id))


@router.patch("/api/events/{event_id}", response_model=EventOut)
async def update_event(
    event_id: str,
    payload: EventUpdate,
    principal: Principal = Depends(require_roles(*ORGANIZER)),
    db: Session = Depends(get_db),
):
    return events.event_out(db, events.update_event(db, principal, event_id, payload))


@router.delete("/api/events/{event_id}")
async def delete_event(
    event_id: str,
    principal: Principal = Depends(require_roles(*ORGANIZER)),
    db: Session = Depends(get_db),
):
    """Delete an event together with its assignments and submissions."""
    events.delete_event(db, principal, event_id)
    return {"ok": True}
