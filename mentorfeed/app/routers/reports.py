# app/routers/reports.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from mentorfeed.app.core.security import require_roles
from mentorfeed.app.schemas.report import RemindersOut, SubmissionRatesOut
from mentorfeed.app.services import reports
from mentorfeed.app.services.authorization import ORGANIZER, Principal
from mentorfeed.app.services.notification import NotificationService, get_notification_service
from mentorfeed.db.session import get_db

router = APIRouter()


@router.get("/api/events/{event_id}/report", response_model=SubmissionRatesOut)
async def submission_rates(
    event_id: str,
    principal: Principal = Depends(require_roles(*ORGANIZER)),
    db: Session = Depends(get_db),
):
    return reports.submission_rates(db, principal, event_id)


@router.post("/api/events/{event_id}/reminders", response_model=RemindersOut)
async def send_reminders(
    event_id: str,
    principal: Principal = Depends(require_roles(*ORGANIZER)),
    db: Session = Depends(get_db),
    notifier: NotificationService = Depends(get_notification_service),
):
    """Remind mentors who have not submitted feedback for this event yet."""
    return await reports.send_reminders(db, principal, event_id, notifier)
