"""Feedback form lifecycle: create, list, edit, delete, and extraction of
candidate questions from a photographed paper form.

Questions are stored in wire shape; every write goes through the form
validation engine first. A form with submissions is frozen for everyone,
admins included, and a form referenced by an event cannot be deleted.
"""
# app/services/forms.py
from typing import Optional
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from mentorfeed.app.core.config import settings
from mentorfeed.app.core.errors import FormInUse, FormLocked, NotFound
from mentorfeed.app.core.logging import get_logs_writer_logger
from mentorfeed.app.schemas.form import FormCreate, FormOut, FormUpdate
from mentorfeed.app.schemas.question import question_to_wire
from mentorfeed.app.services.authorization import ORGANIZER, Principal, authorize
from mentorfeed.app.services.form_validation import validate_form
from mentorfeed.app.services.ocr import FormCandidateExtractor
from mentorfeed.app.services.pagination import paginate
from mentorfeed.db.models import Event, FeedbackForm, FeedbackSubmission

logger = get_logs_writer_logger()


def get_form_or_404(db: Session, form_id: str) -> FeedbackForm:
    form = db.get(FeedbackForm, form_id)
    if not form:
        raise NotFound("Form not found")
    return form


def count_events(db: Session, form_id: str) -> int:
    return db.scalar(select(func.count()).select_from(Event).where(Event.feedback_form_id == form_id)) or 0


def count_submissions(db: Session, form_id: str) -> int:
    return db.scalar(
        select(func.count()).select_from(FeedbackSubmission).where(FeedbackSubmission.feedback_form_id == form_id)
    ) or 0


def form_out(db: Session, form: FeedbackForm) -> FormOut:
    return FormOut(
        form_id=form.form_id,
        name=form.name,
        description=form.description,
        questions=list(form.questions or []),
        created_by_user_id=form.created_by_user_id,
        created_at=form.created_at,
        updated_at=form.updated_at,
        event_count=count_events(db, form.form_id),
        submission_count=count_submissions(db, form.form_id),
    )


def create_form(db: Session, principal: Principal, payload: FormCreate) -> FeedbackForm:
    questions = validate_form(payload.questions)
    form = FeedbackForm(
        name=payload.name,
        description=payload.description,
        questions=[question_to_wire(q) for q in questions],
        created_by_user_id=principal.user_id,
    )
    db.add(form)
    db.commit()
    db.refresh(form)
    logger.info(f"form.created form_id={form.form_id} questions={len(questions)} by={principal.user_id}")
    return form


def list_my_forms(db: Session, principal: Principal, limit: Optional[int] = None, cursor: Optional[str] = None):
    stmt = select(FeedbackForm).where(FeedbackForm.created_by_user_id == principal.user_id)
    return paginate(
        db, stmt, FeedbackForm, FeedbackForm.form_id, FeedbackForm.created_at, cursor, limit or settings.PAGE_SIZE_DEFAULT
    )


def list_all_forms(db: Session) -> list[FeedbackForm]:
    stmt = select(FeedbackForm).order_by(FeedbackForm.name)
    return list(db.execute(stmt).scalars().all())


def get_form(db: Session, form_id: str) -> FeedbackForm:
    return get_form_or_404(db, form_id)


def update_form(db: Session, principal: Principal, form_id: str, payload: FormUpdate) -> FeedbackForm:
    """Edit name, description or questions of a form nobody has answered yet.

    Raises:
        NotFound: Unknown form.
        Forbidden: Caller is neither the creator nor an admin.
        FormLocked: The form already has submissions.
        EmptyForm, InvalidQuestion, DuplicateQuestionId: New questions are invalid.
    """
    form = get_form_or_404(db, form_id)
    authorize(principal, ORGANIZER, owner_id=form.created_by_user_id, message="You can only edit your own forms")

    if count_submissions(db, form_id) > 0:
        raise FormLocked()

    fields = payload.model_dump(exclude_unset=True)
    if "questions" in fields and fields["questions"] is not None:
        form.questions = [question_to_wire(q) for q in validate_form(fields["questions"])]
    if fields.get("name") is not None:
        form.name = fields["name"]
    if "description" in fields:
        form.description = fields["description"]

    db.commit()
    db.refresh(form)
    logger.info(f"form.updated form_id={form_id} by={principal.user_id}")
    return form


def delete_form(db: Session, principal: Principal, form_id: str) -> None:
    form = get_form_or_404(db, form_id)
    authorize(principal, ORGANIZER, owner_id=form.created_by_user_id, message="You can only delete your own forms")

    if count_events(db, form_id) > 0:
        raise FormInUse()

    db.delete(form)
    db.commit()
    logger.info(f"form.deleted form_id={form_id} by={principal.user_id}")


async def extract_questions_from_image(extractor: FormCandidateExtractor, principal: Principal, image_data: str) -> list[dict]:
    questions = await extractor.extract(image_data)
    logger.info(f"form.extracted questions={len(questions)} by={principal.user_id}")
    return [question_to_wire(q) for q in questions]
