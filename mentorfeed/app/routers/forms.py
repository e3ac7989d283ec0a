"""Feedback form endpoints.

Organizers build forms by hand or from a photo of a paper form; a form
becomes read-only once any feedback has been submitted against it.
"""
# app/routers/forms.py
from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from mentorfeed.app.core.security import get_current_principal, require_roles
from mentorfeed.app.schemas.form import ExtractIn, ExtractOut, FormBrief, FormCreate, FormOut, FormsPage, FormUpdate
from mentorfeed.app.services import forms
from mentorfeed.app.services.authorization import ORGANIZER, Principal
from mentorfeed.app.services.ocr import FormCandidateExtractor, get_form_extractor
from mentorfeed.db.session import get_db

router = APIRouter()


@router.post("/api/forms", response_model=FormOut, status_code=201)
async def create_form(
    payload: FormCreate,
    principal: Principal = Depends(require_roles(*ORGANIZER)),
    db: Session = Depends(get_db),
):
    """Create a feedback form.

    Errors:
        400: The question list is empty, a question is malformed, or ids repeat.
    """
    return forms.form_out(db, forms.create_form(db, principal, payload))


@router.get("/api/forms/mine", response_model=FormsPage)
async def list_my_forms(
    limit: Optional[int] = Query(None, ge=1, le=100),
    cursor: Optional[str] = None,
    principal: Principal = Depends(require_roles(*ORGANIZER)),
    db: Session = Depends(get_db),
):
    rows, next_cursor = forms.list_my_forms(db, principal, limit=limit, cursor=cursor)
    return FormsPage(forms=[forms.form_out(db, f) for f in rows], next_cursor=next_cursor)


@router.get("/api/forms", response_model=List[FormBrief])
async def list_all_forms(
    principal: Principal = Depends(require_roles(*ORGANIZER)),
    db: Session = Depends(get_db),
):
    return [
        FormBrief(form_id=f.form_id, name=f.name, description=f.description, created_at=f.created_at)
        for f in forms.list_all_forms(db)
    ]


@router.post("/api/forms/extract", response_model=ExtractOut)
async def extract_questions_from_image(
    payload: ExtractIn,
    principal: Principal = Depends(require_roles(*ORGANIZER)),
    extractor: FormCandidateExtractor = Depends(get_form_extractor),
):
    """Propose questions read from an image of a paper form.

    Nothing is stored; the organizer reviews the candidates and submits them
    through `POST /api/forms`.

    Errors:
        400: The image is unusable or the model reply failed validation.
    """
    questions = await forms.extract_questions_from_image(extractor, principal, payload.image_data)
    return ExtractOut(questions=questions, count=len(questions))


@router.get("/api/forms/{form_id}", response_model=FormOut)
async def get_form(
    form_id: str,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    return forms.form_out(db, forms.get_form(db, form_id))


@router.patch("/api/forms/{form_id}", response_model=FormOut)
async def update_form(
    form_id: str,
    payload: FormUpdate,
    principal: Principal = Depends(require_roles(*ORGANIZER)),
    db: Session = Depends(get_db),
):
    """Edit a form.

    Errors:
        400: The form has submissions, or the new questions are invalid.
        403: The caller is neither the creator nor an admin.
        404: The form was not found.
    """
    return forms.form_out(db, forms.update_form(db, principal, form_id, payload))


@router.delete("/api/forms/{form_id}")
async def delete_form(
    form_id: str,
    principal: Principal = Depends(require_roles(*ORGANIZER)),
    db: Session = Depends(get_db),
):
    forms.delete_form(db, principal, form_id)
    return {"ok": True}
