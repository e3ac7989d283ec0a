"""Pydantic-schemes for feedback forms.

`questions` arrive as raw records; the form validation engine turns them into
typed questions so every failure names the offending question.
"""
# app/schemas/form.py
from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional

from mentorfeed.app.schemas.common import UtcDatetime


class FormCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=1000)
    questions: List[Dict[str, Any]] = Field(default_factory=list)


class FormUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=1000)
    questions: Optional[List[Dict[str, Any]]] = None


class FormOut(BaseModel):
    form_id: str
    name: str
    description: str | None = None
    questions: List[Dict[str, Any]]
    created_by_user_id: str
    created_at: UtcDatetime | None = None
    updated_at: UtcDatetime | None = None
    event_count: int = 0
    submission_count: int = 0


class FormBrief(BaseModel):
    form_id: str
    name: str
    description: str | None = None
    created_at: UtcDatetime | None = None


class FormsPage(BaseModel):
    forms: List[FormOut]
    next_cursor: str | None = None


class ExtractIn(BaseModel):
    image_data: str = Field(..., min_length=1, description="Base64 PNG/JPEG, optionally a data URL")


class ExtractOut(BaseModel):
    success: bool = True
    questions: List[Dict[str, Any]]
    count: int
