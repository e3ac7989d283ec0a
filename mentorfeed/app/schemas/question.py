"""Pydantic-schemes for feedback form questions.

A question is a tagged union over `type`; each kind carries only the fields
that are legal for it. Wire names are camelCase (`minRating`, `maxRating`).
"""
# app/schemas/question.py
from typing import Annotated, Literal, Union
from annotated_types import MinLen
from pydantic import BaseModel, ConfigDict, Field, StringConstraints, TypeAdapter, field_validator, model_validator

QUESTION_TYPES = ("text", "textarea", "select", "radio", "rating")
LABEL_MAX_LENGTH = 500


class BaseQuestion(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: Annotated[str, StringConstraints(min_length=1)] = Field(..., description="Unique within the parent form")
    label: Annotated[str, StringConstraints(min_length=1, max_length=LABEL_MAX_LENGTH)]
    required: bool = False

    @field_validator("label")
    @classmethod
    def label_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("label must not be empty")
        return v


class TextQuestion(BaseQuestion):
    type: Literal["text"] = "text"


class TextareaQuestion(BaseQuestion):
    type: Literal["textarea"] = "textarea"


class SelectQuestion(BaseQuestion):
    type: Literal["select"] = "select"
    options: Annotated[list[str], MinLen(1)] = Field(..., description="Ordered choices, at least one")


class RadioQuestion(BaseQuestion):
    type: Literal["radio"] = "radio"
    options: Annotated[list[str], MinLen(1)] = Field(..., description="Ordered choices, at least one")


class RatingQuestion(BaseQuestion):
    type: Literal["rating"] = "rating"
    min_rating: int = Field(..., alias="minRating", ge=1, strict=True)
    max_rating: int = Field(..., alias="maxRating", le=10, strict=True)

    @model_validator(mode="after")
    def check_bounds(self):
        if self.min_rating >= self.max_rating:
            raise ValueError("minRating must be less than maxRating")
        return self


Question = Annotated[
    Union[TextQuestion, TextareaQuestion, SelectQuestion, RadioQuestion, RatingQuestion],
    Field(discriminator="type"),
]
ChoiceQuestion = (SelectQuestion, RadioQuestion)

question_adapter: TypeAdapter[Question] = TypeAdapter(Question)


def question_to_wire(question: BaseQuestion) -> dict:
    return question.model_dump(by_alias=True, exclude_none=True)
