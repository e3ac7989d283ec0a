"""Typed failures raised by services and rendered by the API layer.

Every error carries a user-displayable message, a stable `code` and an HTTP
status. Validation errors also carry `field`, the question id or input field
the message belongs to, so a client can route it to the right form input.
"""
# app/core/errors.py
from typing import Any, Dict, Optional


class FeedbackAppError(Exception):
    """Base exception for all domain failures"""

    status_code = 400
    code = "BAD_REQUEST"

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.field = field
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"detail": self.message, "code": self.code}
        if self.field is not None:
            body["field"] = self.field
        if self.details:
            body["details"] = self.details
        return body


# ============================================
# Identity & access
# ============================================

class Unauthorized(FeedbackAppError):
    status_code = 401
    code = "UNAUTHORIZED"

    def __init__(self, message: str = "Not authenticated"):
        super().__init__(message)


class Forbidden(FeedbackAppError):
    status_code = 403
    code = "FORBIDDEN"

    def __init__(self, message: str = "Not authorized"):
        super().__init__(message)


class NotFound(FeedbackAppError):
    status_code = 404
    code = "NOT_FOUND"


class LastAdminViolation(FeedbackAppError):
    code = "LAST_ADMIN"

    def __init__(self, message: str = "Cannot remove the last admin user", field: str = "roles"):
        super().__init__(message, field=field)


# ============================================
# Form definition
# ============================================

class InvalidQuestion(FeedbackAppError):
    code = "INVALID_QUESTION"

    def __init__(self, message: str, position: Optional[int] = None, label: Optional[str] = None, question_id: Optional[str] = None):
        self.position = position
        self.label = label
        super().__init__(message, field=question_id, details={"position": position, "label": label})


class DuplicateQuestionId(FeedbackAppError):
    code = "DUPLICATE_QUESTION_ID"

    def __init__(self, question_id: str):
        super().__init__(f"Question IDs must be unique (duplicate: {question_id})", field=question_id)


class EmptyForm(FeedbackAppError):
    code = "EMPTY_FORM"

    def __init__(self):
        super().__init__("A feedback form needs at least one question", field="questions")


class FormLocked(FeedbackAppError):
    code = "FORM_LOCKED"

    def __init__(self):
        super().__init__("Cannot edit form that has existing submissions")


class FormInUse(FeedbackAppError):
    code = "FORM_IN_USE"

    def __init__(self):
        super().__init__("Cannot delete form that is being used in events")


class InvalidDateRange(FeedbackAppError):
    code = "INVALID_DATE_RANGE"

    def __init__(self):
        super().__init__("End date/time must be after or equal to start date/time", field="endDate")


class InvalidAssignee(FeedbackAppError):
    code = "INVALID_ASSIGNEE"


# ============================================
# Answers & submissions
# ============================================

class MissingRequiredAnswer(FeedbackAppError):
    code = "MISSING_REQUIRED_ANSWER"

    def __init__(self, question_id: str, label: str):
        super().__init__(f"Answer required for question: {label}", field=question_id)


class InvalidRatingValue(FeedbackAppError):
    code = "INVALID_RATING_VALUE"

    def __init__(self, question_id: str, label: str, min_rating: int, max_rating: int):
        super().__init__(
            f'Invalid rating for "{label}". Must be between {min_rating} and {max_rating}',
            field=question_id,
        )


class InvalidOptionValue(FeedbackAppError):
    code = "INVALID_OPTION_VALUE"

    def __init__(self, question_id: str, label: str):
        super().__init__(f'Invalid option for "{label}"', field=question_id)


class NotAssigned(FeedbackAppError):
    status_code = 404
    code = "NOT_ASSIGNED"

    def __init__(self):
        super().__init__("You are not assigned to this mentee for this event")


# ============================================
# Collaborators
# ============================================

class ExtractionFailed(FeedbackAppError):
    code = "EXTRACTION_FAILED"
