from .user import User, UserRole, UserStatus
from .feedback_form import FeedbackForm
from .event import Event
from .assignment import MenteeAssignment
from .submission import FeedbackSubmission
