# db/models/submission.py
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import String, DateTime, ForeignKey, JSON, UniqueConstraint
from mentorfeed.db import Base
import uuid


class FeedbackSubmission(Base):
    __tablename__ = "feedback_submissions"

    submission_id: Mapped[str] = mapped_column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    mentee_id: Mapped[str] = mapped_column(String, ForeignKey("users.user_id"), nullable=False, index=True)
    mentor_id: Mapped[str] = mapped_column(String, ForeignKey("users.user_id"), nullable=False, index=True)
    event_id: Mapped[str] = mapped_column(String, ForeignKey("events.event_id", ondelete="CASCADE"), nullable=False, index=True)
    # copied from the event when the submission is written
    feedback_form_id: Mapped[str] = mapped_column(String, ForeignKey("feedback_forms.form_id"), nullable=False, index=True)
    answers: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    submission_date: Mapped["DateTime"] = mapped_column(DateTime(timezone=True), nullable=False)

    mentee = relationship("User", foreign_keys=[mentee_id])
    mentor = relationship("User", foreign_keys=[mentor_id])
    event = relationship("Event", back_populates="submissions")
    feedback_form = relationship("FeedbackForm", back_populates="submissions")

    __table_args__ = (
        UniqueConstraint("mentee_id", "mentor_id", "event_id", name="uq_submission_triple"),
    )
