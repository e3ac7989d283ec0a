# db/models/event.py
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import String, Text, DateTime, ForeignKey
from mentorfeed.db import Base, utcnow
import uuid


class Event(Base):
    __tablename__ = "events"

    event_id: Mapped[str] = mapped_column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    start_date: Mapped["DateTime"] = mapped_column(DateTime(timezone=True), nullable=False)
    end_date: Mapped["DateTime"] = mapped_column(DateTime(timezone=True), nullable=False)
    organizer_id: Mapped[str] = mapped_column(String, ForeignKey("users.user_id"), nullable=False, index=True)
    feedback_form_id: Mapped[str] = mapped_column(String, ForeignKey("feedback_forms.form_id"), nullable=False, index=True)
    created_at: Mapped["DateTime"] = mapped_column(DateTime(timezone=True), default=utcnow)

    organizer = relationship("User", back_populates="organized_events")
    feedback_form = relationship("FeedbackForm", back_populates="events")
    assignments = relationship("MenteeAssignment", back_populates="event", cascade="all, delete-orphan")
    submissions = relationship("FeedbackSubmission", back_populates="event", cascade="all, delete-orphan")
