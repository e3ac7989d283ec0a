# db/models/assignment.py
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import String, DateTime, ForeignKey, UniqueConstraint
from mentorfeed.db import Base, utcnow
import uuid


class MenteeAssignment(Base):
    __tablename__ = "mentee_assignments"

    assignment_id: Mapped[str] = mapped_column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    mentee_id: Mapped[str] = mapped_column(String, ForeignKey("users.user_id"), nullable=False, index=True)
    mentor_id: Mapped[str] = mapped_column(String, ForeignKey("users.user_id"), nullable=False, index=True)
    event_id: Mapped[str] = mapped_column(String, ForeignKey("events.event_id", ondelete="CASCADE"), nullable=False, index=True)
    assigned_at: Mapped["DateTime"] = mapped_column(DateTime(timezone=True), default=utcnow)

    mentee = relationship("User", foreign_keys=[mentee_id])
    mentor = relationship("User", foreign_keys=[mentor_id])
    event = relationship("Event", back_populates="assignments")

    __table_args__ = (
        UniqueConstraint("mentee_id", "mentor_id", "event_id", name="uq_assignment_triple"),
    )
