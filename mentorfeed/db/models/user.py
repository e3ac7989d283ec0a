# db/models/user.py
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import String, Text, DateTime, Enum, ForeignKey
from mentorfeed.db import Base, utcnow
import enum
import uuid


class UserStatus(str, enum.Enum):
    active = "active"
    inactive = "inactive"
    suspended = "suspended"


class UserRole(Base):
    __tablename__ = "user_roles"

    user_id: Mapped[str] = mapped_column(String, ForeignKey("users.user_id", ondelete="CASCADE"), primary_key=True)
    role: Mapped[str] = mapped_column(String(20), primary_key=True, index=True)

    user = relationship("User", back_populates="role_links")


class User(Base):
    __tablename__ = "users"

    user_id: Mapped[str] = mapped_column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    email: Mapped[str] = mapped_column(String, unique=True, nullable=False, index=True)
    name: Mapped[str | None] = mapped_column(String, nullable=True)
    status: Mapped[UserStatus] = mapped_column(Enum(UserStatus), default=UserStatus.active, nullable=False)
    company_name: Mapped[str | None] = mapped_column(String, nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped["DateTime"] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped["DateTime"] = mapped_column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    role_links = relationship("UserRole", back_populates="user", cascade="all, delete-orphan", lazy="selectin")

    organized_events = relationship("Event", back_populates="organizer")

    @property
    def roles(self) -> list[str]:
        return sorted(link.role for link in self.role_links)

    def set_roles(self, roles) -> None:
        wanted = set(str(getattr(r, "value", r)) for r in roles)
        self.role_links = [link for link in self.role_links if link.role in wanted]
        present = {link.role for link in self.role_links}
        for role in sorted(wanted - present):
            self.role_links.append(UserRole(role=role))
