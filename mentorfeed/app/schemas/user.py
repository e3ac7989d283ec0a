# app/schemas/user.py
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from typing import List, Literal, Optional

from mentorfeed.app.schemas.common import UtcDatetime

RoleName = Literal["admin", "organizer", "mentor", "mentee", "user"]
StatusName = Literal["active", "inactive", "suspended"]


class UserBrief(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: str
    name: str | None = None
    email: str


class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: str
    email: str
    name: str | None = None
    roles: List[str]
    status: str
    company_name: str | None = None
    description: str | None = None
    created_at: UtcDatetime | None = None
    updated_at: UtcDatetime | None = None

    @field_validator("status", mode="before")
    @classmethod
    def status_value(cls, v):
        return getattr(v, "value", v)


class ProfileUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    company_name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=1000)


class SignInIn(BaseModel):
    email: EmailStr
    name: Optional[str] = Field(None, max_length=100)


class SignInOut(BaseModel):
    token: str
    user: UserOut


class UserProvisionIn(BaseModel):
    email: EmailStr
    name: Optional[str] = Field(None, max_length=100)
    roles: List[RoleName] = Field(default_factory=lambda: ["user"])
    company_name: Optional[str] = Field(None, max_length=200)


class RolesUpdateIn(BaseModel):
    roles: List[RoleName]


class StatusUpdateIn(BaseModel):
    status: StatusName


class UsersPage(BaseModel):
    users: List[UserOut]
    next_cursor: str | None = None


class UserLookupOut(BaseModel):
    exists: bool
    user: dict | None = None
