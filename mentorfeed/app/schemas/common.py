# app/schemas/common.py
from datetime import datetime, timezone
from typing import Annotated
from pydantic import AfterValidator, AwareDatetime


def as_utc(value: datetime) -> datetime:
    """Treat naive timestamps (SQLite drops tzinfo) as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def to_utc(value: datetime) -> datetime:
    return as_utc(value).astimezone(timezone.utc)


UtcDatetime = Annotated[datetime, AfterValidator(as_utc)]
# client input must carry an offset; stored as UTC
AwareUtcDatetime = Annotated[AwareDatetime, AfterValidator(to_utc)]
