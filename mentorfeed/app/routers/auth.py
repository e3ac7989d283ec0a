# app/routers/auth.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from mentorfeed.app.core.config import settings
from mentorfeed.app.core.errors import NotFound
from mentorfeed.app.schemas.user import SignInIn, SignInOut, UserOut
from mentorfeed.app.services import users
from mentorfeed.app.services.links import issue_session_token
from mentorfeed.db.session import get_db

router = APIRouter()


@router.post("/api/auth/sign-in", response_model=SignInOut)
async def sign_in(payload: SignInIn, db: Session = Depends(get_db)):
    """Development sign-in by email.

    Creates the user on first sign-in and returns a bearer token.

    Errors:
        404: Sign-in by email is disabled (`DEV_SIGN_IN_ENABLED`).
    """
    if not settings.DEV_SIGN_IN_ENABLED:
        raise NotFound("Not found")
    user = users.sign_in(db, str(payload.email), payload.name)
    return SignInOut(token=issue_session_token(user.user_id), user=UserOut.model_validate(user))
