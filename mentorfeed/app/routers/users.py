# app/routers/users.py
from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from mentorfeed.app.core.security import get_current_principal, require_roles
from mentorfeed.app.schemas.user import ProfileUpdate, RoleName, UserBrief, UserLookupOut, UserOut
from mentorfeed.app.services import users
from mentorfeed.app.services.authorization import ORGANIZER, Principal
from mentorfeed.db.session import get_db

router = APIRouter()


@router.get("/api/users/me", response_model=UserOut)
async def get_profile(principal: Principal = Depends(get_current_principal), db: Session = Depends(get_db)):
    return users.get_profile(db, principal)


@router.patch("/api/users/me", response_model=UserOut)
async def update_profile(
    payload: ProfileUpdate,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    return users.update_profile(db, principal, payload.model_dump(exclude_unset=True))


@router.get("/api/users/search", response_model=List[UserBrief])
async def search_users(
    role: Optional[RoleName] = None,
    search: Optional[str] = Query(None, max_length=100),
    limit: int = Query(20, ge=1, le=100),
    principal: Principal = Depends(require_roles(*ORGANIZER)),
    db: Session = Depends(get_db),
):
    """Active users, optionally filtered by role and by a substring of email or name."""
    return users.search_users(db, role=role, search=search, limit=limit)


@router.get("/api/users/check", response_model=UserLookupOut)
async def check_user_by_email(
    email: str = Query(..., min_length=3),
    principal: Principal = Depends(require_roles(*ORGANIZER)),
    db: Session = Depends(get_db),
):
    user = users.find_by_email(db, email)
    if not user:
        return UserLookupOut(exists=False)
    return UserLookupOut(exists=True, user={"user_id": user.user_id, "email": user.email, "name": user.name, "roles": user.roles})
