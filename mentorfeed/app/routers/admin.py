# app/routers/admin.py
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from mentorfeed.app.core.security import require_roles
from mentorfeed.app.schemas.user import (
    RoleName, RolesUpdateIn, StatusUpdateIn, UserOut, UserProvisionIn, UsersPage,
)
from mentorfeed.app.services import users
from mentorfeed.app.services.authorization import ADMIN, Principal
from mentorfeed.db.session import get_db

router = APIRouter()


@router.get("/api/admin/users", response_model=UsersPage)
async def list_users(
    search: Optional[str] = Query(None, max_length=100),
    role: Optional[RoleName] = None,
    limit: Optional[int] = Query(None, ge=1, le=100),
    cursor: Optional[str] = None,
    principal: Principal = Depends(require_roles(*ADMIN)),
    db: Session = Depends(get_db),
):
    rows, next_cursor = users.list_users(db, search=search, role=role, limit=limit, cursor=cursor)
    return UsersPage(users=[UserOut.model_validate(u) for u in rows], next_cursor=next_cursor)


@router.post("/api/admin/users", response_model=UserOut, status_code=201)
async def provision_user(
    payload: UserProvisionIn,
    principal: Principal = Depends(require_roles(*ADMIN)),
    db: Session = Depends(get_db),
):
    return users.provision_user(
        db, principal, str(payload.email), name=payload.name, roles=payload.roles, company_name=payload.company_name
    )


@router.patch("/api/admin/users/{user_id}/roles", response_model=UserOut)
async def update_user_roles(
    user_id: str,
    payload: RolesUpdateIn,
    principal: Principal = Depends(require_roles(*ADMIN)),
    db: Session = Depends(get_db),
):
    """Replace the user's roles.

    Errors:
        400: The change would remove the last admin.
        404: The user was not found.
    """
    return users.update_user_roles(db, principal, user_id, payload.roles)


@router.patch("/api/admin/users/{user_id}/status", response_model=UserOut)
async def update_user_status(
    user_id: str,
    payload: StatusUpdateIn,
    principal: Principal = Depends(require_roles(*ADMIN)),
    db: Session = Depends(get_db),
):
    return users.update_user_status(db, principal, user_id, payload.status)
