# app/core/security.py
from fastapi import Depends, Request
from sqlalchemy.orm import Session

from mentorfeed.app.core.errors import Forbidden, Unauthorized
from mentorfeed.app.services.authorization import Principal, Role, authorize, parse_roles
from mentorfeed.app.services.links import verify_token
from mentorfeed.db.models import User, UserStatus
from mentorfeed.db.session import get_db


def _bearer(request: Request) -> str | None:
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token:
        return None
    return token.strip()


def get_current_principal(request: Request, db: Session = Depends(get_db)) -> Principal:
    """Resolve the caller from the bearer token; roles come from the database."""
    token = _bearer(request)
    payload = verify_token(token) if token else None
    if not payload or payload.get("kind") != "session" or not payload.get("sub"):
        raise Unauthorized()

    user = db.get(User, payload["sub"])
    if not user:
        raise Unauthorized()
    if user.status != UserStatus.active:
        raise Forbidden(f"Account is {user.status.value}")

    return Principal(user_id=user.user_id, email=user.email, roles=parse_roles(user.roles), name=user.name)


def require_roles(*roles: Role):
    """Role-layer dependency: the caller must hold at least one of `roles`."""
    def dependency(principal: Principal = Depends(get_current_principal)) -> Principal:
        authorize(principal, roles)
        return principal
    return dependency
