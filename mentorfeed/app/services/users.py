# app/services/users.py
from typing import Iterable, Optional
from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from mentorfeed.app.core.config import settings
from mentorfeed.app.core.errors import FeedbackAppError, LastAdminViolation, NotFound
from mentorfeed.app.core.logging import get_logs_writer_logger
from mentorfeed.app.services.authorization import Principal, Role, parse_roles
from mentorfeed.app.services.pagination import paginate
from mentorfeed.db.models import User, UserRole, UserStatus

logger = get_logs_writer_logger()


def get_user_or_404(db: Session, user_id: str) -> User:
    user = db.get(User, user_id)
    if not user:
        raise NotFound("User not found")
    return user


def find_by_email(db: Session, email: str) -> Optional[User]:
    return db.execute(select(User).where(func.lower(User.email) == email.strip().lower())).scalar_one_or_none()


def sign_in(db: Session, email: str, name: Optional[str] = None) -> User:
    """First sign-in creates the user with the default `user` role."""
    user = find_by_email(db, email)
    if user is None:
        user = User(email=email.strip().lower(), name=name)
        user.set_roles([Role.user])
        db.add(user)
        db.commit()
        db.refresh(user)
        logger.info(f"user.created user_id={user.user_id} via=sign_in")
    elif name and not user.name:
        user.name = name
        db.commit()
    return user


def get_profile(db: Session, principal: Principal) -> User:
    return get_user_or_404(db, principal.user_id)


def update_profile(db: Session, principal: Principal, fields: dict) -> User:
    user = get_user_or_404(db, principal.user_id)
    for key in ("name", "company_name", "description"):
        if key in fields:
            setattr(user, key, fields[key])
    db.commit()
    db.refresh(user)
    logger.info(f"user.profile_updated user_id={user.user_id}")
    return user


def list_users(
    db: Session,
    search: Optional[str] = None,
    role: Optional[str] = None,
    limit: Optional[int] = None,
    cursor: Optional[str] = None,
):
    stmt = select(User)
    if search:
        pattern = f"%{search.strip()}%"
        stmt = stmt.where(or_(User.email.ilike(pattern), User.name.ilike(pattern)))
    if role:
        stmt = stmt.where(User.user_id.in_(select(UserRole.user_id).where(UserRole.role == role)))
    return paginate(db, stmt, User, User.user_id, User.created_at, cursor, limit or settings.PAGE_SIZE_DEFAULT)


def search_users(db: Session, role: Optional[str] = None, search: Optional[str] = None, limit: int = 20) -> list[User]:
    stmt = select(User).where(User.status == UserStatus.active)
    if role:
        stmt = stmt.where(User.user_id.in_(select(UserRole.user_id).where(UserRole.role == role)))
    if search:
        pattern = f"%{search.strip()}%"
        stmt = stmt.where(or_(User.email.ilike(pattern), User.name.ilike(pattern)))
    return list(db.execute(stmt.order_by(User.email).limit(limit)).scalars().all())


def provision_user(
    db: Session,
    principal: Principal,
    email: str,
    name: Optional[str] = None,
    roles: Iterable[str] = ("user",),
    company_name: Optional[str] = None,
) -> User:
    if find_by_email(db, email):
        raise FeedbackAppError("User with this email already exists", field="email")

    user = User(email=email.strip().lower(), name=name, company_name=company_name)
    user.set_roles(parse_roles(roles) or [Role.user])
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info(f"user.provisioned user_id={user.user_id} roles={','.join(user.roles)} by={principal.user_id}")
    return user


def _lock_active_admin_ids(db: Session) -> set[str]:
    stmt = (
        select(UserRole.user_id)
        .join(User, User.user_id == UserRole.user_id)
        .where(UserRole.role == Role.admin.value, User.status == UserStatus.active)
        .with_for_update()
    )
    return set(db.execute(stmt).scalars().all())


def update_user_roles(db: Session, principal: Principal, user_id: str, roles: Iterable[str]) -> User:
    """Replace a user's role set.

    The admin role rows and the target user are locked before counting, so two
    concurrent demotions cannot both see a second admin and leave none.

    Raises:
        NotFound: Unknown user.
        LastAdminViolation: The change would leave no active admin.
    """
    new_roles = parse_roles(roles)
    try:
        user = db.execute(select(User).where(User.user_id == user_id).with_for_update()).scalar_one_or_none()
        if not user:
            raise NotFound("User not found")

        if Role.admin not in new_roles:
            admin_ids = _lock_active_admin_ids(db)
            if user_id in admin_ids and len(admin_ids) <= 1:
                raise LastAdminViolation()

        before = ",".join(user.roles)
        user.set_roles(new_roles)
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(user)
    logger.info(f"user.roles_updated user_id={user_id} from={before} to={','.join(user.roles)} by={principal.user_id}")
    return user


def update_user_status(db: Session, principal: Principal, user_id: str, status: str) -> User:
    """Set a user's account status; the last active admin stays active."""
    new_status = UserStatus(status)
    try:
        user = db.execute(select(User).where(User.user_id == user_id).with_for_update()).scalar_one_or_none()
        if not user:
            raise NotFound("User not found")

        if new_status is not UserStatus.active:
            admin_ids = _lock_active_admin_ids(db)
            if user_id in admin_ids and len(admin_ids) <= 1:
                raise LastAdminViolation("Cannot deactivate the last admin user", field="status")

        user.status = new_status
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(user)
    logger.info(f"user.status_updated user_id={user_id} status={user.status.value} by={principal.user_id}")
    return user
