"""Role and ownership decisions shared by every entry point.

The role layer is a set intersection between the caller's roles and the
roles an operation accepts. The ownership layer applies only to operations on
records already identified by id: the caller must be the record owner, the
owner of its parent event, or an admin.
"""
# app/services/authorization.py
import enum
from dataclasses import dataclass, field
from typing import Iterable, Optional

from mentorfeed.app.core.errors import Forbidden


class Role(str, enum.Enum):
    admin = "admin"
    organizer = "organizer"
    mentor = "mentor"
    mentee = "mentee"
    user = "user"


RoleSet = frozenset[Role]


def parse_roles(values: Iterable[str]) -> RoleSet:
    """Known role names become `Role` members; unknown names are dropped."""
    out = set()
    for v in values:
        try:
            out.add(Role(v))
        except ValueError:
            continue
    return frozenset(out)


ADMIN: RoleSet = frozenset({Role.admin})
ORGANIZER: RoleSet = frozenset({Role.organizer, Role.admin})
MENTOR: RoleSet = frozenset({Role.mentor, Role.organizer, Role.admin})
MENTEE: RoleSet = frozenset({Role.mentee, Role.admin})
ANY: RoleSet = frozenset(Role)


@dataclass(frozen=True)
class Principal:
    user_id: str
    email: str
    roles: RoleSet = field(default_factory=frozenset)
    name: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return Role.admin in self.roles


def has_any_role(roles: Iterable[Role], required: Iterable[Role]) -> bool:
    return not frozenset(roles).isdisjoint(required)


def is_allowed(
    principal: Principal,
    required_roles: Iterable[Role],
    owner_id: Optional[str] = None,
    parent_owner_id: Optional[str] = None,
) -> bool:
    if not has_any_role(principal.roles, required_roles):
        return False
    if owner_id is None and parent_owner_id is None:
        return True
    if principal.is_admin:
        return True
    return principal.user_id in {owner_id, parent_owner_id} - {None}


def authorize(
    principal: Principal,
    required_roles: Iterable[Role],
    owner_id: Optional[str] = None,
    parent_owner_id: Optional[str] = None,
    message: str = "Not authorized",
) -> None:
    required_roles = frozenset(required_roles)
    if not has_any_role(principal.roles, required_roles):
        raise Forbidden(f"Required role(s): {', '.join(sorted(r.value for r in required_roles))}")
    if not is_allowed(principal, required_roles, owner_id, parent_owner_id):
        raise Forbidden(message)
