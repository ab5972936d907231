"""
Admin user domain entity.
"""
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Iterable, Mapping, Optional

from core.application.audit import DEFAULT_AUDIT_ROLES
from core.domain.rows import parse_timestamp
from core.domain.value_objects import Email
from core.ports.session_provider import Actor

TABLE = "admin_users"


class AdminRole(str, Enum):
    SUPER_ADMIN = "super_admin"
    ADMIN = "admin"
    MODERATOR = "moderator"


def is_admin(actor: Optional[Actor], roles: Iterable[str] = DEFAULT_AUDIT_ROLES) -> bool:
    """True when the actor carries one of the privileged roles."""
    return actor is not None and actor.has_role(tuple(roles))


@dataclass(frozen=True)
class AdminUser:
    """Back-office user record kept alongside the auth service's users."""

    id: str
    email: Email
    full_name: Optional[str] = None
    role: AdminRole = AdminRole.ADMIN
    active: bool = True
    last_login: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "AdminUser":
        return cls(
            id=str(row["id"]),
            email=Email(row["email"]),
            full_name=row.get("full_name"),
            role=AdminRole(row.get("role") or AdminRole.ADMIN.value),
            active=bool(row.get("active", True)),
            last_login=parse_timestamp(row.get("last_login")),
        )
