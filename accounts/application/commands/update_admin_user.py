"""
UpdateAdminUserCommand.

Command to change an admin user's role, name or active flag.
"""
from dataclasses import dataclass
from typing import Optional

from accounts.domain.admin_user import AdminRole


@dataclass
class UpdateAdminUserCommand:
    """Command to update an admin_users row. ``None`` fields are left unchanged."""

    user_id: str
    role: Optional[AdminRole] = None
    full_name: Optional[str] = None
    active: Optional[bool] = None
