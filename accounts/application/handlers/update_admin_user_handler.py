"""
UpdateAdminUserHandler.

Handler for admin user changes. Updates go through the audited
LiveTable. Admins cannot demote or deactivate themselves.
"""
import logging
from typing import Any, Dict

from accounts.application.commands.update_admin_user import UpdateAdminUserCommand
from core.application.live_table import LiveTable
from core.domain.exceptions import PermissionDeniedError, RowNotFoundError
from core.domain.query import Row
from core.ports.session_provider import Actor

logger = logging.getLogger(__name__)


class UpdateAdminUserHandler:
    """Handler for UpdateAdminUserCommand."""

    def __init__(self, admin_users: LiveTable, actor: Actor):
        self.admin_users = admin_users
        self.actor = actor

    async def handle(self, command: UpdateAdminUserCommand) -> Row:
        """
        Handle update admin user command.

        Args:
            command: UpdateAdminUserCommand

        Returns:
            The updated admin_users row

        Raises:
            RowNotFoundError: If the admin user does not exist
            PermissionDeniedError: If the actor targets their own role or active flag
        """
        row = await self.admin_users.remote.select_one(self.admin_users.table, command.user_id)
        if row is None:
            raise RowNotFoundError(self.admin_users.table, command.user_id)

        values: Dict[str, Any] = {}
        if command.role is not None:
            values["role"] = command.role.value
        if command.full_name is not None:
            values["full_name"] = command.full_name
        if command.active is not None:
            values["active"] = command.active

        own_row = str(row.get("email", "")).lower() == self.actor.email.lower()
        if own_row and ("role" in values or values.get("active") is False):
            raise PermissionDeniedError("You cannot change your own role or deactivate yourself")

        if not values:
            return row
        updated = await self.admin_users.update(command.user_id, values)
        logger.info(
            "Admin user %s updated",
            command.user_id,
            extra={"user_id": self.actor.id, "fields": sorted(values)},
        )
        return updated
