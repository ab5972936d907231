"""
Activity-log writer for mutating table operations.

Entries are best effort: an entry is only written for a privileged actor,
and a failure to resolve the actor or to write the entry is logged and
never reaches the mutation that triggered it. This is not access control;
row-level security on the remote side decides what a caller may change.
"""

import logging
from typing import Any, Iterable, Optional

from core.domain.query import Row
from core.domain.value_objects import AuditAction
from core.metrics import audit_entries_total
from core.ports.remote_service import RemoteService
from core.ports.session_provider import SessionProvider

logger = logging.getLogger(__name__)

ACTIVITY_LOG_TABLE = "admin_activity_logs"
DEFAULT_AUDIT_ROLES = ("admin", "super_admin")


class AuditTrail:
    """Writes one activity-log row per audited mutation."""

    def __init__(
        self,
        remote: RemoteService,
        sessions: SessionProvider,
        access_token: Optional[str] = None,
        privileged_roles: Iterable[str] = DEFAULT_AUDIT_ROLES,
        user_agent: Optional[str] = None,
        ip_address: Optional[str] = None,
    ):
        self.remote = remote
        self.sessions = sessions
        self.access_token = access_token
        self.privileged_roles = frozenset(privileged_roles)
        self.user_agent = user_agent
        self.ip_address = ip_address

    async def record(
        self,
        action: AuditAction,
        table: str,
        record_id: Optional[str],
        old_values: Optional[Any],
        new_values: Optional[Any],
    ) -> Optional[Row]:
        """
        Record one mutation.

        Args:
            action: Mutation kind
            table: Table the mutation targeted
            record_id: Row id, None for bulk operations
            old_values: Row before the mutation, None for inserts
            new_values: Row after the mutation, None for deletes

        Returns:
            The stored activity-log row, or None when skipped or failed
        """
        try:
            actor = await self.sessions.get_current_actor(self.access_token)
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.error("Could not resolve actor for activity log: %s", e, exc_info=True)
            audit_entries_total.labels(action=action.value, outcome="error").inc()
            return None

        if actor is None or not actor.has_role(self.privileged_roles):
            logger.debug(
                "Skipping activity log for %s on %s",
                action.value,
                table,
                extra={"table": table, "action": action.value},
            )
            audit_entries_total.labels(action=action.value, outcome="skipped").inc()
            return None

        entry = {
            "user_id": actor.id,
            "user_email": actor.email,
            "action": action.value,
            "table_name": table,
            "record_id": record_id,
            "old_values": old_values,
            "new_values": new_values,
            "ip_address": self.ip_address,
            "user_agent": self.user_agent,
        }
        try:
            stored = await self.remote.insert(ACTIVITY_LOG_TABLE, [entry])
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.error(
                "Error logging admin activity: %s",
                e,
                extra={"table": table, "action": action.value, "record_id": record_id},
                exc_info=True,
            )
            audit_entries_total.labels(action=action.value, outcome="error").inc()
            return None

        audit_entries_total.labels(action=action.value, outcome="written").inc()
        return stored[0] if stored else None
