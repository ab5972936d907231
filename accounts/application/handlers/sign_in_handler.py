"""
SignInHandler.

Signs an admin in through the session provider and stamps
``admin_users.last_login`` for the matching row.
"""
import logging
from datetime import datetime, timezone
from typing import Iterable

from accounts.application.commands.sign_in import SignInCommand
from accounts.domain import admin_user
from accounts.domain.admin_user import is_admin
from core.application.audit import DEFAULT_AUDIT_ROLES
from core.application.table_operations import TableOperations
from core.domain.exceptions import PermissionDeniedError
from core.domain.query import TableQuery
from core.ports.remote_service import RemoteService
from core.ports.session_provider import Session, SessionProvider

logger = logging.getLogger(__name__)


class SignInHandler:
    """Handler for SignInCommand."""

    def __init__(
        self,
        sessions: SessionProvider,
        remote: RemoteService,
        roles: Iterable[str] = DEFAULT_AUDIT_ROLES,
    ):
        self.sessions = sessions
        self.remote = remote
        self.roles = tuple(roles)

    async def handle(self, command: SignInCommand) -> Session:
        """
        Handle sign-in command.

        Args:
            command: SignInCommand

        Returns:
            Session for the admin

        Raises:
            AuthenticationError: If the credentials are rejected
            PermissionDeniedError: If the actor is not an admin
        """
        session = await self.sessions.sign_in(command.email, command.password)
        if not is_admin(session.actor, self.roles):
            logger.warning(
                "Non-admin sign-in refused for %s",
                session.actor.email,
                extra={"user_id": session.actor.id},
            )
            await self.sessions.sign_out(session.access_token)
            raise PermissionDeniedError()

        await self._stamp_last_login(session)
        logger.info("Admin signed in", extra={"user_id": session.actor.id})
        return session

    async def _stamp_last_login(self, session: Session) -> None:
        # Bookkeeping only; the session is valid either way. Runs as the new admin.
        remote = self.remote.for_token(session.access_token)
        operations = TableOperations(remote, admin_user.TABLE)
        try:
            rows = await remote.select(
                admin_user.TABLE, TableQuery(filter={"email": session.actor.email.lower()})
            )
            if rows:
                await operations.update(
                    rows[0]["id"], {"last_login": datetime.now(timezone.utc).isoformat()}
                )
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.warning("Could not record last login for %s: %s", session.actor.email, e)
