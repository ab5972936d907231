"""
SessionProvider implementations.

SupabaseSessionProvider delegates to Supabase Auth; InMemorySessionProvider
keeps accounts and tokens in process memory for tests and local
development. Both read the role claim from the actor's app metadata.
"""

import logging
import secrets
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from supabase import AuthError

from core.domain.exceptions import AuthenticationError
from core.domain.value_objects import Email
from core.infrastructure.supabase_service import SIGN_IN_CLIENT, SupabaseRemoteService
from core.ports.session_provider import Actor, ActorCallback, Session, SessionProvider

logger = logging.getLogger(__name__)


def actor_from_user(user: Any) -> Actor:
    """
    Convert a Supabase Auth user into an Actor.

    Args:
        user: ``supabase_auth`` User model

    Returns:
        Actor with role taken from ``app_metadata.role``
    """
    app_metadata = dict(getattr(user, "app_metadata", None) or {})
    user_metadata = dict(getattr(user, "user_metadata", None) or {})
    return Actor(
        id=str(user.id),
        email=user.email or "",
        role=app_metadata.get("role"),
        full_name=user_metadata.get("full_name"),
        metadata={"app_metadata": app_metadata, "user_metadata": user_metadata},
    )


class _Observers:
    """Callback list shared by both providers."""

    def __init__(self):
        self._callbacks: List[ActorCallback] = []

    def add(self, callback: ActorCallback) -> Callable[[], None]:
        self._callbacks.append(callback)

        def remove() -> None:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

        return remove

    def notify(self, actor: Optional[Actor]) -> None:
        for callback in list(self._callbacks):
            try:
                callback(actor)
            except Exception:  # pylint: disable=broad-exception-caught
                logger.exception("Session observer failed")


class SupabaseSessionProvider(SessionProvider):
    """Session provider backed by Supabase Auth."""

    def __init__(self, remote: SupabaseRemoteService):
        self.remote = remote
        self._observers = _Observers()

    async def get_current_actor(self, access_token: Optional[str] = None) -> Optional[Actor]:
        try:
            response = await self.remote.clients.run(
                lambda client: client.auth.get_user(access_token)
            )
        except AuthError as e:
            logger.info("Access token rejected: %s", e)
            return None
        if response is None or response.user is None:
            return None
        return actor_from_user(response.user)

    async def sign_in(self, email: str, password: str) -> Session:
        try:
            address = str(Email(email))
            # Password grants use their own client so the data client never holds a user session.
            response = await self.remote.clients.run(
                lambda client: client.auth.sign_in_with_password(
                    {"email": address, "password": password}
                ),
                name=SIGN_IN_CLIENT,
            )
        except (AuthError, ValueError) as e:
            logger.warning("Sign-in failed for %s: %s", email, e)
            raise AuthenticationError() from e

        if response.session is None or response.user is None:
            raise AuthenticationError()

        actor = actor_from_user(response.user)
        self._observers.notify(actor)
        logger.info("Signed in", extra={"user_id": actor.id})
        return Session(
            actor=actor,
            access_token=response.session.access_token,
            refresh_token=response.session.refresh_token,
            expires_at=response.session.expires_at,
        )

    async def sign_out(self, access_token: Optional[str] = None) -> None:
        async def work(client) -> None:
            if access_token:
                # Revokes the caller's own session; the token authorises the request.
                await client.auth.admin.sign_out(access_token)
            else:
                await client.auth.sign_out()

        try:
            await self.remote.clients.run(work)
        except AuthError as e:
            raise AuthenticationError(f"Sign-out failed: {e}") from e
        self._observers.notify(None)

    def on_change(self, callback: ActorCallback) -> Callable[[], None]:
        return self._observers.add(callback)


@dataclass
class _Account:
    actor: Actor
    password: str


class InMemorySessionProvider(SessionProvider):
    """Process-local accounts and bearer tokens."""

    def __init__(self):
        self._accounts: Dict[str, _Account] = {}
        self._tokens: Dict[str, Actor] = {}
        self._current: Optional[Actor] = None
        self._observers = _Observers()

    def register(
        self,
        email: str,
        password: str,
        role: Optional[str] = None,
        full_name: Optional[str] = None,
        actor_id: Optional[str] = None,
    ) -> Actor:
        """Create an account that can sign in."""
        address = str(Email(email))
        actor = Actor(
            id=actor_id or secrets.token_hex(16),
            email=address,
            role=role,
            full_name=full_name,
            metadata={"app_metadata": {"role": role} if role else {}},
        )
        self._accounts[address] = _Account(actor=actor, password=password)
        return actor

    def issue_token(self, actor: Actor) -> str:
        """Mint a bearer token for an actor without a password exchange."""
        token = secrets.token_urlsafe(24)
        self._tokens[token] = actor
        return token

    async def get_current_actor(self, access_token: Optional[str] = None) -> Optional[Actor]:
        if access_token is None:
            return self._current
        return self._tokens.get(access_token)

    async def sign_in(self, email: str, password: str) -> Session:
        try:
            account = self._accounts.get(str(Email(email)))
        except ValueError as e:
            raise AuthenticationError() from e
        if account is None or not secrets.compare_digest(account.password, password):
            raise AuthenticationError()
        token = self.issue_token(account.actor)
        self._current = account.actor
        self._observers.notify(account.actor)
        return Session(actor=account.actor, access_token=token)

    async def sign_out(self, access_token: Optional[str] = None) -> None:
        if access_token is not None:
            actor = self._tokens.pop(access_token, None)
            if actor is not None and actor == self._current:
                self._current = None
        else:
            self._current = None
        self._observers.notify(None)

    def on_change(self, callback: ActorCallback) -> Callable[[], None]:
        return self._observers.add(callback)
