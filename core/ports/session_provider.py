"""
Session provider port (interface).

One capability set for authentication: resolve the current actor, sign
in, sign out and observe actor changes. Role claims come from the remote
service's actor metadata and are trusted as-is.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional


@dataclass(frozen=True)
class Actor:
    """Authenticated identity as reported by the remote service."""

    id: str
    email: str
    role: Optional[str] = None
    full_name: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict, compare=False)

    def has_role(self, roles) -> bool:
        return self.role is not None and self.role in roles


@dataclass(frozen=True)
class Session:
    """Result of a successful sign-in."""

    actor: Actor
    access_token: str
    refresh_token: Optional[str] = None
    expires_at: Optional[int] = None


ActorCallback = Callable[[Optional[Actor]], None]


class SessionProvider(ABC):
    """Abstract authentication session provider."""

    @abstractmethod
    async def get_current_actor(self, access_token: Optional[str] = None) -> Optional[Actor]:
        """
        Resolve the actor behind an access token.

        Args:
            access_token: Bearer token; the provider's own session when None

        Returns:
            Actor or None if unauthenticated
        """
        pass

    @abstractmethod
    async def sign_in(self, email: str, password: str) -> Session:
        """
        Exchange a credential pair for a session.

        Raises:
            AuthenticationError: If the credentials are rejected
        """
        pass

    @abstractmethod
    async def sign_out(self, access_token: Optional[str] = None) -> None:
        """
        End a session.

        Args:
            access_token: Token of the session to end
        """
        pass

    @abstractmethod
    def on_change(self, callback: ActorCallback) -> Callable[[], None]:
        """
        Observe sign-in and sign-out.

        Args:
            callback: Called with the new actor, or None after sign-out

        Returns:
            Callable that removes the observer
        """
        pass
