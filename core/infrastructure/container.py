"""
Service container.

The remote service, session provider and event bus are constructed once
per process from the ``STOREFRONT`` settings and handed to whoever needs
them. Tests install their own container with in-memory adapters.
"""

import logging
from dataclasses import dataclass, replace
from typing import Any, Iterable, Mapping, Optional, Tuple

from core.application.audit import DEFAULT_AUDIT_ROLES, AuditTrail
from core.application.live_table import LiveTable
from core.application.table_operations import TableOperations
from core.domain.events import EventBus
from core.domain.exceptions import ConfigurationError
from core.domain.query import TableQuery
from core.infrastructure.events import InMemoryEventBus
from core.ports.remote_service import RemoteService
from core.ports.session_provider import SessionProvider

logger = logging.getLogger(__name__)

SUPPORTED_BACKENDS = ("supabase", "memory")


@dataclass
class ServiceContainer:
    """Explicitly constructed handles to the remote backend."""

    remote: RemoteService
    sessions: SessionProvider
    event_bus: EventBus
    audit_roles: Tuple[str, ...] = DEFAULT_AUDIT_ROLES

    def for_token(self, access_token: Optional[str]) -> "ServiceContainer":
        """Container whose tables, operations and audit trail act as the token's user."""
        remote = self.remote.for_token(access_token)
        if remote is self.remote:
            return self
        return replace(self, remote=remote)

    def audit_trail(
        self,
        access_token: Optional[str] = None,
        user_agent: Optional[str] = None,
        ip_address: Optional[str] = None,
    ) -> AuditTrail:
        return AuditTrail(
            self.remote,
            self.sessions,
            access_token=access_token,
            privileged_roles=self.audit_roles,
            user_agent=user_agent,
            ip_address=ip_address,
        )

    def table(
        self,
        name: str,
        query: Optional[TableQuery] = None,
        audit: Optional[AuditTrail] = None,
    ) -> LiveTable:
        """Build a LiveTable bound to this container's remote service."""
        return LiveTable(self.remote, name, query, audit=audit)

    def operations(self, name: str) -> TableOperations:
        return TableOperations(self.remote, name)

    def is_privileged(self, actor) -> bool:
        return actor is not None and actor.has_role(self.audit_roles)


def build_container(config: Mapping[str, Any]) -> ServiceContainer:
    """
    Construct a container from the ``STOREFRONT`` settings mapping.

    Args:
        config: Settings mapping (BACKEND, SUPABASE_URL, SUPABASE_KEY, AUDIT_ROLES)

    Returns:
        ServiceContainer

    Raises:
        ConfigurationError: If the backend is unknown or Supabase
            credentials are missing
    """
    backend = (config.get("BACKEND") or "supabase").lower()
    roles = _roles(config.get("AUDIT_ROLES") or DEFAULT_AUDIT_ROLES)
    event_bus = InMemoryEventBus()

    if backend == "memory":
        from core.infrastructure.memory_service import InMemoryRemoteService
        from core.infrastructure.sessions import InMemorySessionProvider

        logger.info("Using in-memory remote service")
        return ServiceContainer(
            remote=InMemoryRemoteService(event_bus),
            sessions=InMemorySessionProvider(),
            event_bus=event_bus,
            audit_roles=roles,
        )

    if backend == "supabase":
        url = config.get("SUPABASE_URL")
        key = config.get("SUPABASE_KEY")
        if not url or not key:
            raise ConfigurationError(
                "Missing Supabase environment variables (SUPABASE_URL, SUPABASE_KEY)"
            )

        from core.infrastructure.sessions import SupabaseSessionProvider
        from core.infrastructure.supabase_service import SupabaseRemoteService

        remote = SupabaseRemoteService(url, key)
        logger.info("Using Supabase remote service", extra={"supabase_url": url})
        return ServiceContainer(
            remote=remote,
            sessions=SupabaseSessionProvider(remote),
            event_bus=event_bus,
            audit_roles=roles,
        )

    raise ConfigurationError(
        f"Unknown STOREFRONT backend {backend!r}; expected one of {', '.join(SUPPORTED_BACKENDS)}"
    )


def _roles(value: Any) -> Tuple[str, ...]:
    if isinstance(value, str):
        value = value.split(",")
    roles: Iterable[str] = (role.strip() for role in value)
    return tuple(role for role in roles if role)


_container: Optional[ServiceContainer] = None


def get_container() -> ServiceContainer:
    """Return the process container, building it from Django settings on first use."""
    global _container  # pylint: disable=global-statement
    if _container is None:
        from django.conf import settings

        _container = build_container(settings.STOREFRONT)
    return _container


def set_container(container: Optional[ServiceContainer]) -> None:
    """Install a container (or clear it with None)."""
    global _container  # pylint: disable=global-statement
    _container = container
