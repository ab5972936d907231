"""
Remote service port (interface).

This defines the contract for every read, write and change subscription
the application sends to the hosted backend. Implementations live in the
infrastructure layer.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, List, Mapping, Optional
from uuid import uuid4

from core.domain.events import RowChanged
from core.domain.query import Row, TableQuery

ChangeCallback = Callable[[RowChanged], Awaitable[None]]


@dataclass
class Subscription:
    """Handle for an open change subscription on one table."""

    table: str
    callback: ChangeCallback
    handle: Any = None
    id: str = field(default_factory=lambda: uuid4().hex)
    active: bool = True


class RemoteService(ABC):
    """
    Abstract remote table service.

    This is a port in hexagonal architecture - it defines
    what operations are available, not how they're implemented.
    Identifiers are opaque strings assigned by the remote side.
    """

    access_token: Optional[str] = None

    def for_token(self, access_token: Optional[str]) -> "RemoteService":
        """
        Return a view of this service whose requests act as a signed-in user.

        Row-level security on the remote side then sees that user instead
        of the service key. The view shares connections and subscriptions
        with the service it came from.

        Args:
            access_token: Bearer token of the caller, or None for the service key

        Returns:
            RemoteService scoped to the caller
        """
        return self

    @abstractmethod
    async def select(self, table: str, query: TableQuery) -> List[Row]:
        """
        Run one read query.

        Args:
            table: Remote table name
            query: Projection, filter and ordering

        Returns:
            Matching rows

        Raises:
            RemoteServiceError: If the remote service rejects the query
        """
        pass

    @abstractmethod
    async def select_one(self, table: str, row_id: str) -> Optional[Row]:
        """
        Read one row by id.

        Args:
            table: Remote table name
            row_id: Row identifier

        Returns:
            Row or None if not found
        """
        pass

    @abstractmethod
    async def insert(self, table: str, rows: List[Row]) -> List[Row]:
        """
        Create rows in one request.

        Args:
            table: Remote table name
            rows: Rows to create

        Returns:
            Created rows as stored, with generated ids and timestamps
        """
        pass

    @abstractmethod
    async def update(self, table: str, row_id: str, values: Mapping[str, Any]) -> Row:
        """
        Apply a partial update to one row.

        Args:
            table: Remote table name
            row_id: Row identifier
            values: Columns to change; other columns are left as they are

        Returns:
            Updated row

        Raises:
            RowNotFoundError: If no row has that id
        """
        pass

    @abstractmethod
    async def delete(self, table: str, row_id: str) -> None:
        """
        Delete one row.

        Args:
            table: Remote table name
            row_id: Row identifier
        """
        pass

    @abstractmethod
    async def subscribe(self, table: str, callback: ChangeCallback) -> Subscription:
        """
        Open a change subscription for a table.

        Args:
            table: Remote table name
            callback: Awaited once per insert/update/delete notification

        Returns:
            Subscription handle
        """
        pass

    @abstractmethod
    async def unsubscribe(self, subscription: Subscription) -> None:
        """
        Tear down a change subscription.

        Args:
            subscription: Handle returned by subscribe
        """
        pass

    @abstractmethod
    async def ping(self, table: str) -> None:
        """
        Issue a minimal read against a table.

        Raises:
            RemoteServiceError: If the table is unreachable
        """
        pass
