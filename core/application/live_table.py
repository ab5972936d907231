"""
Reactive view over one remote table.

A LiveTable holds the rows of its last fetch together with a loading flag
and an error message, and exposes the table's mutations. Started with
``realtime`` enabled, it refetches the whole result set once per change
notification. Rows are never patched locally: after a mutation the caller
refetches to see the server's state.
"""

import asyncio
import logging
from typing import Any, Callable, Iterable, List, Mapping, Optional, Sequence, Tuple

from core.application.audit import AuditTrail
from core.domain.events import RowChanged
from core.domain.query import Row, TableQuery
from core.domain.value_objects import AuditAction
from core.metrics import realtime_refetches_total
from core.ports.remote_service import RemoteService, Subscription

logger = logging.getLogger(__name__)

Listener = Callable[["LiveTable"], None]


def error_message(exc: BaseException) -> str:
    """Reduce a failure to the string shown to users."""
    message = getattr(exc, "message", None) or str(exc)
    return message or "Database connection error"


class LiveTable:
    """
    Rows of one table plus their loading/error state and mutations.

    Usage:
        async with LiveTable(remote, "products", query) as products:
            ...  # products.rows stays current while the block runs
    """

    def __init__(
        self,
        remote: RemoteService,
        table: str,
        query: Optional[TableQuery] = None,
        audit: Optional[AuditTrail] = None,
    ):
        self.remote = remote
        self.table = table
        self.query = query or TableQuery()
        self.audit = audit
        self.rows: List[Row] = []
        self.loading = False
        self.error: Optional[str] = None
        self._subscription: Optional[Subscription] = None
        self._listeners: List[Listener] = []

    def __repr__(self) -> str:
        return f"<LiveTable {self.table} rows={len(self.rows)} realtime={self.query.realtime}>"

    @property
    def subscribed(self) -> bool:
        return self._subscription is not None

    def add_listener(self, listener: Listener) -> Callable[[], None]:
        """
        Register a callable run after every completed fetch.

        Returns:
            Callable that removes the listener
        """
        self._listeners.append(listener)

        def remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return remove

    async def fetch(self) -> List[Row]:
        """
        Replace the local rows with a fresh read.

        On failure the previous rows are kept and ``error`` holds the
        failure message; the failure is not raised.
        """
        self.loading = True
        try:
            rows = await self.remote.select(self.table, self.query)
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.error("Error fetching %s: %s", self.table, e, extra={"table": self.table})
            self.error = error_message(e)
        else:
            self.rows = list(rows or [])
            self.error = None
        finally:
            self.loading = False

        for listener in list(self._listeners):
            listener(self)
        return self.rows

    async def refetch(self) -> List[Row]:
        return await self.fetch()

    async def start(self) -> "LiveTable":
        """Initial fetch, then subscribe to changes when realtime is on."""
        await self.fetch()
        if self.query.realtime and self._subscription is None:
            self._subscription = await self.remote.subscribe(self.table, self._on_change)
            logger.debug("Subscribed to %s changes", self.table)
        return self

    async def stop(self) -> None:
        """Tear down the change subscription. In-flight requests keep running."""
        subscription, self._subscription = self._subscription, None
        if subscription is not None:
            await self.remote.unsubscribe(subscription)
            logger.debug("Unsubscribed from %s changes", self.table)

    async def __aenter__(self) -> "LiveTable":
        return await self.start()

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.stop()

    async def _on_change(self, event: RowChanged) -> None:
        logger.debug(
            "Real-time update for %s: %s",
            self.table,
            event.change_type.value,
            extra={"table": self.table, "record_id": event.aggregate_id},
        )
        realtime_refetches_total.labels(table=self.table).inc()
        await self.fetch()

    async def insert(self, row: Mapping[str, Any]) -> Row:
        """
        Create one row.

        Returns:
            The stored row, including generated id and timestamps
        """
        try:
            created = await self.remote.insert(self.table, [dict(row)])
        except Exception as e:
            logger.error("Error inserting into %s: %s", self.table, e)
            raise
        record = created[0]
        if self.audit:
            await self.audit.record(AuditAction.INSERT, self.table, record.get("id"), None, record)
        return record

    async def update(self, row_id: str, values: Mapping[str, Any]) -> Row:
        """
        Apply a partial update to one row.

        Returns:
            The updated row
        """
        old = await self._snapshot(row_id)
        try:
            updated = await self.remote.update(self.table, row_id, dict(values))
        except Exception as e:
            logger.error("Error updating %s: %s", self.table, e, extra={"record_id": row_id})
            raise
        if self.audit:
            await self.audit.record(AuditAction.UPDATE, self.table, row_id, old, updated)
        return updated

    async def remove(self, row_id: str) -> None:
        """Delete one row."""
        old = await self._snapshot(row_id)
        try:
            await self.remote.delete(self.table, row_id)
        except Exception as e:
            logger.error("Error deleting from %s: %s", self.table, e, extra={"record_id": row_id})
            raise
        if self.audit:
            await self.audit.record(AuditAction.DELETE, self.table, row_id, old, None)

    async def bulk_insert(self, rows: Iterable[Mapping[str, Any]]) -> List[Row]:
        """Create all rows in one request; the activity log keeps only the count."""
        payload = [dict(row) for row in rows]
        try:
            created = await self.remote.insert(self.table, payload)
        except Exception as e:
            logger.error("Error bulk inserting into %s: %s", self.table, e)
            raise
        if self.audit:
            await self.audit.record(
                AuditAction.BULK_INSERT, self.table, None, None, {"count": len(payload)}
            )
        return created

    async def bulk_update(self, items: Sequence[Tuple[str, Mapping[str, Any]]]) -> List[Row]:
        """
        Update several rows concurrently.

        There is no atomicity: if one update fails the first failure is
        raised and rows that were already updated stay updated.
        """
        try:
            return list(
                await asyncio.gather(*(self.update(row_id, values) for row_id, values in items))
            )
        except Exception as e:
            logger.error("Error bulk updating %s: %s", self.table, e)
            raise

    async def _snapshot(self, row_id: str) -> Optional[Row]:
        # Read only for the activity log; a failed read does not stop the mutation.
        if not self.audit:
            return None
        try:
            return await self.remote.select_one(self.table, row_id)
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.warning("Could not read %s/%s before mutation: %s", self.table, row_id, e)
            return None
