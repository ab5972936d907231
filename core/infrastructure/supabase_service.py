"""
Supabase implementation of the RemoteService port.

This adapter turns TableQuery values into PostgREST builder calls, maps
realtime ``postgres_changes`` payloads onto RowChanged events and
translates client failures into RemoteServiceError.
"""

import asyncio
import logging
import threading
import time
import uuid
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, TypeVar

import httpx
from supabase import AsyncClient, AsyncClientOptions, PostgrestAPIError, acreate_client

from core.domain.events import RowChanged
from core.domain.exceptions import RemoteServiceError, RowNotFoundError
from core.domain.query import Row, TableQuery
from core.domain.value_objects import ChangeType
from core.metrics import remote_call_duration_seconds, remote_calls_total
from core.ports.remote_service import ChangeCallback, RemoteService, Subscription

logger = logging.getLogger(__name__)

T = TypeVar("T")

Work = Callable[[AsyncClient], Awaitable[T]]

DATA_CLIENT = "data"
SIGN_IN_CLIENT = "sign_in"


def change_event(table: str, payload: Mapping[str, Any]) -> RowChanged:
    """
    Build a RowChanged event from a realtime payload.

    Args:
        table: Subscribed table
        payload: ``postgres_changes`` payload as delivered by the client

    Returns:
        RowChanged event
    """
    data = payload.get("data", payload)
    change_type = ChangeType(data.get("type") or data.get("eventType") or "UPDATE")
    record = data.get("record") or data.get("new") or None
    old_record = data.get("old_record") or data.get("old") or None
    source = record or old_record or {}
    return RowChanged(
        aggregate_id=str(source.get("id", "")),
        table=table,
        change_type=change_type,
        record=record,
        old_record=old_record,
    )


class SupabaseClients:
    """
    Process-wide Supabase clients on a dedicated event loop.

    The async client's HTTP pools and realtime socket belong to the loop
    that created them, while Django runs every async handler through
    ``async_to_sync`` on a fresh loop. All client work is therefore handed
    to one long-lived loop on a daemon thread, and each named client is
    created once on it.

    Usage:
        clients = SupabaseClients(url, key)
        rows = await clients.run(lambda client: client.table("brands").select("*").execute())
    """

    def __init__(self, url: str, key: str, thread_name: str = "supabase-client"):
        self.url = url
        self.key = key
        self._thread_name = thread_name
        self._lock = threading.Lock()
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._clients: Dict[str, AsyncClient] = {}
        self._creating: Optional[asyncio.Lock] = None

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        """The owning loop, started on first use."""
        with self._lock:
            if self._loop is None or self._loop.is_closed():
                loop = asyncio.new_event_loop()
                thread = threading.Thread(
                    target=loop.run_forever, name=self._thread_name, daemon=True
                )
                thread.start()
                self._loop = loop
                self._clients = {}
                self._creating = None
            return self._loop

    async def run(self, work: Work, name: str = DATA_CLIENT) -> T:
        """
        Await ``work(client)`` on the owning loop.

        Args:
            work: Coroutine function taking the client
            name: Which client to use; ``sign_in`` keeps password grants
                off the data client

        Returns:
            Whatever ``work`` returns; its exceptions propagate unchanged
        """
        loop = self.loop
        coroutine = self._with_client(work, name)
        if asyncio.get_running_loop() is loop:
            return await coroutine
        return await asyncio.wrap_future(asyncio.run_coroutine_threadsafe(coroutine, loop))

    async def _with_client(self, work: Work, name: str) -> T:
        return await work(await self._client(name))

    async def _client(self, name: str) -> AsyncClient:
        if self._creating is None:
            self._creating = asyncio.Lock()
        async with self._creating:
            client = self._clients.get(name)
            if client is None:
                client = await acreate_client(
                    self.url,
                    self.key,
                    options=AsyncClientOptions(persist_session=False, auto_refresh_token=False),
                )
                self._clients[name] = client
                logger.info("Supabase %s client created", name, extra={"supabase_url": self.url})
        return client

    def shutdown(self) -> None:
        """Stop the owning loop. A later ``run`` starts a new one."""
        with self._lock:
            loop, self._loop = self._loop, None
            self._clients = {}
            self._creating = None
        if loop is not None and not loop.is_closed():
            loop.call_soon_threadsafe(loop.stop)


class SupabaseRemoteService(RemoteService):
    """
    Supabase-backed RemoteService.

    Requests go out with the project key unless the service was scoped to
    a caller with ``for_token``, in which case PostgREST requests carry
    the caller's bearer token and row-level security applies to them.
    """

    def __init__(
        self,
        url: str,
        key: str,
        schema: str = "public",
        access_token: Optional[str] = None,
        clients: Optional[SupabaseClients] = None,
    ):
        self.url = url
        self.key = key
        self.schema = schema
        self.access_token = access_token
        self.clients = clients or SupabaseClients(url, key)

    def for_token(self, access_token: Optional[str]) -> "SupabaseRemoteService":
        if access_token == self.access_token:
            return self
        return SupabaseRemoteService(
            self.url, self.key, self.schema, access_token=access_token, clients=self.clients
        )

    def _as_caller(self, builder: T) -> T:
        if self.access_token:
            builder.headers["Authorization"] = f"Bearer {self.access_token}"
        return builder

    async def _call(self, operation: str, table: str, work: Work) -> T:
        start = time.perf_counter()
        outcome = "success"
        try:
            return await self.clients.run(work)
        except PostgrestAPIError as e:
            outcome = "error"
            raise RemoteServiceError(
                e.message or str(e),
                details={"code": e.code, "details": e.details, "hint": e.hint},
            ) from e
        except (httpx.HTTPError, OSError) as e:
            outcome = "error"
            raise RemoteServiceError(f"Database connection error: {e}") from e
        finally:
            remote_calls_total.labels(operation=operation, table=table, outcome=outcome).inc()
            remote_call_duration_seconds.labels(operation=operation, table=table).observe(
                time.perf_counter() - start
            )

    async def select(self, table: str, query: TableQuery) -> List[Row]:
        async def work(client: AsyncClient) -> List[Row]:
            builder = client.table(table).select(query.projection)
            for clause in query.clauses():
                if clause.operator == "in":
                    builder = builder.in_(clause.column, clause.value)
                else:
                    builder = builder.eq(clause.column, clause.value)
            if query.order_by:
                builder = builder.order(query.order_by.column, desc=not query.order_by.ascending)
            response = await self._as_caller(builder).execute()
            return response.data or []

        return await self._call("select", table, work)

    async def select_one(self, table: str, row_id: str) -> Optional[Row]:
        async def work(client: AsyncClient) -> Optional[Row]:
            builder = client.table(table).select("*").eq("id", row_id).maybe_single()
            response = await self._as_caller(builder).execute()
            if response is None:
                return None
            return response.data

        return await self._call("select_one", table, work)

    async def insert(self, table: str, rows: List[Row]) -> List[Row]:
        async def work(client: AsyncClient) -> List[Row]:
            response = await self._as_caller(client.table(table).insert(rows)).execute()
            return response.data or []

        return await self._call("insert", table, work)

    async def update(self, table: str, row_id: str, values: Mapping[str, Any]) -> Row:
        async def work(client: AsyncClient) -> Row:
            builder = client.table(table).update(dict(values)).eq("id", row_id)
            response = await self._as_caller(builder).execute()
            if not response.data:
                # Row-level security hides rows the caller may not change.
                raise RowNotFoundError(table, row_id)
            return response.data[0]

        return await self._call("update", table, work)

    async def delete(self, table: str, row_id: str) -> None:
        async def work(client: AsyncClient) -> None:
            await self._as_caller(client.table(table).delete().eq("id", row_id)).execute()

        await self._call("delete", table, work)

    async def subscribe(self, table: str, callback: ChangeCallback) -> Subscription:
        subscriber_loop = asyncio.get_running_loop()

        def on_change(payload: Dict[str, Any]) -> None:
            # Runs on the client loop; the callback belongs to the subscriber's loop.
            if subscriber_loop.is_closed():
                logger.warning("Dropped %s change: subscriber loop is closed", table)
                return
            event = change_event(table, payload)
            asyncio.run_coroutine_threadsafe(callback(event), subscriber_loop)

        async def work(client: AsyncClient) -> Any:
            channel = client.channel(f"{table}_changes_{uuid.uuid4().hex[:8]}")
            channel.on_postgres_changes("*", schema=self.schema, table=table, callback=on_change)
            await channel.subscribe()
            return channel

        channel = await self.clients.run(work)
        logger.info("Realtime channel opened for %s", table, extra={"table": table})
        return Subscription(table=table, callback=callback, handle=channel)

    async def unsubscribe(self, subscription: Subscription) -> None:
        await self.clients.run(lambda client: client.remove_channel(subscription.handle))
        subscription.active = False
        logger.info("Realtime channel closed for %s", subscription.table)

    async def ping(self, table: str) -> None:
        async def work(client: AsyncClient) -> None:
            await self._as_caller(client.table(table).select("id").limit(1)).execute()

        await self._call("ping", table, work)
