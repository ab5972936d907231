"""
In-memory implementation of the RemoteService port.

Used by the test suite and by local development when
``STOREFRONT_BACKEND=memory``. It mimics the remote service closely
enough for the application layer: server-assigned ids and timestamps,
partial updates, equality/membership filters, single-column ordering,
foreign-key expansion for ``relation(columns)`` joins, and change
notifications delivered through the event bus.
"""

import copy
import logging
import re
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Tuple

from core.domain.events import DomainEvent, EventBus, EventHandler, RowChanged
from core.domain.exceptions import InvalidQueryError, RemoteServiceError, RowNotFoundError
from core.domain.query import Row, TableQuery
from core.domain.value_objects import ChangeType
from core.ports.remote_service import ChangeCallback, RemoteService, Subscription

logger = logging.getLogger(__name__)

JOIN_PATTERN = re.compile(r"^\s*(?P<table>\w+)(?:!(?P<fkey>\w+))?\s*\((?P<columns>[^)]*)\)\s*$")


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _foreign_key(source_table: str, relation: str, fkey: Optional[str]) -> str:
    """Column on the source row that points at the related table."""
    if fkey:
        column = fkey
        if column.startswith(f"{source_table}_"):
            column = column[len(source_table) + 1 :]
        if column.endswith("_fkey"):
            column = column[: -len("_fkey")]
        return column
    if relation.endswith("ies"):
        return f"{relation[:-3]}y_id"
    if relation.endswith("s"):
        return f"{relation[:-1]}_id"
    return f"{relation}_id"


class _TableChangeHandler(EventHandler):
    """Forwards RowChanged events for one table to a subscriber."""

    def __init__(self, table: str, callback: ChangeCallback):
        self.table = table
        self.callback = callback

    async def handle(self, event: DomainEvent) -> None:
        if isinstance(event, RowChanged) and event.table == self.table:
            await self.callback(event)


class InMemoryRemoteService(RemoteService):
    """Dict-backed fake of the hosted table service."""

    def __init__(self, event_bus: EventBus):
        self.event_bus = event_bus
        self._tables: Dict[str, Dict[str, Row]] = {}
        self._failures: Dict[Tuple[str, str], List[Exception]] = {}
        self.calls: List[Tuple[str, str]] = []
        # (operation, table, access_token) for every call, across scoped views.
        self.callers: List[Tuple[str, str, Optional[str]]] = []

    def for_token(self, access_token: Optional[str]) -> "InMemoryRemoteService":
        if access_token == self.access_token:
            return self
        scoped = copy.copy(self)
        scoped.access_token = access_token
        return scoped

    def seed(self, table: str, rows: List[Mapping[str, Any]]) -> List[Row]:
        """Store rows directly, without change notifications."""
        stored = [self._stamp(dict(row)) for row in rows]
        bucket = self._tables.setdefault(table, {})
        for row in stored:
            bucket[row["id"]] = row
        return copy.deepcopy(stored)

    def rows(self, table: str) -> List[Row]:
        return copy.deepcopy(list(self._tables.get(table, {}).values()))

    def fail(self, operation: str, table: str, error: Optional[Exception] = None, times: int = 1):
        """Make the next ``times`` calls of ``operation`` on ``table`` raise."""
        error = error or RemoteServiceError(f"Simulated {operation} failure on {table}")
        self._failures.setdefault((operation, table), []).extend([error] * times)

    def _check_failure(self, operation: str, table: str) -> None:
        self.calls.append((operation, table))
        self.callers.append((operation, table, self.access_token))
        pending = self._failures.get((operation, table))
        if pending:
            raise pending.pop(0)

    def _stamp(self, row: Row) -> Row:
        now = _now()
        row.setdefault("id", str(uuid.uuid4()))
        row.setdefault("created_at", now)
        row.setdefault("updated_at", now)
        return row

    async def select(self, table: str, query: TableQuery) -> List[Row]:
        self._check_failure("select", table)
        rows = list(self._tables.get(table, {}).values())

        for clause in query.clauses():
            if clause.operator == "in":
                rows = [row for row in rows if row.get(clause.column) in clause.value]
            else:
                rows = [row for row in rows if row.get(clause.column) == clause.value]

        if query.order_by:
            rows = self._ordered(rows, query.order_by.column, query.order_by.ascending)

        rows = copy.deepcopy(rows)
        if query.joins:
            for row in rows:
                for expression in query.joins:
                    self._expand(table, row, expression)
        elif query.select.strip() != "*":
            columns = [column.strip() for column in query.select.split(",") if column.strip()]
            rows = [{column: row.get(column) for column in columns} for row in rows]
        return rows

    @staticmethod
    def _ordered(rows: List[Row], column: str, ascending: bool) -> List[Row]:
        # Nulls sort last ascending and first descending, as in Postgres.
        present = [row for row in rows if row.get(column) is not None]
        missing = [row for row in rows if row.get(column) is None]
        present.sort(key=lambda row: row[column], reverse=not ascending)
        return present + missing if ascending else missing + present

    def _expand(self, table: str, row: Row, expression: str) -> None:
        match = JOIN_PATTERN.match(expression)
        if not match:
            raise InvalidQueryError(f"Unsupported join expression: {expression}")
        relation = match.group("table")
        key = _foreign_key(table, relation, match.group("fkey"))
        columns = [c.strip() for c in match.group("columns").split(",") if c.strip()]
        related = self._tables.get(relation, {}).get(row.get(key))
        if related is None:
            row[relation] = None
        elif not columns or columns == ["*"]:
            row[relation] = copy.deepcopy(related)
        else:
            row[relation] = {column: copy.deepcopy(related.get(column)) for column in columns}

    async def select_one(self, table: str, row_id: str) -> Optional[Row]:
        self._check_failure("select_one", table)
        row = self._tables.get(table, {}).get(row_id)
        return copy.deepcopy(row) if row is not None else None

    async def insert(self, table: str, rows: List[Row]) -> List[Row]:
        self._check_failure("insert", table)
        bucket = self._tables.setdefault(table, {})
        stored = [self._stamp(copy.deepcopy(dict(row))) for row in rows]
        # All or nothing: nothing is stored when any id collides.
        ids = [record["id"] for record in stored]
        if len(set(ids)) != len(ids) or any(row_id in bucket for row_id in ids):
            raise RemoteServiceError(
                f'duplicate key value violates unique constraint "{table}_pkey"',
                code="CONFLICT",
            )
        for record in stored:
            bucket[record["id"]] = record
        for record in stored:
            await self._publish(table, ChangeType.INSERT, record, None)
        return copy.deepcopy(stored)

    async def update(self, table: str, row_id: str, values: Mapping[str, Any]) -> Row:
        self._check_failure("update", table)
        bucket = self._tables.get(table, {})
        if row_id not in bucket:
            raise RowNotFoundError(table, row_id)
        old = copy.deepcopy(bucket[row_id])
        record = bucket[row_id]
        record.update(copy.deepcopy(dict(values)))
        record["id"] = row_id
        record["updated_at"] = _now()
        await self._publish(table, ChangeType.UPDATE, record, old)
        return copy.deepcopy(record)

    async def delete(self, table: str, row_id: str) -> None:
        self._check_failure("delete", table)
        old = self._tables.get(table, {}).pop(row_id, None)
        if old is not None:
            await self._publish(table, ChangeType.DELETE, None, old)

    async def subscribe(self, table: str, callback: ChangeCallback) -> Subscription:
        self._check_failure("subscribe", table)
        handler = _TableChangeHandler(table, callback)
        self.event_bus.subscribe(RowChanged, handler)
        return Subscription(table=table, callback=callback, handle=handler)

    async def unsubscribe(self, subscription: Subscription) -> None:
        self.event_bus.unsubscribe(RowChanged, subscription.handle)
        subscription.active = False

    async def ping(self, table: str) -> None:
        self._check_failure("select", table)

    async def _publish(
        self, table: str, change_type: ChangeType, record: Optional[Row], old: Optional[Row]
    ) -> None:
        source = record if record is not None else old
        await self.event_bus.publish(
            RowChanged(
                aggregate_id=str(source.get("id")),
                table=table,
                change_type=change_type,
                record=copy.deepcopy(record),
                old_record=copy.deepcopy(old),
            )
        )
