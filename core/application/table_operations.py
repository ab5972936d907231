"""
Single-row operations over one remote table.

The narrow admin variant of LiveTable: no activity log, no change
subscription. Every call toggles ``loading``, and a failure is stored in
``error`` and re-raised. ``last_result`` keeps the previous successful
result when a later call fails; ``error`` stays set until the caller
clears it or starts another call.
"""

import logging
from typing import Any, Awaitable, Callable, List, Mapping, Optional, TypeVar

from core.application.live_table import error_message
from core.domain.exceptions import RowNotFoundError
from core.domain.query import Row, TableQuery
from core.ports.remote_service import RemoteService

logger = logging.getLogger(__name__)

R = TypeVar("R")


class TableOperations:
    """Loading/error-tracked CRUD calls for one table."""

    def __init__(self, remote: RemoteService, table: str):
        self.remote = remote
        self.table = table
        self.loading = False
        self.error: Optional[str] = None
        self.last_result: Any = None

    def clear_error(self) -> None:
        self.error = None

    async def _run(self, operation: Callable[[], Awaitable[R]]) -> R:
        self.loading = True
        self.error = None
        try:
            result = await operation()
        except Exception as e:
            self.error = error_message(e)
            logger.error("Operation on %s failed: %s", self.table, e, extra={"table": self.table})
            raise
        finally:
            self.loading = False
        self.last_result = result
        return result

    async def fetch_all(self) -> List[Row]:
        return await self._run(lambda: self.remote.select(self.table, TableQuery()))

    async def fetch_by_id(self, row_id: str) -> Row:
        async def operation() -> Row:
            row = await self.remote.select_one(self.table, row_id)
            if row is None:
                raise RowNotFoundError(self.table, row_id)
            return row

        return await self._run(operation)

    async def create(self, values: Mapping[str, Any]) -> Row:
        async def operation() -> Row:
            created = await self.remote.insert(self.table, [dict(values)])
            return created[0]

        return await self._run(operation)

    async def update(self, row_id: str, values: Mapping[str, Any]) -> Row:
        return await self._run(lambda: self.remote.update(self.table, row_id, dict(values)))

    async def remove(self, row_id: str) -> bool:
        async def operation() -> bool:
            await self.remote.delete(self.table, row_id)
            return True

        return await self._run(operation)
