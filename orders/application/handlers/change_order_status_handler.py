"""
ChangeOrderStatusHandler.

Validates the transition against the stored order, then applies it
through the audited LiveTable so the activity log records old and new
values.
"""
import logging
from datetime import datetime, timezone

from core.application.live_table import LiveTable
from core.domain.exceptions import RowNotFoundError
from core.domain.query import Row
from orders.application.commands.change_order_status import ChangeOrderStatusCommand
from orders.domain.order import Order

logger = logging.getLogger(__name__)


class ChangeOrderStatusHandler:
    """Handler for ChangeOrderStatusCommand."""

    def __init__(self, orders: LiveTable):
        self.orders = orders

    async def handle(self, command: ChangeOrderStatusCommand) -> Row:
        """
        Handle change order status command.

        Args:
            command: ChangeOrderStatusCommand

        Returns:
            The updated order row

        Raises:
            RowNotFoundError: If the order does not exist
            InvalidTransitionError: If the order cannot move to the status
        """
        row = await self.orders.remote.select_one(self.orders.table, command.order_id)
        if row is None:
            raise RowNotFoundError(self.orders.table, command.order_id)

        order = Order.from_row(row)
        values = order.transition_values(command.status, datetime.now(timezone.utc))
        updated = await self.orders.update(command.order_id, values)

        logger.info(
            "Order %s moved from %s to %s",
            command.order_id,
            order.status.value,
            command.status.value,
            extra={"order_id": command.order_id},
        )
        return updated
