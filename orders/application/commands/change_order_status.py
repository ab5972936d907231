"""
ChangeOrderStatusCommand.

Command to move an order to another status.
"""
from dataclasses import dataclass

from orders.domain.order import OrderStatus


@dataclass
class ChangeOrderStatusCommand:
    """Command to change an order's status."""

    order_id: str
    status: OrderStatus
