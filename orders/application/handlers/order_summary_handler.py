"""
OrderSummaryHandler.

Order counts and revenue for the admin dashboard.
"""
from collections import Counter
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, List

from catalog.application.queries import read_rows
from core.application.live_table import LiveTable
from core.domain.query import Row
from orders.domain.order import Order, OrderStatus, PaymentStatus

RECENT_ORDERS_LIMIT = 5


@dataclass
class OrderSummaryDTO:
    """DTO for the order side of the dashboard."""

    total_orders: int = 0
    open_orders: int = 0
    by_status: Dict[str, int] = field(default_factory=dict)
    revenue: Decimal = Decimal("0")
    recent_orders: List[Row] = field(default_factory=list)


class OrderSummaryHandler:
    """
    Handler for the order summary query.

    Revenue counts paid orders that were not cancelled or refunded.
    ``orders`` is expected to be ordered newest first.
    """

    def __init__(self, orders: LiveTable):
        self.orders = orders

    async def handle(self) -> OrderSummaryDTO:
        rows = await read_rows(self.orders)
        orders = [Order.from_row(row) for row in rows]

        counts = Counter(order.status.value for order in orders)
        revenue = sum(
            (
                order.total
                for order in orders
                if order.payment_status is PaymentStatus.PAID
                and order.status not in (OrderStatus.CANCELLED, OrderStatus.REFUNDED)
            ),
            Decimal("0"),
        )
        return OrderSummaryDTO(
            total_orders=len(orders),
            open_orders=sum(1 for order in orders if order.is_open),
            by_status={status.value: counts.get(status.value, 0) for status in OrderStatus},
            revenue=revenue,
            recent_orders=rows[:RECENT_ORDERS_LIMIT],
        )
