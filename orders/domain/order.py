"""
Order domain entity.
"""
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, FrozenSet, List, Mapping, Optional

from core.domain.exceptions import InvalidTransitionError
from core.domain.rows import parse_timestamp, to_decimal

TABLE = "orders"
CUSTOMERS_TABLE = "customers"


class OrderStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"
    REFUNDED = "refunded"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"


TRANSITIONS: Dict[OrderStatus, FrozenSet[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.CONFIRMED, OrderStatus.CANCELLED}),
    OrderStatus.CONFIRMED: frozenset(
        {OrderStatus.PROCESSING, OrderStatus.SHIPPED, OrderStatus.CANCELLED}
    ),
    OrderStatus.PROCESSING: frozenset({OrderStatus.SHIPPED, OrderStatus.CANCELLED}),
    OrderStatus.SHIPPED: frozenset({OrderStatus.DELIVERED}),
    OrderStatus.DELIVERED: frozenset({OrderStatus.REFUNDED}),
    OrderStatus.CANCELLED: frozenset(),
    OrderStatus.REFUNDED: frozenset(),
}

# Column stamped when an order enters the status.
LIFECYCLE_COLUMNS = {
    OrderStatus.CONFIRMED: "confirmed_at",
    OrderStatus.SHIPPED: "shipped_at",
    OrderStatus.DELIVERED: "delivered_at",
    OrderStatus.CANCELLED: "cancelled_at",
}


@dataclass(frozen=True)
class Order:
    """
    Order domain entity.

    ``items`` is kept as stored; the back-office never edits line items.
    """

    id: str
    order_number: Optional[str] = None
    customer_id: Optional[str] = None
    customer_name: Optional[str] = None
    customer_email: Optional[str] = None
    customer_phone: Optional[str] = None
    shipping_address: Optional[Any] = None
    billing_address: Optional[Any] = None
    items: List[Any] = field(default_factory=list)
    subtotal: Decimal = Decimal("0")
    tax_amount: Decimal = Decimal("0")
    shipping_amount: Decimal = Decimal("0")
    discount_amount: Decimal = Decimal("0")
    total: Decimal = Decimal("0")
    currency: str = "KES"
    status: OrderStatus = OrderStatus.PENDING
    payment_status: PaymentStatus = PaymentStatus.PENDING
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    confirmed_at: Optional[datetime] = None
    shipped_at: Optional[datetime] = None
    delivered_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Order":
        customer = row.get("customers") or {}
        return cls(
            id=str(row["id"]),
            order_number=row.get("order_number"),
            customer_id=row.get("customer_id"),
            customer_name=row.get("customer_name") or customer.get("full_name"),
            customer_email=row.get("customer_email") or customer.get("email"),
            customer_phone=row.get("customer_phone") or customer.get("phone"),
            shipping_address=row.get("shipping_address"),
            billing_address=row.get("billing_address"),
            items=list(row.get("items") or []),
            subtotal=to_decimal(row.get("subtotal")),
            tax_amount=to_decimal(row.get("tax_amount")),
            shipping_amount=to_decimal(row.get("shipping_amount")),
            discount_amount=to_decimal(row.get("discount_amount")),
            total=to_decimal(row.get("total") or row.get("total_amount")),
            currency=row.get("currency") or "KES",
            status=OrderStatus(row.get("status") or OrderStatus.PENDING.value),
            payment_status=PaymentStatus(row.get("payment_status") or PaymentStatus.PENDING.value),
            created_at=parse_timestamp(row.get("created_at")),
            updated_at=parse_timestamp(row.get("updated_at")),
            confirmed_at=parse_timestamp(row.get("confirmed_at")),
            shipped_at=parse_timestamp(row.get("shipped_at")),
            delivered_at=parse_timestamp(row.get("delivered_at")),
            cancelled_at=parse_timestamp(row.get("cancelled_at")),
        )

    @property
    def is_open(self) -> bool:
        return self.status not in (
            OrderStatus.DELIVERED,
            OrderStatus.CANCELLED,
            OrderStatus.REFUNDED,
        )

    def can_transition_to(self, status: OrderStatus) -> bool:
        return status in TRANSITIONS[self.status]

    def transition_values(self, status: OrderStatus, now: datetime) -> Dict[str, Any]:
        """
        Column values for moving this order to ``status``.

        Args:
            status: Target status
            now: Timestamp recorded in the lifecycle column

        Returns:
            Partial row for the update

        Raises:
            InvalidTransitionError: If the move is not allowed
        """
        if not self.can_transition_to(status):
            raise InvalidTransitionError(
                f"Cannot move order {self.order_number or self.id} "
                f"from {self.status.value} to {status.value}"
            )
        values: Dict[str, Any] = {"status": status.value}
        column = LIFECYCLE_COLUMNS.get(status)
        if column:
            values[column] = now.isoformat()
        if status is OrderStatus.REFUNDED:
            values["payment_status"] = PaymentStatus.REFUNDED.value
        return values
