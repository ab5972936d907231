"""
Unit tests for Order entity.
"""
from datetime import datetime, timezone
from decimal import Decimal

import pytest

from core.domain.exceptions import InvalidTransitionError
from orders.domain.order import Order, OrderStatus, PaymentStatus

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


class TestOrder:
    """Tests for Order entity."""

    def test_from_row_with_customer_join(self):
        """Test customer details fall back to the joined customer row."""
        order = Order.from_row(
            {
                "id": "o1",
                "order_number": "ORD-1001",
                "total_amount": "4300.00",
                "status": "confirmed",
                "payment_status": "paid",
                "customers": {"full_name": "Jane", "email": "jane@example.com", "phone": "0700"},
            }
        )
        assert order.total == Decimal("4300.00")
        assert order.status is OrderStatus.CONFIRMED
        assert order.payment_status is PaymentStatus.PAID
        assert order.customer_name == "Jane"
        assert order.customer_email == "jane@example.com"

    def test_defaults(self):
        """Test a bare row is a pending, unpaid order."""
        order = Order.from_row({"id": "o1"})
        assert order.status is OrderStatus.PENDING
        assert order.payment_status is PaymentStatus.PENDING
        assert order.is_open

    @pytest.mark.parametrize(
        "current,target,column",
        [
            (OrderStatus.PENDING, OrderStatus.CONFIRMED, "confirmed_at"),
            (OrderStatus.CONFIRMED, OrderStatus.SHIPPED, "shipped_at"),
            (OrderStatus.SHIPPED, OrderStatus.DELIVERED, "delivered_at"),
            (OrderStatus.PROCESSING, OrderStatus.CANCELLED, "cancelled_at"),
        ],
    )
    def test_transition_stamps_lifecycle_column(self, current, target, column):
        """Test allowed transitions set the status and its timestamp."""
        values = Order(id="o1", status=current).transition_values(target, NOW)
        assert values == {"status": target.value, column: NOW.isoformat()}

    def test_processing_has_no_timestamp(self):
        """Test statuses without a lifecycle column only change the status."""
        values = Order(id="o1", status=OrderStatus.CONFIRMED).transition_values(
            OrderStatus.PROCESSING, NOW
        )
        assert values == {"status": "processing"}

    def test_refund_marks_payment_refunded(self):
        """Test refunding a delivered order refunds the payment."""
        values = Order(id="o1", status=OrderStatus.DELIVERED).transition_values(
            OrderStatus.REFUNDED, NOW
        )
        assert values["payment_status"] == "refunded"

    @pytest.mark.parametrize(
        "current,target",
        [
            (OrderStatus.PENDING, OrderStatus.SHIPPED),
            (OrderStatus.DELIVERED, OrderStatus.CANCELLED),
            (OrderStatus.CANCELLED, OrderStatus.CONFIRMED),
            (OrderStatus.REFUNDED, OrderStatus.PENDING),
        ],
    )
    def test_invalid_transition(self, current, target):
        """Test disallowed transitions raise InvalidTransitionError."""
        order = Order(id="o1", order_number="ORD-1", status=current)
        assert not order.can_transition_to(target)
        with pytest.raises(InvalidTransitionError, match="ORD-1"):
            order.transition_values(target, NOW)

    def test_closed_statuses(self):
        """Test delivered, cancelled and refunded orders are closed."""
        closed = {OrderStatus.DELIVERED, OrderStatus.CANCELLED, OrderStatus.REFUNDED}
        for status in OrderStatus:
            assert Order(id="o1", status=status).is_open is (status not in closed)
