"""
Serializers for Admin API endpoints.
"""

from rest_framework import serializers
from rest_framework.settings import api_settings

from accounts.domain.admin_user import AdminRole
from core.domain.value_objects import AuditAction
from orders.domain.order import OrderStatus, PaymentStatus

READ_ONLY_COLUMNS = ("id", "created_at", "updated_at")
NON_FIELD_ERRORS = api_settings.NON_FIELD_ERRORS_KEY


class LoginRequestSerializer(serializers.Serializer):
    """Serializer for admin sign-in request."""

    email = serializers.EmailField(required=True)
    password = serializers.CharField(required=True, trim_whitespace=False)


class ActorSerializer(serializers.Serializer):
    """Serializer for the authenticated actor."""

    id = serializers.CharField()
    email = serializers.EmailField()
    role = serializers.CharField(allow_null=True)
    full_name = serializers.CharField(allow_null=True)


class SessionResponseSerializer(serializers.Serializer):
    """Serializer for Session."""

    access_token = serializers.CharField()
    refresh_token = serializers.CharField(allow_null=True)
    expires_at = serializers.IntegerField(allow_null=True)
    user = ActorSerializer(source="actor")


class RowSerializer(serializers.Serializer):
    """
    Serializer for a row payload.

    Accepts any JSON object. Server-managed columns are dropped.
    """

    def to_internal_value(self, data):
        if not isinstance(data, dict):
            raise serializers.ValidationError({NON_FIELD_ERRORS: ["Expected a JSON object"]})
        values = {key: value for key, value in data.items() if key not in READ_ONLY_COLUMNS}
        if not values:
            raise serializers.ValidationError({NON_FIELD_ERRORS: ["No writable columns given"]})
        return values

    def to_representation(self, instance):
        return dict(instance)


class BulkInsertSerializer(serializers.Serializer):
    """Serializer for bulk insert request."""

    rows = serializers.ListField(child=RowSerializer(), min_length=1)


class BulkUpdateItemSerializer(serializers.Serializer):
    """One ``(id, values)`` pair of a bulk update."""

    id = serializers.CharField()
    values = RowSerializer()


class BulkUpdateSerializer(serializers.Serializer):
    """Serializer for bulk update request."""

    items = BulkUpdateItemSerializer(many=True, allow_empty=False)


class ListQuerySerializer(serializers.Serializer):
    """Serializer for admin listing query parameters; other keys filter by column."""

    ordering = serializers.CharField(required=False)


class OrderListQuerySerializer(serializers.Serializer):
    """Serializer for order listing query parameters."""

    status = serializers.ChoiceField(choices=[s.value for s in OrderStatus], required=False)
    payment_status = serializers.ChoiceField(
        choices=[s.value for s in PaymentStatus], required=False
    )


class OrderStatusRequestSerializer(serializers.Serializer):
    """Serializer for order status change request."""

    status = serializers.ChoiceField(choices=[s.value for s in OrderStatus], required=True)


class StockAdjustmentRequestSerializer(serializers.Serializer):
    """Serializer for stock adjustment request."""

    change = serializers.IntegerField(required=True)
    reason = serializers.CharField(required=False, allow_blank=True, max_length=500)

    def validate_change(self, value):
        """Validate stock change."""
        if value == 0:
            raise serializers.ValidationError("Stock change must be non-zero")
        return value


class ActivityLogQuerySerializer(serializers.Serializer):
    """Serializer for activity log query parameters."""

    table = serializers.CharField(required=False)
    action = serializers.ChoiceField(choices=[a.value for a in AuditAction], required=False)
    user = serializers.CharField(required=False)


class AdminUserUpdateRequestSerializer(serializers.Serializer):
    """Serializer for admin user update request."""

    role = serializers.ChoiceField(choices=[r.value for r in AdminRole], required=False)
    full_name = serializers.CharField(required=False, max_length=200)
    active = serializers.BooleanField(required=False)


class InventorySummarySerializer(serializers.Serializer):
    """Serializer for InventorySummaryDTO."""

    total_products = serializers.IntegerField()
    active_products = serializers.IntegerField()
    featured_products = serializers.IntegerField()
    in_stock = serializers.IntegerField()
    low_stock = serializers.IntegerField()
    out_of_stock = serializers.IntegerField()
    low_stock_items = serializers.ListField(child=serializers.DictField())


class OrderSummarySerializer(serializers.Serializer):
    """Serializer for OrderSummaryDTO."""

    total_orders = serializers.IntegerField()
    open_orders = serializers.IntegerField()
    by_status = serializers.DictField(child=serializers.IntegerField())
    revenue = serializers.DecimalField(max_digits=14, decimal_places=2, coerce_to_string=False)
    recent_orders = serializers.ListField(child=serializers.DictField())


class DashboardResponseSerializer(serializers.Serializer):
    """Serializer for dashboard response."""

    inventory = InventorySummarySerializer()
    orders = OrderSummarySerializer()
    currency = serializers.CharField()
