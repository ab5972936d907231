"""
Serializers for Storefront API endpoints.

Rows are returned as stored by the remote service; serializers here
validate query parameters and shape the computed parts of responses.
"""

from rest_framework import serializers

from catalog.domain.banner import BannerPosition

ORDERING_CHOICES = ("name", "-name", "price", "-price", "created_at", "-created_at", "sort_order")


class ProductListQuerySerializer(serializers.Serializer):
    """Serializer for product listing query parameters."""

    category = serializers.CharField(required=False)
    brand = serializers.CharField(required=False)
    featured = serializers.BooleanField(required=False, allow_null=True, default=None)
    ordering = serializers.ChoiceField(choices=ORDERING_CHOICES, required=False)


class BrandListQuerySerializer(serializers.Serializer):
    """Serializer for brand listing query parameters."""

    featured = serializers.BooleanField(required=False, allow_null=True, default=None)


class BannerListQuerySerializer(serializers.Serializer):
    """Serializer for banner listing query parameters."""

    position = serializers.ChoiceField(
        choices=[position.value for position in BannerPosition], required=False
    )


class ProductDetailQuerySerializer(serializers.Serializer):
    """Serializer for product detail query parameters."""

    quantity = serializers.IntegerField(required=False, default=1, min_value=1)


class OrderLinkSerializer(serializers.Serializer):
    """Serializer for OrderLink."""

    url = serializers.URLField()
    message = serializers.CharField()
    quantity = serializers.IntegerField()
    total = serializers.DecimalField(max_digits=12, decimal_places=2, coerce_to_string=False)


class ProductDetailResponseSerializer(serializers.Serializer):
    """Serializer for product detail response."""

    product = serializers.DictField()
    related = serializers.ListField(child=serializers.DictField())
    order_link = OrderLinkSerializer()
    stock_status = serializers.CharField()
