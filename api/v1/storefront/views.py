"""
Storefront API views.

Public, read-only endpoints used by the shop front:
- Categories, brands and banners for navigation and hero sections
- Product listings with filters and ordering
- Product detail with related products and a WhatsApp order link
"""

from asgiref.sync import async_to_sync
from django.conf import settings
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from api.v1.storefront.serializers import (
    BannerListQuerySerializer,
    BrandListQuerySerializer,
    ProductDetailQuerySerializer,
    ProductDetailResponseSerializer,
    ProductListQuerySerializer,
)
from catalog.application.queries import StorefrontCatalog
from catalog.domain.banner import BannerPosition
from catalog.domain.product import Product
from catalog.domain.services import WhatsAppOrderLinkBuilder
from core.domain.query import OrderBy
from core.infrastructure.container import get_container
from core.instrumentation import Status, StatusCode, get_tracer

tracer = get_tracer(__name__)


def _catalog() -> StorefrontCatalog:
    config = settings.STOREFRONT
    return StorefrontCatalog(
        get_container().remote,
        WhatsAppOrderLinkBuilder(config["WHATSAPP_PHONE"], config["CURRENCY"]),
    )


class CategoryListView(APIView):
    """View for listing active categories."""

    @extend_schema(
        operation_id="list_categories",
        summary="List Categories",
        description="Active categories in display order.",
        tags=["Storefront"],
        responses={200: {"description": "List of categories"}},
    )
    def get(self, request: Request) -> Response:
        return async_to_sync(self._handle_list)(request)

    async def _handle_list(self, request: Request) -> Response:
        with tracer.start_as_current_span("list_categories") as span:
            rows = await _catalog().categories()
            span.set_attribute("categories.count", len(rows))
            return Response({"categories": rows}, status=status.HTTP_200_OK)


class BrandListView(APIView):
    """View for listing active brands."""

    @extend_schema(
        operation_id="list_brands",
        summary="List Brands",
        description="Active brands in display order, optionally only featured ones.",
        tags=["Storefront"],
        parameters=[OpenApiParameter(name="featured", type=bool, required=False)],
        responses={200: {"description": "List of brands"}},
    )
    def get(self, request: Request) -> Response:
        return async_to_sync(self._handle_list)(request)

    async def _handle_list(self, request: Request) -> Response:
        serializer = BrandListQuerySerializer(data=request.query_params.dict())
        if not serializer.is_valid():
            return Response({"error": serializer.errors}, status=status.HTTP_400_BAD_REQUEST)

        with tracer.start_as_current_span("list_brands") as span:
            rows = await _catalog().brands(featured=serializer.validated_data.get("featured"))
            span.set_attribute("brands.count", len(rows))
            return Response({"brands": rows}, status=status.HTTP_200_OK)


class BannerListView(APIView):
    """View for listing banners currently on display."""

    @extend_schema(
        operation_id="list_banners",
        summary="List Banners",
        description=(
            "Active banners whose scheduling window contains the current time, "
            "optionally for one position."
        ),
        tags=["Storefront"],
        parameters=[OpenApiParameter(name="position", type=str, required=False)],
        responses={200: {"description": "List of banners"}},
    )
    def get(self, request: Request) -> Response:
        return async_to_sync(self._handle_list)(request)

    async def _handle_list(self, request: Request) -> Response:
        serializer = BannerListQuerySerializer(data=request.query_params.dict())
        if not serializer.is_valid():
            return Response({"error": serializer.errors}, status=status.HTTP_400_BAD_REQUEST)

        position = serializer.validated_data.get("position")
        with tracer.start_as_current_span("list_banners") as span:
            span.set_attribute("banner.position", position or "any")
            rows = await _catalog().banners(BannerPosition(position) if position else None)
            span.set_attribute("banners.count", len(rows))
            return Response({"banners": rows}, status=status.HTTP_200_OK)


class ProductListView(APIView):
    """View for listing active products with category and brand names."""

    @extend_schema(
        operation_id="list_products",
        summary="List Products",
        description="Active products, filtered by category, brand or featured flag.",
        tags=["Storefront"],
        parameters=[
            OpenApiParameter(name="category", type=str, required=False),
            OpenApiParameter(name="brand", type=str, required=False),
            OpenApiParameter(name="featured", type=bool, required=False),
            OpenApiParameter(
                name="ordering",
                type=str,
                required=False,
                description="Column to order by; prefix with '-' for descending",
            ),
        ],
        responses={200: {"description": "List of products"}},
    )
    def get(self, request: Request) -> Response:
        return async_to_sync(self._handle_list)(request)

    async def _handle_list(self, request: Request) -> Response:
        serializer = ProductListQuerySerializer(data=request.query_params.dict())
        if not serializer.is_valid():
            return Response({"error": serializer.errors}, status=status.HTTP_400_BAD_REQUEST)

        data = serializer.validated_data
        ordering = data.get("ordering")
        with tracer.start_as_current_span("list_products") as span:
            rows = await _catalog().products(
                category_id=data.get("category"),
                brand_id=data.get("brand"),
                featured=data.get("featured"),
                order_by=OrderBy.parse(ordering) if ordering else None,
            )
            span.set_attribute("products.count", len(rows))
            return Response({"products": rows}, status=status.HTTP_200_OK)


class ProductDetailView(APIView):
    """View for one product with related products and an order link."""

    @extend_schema(
        operation_id="get_product",
        summary="Get Product",
        description=(
            "Product detail with up to four related products from the same category "
            "and a WhatsApp link pre-filled with an order for ``quantity`` units."
        ),
        tags=["Storefront"],
        parameters=[OpenApiParameter(name="quantity", type=int, required=False)],
        responses={
            200: ProductDetailResponseSerializer,
            404: {"description": "Product not found"},
        },
    )
    def get(self, request: Request, product_id: str) -> Response:
        return async_to_sync(self._handle_get)(request, product_id)

    async def _handle_get(self, request: Request, product_id: str) -> Response:
        serializer = ProductDetailQuerySerializer(data=request.query_params.dict())
        if not serializer.is_valid():
            return Response({"error": serializer.errors}, status=status.HTTP_400_BAD_REQUEST)

        with tracer.start_as_current_span("get_product") as span:
            span.set_attribute("product.id", product_id)
            detail = await _catalog().product_detail(
                product_id, serializer.validated_data["quantity"]
            )
            stock_status = Product.from_row(detail.product).stock_status(
                settings.STOREFRONT["LOW_STOCK_THRESHOLD"]
            )
            response_serializer = ProductDetailResponseSerializer(
                {
                    "product": detail.product,
                    "related": detail.related,
                    "order_link": detail.order_link,
                    "stock_status": stock_status.value,
                }
            )
            span.set_attribute("related.count", len(detail.related))
            span.set_status(Status(StatusCode.OK))
            return Response(response_serializer.data, status=status.HTTP_200_OK)
