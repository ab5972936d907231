"""
Admin API views.

These endpoints back the back-office:
- Sign-in, sign-out and the current admin
- Catalog CRUD and bulk operations with activity logging
- Order listing and status changes
- Stock adjustments, dashboard figures, admin users and the activity log

Every route except sign-in sits behind AdminAuthenticationMiddleware,
which puts the actor and bearer token on the request.
"""

import asyncio
from typing import Optional

from asgiref.sync import async_to_sync
from django.conf import settings
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.application import queries as account_queries
from accounts.application.commands.sign_in import SignInCommand
from accounts.application.commands.update_admin_user import UpdateAdminUserCommand
from accounts.application.handlers.sign_in_handler import SignInHandler
from accounts.application.handlers.update_admin_user_handler import UpdateAdminUserHandler
from accounts.domain import admin_user
from accounts.domain.admin_user import AdminRole
from api.exceptions import APIError
from api.v1.admin.serializers import (
    ActivityLogQuerySerializer,
    ActorSerializer,
    AdminUserUpdateRequestSerializer,
    BulkInsertSerializer,
    BulkUpdateSerializer,
    DashboardResponseSerializer,
    ListQuerySerializer,
    LoginRequestSerializer,
    OrderListQuerySerializer,
    OrderStatusRequestSerializer,
    RowSerializer,
    SessionResponseSerializer,
    StockAdjustmentRequestSerializer,
)
from catalog.application.commands.adjust_stock import AdjustStockCommand
from catalog.application.handlers.adjust_stock_handler import (
    INVENTORY_LOG_TABLE,
    AdjustStockHandler,
)
from catalog.application.handlers.inventory_summary_handler import InventorySummaryHandler
from catalog.application.queries import (
    BY_SORT_ORDER,
    banners_with_categories,
    products_with_relations,
    read_rows,
)
from catalog.domain import product as product_table
from core.application.audit import ACTIVITY_LOG_TABLE
from core.application.live_table import LiveTable
from core.domain.query import OrderBy, TableQuery, parse_filter_args
from core.infrastructure.container import ServiceContainer, get_container
from core.instrumentation import Status, StatusCode, get_tracer
from orders.application.commands.change_order_status import ChangeOrderStatusCommand
from orders.application.handlers.change_order_status_handler import ChangeOrderStatusHandler
from orders.application.handlers.order_summary_handler import OrderSummaryHandler
from orders.application.queries import orders_with_customers
from orders.domain import order as order_table
from orders.domain.order import OrderStatus

tracer = get_tracer(__name__)

# Tables managed through the generic CRUD routes, with their list queries.
RESOURCES = {
    "products": lambda: products_with_relations(realtime=False),
    "categories": lambda: TableQuery(order_by=BY_SORT_ORDER),
    "brands": lambda: TableQuery(order_by=BY_SORT_ORDER),
    "banners": lambda: banners_with_categories(realtime=False),
}


def _client_ip(request: Request) -> Optional[str]:
    forwarded = request.META.get("HTTP_X_FORWARDED_FOR")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.META.get("REMOTE_ADDR")


def _services(request: Request) -> ServiceContainer:
    """Container whose remote calls carry the request's bearer token."""
    return get_container().for_token(getattr(request, "access_token", None))


def _audited_table(request: Request, table: str, query: Optional[TableQuery] = None) -> LiveTable:
    """LiveTable whose mutations are recorded against the request's actor."""
    container = _services(request)
    audit = container.audit_trail(
        access_token=getattr(request, "access_token", None),
        user_agent=request.META.get("HTTP_USER_AGENT"),
        ip_address=_client_ip(request),
    )
    return container.table(table, query, audit=audit)


def _list_query(request: Request, base: TableQuery) -> TableQuery:
    """Apply ``ordering`` and column filters from the query string."""
    serializer = ListQuerySerializer(data=request.query_params.dict())
    serializer.is_valid(raise_exception=True)
    ordering = serializer.validated_data.get("ordering")
    filters = parse_filter_args(
        f"{key}={value}" for key, value in request.query_params.items() if key != "ordering"
    )
    return TableQuery(
        filter={**base.filter, **filters},
        order_by=OrderBy.parse(ordering) if ordering else base.order_by,
        joins=base.joins,
        select=base.select,
        realtime=False,
    )


class LoginView(APIView):
    """View for admin sign-in."""

    @extend_schema(
        operation_id="admin_login",
        summary="Admin Login",
        description="Exchange email and password for a bearer token. Only admin roles may sign in.",
        tags=["Admin Auth"],
        request=LoginRequestSerializer,
        responses={
            200: SessionResponseSerializer,
            400: {"description": "Bad Request"},
            401: {"description": "Invalid email or password"},
            403: {"description": "Account is not an admin"},
        },
    )
    def post(self, request: Request) -> Response:
        return async_to_sync(self._handle_login)(request)

    async def _handle_login(self, request: Request) -> Response:
        with tracer.start_as_current_span("admin_login") as span:
            serializer = LoginRequestSerializer(data=request.data)
            if not serializer.is_valid():
                span.set_status(Status(StatusCode.ERROR, "Validation failed"))
                return Response({"error": serializer.errors}, status=status.HTTP_400_BAD_REQUEST)

            container = get_container()
            handler = SignInHandler(container.sessions, container.remote, container.audit_roles)
            session = await handler.handle(
                SignInCommand(
                    email=serializer.validated_data["email"],
                    password=serializer.validated_data["password"],
                )
            )
            span.set_attribute("user.id", session.actor.id)
            span.set_status(Status(StatusCode.OK))
            return Response(SessionResponseSerializer(session).data, status=status.HTTP_200_OK)


class LogoutView(APIView):
    """View for admin sign-out."""

    @extend_schema(
        operation_id="admin_logout",
        summary="Admin Logout",
        tags=["Admin Auth"],
        request=None,
        responses={204: None},
    )
    def post(self, request: Request) -> Response:
        return async_to_sync(self._handle_logout)(request)

    async def _handle_logout(self, request: Request) -> Response:
        await get_container().sessions.sign_out(request.access_token)
        return Response(status=status.HTTP_204_NO_CONTENT)


class MeView(APIView):
    """View for the signed-in admin."""

    @extend_schema(
        operation_id="admin_me",
        summary="Current Admin",
        tags=["Admin Auth"],
        responses={200: ActorSerializer},
    )
    def get(self, request: Request) -> Response:
        return Response(ActorSerializer(request.actor).data, status=status.HTTP_200_OK)


class ResourceListView(APIView):
    """View for listing and creating rows of a catalog table."""

    @extend_schema(
        operation_id="admin_list_rows",
        summary="List Rows",
        description=(
            "Rows of products, categories, brands or banners. ``ordering`` takes "
            "``column``, ``-column`` or ``column:desc``; any other parameter "
            "filters by equality (comma-separated values match any)."
        ),
        tags=["Admin Catalog"],
        parameters=[OpenApiParameter(name="ordering", type=str, required=False)],
        responses={200: {"description": "List of rows"}},
    )
    def get(self, request: Request, resource: str) -> Response:
        return async_to_sync(self._handle_list)(request, resource)

    async def _handle_list(self, request: Request, resource: str) -> Response:
        with tracer.start_as_current_span("admin_list_rows") as span:
            span.set_attribute("table", resource)
            query = _list_query(request, RESOURCES[resource]())
            rows = await read_rows(_services(request).table(resource, query))
            span.set_attribute("rows.count", len(rows))
            return Response({"rows": rows, "count": len(rows)}, status=status.HTTP_200_OK)

    @extend_schema(
        operation_id="admin_create_row",
        summary="Create Row",
        tags=["Admin Catalog"],
        request=RowSerializer,
        responses={201: {"description": "Created row"}, 400: {"description": "Bad Request"}},
    )
    def post(self, request: Request, resource: str) -> Response:
        return async_to_sync(self._handle_create)(request, resource)

    async def _handle_create(self, request: Request, resource: str) -> Response:
        with tracer.start_as_current_span("admin_create_row") as span:
            span.set_attribute("table", resource)
            serializer = RowSerializer(data=request.data)
            if not serializer.is_valid():
                return Response({"error": serializer.errors}, status=status.HTTP_400_BAD_REQUEST)

            row = await _audited_table(request, resource).insert(serializer.validated_data)
            span.set_attribute("record.id", str(row.get("id")))
            return Response(row, status=status.HTTP_201_CREATED)


class ResourceDetailView(APIView):
    """View for reading, updating and deleting one row of a catalog table."""

    @extend_schema(
        operation_id="admin_get_row",
        summary="Get Row",
        tags=["Admin Catalog"],
        responses={200: {"description": "Row"}, 404: {"description": "Not Found"}},
    )
    def get(self, request: Request, resource: str, row_id: str) -> Response:
        return async_to_sync(self._handle_get)(request, resource, row_id)

    async def _handle_get(self, request: Request, resource: str, row_id: str) -> Response:
        row = await _services(request).operations(resource).fetch_by_id(row_id)
        return Response(row, status=status.HTTP_200_OK)

    @extend_schema(
        operation_id="admin_update_row",
        summary="Update Row",
        description="Partial update; columns not given are left unchanged.",
        tags=["Admin Catalog"],
        request=RowSerializer,
        responses={200: {"description": "Updated row"}, 404: {"description": "Not Found"}},
    )
    def patch(self, request: Request, resource: str, row_id: str) -> Response:
        return async_to_sync(self._handle_update)(request, resource, row_id)

    async def _handle_update(self, request: Request, resource: str, row_id: str) -> Response:
        with tracer.start_as_current_span("admin_update_row") as span:
            span.set_attribute("table", resource)
            span.set_attribute("record.id", row_id)
            if not request.data:
                raise APIError("No fields to update", code="empty_update")
            serializer = RowSerializer(data=request.data)
            if not serializer.is_valid():
                return Response({"error": serializer.errors}, status=status.HTTP_400_BAD_REQUEST)

            row = await _audited_table(request, resource).update(row_id, serializer.validated_data)
            return Response(row, status=status.HTTP_200_OK)

    @extend_schema(
        operation_id="admin_delete_row",
        summary="Delete Row",
        tags=["Admin Catalog"],
        responses={204: None},
    )
    def delete(self, request: Request, resource: str, row_id: str) -> Response:
        return async_to_sync(self._handle_delete)(request, resource, row_id)

    async def _handle_delete(self, request: Request, resource: str, row_id: str) -> Response:
        with tracer.start_as_current_span("admin_delete_row") as span:
            span.set_attribute("table", resource)
            span.set_attribute("record.id", row_id)
            await _audited_table(request, resource).remove(row_id)
            return Response(status=status.HTTP_204_NO_CONTENT)


class ResourceBulkView(APIView):
    """View for bulk inserts and bulk updates of a catalog table."""

    @extend_schema(
        operation_id="admin_bulk_insert",
        summary="Bulk Insert",
        description="Create all rows in one request. The activity log records only the count.",
        tags=["Admin Catalog"],
        request=BulkInsertSerializer,
        responses={201: {"description": "Created rows"}},
    )
    def post(self, request: Request, resource: str) -> Response:
        return async_to_sync(self._handle_bulk_insert)(request, resource)

    async def _handle_bulk_insert(self, request: Request, resource: str) -> Response:
        with tracer.start_as_current_span("admin_bulk_insert") as span:
            span.set_attribute("table", resource)
            serializer = BulkInsertSerializer(data=request.data)
            if not serializer.is_valid():
                return Response({"error": serializer.errors}, status=status.HTTP_400_BAD_REQUEST)

            rows = serializer.validated_data["rows"]
            created = await _audited_table(request, resource).bulk_insert(rows)
            span.set_attribute("rows.count", len(created))
            return Response({"rows": created, "count": len(created)}, status=status.HTTP_201_CREATED)

    @extend_schema(
        operation_id="admin_bulk_update",
        summary="Bulk Update",
        description=(
            "Apply several partial updates concurrently. Not atomic: the first "
            "failure is returned and rows already updated stay updated."
        ),
        tags=["Admin Catalog"],
        request=BulkUpdateSerializer,
        responses={200: {"description": "Updated rows"}},
    )
    def patch(self, request: Request, resource: str) -> Response:
        return async_to_sync(self._handle_bulk_update)(request, resource)

    async def _handle_bulk_update(self, request: Request, resource: str) -> Response:
        with tracer.start_as_current_span("admin_bulk_update") as span:
            span.set_attribute("table", resource)
            serializer = BulkUpdateSerializer(data=request.data)
            if not serializer.is_valid():
                return Response({"error": serializer.errors}, status=status.HTTP_400_BAD_REQUEST)

            items = [(item["id"], item["values"]) for item in serializer.validated_data["items"]]
            updated = await _audited_table(request, resource).bulk_update(items)
            span.set_attribute("rows.count", len(updated))
            return Response({"rows": updated, "count": len(updated)}, status=status.HTTP_200_OK)


class ProductStockView(APIView):
    """View for adjusting a product's stock."""

    @extend_schema(
        operation_id="admin_adjust_stock",
        summary="Adjust Stock",
        description="Add (positive change) or remove (negative change) units of stock.",
        tags=["Admin Catalog"],
        request=StockAdjustmentRequestSerializer,
        responses={
            200: {"description": "Updated product"},
            400: {"description": "Insufficient stock"},
            404: {"description": "Product not found"},
        },
    )
    def post(self, request: Request, product_id: str) -> Response:
        return async_to_sync(self._handle_adjust)(request, product_id)

    async def _handle_adjust(self, request: Request, product_id: str) -> Response:
        with tracer.start_as_current_span("admin_adjust_stock") as span:
            span.set_attribute("product.id", product_id)
            serializer = StockAdjustmentRequestSerializer(data=request.data)
            if not serializer.is_valid():
                return Response({"error": serializer.errors}, status=status.HTTP_400_BAD_REQUEST)

            handler = AdjustStockHandler(
                products=_audited_table(request, product_table.TABLE),
                inventory_logs=_services(request).table(INVENTORY_LOG_TABLE),
            )
            product = await handler.handle(
                AdjustStockCommand(
                    product_id=product_id,
                    change=serializer.validated_data["change"],
                    reason=serializer.validated_data.get("reason"),
                    user_id=request.actor.id,
                )
            )
            span.set_attribute("stock", product.get("stock"))
            return Response(product, status=status.HTTP_200_OK)


class OrderListView(APIView):
    """View for listing orders with customer details."""

    @extend_schema(
        operation_id="admin_list_orders",
        summary="List Orders",
        description="Orders, newest first, optionally filtered by status.",
        tags=["Admin Orders"],
        parameters=[
            OpenApiParameter(name="status", type=str, required=False),
            OpenApiParameter(name="payment_status", type=str, required=False),
        ],
        responses={200: {"description": "List of orders"}},
    )
    def get(self, request: Request) -> Response:
        return async_to_sync(self._handle_list)(request)

    async def _handle_list(self, request: Request) -> Response:
        serializer = OrderListQuerySerializer(data=request.query_params.dict())
        if not serializer.is_valid():
            return Response({"error": serializer.errors}, status=status.HTTP_400_BAD_REQUEST)

        with tracer.start_as_current_span("admin_list_orders") as span:
            query = orders_with_customers(filter=dict(serializer.validated_data), realtime=False)
            rows = await read_rows(_services(request).table(order_table.TABLE, query))
            span.set_attribute("orders.count", len(rows))
            return Response({"orders": rows, "count": len(rows)}, status=status.HTTP_200_OK)


class OrderStatusView(APIView):
    """View for moving an order to another status."""

    @extend_schema(
        operation_id="admin_change_order_status",
        summary="Change Order Status",
        tags=["Admin Orders"],
        request=OrderStatusRequestSerializer,
        responses={
            200: {"description": "Updated order"},
            400: {"description": "Invalid transition"},
            404: {"description": "Order not found"},
        },
    )
    def post(self, request: Request, order_id: str) -> Response:
        return async_to_sync(self._handle_change)(request, order_id)

    async def _handle_change(self, request: Request, order_id: str) -> Response:
        with tracer.start_as_current_span("admin_change_order_status") as span:
            span.set_attribute("order.id", order_id)
            serializer = OrderStatusRequestSerializer(data=request.data)
            if not serializer.is_valid():
                return Response({"error": serializer.errors}, status=status.HTTP_400_BAD_REQUEST)

            target = OrderStatus(serializer.validated_data["status"])
            span.set_attribute("order.status", target.value)
            handler = ChangeOrderStatusHandler(_audited_table(request, order_table.TABLE))
            order = await handler.handle(ChangeOrderStatusCommand(order_id=order_id, status=target))
            return Response(order, status=status.HTTP_200_OK)


class DashboardView(APIView):
    """View for back-office dashboard figures."""

    @extend_schema(
        operation_id="admin_dashboard",
        summary="Dashboard",
        description="Stock levels, order counts by status, revenue and recent orders.",
        tags=["Admin Orders"],
        responses={200: DashboardResponseSerializer},
    )
    def get(self, request: Request) -> Response:
        return async_to_sync(self._handle_dashboard)(request)

    async def _handle_dashboard(self, request: Request) -> Response:
        with tracer.start_as_current_span("admin_dashboard"):
            container = _services(request)
            config = settings.STOREFRONT
            inventory, orders = await asyncio.gather(
                InventorySummaryHandler(
                    container.table(product_table.TABLE), config["LOW_STOCK_THRESHOLD"]
                ).handle(),
                OrderSummaryHandler(
                    container.table(order_table.TABLE, orders_with_customers(realtime=False))
                ).handle(),
            )
            serializer = DashboardResponseSerializer(
                {"inventory": inventory, "orders": orders, "currency": config["CURRENCY"]}
            )
            return Response(serializer.data, status=status.HTTP_200_OK)


class ActivityLogListView(APIView):
    """View for browsing the activity log."""

    @extend_schema(
        operation_id="admin_activity_logs",
        summary="Activity Log",
        description="Audited mutations, newest first.",
        tags=["Admin Accounts"],
        parameters=[
            OpenApiParameter(name="table", type=str, required=False),
            OpenApiParameter(name="action", type=str, required=False),
            OpenApiParameter(name="user", type=str, required=False),
        ],
        responses={200: {"description": "Activity log entries"}},
    )
    def get(self, request: Request) -> Response:
        return async_to_sync(self._handle_list)(request)

    async def _handle_list(self, request: Request) -> Response:
        serializer = ActivityLogQuerySerializer(data=request.query_params.dict())
        if not serializer.is_valid():
            return Response({"error": serializer.errors}, status=status.HTTP_400_BAD_REQUEST)

        data = serializer.validated_data
        query = account_queries.activity_logs(
            table_name=data.get("table"), action=data.get("action"), user_id=data.get("user")
        )
        rows = await read_rows(_services(request).table(ACTIVITY_LOG_TABLE, query))
        return Response({"logs": rows, "count": len(rows)}, status=status.HTTP_200_OK)


class AdminUserListView(APIView):
    """View for listing admin users."""

    @extend_schema(
        operation_id="admin_list_users",
        summary="List Admin Users",
        tags=["Admin Accounts"],
        responses={200: {"description": "Admin users"}},
    )
    def get(self, request: Request) -> Response:
        return async_to_sync(self._handle_list)(request)

    async def _handle_list(self, request: Request) -> Response:
        table = _services(request).table(admin_user.TABLE, account_queries.admin_users())
        rows = await read_rows(table)
        return Response({"users": rows, "count": len(rows)}, status=status.HTTP_200_OK)


class AdminUserDetailView(APIView):
    """View for updating one admin user."""

    @extend_schema(
        operation_id="admin_update_user",
        summary="Update Admin User",
        description="Change role, name or active flag. Admins cannot demote or deactivate themselves.",
        tags=["Admin Accounts"],
        request=AdminUserUpdateRequestSerializer,
        responses={
            200: {"description": "Updated admin user"},
            403: {"description": "Own role or active flag"},
            404: {"description": "Not Found"},
        },
    )
    def patch(self, request: Request, user_id: str) -> Response:
        return async_to_sync(self._handle_update)(request, user_id)

    async def _handle_update(self, request: Request, user_id: str) -> Response:
        serializer = AdminUserUpdateRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return Response({"error": serializer.errors}, status=status.HTTP_400_BAD_REQUEST)

        data = serializer.validated_data
        role = data.get("role")
        handler = UpdateAdminUserHandler(_audited_table(request, admin_user.TABLE), request.actor)
        row = await handler.handle(
            UpdateAdminUserCommand(
                user_id=user_id,
                role=AdminRole(role) if role else None,
                full_name=data.get("full_name"),
                active=data.get("active"),
            )
        )
        return Response(row, status=status.HTTP_200_OK)
