"""
URL configuration for admin API endpoints.
"""

from django.urls import path, re_path

from api.v1.admin import views

app_name = "admin"

RESOURCE = r"(?P<resource>products|categories|brands|banners)"

urlpatterns = [
    path("auth/login", views.LoginView.as_view(), name="login"),
    path("auth/logout", views.LogoutView.as_view(), name="logout"),
    path("auth/me", views.MeView.as_view(), name="me"),
    path("dashboard", views.DashboardView.as_view(), name="dashboard"),
    path("orders", views.OrderListView.as_view(), name="list-orders"),
    path(
        "orders/<str:order_id>/status",
        views.OrderStatusView.as_view(),
        name="change-order-status",
    ),
    path(
        "products/<str:product_id>/stock",
        views.ProductStockView.as_view(),
        name="adjust-stock",
    ),
    path("activity-logs", views.ActivityLogListView.as_view(), name="activity-logs"),
    path("users", views.AdminUserListView.as_view(), name="list-users"),
    path("users/<str:user_id>", views.AdminUserDetailView.as_view(), name="update-user"),
    re_path(rf"^{RESOURCE}/bulk$", views.ResourceBulkView.as_view(), name="bulk-rows"),
    re_path(rf"^{RESOURCE}/(?P<row_id>[^/]+)$", views.ResourceDetailView.as_view(), name="row"),
    re_path(rf"^{RESOURCE}$", views.ResourceListView.as_view(), name="rows"),
]
