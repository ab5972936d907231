"""
URL configuration for storefront API endpoints.
"""

from django.urls import path

from api.v1.storefront import views

app_name = "storefront"

urlpatterns = [
    path("categories", views.CategoryListView.as_view(), name="list-categories"),
    path("brands", views.BrandListView.as_view(), name="list-brands"),
    path("banners", views.BannerListView.as_view(), name="list-banners"),
    path("products", views.ProductListView.as_view(), name="list-products"),
    path("products/<str:product_id>", views.ProductDetailView.as_view(), name="get-product"),
]
