"""
Integration tests for the storefront API.
"""
import pytest
from django.urls import reverse
from prometheus_client import REGISTRY
from rest_framework import status


@pytest.mark.integration
class TestStorefrontAPI:
    """Tests for the public storefront endpoints."""

    def test_list_categories(self, api_client, container, catalog):
        """Test active categories are listed in display order."""
        response = api_client.get(reverse("storefront:list-categories"))

        assert response.status_code == status.HTTP_200_OK
        assert [row["slug"] for row in response.data["categories"]] == ["hair", "beard"]

    def test_list_featured_brands(self, api_client, container, catalog):
        """Test the featured flag narrows brands."""
        response = api_client.get(reverse("storefront:list-brands"), {"featured": "true"})

        assert response.status_code == status.HTTP_200_OK
        assert [row["id"] for row in response.data["brands"]] == ["brand-dior"]

    def test_list_products_with_filters(self, api_client, container, catalog):
        """Test product filters, ordering and joined names."""
        response = api_client.get(
            reverse("storefront:list-products"), {"category": "cat-hair", "ordering": "-price"}
        )

        assert response.status_code == status.HTTP_200_OK
        products = response.data["products"]
        assert [row["id"] for row in products] == ["prod-serum", "prod-mask", "prod-shampoo"]
        assert products[0]["categories"]["name"] == "Hair"

    def test_list_products_rejects_unknown_ordering(self, api_client, container, catalog):
        """Test ordering is limited to known columns."""
        response = api_client.get(reverse("storefront:list-products"), {"ordering": "cost_price"})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "ordering" in response.data["error"]

    def test_list_banners_by_position(self, api_client, container, catalog):
        """Test only live banners for the position are returned."""
        response = api_client.get(reverse("storefront:list-banners"), {"position": "hero"})

        assert response.status_code == status.HTTP_200_OK
        assert [row["id"] for row in response.data["banners"]] == ["banner-live"]

    def test_get_product(self, api_client, container, catalog):
        """Test product detail with order link and stock status."""
        url = reverse("storefront:get-product", kwargs={"product_id": "prod-serum"})
        response = api_client.get(url, {"quantity": 2})

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["product"]["name"] == "Luxury Hair Serum"
        assert data["stock_status"] == "in_stock"
        assert data["order_link"]["quantity"] == 2
        assert data["order_link"]["message"] == (
            "Hi! I'm interested in ordering 2x Luxury Hair Serum (KSh 2,500 each). "
            "Total: KSh 5,000"
        )
        assert data["order_link"]["url"].startswith("https://wa.me/254722240558?text=")
        assert {row["id"] for row in data["related"]} == {"prod-shampoo", "prod-mask"}

    def test_get_inactive_product(self, api_client, container, catalog):
        """Test inactive products are not found."""
        url = reverse("storefront:get-product", kwargs={"product_id": "prod-hidden"})
        response = api_client.get(url)

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data["error"]["code"] == "ROW_NOT_FOUND"

    def test_remote_failure(self, api_client, container, remote, catalog):
        """Test a failed remote read becomes a 502."""
        remote.fail("select", "categories")
        response = api_client.get(reverse("storefront:list-categories"))

        assert response.status_code == status.HTTP_502_BAD_GATEWAY
        assert response.data["error"]["code"] == "REMOTE_SERVICE_ERROR"

    def test_error_responses_are_counted(self, api_client, container, catalog):
        """Test each rendered error increments errors_total by code and endpoint."""
        url = reverse("storefront:get-product", kwargs={"product_id": "prod-hidden"})
        labels = {"error_type": "ROW_NOT_FOUND", "endpoint": url}
        before = REGISTRY.get_sample_value("errors_total", labels) or 0

        api_client.get(url)
        api_client.get(url)

        assert REGISTRY.get_sample_value("errors_total", labels) == before + 2


@pytest.mark.integration
class TestHealthEndpoints:
    """Tests for health and metrics endpoints."""

    def test_health(self, client):
        """Test the liveness endpoint."""
        response = client.get(reverse("health"))
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_remote_health(self, client, container):
        """Test the connection checks report healthy on the in-memory backend."""
        response = client.get(reverse("health-remote"))
        assert response.status_code == 200
        assert len(response.json()["checks"]) == 4

    def test_remote_health_failure(self, client, container, remote):
        """Test a failing table check makes the endpoint unhealthy."""
        remote.fail("select", "orders")
        response = client.get(reverse("health-remote"))
        assert response.status_code == 503
        assert response.json()["status"] == "unhealthy"

    def test_metrics(self, client):
        """Test the Prometheus endpoint exposes the request counter."""
        response = client.get(reverse("metrics"))
        assert response.status_code == 200
        assert b"http_requests_total" in response.content
