"""
Unit tests for the storefront read service.
"""
from datetime import datetime, timezone
from decimal import Decimal

import pytest

from catalog.application.queries import StorefrontCatalog
from catalog.domain.banner import BannerPosition
from core.domain.exceptions import RemoteServiceError, RowNotFoundError
from core.domain.query import OrderBy


@pytest.mark.asyncio
class TestStorefrontCatalog:
    """Tests for StorefrontCatalog."""

    async def test_active_categories_in_order(self, remote, catalog):
        """Test inactive categories are hidden and sort_order is kept."""
        rows = await StorefrontCatalog(remote).categories()
        assert [row["id"] for row in rows] == ["cat-hair", "cat-beard"]

    async def test_featured_brands(self, remote, catalog):
        """Test brands narrowed to featured ones."""
        rows = await StorefrontCatalog(remote).brands(featured=True)
        assert [row["id"] for row in rows] == ["brand-dior"]

    async def test_products_by_category_with_joins(self, remote, catalog):
        """Test product listing filters inactive rows and expands relations."""
        rows = await StorefrontCatalog(remote).products(
            category_id="cat-hair", order_by=OrderBy("price")
        )

        assert [row["id"] for row in rows] == ["prod-shampoo", "prod-mask", "prod-serum"]
        assert rows[2]["categories"] == {"name": "Hair", "slug": "hair"}
        assert rows[2]["brands"] == {"name": "Dior", "slug": "dior"}
        assert rows[1]["brands"] is None

    async def test_product_detail(self, remote, catalog):
        """Test detail includes related products and the order link."""
        detail = await StorefrontCatalog(remote).product_detail("prod-serum", quantity=2)

        assert detail.product["name"] == "Luxury Hair Serum"
        assert {row["id"] for row in detail.related} == {"prod-shampoo", "prod-mask"}
        assert detail.order_link.total == Decimal("5000")
        assert detail.order_link.url.startswith("https://wa.me/254722240558?text=")

    @pytest.mark.parametrize("product_id", ["prod-hidden", "does-not-exist"])
    async def test_product_detail_not_found(self, remote, catalog, product_id):
        """Test inactive and unknown products are not found."""
        with pytest.raises(RowNotFoundError):
            await StorefrontCatalog(remote).product_detail(product_id)

    async def test_live_banners(self, remote, catalog):
        """Test expired banners are dropped and position narrows the list."""
        now = datetime(2024, 6, 1, tzinfo=timezone.utc)
        catalog_service = StorefrontCatalog(remote)

        rows = await catalog_service.banners(now=now)
        assert [row["id"] for row in rows] == ["banner-live", "banner-footer"]

        hero = await catalog_service.banners(position=BannerPosition.HERO, now=now)
        assert [row["id"] for row in hero] == ["banner-live"]
        assert hero[0]["categories"]["slug"] == "hair"

    async def test_read_failure_raises(self, remote, catalog):
        """Test a failed read surfaces as RemoteServiceError."""
        remote.fail("select", "categories", RemoteServiceError("permission denied"))
        with pytest.raises(RemoteServiceError, match="permission denied"):
            await StorefrontCatalog(remote).categories()
