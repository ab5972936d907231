"""
Unit tests for catalog entities.
"""
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from catalog.domain.banner import Banner, BannerPosition
from catalog.domain.brand import Brand
from catalog.domain.product import Product, StockStatus


class TestProduct:
    """Tests for Product entity."""

    def test_from_row(self):
        """Test reading a product row with a joined category."""
        product = Product.from_row(
            {
                "id": "p1",
                "name": "Luxury Hair Serum",
                "price": "2500.00",
                "compare_price": 3000,
                "stock": 12,
                "category": {"name": "Hair", "slug": "hair"},
                "images": ["https://img/1.jpg"],
                "created_at": "2024-05-01T10:00:00Z",
            }
        )
        assert product.price == Decimal("2500.00")
        assert product.compare_price == Decimal("3000")
        assert product.category == "Hair"
        assert product.images == ["https://img/1.jpg"]
        assert product.created_at.tzinfo is not None

    def test_negative_price_rejected(self):
        """Test a negative price raises ValueError."""
        with pytest.raises(ValueError, match="cannot be negative"):
            Product(id="p1", name="Serum", price=Decimal("-1"))

    def test_sale_and_discount(self):
        """Test on_sale and discount_percent."""
        product = Product(
            id="p1", name="Serum", price=Decimal("2500"), compare_price=Decimal("3000")
        )
        assert product.on_sale is True
        assert product.discount_percent == 17

        full_price = Product(id="p2", name="Oil", price=Decimal("1800"))
        assert full_price.on_sale is False
        assert full_price.discount_percent == 0

    @pytest.mark.parametrize(
        "stock,min_stock,expected",
        [
            (0, None, StockStatus.OUT_OF_STOCK),
            (10, None, StockStatus.LOW_STOCK),
            (11, None, StockStatus.IN_STOCK),
            (3, 3, StockStatus.LOW_STOCK),
            (4, 3, StockStatus.IN_STOCK),
        ],
    )
    def test_stock_status(self, stock, min_stock, expected):
        """Test stock classification against min_stock or the default threshold."""
        product = Product(
            id="p1", name="Serum", price=Decimal("1"), stock=stock, min_stock=min_stock
        )
        assert product.stock_status() is expected

    def test_same_category(self):
        """Test category matching by id, falling back to the category name."""
        a = Product(id="a", name="A", price=Decimal("1"), category_id="c1")
        b = Product(id="b", name="B", price=Decimal("1"), category_id="c1")
        c = Product(id="c", name="C", price=Decimal("1"), category="Hair")
        d = Product(id="d", name="D", price=Decimal("1"), category="Hair")
        assert a.same_category(b)
        assert c.same_category(d)
        assert not a.same_category(c)


class TestBrand:
    """Tests for Brand entity."""

    def test_display_image_prefers_logo(self):
        """Test the logo wins over the image."""
        brand = Brand.from_row({"id": "b1", "name": "Dior", "logo_url": "logo.png", "image": "x.png"})
        assert brand.display_image == "logo.png"


class TestBanner:
    """Tests for Banner scheduling."""

    NOW = datetime(2024, 6, 1, tzinfo=timezone.utc)

    def test_open_window_is_live(self):
        """Test a banner with no dates is live while active."""
        assert Banner(id="b1", title="Sale").is_live(self.NOW)
        assert not Banner(id="b2", title="Sale", active=False).is_live(self.NOW)

    def test_scheduled_window(self):
        """Test start and end bounds."""
        banner = Banner.from_row(
            {
                "id": "b1",
                "title": "Summer",
                "position": "secondary",
                "start_date": (self.NOW - timedelta(days=1)).isoformat(),
                "end_date": (self.NOW + timedelta(days=1)).isoformat(),
            }
        )
        assert banner.position is BannerPosition.SECONDARY
        assert banner.is_live(self.NOW)
        assert not banner.is_live(self.NOW + timedelta(days=2))
        assert not banner.is_live(self.NOW - timedelta(days=2))
