"""
Product domain entity.

This is the core domain entity representing a sellable product.
Pricing and stock thresholds are read from the row; identifiers, slugs
and SKUs are assigned by the remote service.
"""
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, List, Mapping, Optional

from core.domain.rows import parse_timestamp, to_decimal

TABLE = "products"
DEFAULT_LOW_STOCK_THRESHOLD = 10


class StockStatus(str, Enum):
    IN_STOCK = "in_stock"
    LOW_STOCK = "low_stock"
    OUT_OF_STOCK = "out_of_stock"


@dataclass(frozen=True)
class Product:
    """
    Product domain entity.

    ``category`` carries the denormalized category name used by older
    rows; newer rows reference the category through ``category_id``.
    """

    id: str
    name: str
    price: Decimal
    slug: Optional[str] = None
    sku: Optional[str] = None
    category_id: Optional[str] = None
    category: Optional[str] = None
    brand_id: Optional[str] = None
    compare_price: Optional[Decimal] = None
    cost_price: Optional[Decimal] = None
    short_description: Optional[str] = None
    description: Optional[str] = None
    ingredients: Optional[str] = None
    usage: Optional[str] = None
    benefits: Optional[str] = None
    images: List[str] = field(default_factory=list)
    stock: int = 0
    min_stock: Optional[int] = None
    max_stock: Optional[int] = None
    weight: Optional[Decimal] = None
    active: bool = True
    featured: bool = False
    tags: List[str] = field(default_factory=list)
    seo_title: Optional[str] = None
    seo_description: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        """Validate product entity."""
        if self.price < 0:
            raise ValueError("Product price cannot be negative")

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Product":
        category = row.get("category")
        if isinstance(category, Mapping):
            category = category.get("name")
        return cls(
            id=str(row["id"]),
            name=row.get("name") or "",
            price=to_decimal(row.get("price")),
            slug=row.get("slug"),
            sku=row.get("sku"),
            category_id=row.get("category_id"),
            category=category,
            brand_id=row.get("brand_id"),
            compare_price=_optional_decimal(row.get("compare_price")),
            cost_price=_optional_decimal(row.get("cost_price")),
            short_description=row.get("short_description"),
            description=row.get("description"),
            ingredients=row.get("ingredients"),
            usage=row.get("usage") or row.get("usage_instructions"),
            benefits=row.get("benefits"),
            images=list(row.get("images") or []),
            stock=int(row.get("stock") or row.get("stock_quantity") or 0),
            min_stock=_optional_int(row.get("min_stock")),
            max_stock=_optional_int(row.get("max_stock")),
            weight=_optional_decimal(row.get("weight")),
            active=bool(row.get("active", True)),
            featured=bool(row.get("featured", False)),
            tags=list(row.get("tags") or []),
            seo_title=row.get("seo_title"),
            seo_description=row.get("seo_description"),
            created_at=parse_timestamp(row.get("created_at")),
            updated_at=parse_timestamp(row.get("updated_at")),
        )

    @property
    def in_stock(self) -> bool:
        return self.stock > 0

    @property
    def on_sale(self) -> bool:
        return self.compare_price is not None and self.compare_price > self.price

    @property
    def discount_percent(self) -> int:
        if not self.on_sale:
            return 0
        return int(round((self.compare_price - self.price) / self.compare_price * 100))

    def stock_status(self, default_threshold: int = DEFAULT_LOW_STOCK_THRESHOLD) -> StockStatus:
        """
        Classify stock against the product's own minimum, or the default.

        Args:
            default_threshold: Used when the product has no min_stock

        Returns:
            StockStatus
        """
        if self.stock <= 0:
            return StockStatus.OUT_OF_STOCK
        threshold = self.min_stock if self.min_stock else default_threshold
        if self.stock <= threshold:
            return StockStatus.LOW_STOCK
        return StockStatus.IN_STOCK

    def same_category(self, other: "Product") -> bool:
        if self.category_id and other.category_id:
            return self.category_id == other.category_id
        return bool(self.category) and self.category == other.category


def _optional_decimal(value: Any) -> Optional[Decimal]:
    return None if value is None or value == "" else to_decimal(value)


def _optional_int(value: Any) -> Optional[int]:
    return None if value is None or value == "" else int(value)
