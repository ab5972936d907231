"""
Catalog read queries.

Standard TableQuery configurations for catalog tables, and the
storefront read service built on them.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from catalog.domain import banner as banner_table
from catalog.domain import brand as brand_table
from catalog.domain import category as category_table
from catalog.domain import product as product_table
from catalog.domain.banner import Banner, BannerPosition
from catalog.domain.product import Product
from catalog.domain.services import OrderLink, WhatsAppOrderLinkBuilder, related_products
from core.application.live_table import LiveTable
from core.domain.exceptions import RemoteServiceError, RowNotFoundError
from core.domain.query import OrderBy, Row, TableQuery
from core.ports.remote_service import RemoteService

logger = logging.getLogger(__name__)

PRODUCT_JOINS = (
    "categories!products_category_id_fkey(name, slug)",
    "brands!products_brand_id_fkey(name, slug)",
)
BANNER_JOINS = ("categories!banners_category_id_fkey(name, slug)",)
BY_SORT_ORDER = OrderBy("sort_order", ascending=True)


def products_with_relations(
    filter: Optional[Dict[str, Any]] = None,
    order_by: Optional[OrderBy] = None,
    realtime: bool = True,
) -> TableQuery:
    """Products with their category and brand names expanded."""
    return TableQuery(filter=filter or {}, order_by=order_by, joins=PRODUCT_JOINS, realtime=realtime)


def banners_with_categories(
    filter: Optional[Dict[str, Any]] = None, realtime: bool = True
) -> TableQuery:
    """Banners in display order with their category expanded."""
    return TableQuery(
        filter=filter or {}, order_by=BY_SORT_ORDER, joins=BANNER_JOINS, realtime=realtime
    )


async def read_rows(table: LiveTable) -> List[Row]:
    """Fetch a LiveTable and raise its error instead of returning an empty list."""
    rows = await table.fetch()
    if table.error is not None:
        raise RemoteServiceError(table.error)
    return rows


@dataclass
class ProductDetail:
    product: Row
    related: List[Row]
    order_link: OrderLink


class StorefrontCatalog:
    """Public, read-only view of the catalog."""

    def __init__(self, remote: RemoteService, link_builder: WhatsAppOrderLinkBuilder = None):
        self.remote = remote
        self.link_builder = link_builder or WhatsAppOrderLinkBuilder()

    def _table(self, name: str, query: TableQuery) -> LiveTable:
        return LiveTable(self.remote, name, query)

    async def categories(self) -> List[Row]:
        query = TableQuery(filter={"active": True}, order_by=BY_SORT_ORDER)
        return await read_rows(self._table(category_table.TABLE, query))

    async def brands(self, featured: Optional[bool] = None) -> List[Row]:
        query = TableQuery(filter={"active": True, "featured": featured}, order_by=BY_SORT_ORDER)
        return await read_rows(self._table(brand_table.TABLE, query))

    async def products(
        self,
        category_id: Optional[str] = None,
        brand_id: Optional[str] = None,
        featured: Optional[bool] = None,
        order_by: Optional[OrderBy] = None,
    ) -> List[Row]:
        query = products_with_relations(
            filter={
                "active": True,
                "category_id": category_id,
                "brand_id": brand_id,
                "featured": featured,
            },
            order_by=order_by,
            realtime=False,
        )
        return await read_rows(self._table(product_table.TABLE, query))

    async def product_detail(self, product_id: str, quantity: int = 1) -> ProductDetail:
        """
        One product with related products and a WhatsApp order link.

        Raises:
            RowNotFoundError: If the product does not exist or is inactive
        """
        rows = await read_rows(
            self._table(
                product_table.TABLE,
                products_with_relations(filter={"id": product_id}, realtime=False),
            )
        )
        if not rows or not rows[0].get("active", True):
            raise RowNotFoundError(product_table.TABLE, product_id)
        row = rows[0]
        product = Product.from_row(row)

        candidates = await self.products()
        by_id = {str(candidate["id"]): candidate for candidate in candidates}
        related = related_products(product, (Product.from_row(c) for c in candidates))

        return ProductDetail(
            product=row,
            related=[by_id[p.id] for p in related],
            order_link=self.link_builder.build(product, quantity),
        )

    async def banners(
        self, position: Optional[BannerPosition] = None, now: Optional[datetime] = None
    ) -> List[Row]:
        """Active banners whose scheduling window contains ``now``."""
        now = now or datetime.now(timezone.utc)
        query = banners_with_categories(
            filter={"active": True, "position": position.value if position else None},
            realtime=False,
        )
        rows = await read_rows(self._table(banner_table.TABLE, query))
        return [row for row in rows if Banner.from_row(row).is_live(now)]
