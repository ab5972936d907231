"""
InventorySummaryHandler.

Counts products by stock status for the admin dashboard.
"""
from dataclasses import dataclass, field
from typing import List

from catalog.application.queries import read_rows
from catalog.domain.product import DEFAULT_LOW_STOCK_THRESHOLD, Product, StockStatus
from core.application.live_table import LiveTable
from core.domain.query import Row


@dataclass
class InventorySummaryDTO:
    """DTO for the product side of the dashboard."""

    total_products: int = 0
    active_products: int = 0
    featured_products: int = 0
    in_stock: int = 0
    low_stock: int = 0
    out_of_stock: int = 0
    low_stock_items: List[Row] = field(default_factory=list)


class InventorySummaryHandler:
    """Handler for the inventory summary query."""

    def __init__(self, products: LiveTable, threshold: int = DEFAULT_LOW_STOCK_THRESHOLD):
        self.products = products
        self.threshold = threshold

    async def handle(self) -> InventorySummaryDTO:
        rows = await read_rows(self.products)
        summary = InventorySummaryDTO(total_products=len(rows))

        for row in rows:
            product = Product.from_row(row)
            if product.active:
                summary.active_products += 1
            if product.featured:
                summary.featured_products += 1

            status = product.stock_status(self.threshold)
            if status is StockStatus.OUT_OF_STOCK:
                summary.out_of_stock += 1
            elif status is StockStatus.LOW_STOCK:
                summary.low_stock += 1
                summary.low_stock_items.append(
                    {"id": product.id, "name": product.name, "stock": product.stock}
                )
            else:
                summary.in_stock += 1

        summary.low_stock_items.sort(key=lambda item: item["stock"])
        return summary
