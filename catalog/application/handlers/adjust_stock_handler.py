"""
AdjustStockHandler.

Handler for stock adjustments. The product update goes through the
audited LiveTable; every adjustment also appends an inventory log row.
"""
import logging

from catalog.application.commands.adjust_stock import AdjustStockCommand
from catalog.domain.product import Product
from core.application.live_table import LiveTable
from core.domain.exceptions import InsufficientStockError, RowNotFoundError
from core.domain.query import Row

logger = logging.getLogger(__name__)

INVENTORY_LOG_TABLE = "inventory_logs"


class AdjustStockHandler:
    """Handler for AdjustStockCommand."""

    def __init__(self, products: LiveTable, inventory_logs: LiveTable):
        self.products = products
        self.inventory_logs = inventory_logs

    async def handle(self, command: AdjustStockCommand) -> Row:
        """
        Handle stock adjustment command.

        Args:
            command: AdjustStockCommand

        Returns:
            The updated product row

        Raises:
            RowNotFoundError: If the product does not exist
            InsufficientStockError: If the adjustment would leave negative stock
        """
        if command.change == 0:
            raise ValueError("Stock change must be non-zero")

        row = await self.products.remote.select_one(self.products.table, command.product_id)
        if row is None:
            raise RowNotFoundError(self.products.table, command.product_id)

        previous = Product.from_row(row).stock
        new_stock = previous + command.change
        if new_stock < 0:
            raise InsufficientStockError(
                f"Cannot remove {-command.change} units; only {previous} in stock"
            )

        updated = await self.products.update(command.product_id, {"stock": new_stock})
        await self.inventory_logs.insert(
            {
                "product_id": command.product_id,
                "change": command.change,
                "previous_stock": previous,
                "new_stock": new_stock,
                "reason": command.reason,
                "user_id": command.user_id,
            }
        )
        logger.info(
            "Adjusted stock for %s: %s -> %s",
            command.product_id,
            previous,
            new_stock,
            extra={"product_id": command.product_id, "change": command.change},
        )
        return updated
