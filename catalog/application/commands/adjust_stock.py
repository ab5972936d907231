"""
AdjustStockCommand.

Command to add or remove units of a product from stock.
"""
from dataclasses import dataclass
from typing import Optional


@dataclass
class AdjustStockCommand:
    """Command to change a product's stock by ``change`` units."""

    product_id: str
    change: int
    reason: Optional[str] = None
    user_id: Optional[str] = None
