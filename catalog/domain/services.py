"""
Catalog domain services.

Domain services contain business logic that doesn't naturally
fit within a single entity.
"""
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, List
from urllib.parse import quote

from catalog.domain.product import Product
from core.domain.rows import format_amount

WHATSAPP_BASE_URL = "https://wa.me"
DEFAULT_WHATSAPP_PHONE = "254722240558"
DEFAULT_CURRENCY = "KSh"
RELATED_PRODUCTS_LIMIT = 4
# Unreserved marks left unescaped in the message text.
URI_COMPONENT_SAFE = "!~*'()"


@dataclass(frozen=True)
class OrderLink:
    """Pre-filled chat link for ordering one product."""

    url: str
    message: str
    quantity: int
    total: Decimal


class WhatsAppOrderLinkBuilder:
    """Builds wa.me deep links that open a chat with an order message."""

    def __init__(self, phone: str = DEFAULT_WHATSAPP_PHONE, currency: str = DEFAULT_CURRENCY):
        self.phone = "".join(ch for ch in phone if ch.isdigit())
        self.currency = currency

    @staticmethod
    def clamp_quantity(product: Product, quantity: int) -> int:
        """Keep the quantity between 1 and the available stock."""
        upper = max(product.stock, 1)
        return min(max(quantity, 1), upper)

    def message_for(self, product: Product, quantity: int) -> str:
        total = product.price * quantity
        return (
            f"Hi! I'm interested in ordering {quantity}x {product.name} "
            f"({self.currency} {format_amount(product.price)} each). "
            f"Total: {self.currency} {format_amount(total)}"
        )

    def link(self, message: str) -> str:
        return f"{WHATSAPP_BASE_URL}/{self.phone}?text={quote(message, safe=URI_COMPONENT_SAFE)}"

    def build(self, product: Product, quantity: int = 1) -> OrderLink:
        """
        Build the order link for a product.

        Args:
            product: Product being ordered
            quantity: Requested quantity, clamped to the stock on hand

        Returns:
            OrderLink with URL, message and total
        """
        quantity = self.clamp_quantity(product, quantity)
        message = self.message_for(product, quantity)
        return OrderLink(
            url=self.link(message),
            message=message,
            quantity=quantity,
            total=product.price * quantity,
        )


def related_products(
    product: Product, candidates: Iterable[Product], limit: int = RELATED_PRODUCTS_LIMIT
) -> List[Product]:
    """Other products in the same category, in candidate order."""
    related = [p for p in candidates if p.id != product.id and product.same_category(p)]
    return related[:limit]


def build_order_link(
    product: Product,
    quantity: int = 1,
    phone: str = DEFAULT_WHATSAPP_PHONE,
    currency: str = DEFAULT_CURRENCY,
) -> OrderLink:
    return WhatsAppOrderLinkBuilder(phone, currency).build(product, quantity)
