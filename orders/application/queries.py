"""
Order read queries.
"""
from typing import Any, Dict, Optional

from core.domain.query import OrderBy, TableQuery

CUSTOMER_JOINS = ("customers!orders_customer_id_fkey(full_name, email, phone)",)
NEWEST_FIRST = OrderBy("created_at", ascending=False)


def orders_with_customers(
    filter: Optional[Dict[str, Any]] = None, realtime: bool = True
) -> TableQuery:
    """Orders, newest first, with the customer's contact details expanded."""
    return TableQuery(
        filter=filter or {}, order_by=NEWEST_FIRST, joins=CUSTOMER_JOINS, realtime=realtime
    )
