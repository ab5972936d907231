"""
Back-office read queries.
"""
from typing import Optional

from core.domain.query import OrderBy, TableQuery

NEWEST_FIRST = OrderBy("created_at", ascending=False)


def activity_logs(
    table_name: Optional[str] = None,
    action: Optional[str] = None,
    user_id: Optional[str] = None,
) -> TableQuery:
    """Activity-log entries, newest first, optionally narrowed."""
    return TableQuery(
        filter={"table_name": table_name, "action": action, "user_id": user_id},
        order_by=NEWEST_FIRST,
    )


def admin_users(active: Optional[bool] = None) -> TableQuery:
    return TableQuery(filter={"active": active}, order_by=OrderBy("email"))
