"""
Category domain entity.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping, Optional

from core.domain.rows import parse_timestamp

TABLE = "categories"


@dataclass(frozen=True)
class Category:
    """Product category as stored in the ``categories`` table."""

    id: str
    name: str
    slug: Optional[str] = None
    description: Optional[str] = None
    image: Optional[str] = None
    sort_order: int = 0
    active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Category":
        return cls(
            id=str(row["id"]),
            name=row.get("name") or "",
            slug=row.get("slug"),
            description=row.get("description"),
            image=row.get("image") or row.get("image_url"),
            sort_order=int(row.get("sort_order") or 0),
            active=bool(row.get("active", True)),
            created_at=parse_timestamp(row.get("created_at")),
            updated_at=parse_timestamp(row.get("updated_at")),
        )
