"""
Brand domain entity.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping, Optional

from core.domain.rows import parse_timestamp

TABLE = "brands"


@dataclass(frozen=True)
class Brand:
    """
    Brand domain entity.

    Represents a product brand in the catalog. Slugs and ordering are
    maintained by the remote service; this type only reads them.
    """

    id: str
    name: str
    slug: Optional[str] = None
    description: Optional[str] = None
    image: Optional[str] = None
    logo: Optional[str] = None
    website: Optional[str] = None
    country: Optional[str] = None
    sort_order: int = 0
    active: bool = True
    featured: bool = False
    seo_title: Optional[str] = None
    seo_description: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Brand":
        return cls(
            id=str(row["id"]),
            name=row.get("name") or "",
            slug=row.get("slug"),
            description=row.get("description"),
            image=row.get("image"),
            logo=row.get("logo") or row.get("logo_url"),
            website=row.get("website") or row.get("website_url"),
            country=row.get("country"),
            sort_order=int(row.get("sort_order") or 0),
            active=bool(row.get("active", True)),
            featured=bool(row.get("featured", False)),
            seo_title=row.get("seo_title"),
            seo_description=row.get("seo_description"),
            created_at=parse_timestamp(row.get("created_at")),
            updated_at=parse_timestamp(row.get("updated_at")),
        )

    @property
    def display_image(self) -> Optional[str]:
        return self.logo or self.image
