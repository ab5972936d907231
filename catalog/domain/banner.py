"""
Banner domain entity.
"""
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Mapping, Optional

from core.domain.rows import parse_timestamp

TABLE = "banners"


class BannerPosition(str, Enum):
    HERO = "hero"
    SECONDARY = "secondary"
    SIDEBAR = "sidebar"
    FOOTER = "footer"


@dataclass(frozen=True)
class Banner:
    """
    Promotional banner.

    A banner is shown while it is active and ``now`` falls inside its
    optional scheduling window (either bound may be open).
    """

    id: str
    title: str
    image: Optional[str] = None
    subtitle: Optional[str] = None
    description: Optional[str] = None
    mobile_image: Optional[str] = None
    link_url: Optional[str] = None
    category_id: Optional[str] = None
    position: BannerPosition = BannerPosition.HERO
    sort_order: int = 0
    active: bool = True
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Banner":
        return cls(
            id=str(row["id"]),
            title=row.get("title") or "",
            image=row.get("image") or row.get("image_url"),
            subtitle=row.get("subtitle"),
            description=row.get("description"),
            mobile_image=row.get("mobile_image") or row.get("mobile_image_url"),
            link_url=row.get("link_url"),
            category_id=row.get("category_id"),
            position=BannerPosition(row.get("position") or BannerPosition.HERO.value),
            sort_order=int(row.get("sort_order") or 0),
            active=bool(row.get("active", True)),
            start_date=parse_timestamp(row.get("start_date")),
            end_date=parse_timestamp(row.get("end_date")),
        )

    def is_live(self, now: datetime) -> bool:
        if not self.active:
            return False
        if self.start_date and now < self.start_date:
            return False
        if self.end_date and now > self.end_date:
            return False
        return True
