"""
Django management command to seed the demo catalog.

Creates:
- Six categories (hair, beard, skincare, perfume, body spray, air freshener)
- Four brands
- Six products linked to their category and brand
- Three hero banners
"""

import asyncio
import logging
from typing import Dict, List

from django.core.management.base import BaseCommand, CommandError

from catalog import seed_data
from catalog.domain import banner, brand, category, product
from core.domain.exceptions import DomainException
from core.domain.query import Row
from core.infrastructure.container import ServiceContainer, get_container

logger = logging.getLogger(__name__)


def _ids_by_slug(rows: List[Row]) -> Dict[str, str]:
    return {row["slug"]: row["id"] for row in rows if row.get("slug")}


class Command(BaseCommand):
    """Command to seed the demo catalog."""

    help = "Insert the demo categories, brands, products and banners"

    def add_arguments(self, parser):
        """Add command arguments."""
        parser.add_argument(
            "--force",
            action="store_true",
            help="Seed even when the products table already has rows",
        )
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Dry run mode - print what would be inserted",
        )

    def handle(self, *args, **options):
        """Execute the command."""
        if options["dry_run"]:
            # pylint: disable=no-member
            self.stdout.write(self.style.WARNING("DRY RUN - No changes will be made"))
            for name, rows in (
                ("categories", seed_data.CATEGORIES),
                ("brands", seed_data.BRANDS),
                ("products", seed_data.PRODUCTS),
                ("banners", seed_data.BANNERS),
            ):
                self.stdout.write(f"  - {len(rows)} {name}")
            return

        try:
            counts = asyncio.run(self._seed(get_container(), options["force"]))
        except DomainException as e:
            raise CommandError(e.message) from e

        if counts is None:
            self.stdout.write(
                # pylint: disable=no-member
                self.style.WARNING("Catalog already has products; use --force to seed anyway")
            )
            return

        summary = ", ".join(f"{count} {name}" for name, count in counts.items())
        # pylint: disable=no-member
        self.stdout.write(self.style.SUCCESS(f"Seeded {summary}"))

    async def _seed(self, container: ServiceContainer, force: bool):
        products_table = container.table(product.TABLE)
        if not force and await container.remote.select(product.TABLE, products_table.query):
            return None

        categories = await container.table(category.TABLE).bulk_insert(
            {**row, "active": True} for row in seed_data.CATEGORIES
        )
        brands = await container.table(brand.TABLE).bulk_insert(
            {**row, "active": True} for row in seed_data.BRANDS
        )
        category_ids = _ids_by_slug(categories)
        brand_ids = _ids_by_slug(brands)

        products = await products_table.bulk_insert(
            {
                **{k: v for k, v in row.items() if k not in ("category", "brand")},
                "category_id": category_ids[row["category"]],
                "brand_id": brand_ids.get(row.get("brand")),
                "active": True,
            }
            for row in seed_data.PRODUCTS
        )
        banners = await container.table(banner.TABLE).bulk_insert(
            {
                **{k: v for k, v in row.items() if k != "category"},
                "category_id": category_ids[row["category"]],
                "active": True,
            }
            for row in seed_data.BANNERS
        )

        logger.info("Seeded demo catalog", extra={"products": len(products)})
        return {
            "categories": len(categories),
            "brands": len(brands),
            "products": len(products),
            "banners": len(banners),
        }
