"""
Django management command to follow a remote table.

Prints the table's rows, then prints them again after every refetch
triggered by a change notification.
"""

import asyncio
import json
import logging

from django.core.management.base import BaseCommand, CommandError

from core.application.live_table import LiveTable
from core.domain.exceptions import DomainException
from core.domain.query import OrderBy, TableQuery, parse_filter_args
from core.domain.value_objects import TableName
from core.infrastructure.container import get_container

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    """Command to print a table and follow its changes."""

    help = "Print the rows of a remote table and follow changes"

    def add_arguments(self, parser):
        """Add command arguments."""
        parser.add_argument("table", type=str, help="Table name")
        parser.add_argument(
            "--filter",
            action="append",
            default=[],
            metavar="COLUMN=VALUE",
            help="Equality filter; comma-separated values match any. Repeatable.",
        )
        parser.add_argument(
            "--order",
            type=str,
            default=None,
            metavar="COLUMN[:desc]",
            help="Order by one column",
        )
        parser.add_argument(
            "--join",
            action="append",
            default=[],
            help="Join expression, e.g. 'categories!products_category_id_fkey(name, slug)'",
        )
        parser.add_argument(
            "--once",
            action="store_true",
            help="Print the rows once and exit without subscribing",
        )
        parser.add_argument(
            "--duration",
            type=float,
            default=None,
            help="Stop following after this many seconds",
        )

    def handle(self, *args, **options):
        """Execute the command."""
        try:
            query = TableQuery(
                filter=parse_filter_args(options["filter"]),
                order_by=OrderBy.parse(options["order"]) if options["order"] else None,
                joins=tuple(options["join"]),
                realtime=not options["once"],
            )
            name = TableName(options["table"])
            table = get_container().table(str(name), query)
        except DomainException as e:
            raise CommandError(e.message) from e
        except ValueError as e:
            raise CommandError(str(e)) from e

        table.add_listener(self._print_rows)
        try:
            asyncio.run(self._follow(table, options["duration"]))
        except KeyboardInterrupt:
            self.stdout.write("Stopped")

        if table.error:
            raise CommandError(table.error)

    async def _follow(self, table: LiveTable, duration):
        if not table.query.realtime:
            await table.fetch()
            return
        async with table:
            if table.error:
                return
            self.stdout.write(f"Following {table.table}; press Ctrl-C to stop")
            if duration is not None:
                await asyncio.sleep(duration)
            else:
                await asyncio.Event().wait()

    def _print_rows(self, table: LiveTable) -> None:
        if table.error:
            # pylint: disable=no-member
            self.stderr.write(self.style.ERROR(f"Error fetching {table.table}: {table.error}"))
            return
        self.stdout.write(f"{table.table}: {len(table.rows)} row(s)")
        for row in table.rows:
            self.stdout.write(json.dumps(row, default=str))
