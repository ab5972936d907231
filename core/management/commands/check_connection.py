"""
Django management command to test the remote service connection.

Runs the same checks as ``/health/remote/`` and exits non-zero when any
of them fails.
"""

import asyncio

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError

from core.application.connection_check import run_connection_checks
from core.domain.exceptions import ConfigurationError
from core.infrastructure.container import get_container


class Command(BaseCommand):
    """Command to check configuration, database, auth and table access."""

    help = "Test the connection to the remote table service"

    def add_arguments(self, parser):
        """Add command arguments."""
        parser.add_argument(
            "--token",
            type=str,
            default=None,
            help="Access token to resolve in the authentication check",
        )

    def handle(self, *args, **options):
        """Execute the command."""
        try:
            container = get_container()
        except ConfigurationError as e:
            # pylint: disable=no-member
            self.stdout.write(self.style.ERROR(f"[error] Environment Variables: {e.message}"))
            raise CommandError("Connection test failed: configuration missing") from e

        results = asyncio.run(
            run_connection_checks(container, settings.STOREFRONT, options["token"])
        )

        for result in results:
            # pylint: disable=no-member
            style = self.style.SUCCESS if result.ok else self.style.ERROR
            self.stdout.write(style(f"[{result.status}] {result.name}: {result.message}"))

        failed = [result for result in results if not result.ok]
        if failed:
            raise CommandError(f"{len(failed)} of {len(results)} checks failed")
        # pylint: disable=no-member
        self.stdout.write(self.style.SUCCESS("All connection checks passed"))
