"""
App configuration for Storefront Service.
"""

import logging
import sys

from django.apps import AppConfig

logger = logging.getLogger(__name__)

# Commands that run without a configured remote service.
SKIP_STARTUP_COMMANDS = ("check", "check_connection", "collectstatic", "spectacular", "test")


class StorefrontServiceConfig(AppConfig):
    """App configuration for StorefrontService."""

    name = "StorefrontService"
    verbose_name = "Storefront Service"

    def ready(self):
        """
        Called when Django starts.

        Builds the service container so missing Supabase configuration
        stops the process at startup instead of on the first request.
        """
        if len(sys.argv) > 1 and sys.argv[1] in SKIP_STARTUP_COMMANDS:
            return
        if hasattr(self, "_initialized"):
            return

        from core.infrastructure.container import get_container
        from core.instrumentation import setup_opentelemetry

        try:
            setup_opentelemetry()
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.warning("Failed to setup OpenTelemetry: %s", e)

        # ConfigurationError propagates and aborts startup.
        get_container()
        self._initialized = True
        logger.info("Storefront service ready")
