"""
Core views for health checks and system status.
"""

from asgiref.sync import async_to_sync
from django.conf import settings
from django.http import HttpResponse, JsonResponse
from django.utils.decorators import method_decorator
from django.views import View
from django.views.decorators.csrf import csrf_exempt
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from core.application.connection_check import run_connection_checks
from core.infrastructure.container import get_container
from core.middleware.auth import bearer_token


@method_decorator(csrf_exempt, name="dispatch")
class HealthView(View):
    """Health check endpoint."""

    def get(self, _request):
        """Return service health status."""
        return JsonResponse({"status": "healthy", "service": "storefront-service"})


@method_decorator(csrf_exempt, name="dispatch")
class RemoteHealthView(View):
    """Remote service connection check endpoint."""

    def get(self, request):
        """Run the connection checks against the configured backend."""
        results = async_to_sync(run_connection_checks)(
            get_container(), settings.STOREFRONT, bearer_token(request)
        )
        healthy = all(result.ok for result in results)
        return JsonResponse(
            {
                "status": "healthy" if healthy else "unhealthy",
                "checks": [result.to_dict() for result in results],
            },
            status=200 if healthy else 503,
        )


class MetricsView(View):
    """Prometheus scrape endpoint."""

    def get(self, _request):
        return HttpResponse(generate_latest(), content_type=CONTENT_TYPE_LATEST)
