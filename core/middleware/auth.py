"""
Bearer-token authentication middleware for the back-office API.

Admin API requests must carry ``Authorization: Bearer <access token>``
issued by the session provider, and the token's actor must hold a
privileged role. Storefront and health endpoints are public.
"""

import logging
from typing import Optional

from asgiref.sync import async_to_sync
from django.http import HttpRequest, HttpResponse, JsonResponse
from django.utils.deprecation import MiddlewareMixin

from core.infrastructure.container import get_container

logger = logging.getLogger(__name__)

ADMIN_PREFIX = "/api/v1/admin/"
PUBLIC_ADMIN_PATHS = ("/api/v1/admin/auth/login",)


def bearer_token(request: HttpRequest) -> Optional[str]:
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


class AdminAuthenticationMiddleware(MiddlewareMixin):
    """
    Middleware for back-office authentication.

    This middleware:
    1. Resolves the bearer token on /api/v1/admin/* to an actor
    2. Returns 401 when the token is missing or rejected
    3. Returns 403 when the actor lacks a privileged role
    4. Stores the actor and token on the request for views and activity logs
    """

    def process_request(self, request: HttpRequest) -> Optional[HttpResponse]:
        request.actor = None  # type: ignore
        request.access_token = bearer_token(request)  # type: ignore

        if not request.path.startswith(ADMIN_PREFIX):
            return None
        if any(request.path.startswith(path) for path in PUBLIC_ADMIN_PATHS):
            return None

        if not request.access_token:
            return JsonResponse(
                {
                    "error": {
                        "code": "AUTHENTICATION_REQUIRED",
                        "message": "Missing access token. Provide Authorization: Bearer <token>.",
                    }
                },
                status=401,
            )

        container = get_container()
        try:
            actor = async_to_sync(container.sessions.get_current_actor)(request.access_token)
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.error("Error resolving access token: %s", e, exc_info=True)
            return JsonResponse(
                {"error": {"code": "AUTHENTICATION_ERROR", "message": "Authentication error"}},
                status=500,
            )

        if actor is None:
            logger.warning("Invalid access token attempted: %s...", request.access_token[:8])
            return JsonResponse(
                {"error": {"code": "INVALID_TOKEN", "message": "Invalid or expired access token"}},
                status=401,
            )

        if not container.is_privileged(actor):
            logger.warning("Non-admin actor denied", extra={"user_id": actor.id})
            return JsonResponse(
                {"error": {"code": "PERMISSION_DENIED", "message": "Admin access required"}},
                status=403,
            )

        request.actor = actor  # type: ignore
        return None
