"""
ASGI config for StorefrontService.
"""

import os

from django.core.asgi import get_asgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "StorefrontService.settings.prod")

application = get_asgi_application()
