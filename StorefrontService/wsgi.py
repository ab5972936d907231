"""
WSGI config for StorefrontService.
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "StorefrontService.settings.prod")

application = get_wsgi_application()
