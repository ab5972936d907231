"""
Test settings for StorefrontService.
"""

from .base import *  # noqa: F403, F401
from .logging import get_logging_config

DEBUG = False

ALLOWED_HOSTS = ["testserver", "localhost"]

STOREFRONT = {
    **STOREFRONT,  # noqa: F405
    "BACKEND": "memory",
    "SUPABASE_URL": None,
    "SUPABASE_KEY": None,
    "AUDIT_ROLES": "admin,super_admin",
    "WHATSAPP_PHONE": "254722240558",
    "CURRENCY": "KSh",
    "LOW_STOCK_THRESHOLD": 10,
}

LOGGING = get_logging_config("test")
