"""
Development settings for StorefrontService.

Set STOREFRONT_BACKEND=memory to run without a Supabase project.
"""

from .base import *  # noqa: F403, F401
from .logging import get_logging_config

DEBUG = True

ALLOWED_HOSTS = ["localhost", "127.0.0.1", "0.0.0.0"]

LOGGING = get_logging_config("development")
