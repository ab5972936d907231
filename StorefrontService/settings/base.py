"""
Base Django settings for StorefrontService.

These settings are shared across all environments.
Environment-specific overrides are in dev.py, test.py, and prod.py
"""
import os
from pathlib import Path

from .logging import get_logging_config

# Build paths inside the project
BASE_DIR = Path(__file__).resolve().parent.parent.parent

SECRET_KEY = os.environ.get("SECRET_KEY", "django-insecure-storefront-local-development-key")

DEBUG = False

ALLOWED_HOSTS = ["localhost", "127.0.0.1"]

# Application definition
INSTALLED_APPS = [
    "django.contrib.contenttypes",
    "django.contrib.staticfiles",
    # Third party
    "rest_framework",
    "drf_spectacular",
    # Local apps
    "StorefrontService.apps.StorefrontServiceConfig",
    "core",
    "catalog",
    "orders",
    "accounts",
    "api",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
    # Custom middleware
    "core.middleware.observability.ObservabilityMiddleware",
    "core.middleware.metrics.MetricsMiddleware",
    "core.middleware.auth.AdminAuthenticationMiddleware",
]

ROOT_URLCONF = "StorefrontService.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.debug",
                "django.template.context_processors.request",
            ],
        },
    },
]

WSGI_APPLICATION = "StorefrontService.wsgi.application"
ASGI_APPLICATION = "StorefrontService.asgi.application"

# All persistence lives in the remote table service.
DATABASES = {}

# Internationalization
LANGUAGE_CODE = "en-us"
TIME_ZONE = "Africa/Nairobi"
USE_I18N = True
USE_TZ = True

# Static files (CSS, JavaScript, Images)
STATIC_URL = "static/"
STATIC_ROOT = BASE_DIR / "staticfiles"

# REST Framework
REST_FRAMEWORK = {
    "DEFAULT_RENDERER_CLASSES": [
        "rest_framework.renderers.JSONRenderer",
    ],
    "DEFAULT_PARSER_CLASSES": [
        "rest_framework.parsers.JSONParser",
    ],
    "DEFAULT_AUTHENTICATION_CLASSES": [],
    "DEFAULT_PERMISSION_CLASSES": [],
    "UNAUTHENTICATED_USER": None,
    "EXCEPTION_HANDLER": "api.exceptions.custom_exception_handler",
    "DEFAULT_SCHEMA_CLASS": "drf_spectacular.openapi.AutoSchema",
}

# drf-spectacular settings
SPECTACULAR_SETTINGS = {
    "TITLE": "Storefront Service API",
    "DESCRIPTION": (
        "Retail storefront and back-office API over a hosted table service. "
        "Storefront endpoints are public; admin endpoints require a bearer "
        "token for an account with an admin role."
    ),
    "VERSION": "1.0.0",
    "SERVE_INCLUDE_SCHEMA": False,
    "COMPONENT_SPLIT_REQUEST": True,
    "SCHEMA_PATH_PREFIX": "/api/v1",
    "TAGS": [
        {"name": "Storefront", "description": "Public catalog browsing"},
        {"name": "Admin Auth", "description": "Back-office sign-in"},
        {"name": "Admin Catalog", "description": "Catalog management"},
        {"name": "Admin Orders", "description": "Order management"},
        {"name": "Admin Accounts", "description": "Admin users and activity log"},
        {"name": "Health", "description": "Health check endpoints"},
    ],
}

# Remote table service
STOREFRONT = {
    "BACKEND": os.environ.get("STOREFRONT_BACKEND", "supabase"),
    "SUPABASE_URL": os.environ.get("SUPABASE_URL"),
    "SUPABASE_KEY": os.environ.get("SUPABASE_KEY") or os.environ.get("SUPABASE_ANON_KEY"),
    "AUDIT_ROLES": os.environ.get("AUDIT_ROLES", "admin,super_admin"),
    "WHATSAPP_PHONE": os.environ.get("WHATSAPP_PHONE", "254722240558"),
    "CURRENCY": os.environ.get("STOREFRONT_CURRENCY", "KSh"),
    "LOW_STOCK_THRESHOLD": int(os.environ.get("LOW_STOCK_THRESHOLD", "10")),
}

# Observability
LOGGING = get_logging_config(os.environ.get("ENVIRONMENT", "production"))
