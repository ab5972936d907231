"""
Pytest configuration and shared fixtures.
"""

import pytest

from core.application.audit import AuditTrail
from core.infrastructure.container import ServiceContainer, set_container
from core.infrastructure.events import InMemoryEventBus
from core.infrastructure.memory_service import InMemoryRemoteService
from core.infrastructure.sessions import InMemorySessionProvider

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "admin-password"
CUSTOMER_EMAIL = "customer@example.com"
CUSTOMER_PASSWORD = "customer-password"


@pytest.fixture
def event_bus():
    """Fixture for InMemoryEventBus."""
    return InMemoryEventBus()


@pytest.fixture
def remote(event_bus):
    """Fixture for InMemoryRemoteService."""
    return InMemoryRemoteService(event_bus)


@pytest.fixture
def sessions():
    """Fixture for InMemorySessionProvider."""
    return InMemorySessionProvider()


@pytest.fixture
def admin_actor(sessions):
    """Fixture for a registered account with the admin role."""
    return sessions.register(
        ADMIN_EMAIL, ADMIN_PASSWORD, role="admin", full_name="Shop Admin", actor_id="admin-1"
    )


@pytest.fixture
def customer_actor(sessions):
    """Fixture for a registered account without a role."""
    return sessions.register(
        CUSTOMER_EMAIL, CUSTOMER_PASSWORD, full_name="Jane Customer", actor_id="customer-1"
    )


@pytest.fixture
def container(remote, sessions, event_bus):
    """Fixture for a ServiceContainer installed as the process container."""
    services = ServiceContainer(remote=remote, sessions=sessions, event_bus=event_bus)
    set_container(services)
    yield services
    set_container(None)


@pytest.fixture
def admin_token(sessions, admin_actor):
    """Fixture for a bearer token of the admin account."""
    return sessions.issue_token(admin_actor)


@pytest.fixture
def customer_token(sessions, customer_actor):
    """Fixture for a bearer token of the non-admin account."""
    return sessions.issue_token(customer_actor)


@pytest.fixture
def admin_audit(remote, sessions, admin_token):
    """Fixture for an AuditTrail acting as the admin."""
    return AuditTrail(remote, sessions, access_token=admin_token)


@pytest.fixture
def customer_audit(remote, sessions, customer_token):
    """Fixture for an AuditTrail acting as the non-admin."""
    return AuditTrail(remote, sessions, access_token=customer_token)


@pytest.fixture
def catalog(remote):
    """Fixture for a small seeded catalog with fixed ids."""
    remote.seed(
        "categories",
        [
            {"id": "cat-hair", "name": "Hair", "slug": "hair", "sort_order": 1, "active": True},
            {"id": "cat-beard", "name": "Beard", "slug": "beard", "sort_order": 2, "active": True},
            {"id": "cat-old", "name": "Old", "slug": "old", "sort_order": 3, "active": False},
        ],
    )
    remote.seed(
        "brands",
        [
            {"id": "brand-dior", "name": "Dior", "slug": "dior", "featured": True, "active": True},
            {"id": "brand-tf", "name": "Tom Ford", "slug": "tom-ford", "active": True},
        ],
    )
    products = [
        {
            "id": "prod-serum",
            "name": "Luxury Hair Serum",
            "category_id": "cat-hair",
            "brand_id": "brand-dior",
            "price": 2500,
            "stock": 25,
            "featured": True,
            "active": True,
        },
        {
            "id": "prod-shampoo",
            "name": "Repair Shampoo",
            "category_id": "cat-hair",
            "brand_id": "brand-tf",
            "price": 1200,
            "stock": 5,
            "active": True,
        },
        {
            "id": "prod-mask",
            "name": "Hair Mask",
            "category_id": "cat-hair",
            "price": 1800,
            "stock": 0,
            "active": True,
        },
        {
            "id": "prod-oil",
            "name": "Beard Growth Oil",
            "category_id": "cat-beard",
            "price": 1800,
            "stock": 30,
            "featured": True,
            "active": True,
        },
        {
            "id": "prod-hidden",
            "name": "Discontinued Gel",
            "category_id": "cat-hair",
            "price": 500,
            "stock": 3,
            "active": False,
        },
    ]
    remote.seed("products", products)
    remote.seed(
        "banners",
        [
            {
                "id": "banner-live",
                "title": "Hair Care Excellence",
                "category_id": "cat-hair",
                "position": "hero",
                "sort_order": 1,
                "active": True,
            },
            {
                "id": "banner-expired",
                "title": "Last Season",
                "position": "hero",
                "sort_order": 2,
                "active": True,
                "end_date": "2020-01-01T00:00:00+00:00",
            },
            {
                "id": "banner-footer",
                "title": "Free Delivery",
                "position": "footer",
                "sort_order": 1,
                "active": True,
            },
        ],
    )
    return products


@pytest.fixture
def api_client():
    """Fixture for DRF API client."""
    from rest_framework.test import APIClient

    return APIClient()


@pytest.fixture
def admin_client(api_client, container, admin_token):
    """Fixture for DRF API client authenticated as the admin."""
    api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {admin_token}")
    return api_client
