"""
Unit tests for remote service connection checks.
"""
import pytest

from core.application.connection_check import CHECKED_TABLES, run_connection_checks


@pytest.mark.asyncio
class TestConnectionChecks:
    """Tests for run_connection_checks."""

    async def test_all_checks_pass(self, container):
        """Test the four checks succeed against a healthy backend."""
        results = await run_connection_checks(container, {"BACKEND": "memory"})

        assert [r.name for r in results] == [
            "Environment Variables",
            "Database Connection",
            "Authentication",
            "Table Access",
        ]
        assert all(r.ok for r in results)
        assert results[2].message == "Auth service available (not logged in)"

    async def test_authenticated_actor_reported(self, container, admin_token):
        """Test the auth check names the actor behind a token."""
        results = await run_connection_checks(container, {"BACKEND": "memory"}, admin_token)
        assert results[2].message == "Authenticated as: admin@example.com"

    async def test_missing_configuration(self, container):
        """Test missing Supabase settings fail only the environment check."""
        results = await run_connection_checks(container, {"BACKEND": "supabase"})
        assert results[0].status == "error"
        assert all(r.ok for r in results[1:])

    async def test_table_access_failure(self, container, remote):
        """Test one unreadable table fails the table access check."""
        remote.fail("select", "orders")
        results = await run_connection_checks(container, {"BACKEND": "memory"})

        table_access = results[3]
        assert table_access.status == "error"
        assert f"{len(CHECKED_TABLES) - 1}/{len(CHECKED_TABLES)} tables accessible" in (
            table_access.message
        )
        assert "orders" in table_access.message

    async def test_database_failure(self, container, remote):
        """Test an unreachable database fails the connection check."""
        remote.fail("select", "categories")
        results = await run_connection_checks(container, {"BACKEND": "memory"})
        assert results[1].status == "error"
        assert results[1].message.startswith("Connection failed")
