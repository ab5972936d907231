"""
Unit tests for AuditTrail.
"""
import pytest

from core.application.audit import ACTIVITY_LOG_TABLE, AuditTrail
from core.domain.value_objects import AuditAction


@pytest.mark.asyncio
class TestAuditTrail:
    """Tests for activity log writes."""

    async def test_records_entry_for_admin(self, remote, sessions, admin_token):
        """Test an admin's mutation is recorded with request metadata."""
        audit = AuditTrail(
            remote,
            sessions,
            access_token=admin_token,
            user_agent="pytest",
            ip_address="10.0.0.1",
        )
        entry = await audit.record(AuditAction.UPDATE, "products", "p1", {"a": 1}, {"a": 2})

        assert entry is not None
        stored = remote.rows(ACTIVITY_LOG_TABLE)[0]
        assert stored["user_email"] == "admin@example.com"
        assert stored["action"] == "UPDATE"
        assert stored["record_id"] == "p1"
        assert stored["user_agent"] == "pytest"
        assert stored["ip_address"] == "10.0.0.1"

    async def test_skips_non_admin(self, customer_audit, remote):
        """Test no entry is written for an actor without a privileged role."""
        assert await customer_audit.record(AuditAction.INSERT, "products", "p1", None, {}) is None
        assert remote.rows(ACTIVITY_LOG_TABLE) == []

    async def test_skips_anonymous(self, remote, sessions):
        """Test no entry is written when no actor is signed in."""
        audit = AuditTrail(remote, sessions, access_token="unknown-token")
        assert await audit.record(AuditAction.DELETE, "products", "p1", {}, None) is None
        assert remote.rows(ACTIVITY_LOG_TABLE) == []

    async def test_custom_roles(self, remote, sessions):
        """Test privileged roles are configurable."""
        sessions.register("mod@example.com", "pw", role="moderator")
        token = (await sessions.sign_in("mod@example.com", "pw")).access_token
        audit = AuditTrail(remote, sessions, access_token=token, privileged_roles=("moderator",))
        assert await audit.record(AuditAction.INSERT, "brands", "b1", None, {}) is not None

    async def test_write_failure_swallowed(self, remote, admin_audit):
        """Test a failed activity log insert returns None instead of raising."""
        remote.fail("insert", ACTIVITY_LOG_TABLE)
        assert await admin_audit.record(AuditAction.INSERT, "brands", "b1", None, {}) is None

    async def test_actor_lookup_failure_swallowed(self, remote, sessions, admin_token):
        """Test a failing session provider does not raise."""

        async def broken(access_token=None):
            raise RuntimeError("auth down")

        sessions.get_current_actor = broken
        audit = AuditTrail(remote, sessions, access_token=admin_token)
        assert await audit.record(AuditAction.INSERT, "brands", "b1", None, {}) is None
