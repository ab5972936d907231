"""
Unit tests for UpdateAdminUserHandler and AdminUser.
"""
import pytest

from accounts.application.commands.update_admin_user import UpdateAdminUserCommand
from accounts.application.handlers.update_admin_user_handler import UpdateAdminUserHandler
from accounts.domain.admin_user import AdminRole, AdminUser, is_admin
from core.application.audit import ACTIVITY_LOG_TABLE
from core.application.live_table import LiveTable
from core.domain.exceptions import PermissionDeniedError, RowNotFoundError

from conftest import ADMIN_EMAIL


@pytest.fixture
def admin_users(remote):
    """Fixture for two admin_users rows, the first owned by the admin account."""
    return remote.seed(
        "admin_users",
        [
            {"id": "au-1", "email": ADMIN_EMAIL, "role": "admin", "active": True},
            {"id": "au-2", "email": "mod@example.com", "role": "moderator", "active": True},
        ],
    )


@pytest.fixture
def handler(remote, admin_audit, admin_actor):
    """Fixture for UpdateAdminUserHandler acting as the admin."""
    return UpdateAdminUserHandler(LiveTable(remote, "admin_users", audit=admin_audit), admin_actor)


class TestAdminUser:
    """Tests for AdminUser and is_admin."""

    def test_from_row(self):
        """Test role and email parsing."""
        user = AdminUser.from_row({"id": "au-1", "email": "Boss@Example.com", "role": "super_admin"})
        assert user.role is AdminRole.SUPER_ADMIN
        assert str(user.email) == "boss@example.com"

    def test_is_admin(self, admin_actor, customer_actor):
        """Test privileged role detection."""
        assert is_admin(admin_actor)
        assert not is_admin(customer_actor)
        assert not is_admin(None)


@pytest.mark.asyncio
class TestUpdateAdminUserHandler:
    """Tests for UpdateAdminUserHandler."""

    async def test_promote_other_user(self, handler, remote, admin_users):
        """Test changing another user's role is applied and audited."""
        updated = await handler.handle(UpdateAdminUserCommand("au-2", role=AdminRole.ADMIN))

        assert updated["role"] == "admin"
        entry = remote.rows(ACTIVITY_LOG_TABLE)[0]
        assert entry["table_name"] == "admin_users"
        assert entry["record_id"] == "au-2"

    async def test_cannot_change_own_role(self, handler, admin_users):
        """Test the actor cannot change their own role."""
        with pytest.raises(PermissionDeniedError):
            await handler.handle(UpdateAdminUserCommand("au-1", role=AdminRole.MODERATOR))

    async def test_cannot_deactivate_self(self, handler, admin_users):
        """Test the actor cannot deactivate themselves."""
        with pytest.raises(PermissionDeniedError):
            await handler.handle(UpdateAdminUserCommand("au-1", active=False))

    async def test_rename_self(self, handler, admin_users):
        """Test the actor may change their own name."""
        updated = await handler.handle(UpdateAdminUserCommand("au-1", full_name="Head Admin"))
        assert updated["full_name"] == "Head Admin"

    async def test_empty_update_returns_row(self, handler, remote, admin_users):
        """Test an update with no values writes nothing."""
        row = await handler.handle(UpdateAdminUserCommand("au-2"))
        assert row["role"] == "moderator"
        assert ("update", "admin_users") not in remote.calls

    async def test_unknown_user(self, handler, admin_users):
        """Test a missing admin user raises RowNotFoundError."""
        with pytest.raises(RowNotFoundError):
            await handler.handle(UpdateAdminUserCommand("nope", active=True))
