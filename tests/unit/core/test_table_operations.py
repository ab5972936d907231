"""
Unit tests for TableOperations.
"""
import pytest

from core.application.audit import ACTIVITY_LOG_TABLE
from core.application.table_operations import TableOperations
from core.domain.exceptions import RemoteServiceError, RowNotFoundError


@pytest.mark.asyncio
class TestTableOperations:
    """Tests for the single-row operations variant."""

    async def test_create_and_fetch_by_id(self, remote):
        """Test create returns the stored row and fetch_by_id reads it back."""
        operations = TableOperations(remote, "brands")
        created = await operations.create({"name": "Dior"})
        fetched = await operations.fetch_by_id(created["id"])

        assert fetched["name"] == "Dior"
        assert operations.last_result == fetched
        assert operations.loading is False
        assert operations.error is None

    async def test_fetch_by_id_missing(self, remote):
        """Test a missing row raises and records the error."""
        operations = TableOperations(remote, "brands")
        with pytest.raises(RowNotFoundError):
            await operations.fetch_by_id("nope")
        assert operations.error == "No row nope in brands"

    async def test_failure_keeps_last_result(self, remote):
        """Test the previous successful result survives a failed call."""
        remote.seed("brands", [{"id": "b1", "name": "Dior"}])
        operations = TableOperations(remote, "brands")
        rows = await operations.fetch_all()

        remote.fail("select", "brands", RemoteServiceError("timeout"))
        with pytest.raises(RemoteServiceError):
            await operations.fetch_all()

        assert operations.last_result == rows
        assert operations.error == "timeout"
        assert operations.loading is False

    async def test_next_call_resets_error(self, remote):
        """Test error is cleared when the next call starts."""
        operations = TableOperations(remote, "brands")
        remote.fail("insert", "brands")
        with pytest.raises(RemoteServiceError):
            await operations.create({"name": "Dior"})
        assert operations.error is not None

        await operations.create({"name": "Dior"})
        assert operations.error is None

    async def test_clear_error(self, remote):
        """Test clear_error resets the stored message."""
        operations = TableOperations(remote, "brands")
        remote.fail("delete", "brands")
        with pytest.raises(RemoteServiceError):
            await operations.remove("b1")
        operations.clear_error()
        assert operations.error is None

    async def test_update_and_remove(self, remote):
        """Test update is partial and remove returns True."""
        remote.seed("brands", [{"id": "b1", "name": "Dior", "country": "France"}])
        operations = TableOperations(remote, "brands")

        updated = await operations.update("b1", {"featured": True})
        assert updated["country"] == "France"
        assert updated["featured"] is True

        assert await operations.remove("b1") is True
        assert remote.rows("brands") == []

    async def test_no_activity_log(self, remote):
        """Test single-row operations never write activity log entries."""
        operations = TableOperations(remote, "brands")
        await operations.create({"name": "Dior"})
        assert remote.rows(ACTIVITY_LOG_TABLE) == []
