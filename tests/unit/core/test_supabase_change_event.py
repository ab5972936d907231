"""
Unit tests for mapping realtime payloads onto RowChanged events.
"""
from core.domain.value_objects import ChangeType
from core.infrastructure.supabase_service import change_event


class TestChangeEvent:
    """Tests for change_event."""

    def test_insert_payload(self):
        """Test an INSERT payload carries the new record."""
        event = change_event(
            "products",
            {"data": {"type": "INSERT", "record": {"id": "p1", "name": "Serum"}, "old_record": None}},
        )
        assert event.table == "products"
        assert event.change_type == ChangeType.INSERT
        assert event.aggregate_id == "p1"
        assert event.record == {"id": "p1", "name": "Serum"}
        assert event.old_record is None

    def test_delete_payload_uses_old_record(self):
        """Test a DELETE payload takes its id from the old record."""
        event = change_event("products", {"data": {"type": "DELETE", "old_record": {"id": "p2"}}})
        assert event.change_type == ChangeType.DELETE
        assert event.aggregate_id == "p2"
        assert event.record is None

    def test_legacy_payload_keys(self):
        """Test eventType/new/old payloads are accepted."""
        event = change_event(
            "orders", {"eventType": "UPDATE", "new": {"id": 7}, "old": {"id": 7, "status": "pending"}}
        )
        assert event.change_type == ChangeType.UPDATE
        assert event.aggregate_id == "7"
        assert event.old_record["status"] == "pending"
