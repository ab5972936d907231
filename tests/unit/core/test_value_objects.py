"""
Unit tests for core value objects and row helpers.
"""
from datetime import timezone
from decimal import Decimal

import pytest

from core.domain.rows import format_amount, parse_timestamp, to_decimal
from core.domain.value_objects import AuditAction, ChangeType, Email, TableName


class TestEmail:
    """Tests for Email value object."""

    def test_valid_email(self):
        """Test valid email creation."""
        email = Email("test@example.com")
        assert str(email) == "test@example.com"
        assert email.value == "test@example.com"

    def test_email_normalized(self):
        """Test emails are lowercased and stripped."""
        assert Email("  Admin@Example.COM ") == Email("admin@example.com")

    def test_invalid_email_no_at(self):
        """Test invalid email without @."""
        with pytest.raises(ValueError, match="Invalid email"):
            Email("invalid-email")

    def test_invalid_email_empty(self):
        """Test invalid empty email."""
        with pytest.raises(ValueError, match="Invalid email"):
            Email("")


class TestTableName:
    """Tests for TableName value object."""

    def test_valid_table_name(self):
        """Test valid table name."""
        assert str(TableName("admin_activity_logs")) == "admin_activity_logs"

    def test_invalid_table_name(self):
        """Test table names with punctuation are rejected."""
        with pytest.raises(ValueError, match="Invalid table name"):
            TableName("products; drop")


class TestEnums:
    """Tests for change and audit enums."""

    def test_change_type_values(self):
        """Test change types match the realtime event names."""
        assert {c.value for c in ChangeType} == {"INSERT", "UPDATE", "DELETE"}

    def test_audit_action_values(self):
        """Test audit actions include bulk insert."""
        assert AuditAction.BULK_INSERT.value == "BULK_INSERT"


class TestRowHelpers:
    """Tests for row conversion helpers."""

    def test_parse_timestamp_z_suffix(self):
        """Test UTC 'Z' timestamps are parsed as aware datetimes."""
        parsed = parse_timestamp("2024-03-01T10:00:00Z")
        assert parsed.tzinfo == timezone.utc
        assert parsed.hour == 10

    def test_parse_timestamp_empty(self):
        """Test empty values parse to None."""
        assert parse_timestamp(None) is None
        assert parse_timestamp("") is None

    def test_to_decimal(self):
        """Test numeric columns become Decimal."""
        assert to_decimal(2500) == Decimal("2500")
        assert to_decimal("12.50") == Decimal("12.50")
        assert to_decimal(None) == Decimal("0")

    def test_to_decimal_invalid(self):
        """Test non-numeric values are rejected."""
        with pytest.raises(ValueError):
            to_decimal("abc")

    @pytest.mark.parametrize(
        "amount,expected",
        [
            (Decimal("2500"), "2,500"),
            (Decimal("1250000"), "1,250,000"),
            (Decimal("99.5"), "99.50"),
            (Decimal("0"), "0"),
        ],
    )
    def test_format_amount(self, amount, expected):
        """Test thousands grouping and fraction handling."""
        assert format_amount(amount) == expected
