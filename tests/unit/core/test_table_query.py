"""
Unit tests for TableQuery and related parsing helpers.
"""
import pytest

from core.domain.exceptions import InvalidQueryError
from core.domain.query import FilterClause, OrderBy, TableQuery, parse_filter_args


class TestOrderBy:
    """Tests for OrderBy."""

    def test_ascending_by_default(self):
        """Test ordering defaults to ascending."""
        assert OrderBy("name").ascending is True

    @pytest.mark.parametrize(
        "expression,column,ascending",
        [
            ("price", "price", True),
            ("price:asc", "price", True),
            ("price:desc", "price", False),
            ("-created_at", "created_at", False),
        ],
    )
    def test_parse(self, expression, column, ascending):
        """Test parsing ordering expressions."""
        order = OrderBy.parse(expression)
        assert order.column == column
        assert order.ascending is ascending

    def test_parse_unknown_direction(self):
        """Test an unknown direction is rejected."""
        with pytest.raises(InvalidQueryError):
            OrderBy.parse("price:sideways")


class TestTableQuery:
    """Tests for TableQuery."""

    def test_projection_without_joins(self):
        """Test projection is the base select when no joins are given."""
        assert TableQuery().projection == "*"
        assert TableQuery(select="id, name").projection == "id, name"

    def test_projection_with_joins(self):
        """Test joins are appended to a full projection."""
        query = TableQuery(
            joins=[
                "categories!products_category_id_fkey(name, slug)",
                "brands!products_brand_id_fkey(name, slug)",
            ]
        )
        assert query.projection == (
            "*, categories!products_category_id_fkey(name, slug), "
            "brands!products_brand_id_fkey(name, slug)"
        )

    def test_none_values_impose_no_constraint(self):
        """Test filter columns set to None are skipped."""
        query = TableQuery(filter={"active": True, "category_id": None})
        assert query.clauses() == [FilterClause("active", "eq", True)]

    def test_sequences_become_membership(self):
        """Test list, tuple and set values become membership clauses."""
        query = TableQuery(filter={"status": ("pending", "confirmed")})
        clause = query.clauses()[0]
        assert clause.operator == "in"
        assert clause.value == ["pending", "confirmed"]

    def test_strings_are_scalars(self):
        """Test strings are never treated as sequences."""
        clause = TableQuery(filter={"slug": "hair"}).clauses()[0]
        assert clause == FilterClause("slug", "eq", "hair")

    def test_with_filter_keeps_other_settings(self):
        """Test with_filter merges columns and keeps ordering and joins."""
        base = TableQuery(
            filter={"active": True}, order_by=OrderBy("name"), joins=["brands(name)"], realtime=True
        )
        narrowed = base.with_filter(featured=True)
        assert narrowed.filter == {"active": True, "featured": True}
        assert narrowed.order_by == base.order_by
        assert narrowed.joins == ("brands(name)",)
        assert narrowed.realtime is True
        assert base.filter == {"active": True}

    def test_empty_filter_column_rejected(self):
        """Test an empty column name is rejected."""
        with pytest.raises(InvalidQueryError):
            TableQuery(filter={"": 1})


class TestParseFilterArgs:
    """Tests for parse_filter_args."""

    def test_parse_pairs(self):
        """Test scalar, boolean and membership values."""
        parsed = parse_filter_args(["slug=hair", "active=true", "status=pending,shipped"])
        assert parsed == {"slug": "hair", "active": True, "status": ["pending", "shipped"]}

    def test_missing_separator(self):
        """Test pairs without '=' are rejected."""
        with pytest.raises(InvalidQueryError):
            parse_filter_args(["slug"])
