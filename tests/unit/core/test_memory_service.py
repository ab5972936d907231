"""
Unit tests for InMemoryRemoteService.
"""
import pytest

from core.domain.events import RowChanged
from core.domain.exceptions import InvalidQueryError, RemoteServiceError, RowNotFoundError
from core.domain.query import OrderBy, TableQuery
from core.domain.value_objects import ChangeType


@pytest.mark.asyncio
class TestInMemoryRemoteService:
    """Tests for the in-memory remote service."""

    async def test_insert_assigns_id_and_timestamps(self, remote):
        """Test inserted rows get server-side id, created_at and updated_at."""
        created = await remote.insert("categories", [{"name": "Hair"}])
        row = created[0]
        assert row["id"]
        assert row["created_at"]
        assert row["updated_at"]
        assert row["name"] == "Hair"

    async def test_insert_duplicate_id(self, remote):
        """Test inserting an existing id is rejected."""
        remote.seed("categories", [{"id": "c1", "name": "Hair"}])
        with pytest.raises(RemoteServiceError) as exc_info:
            await remote.insert("categories", [{"id": "c1", "name": "Again"}])
        assert exc_info.value.code == "CONFLICT"

    async def test_insert_batch_with_duplicate_stores_nothing(self, remote):
        """Test a batch with one colliding id leaves the table unchanged."""
        remote.seed("categories", [{"id": "dup", "name": "Hair"}])
        events = []

        async def callback(event: RowChanged):
            events.append(event)

        await remote.subscribe("categories", callback)
        with pytest.raises(RemoteServiceError):
            await remote.insert("categories", [{"id": "new1"}, {"id": "dup"}])

        assert [row["id"] for row in remote.rows("categories")] == ["dup"]
        assert events == []

    async def test_insert_batch_repeating_an_id(self, remote):
        """Test the same id twice in one batch is rejected."""
        with pytest.raises(RemoteServiceError):
            await remote.insert("categories", [{"id": "c1"}, {"id": "c1"}])
        assert remote.rows("categories") == []

    async def test_filter_and_order(self, remote):
        """Test equality, membership and ordering."""
        remote.seed(
            "products",
            [
                {"id": "a", "price": 300, "category_id": "x"},
                {"id": "b", "price": 100, "category_id": "x"},
                {"id": "c", "price": 200, "category_id": "y"},
            ],
        )
        rows = await remote.select(
            "products", TableQuery(filter={"category_id": "x"}, order_by=OrderBy("price"))
        )
        assert [row["id"] for row in rows] == ["b", "a"]

        rows = await remote.select(
            "products",
            TableQuery(filter={"id": ["a", "c"]}, order_by=OrderBy("price", ascending=False)),
        )
        assert [row["id"] for row in rows] == ["a", "c"]

    async def test_nulls_sort_last_ascending(self, remote):
        """Test rows without the order column come last when ascending."""
        remote.seed("banners", [{"id": "a"}, {"id": "b", "sort_order": 2}, {"id": "c", "sort_order": 1}])
        rows = await remote.select("banners", TableQuery(order_by=OrderBy("sort_order")))
        assert [row["id"] for row in rows] == ["c", "b", "a"]

    async def test_join_expansion(self, remote):
        """Test relation(columns) joins follow the foreign key column."""
        remote.seed("categories", [{"id": "cat-1", "name": "Hair", "slug": "hair", "sort_order": 1}])
        remote.seed("products", [{"id": "p1", "category_id": "cat-1"}, {"id": "p2"}])
        rows = await remote.select(
            "products",
            TableQuery(
                joins=["categories!products_category_id_fkey(name, slug)"],
                order_by=OrderBy("id"),
            ),
        )
        assert rows[0]["categories"] == {"name": "Hair", "slug": "hair"}
        assert rows[1]["categories"] is None

    async def test_join_without_fkey_hint(self, remote):
        """Test joins without a constraint name use <singular>_id."""
        remote.seed("customers", [{"id": "cu1", "full_name": "Jane"}])
        remote.seed("orders", [{"id": "o1", "customer_id": "cu1"}])
        rows = await remote.select("orders", TableQuery(joins=["customers(full_name)"]))
        assert rows[0]["customers"] == {"full_name": "Jane"}

    async def test_invalid_join(self, remote):
        """Test malformed join expressions are rejected."""
        remote.seed("products", [{"id": "p1"}])
        with pytest.raises(InvalidQueryError):
            await remote.select("products", TableQuery(joins=["not a join"]))

    async def test_narrow_projection(self, remote):
        """Test select narrows columns when no joins are given."""
        remote.seed("products", [{"id": "p1", "name": "Serum", "price": 10}])
        rows = await remote.select("products", TableQuery(select="id, name"))
        assert rows == [{"id": "p1", "name": "Serum"}]

    async def test_partial_update(self, remote):
        """Test updates leave unspecified columns unchanged."""
        remote.seed("products", [{"id": "p1", "name": "Serum", "price": 10}])
        updated = await remote.update("products", "p1", {"price": 12})
        assert updated["name"] == "Serum"
        assert updated["price"] == 12

    async def test_update_missing_row(self, remote):
        """Test updating an unknown id raises RowNotFoundError."""
        with pytest.raises(RowNotFoundError):
            await remote.update("products", "missing", {"price": 1})

    async def test_returned_rows_are_copies(self, remote):
        """Test callers cannot mutate stored rows through results."""
        remote.seed("products", [{"id": "p1", "tags": ["a"]}])
        rows = await remote.select("products", TableQuery())
        rows[0]["tags"].append("b")
        assert remote.rows("products")[0]["tags"] == ["a"]

    async def test_change_notifications(self, remote):
        """Test subscribers see insert, update and delete events for their table only."""
        events = []

        async def callback(event: RowChanged):
            events.append(event)

        subscription = await remote.subscribe("products", callback)
        created = (await remote.insert("products", [{"name": "Serum"}]))[0]
        await remote.insert("brands", [{"name": "Dior"}])
        await remote.update("products", created["id"], {"name": "Serum 2"})
        await remote.delete("products", created["id"])

        assert [e.change_type for e in events] == [
            ChangeType.INSERT,
            ChangeType.UPDATE,
            ChangeType.DELETE,
        ]
        assert events[1].old_record["name"] == "Serum"
        assert events[2].record is None

        await remote.unsubscribe(subscription)
        await remote.insert("products", [{"name": "Oil"}])
        assert len(events) == 3
        assert subscription.active is False

    async def test_simulated_failure(self, remote):
        """Test fail() makes the next call raise once."""
        remote.fail("select", "products")
        with pytest.raises(RemoteServiceError):
            await remote.select("products", TableQuery())
        assert await remote.select("products", TableQuery()) == []
