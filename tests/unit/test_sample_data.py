"""
Unit tests for the example payloads and the synthetic user generator.
"""

from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from mongo_practice.sample_data import (
    AGG_ORDERS,
    AGG_PRODUCTS,
    AGG_USERS,
    COUNTRIES,
    CRUD_BATCH_USERS,
    SEED_EPOCH,
    crud_first_user,
    generate_test_users,
    insert_in_batches,
    setup_sample_data,
)

NOW = datetime(2025, 1, 1, tzinfo=timezone.utc)


def fake_insert_many(docs, ordered=True):
    return SimpleNamespace(inserted_ids=list(range(len(docs))))


class TestGenerateTestUsers:
    """Test synthetic user generation"""

    def test_sequential_names_and_emails(self):
        """Test that names and emails follow the index"""
        users = generate_test_users(3, seed=1, now=NOW)

        assert [u["name"] for u in users] == ["User 0", "User 1", "User 2"]
        assert users[2]["email"] == "user2@example.com"

    def test_field_ranges(self):
        """Test age, country, status and createdAt ranges"""
        users = generate_test_users(500, seed=42, now=NOW)

        for user in users:
            assert 18 <= user["age"] <= 67
            assert user["country"] in COUNTRIES
            assert user["status"] in ("active", "inactive")
            assert NOW - timedelta(days=365) <= user["createdAt"] <= NOW

    def test_seed_is_reproducible(self):
        """Test that the same seed yields the same documents"""
        assert generate_test_users(50, seed=7, now=NOW) == generate_test_users(50, seed=7, now=NOW)

    def test_seed_alone_is_reproducible(self):
        """Test that a seeded run without a pinned clock repeats exactly"""
        first = generate_test_users(5, seed=7)
        second = generate_test_users(5, seed=7)

        assert first == second
        assert all(u["createdAt"] <= SEED_EPOCH for u in first)

    def test_different_seeds_differ(self):
        """Test that the random fields depend on the seed"""
        assert generate_test_users(50, seed=1, now=NOW) != generate_test_users(50, seed=2, now=NOW)

    def test_zero_and_negative_counts(self):
        """Test count edge cases"""
        assert generate_test_users(0) == []
        with pytest.raises(ValueError):
            generate_test_users(-1)


class TestInsertInBatches:
    """Test batched inserts"""

    def test_batches_and_total(self, collection):
        """Test that documents are split into unordered batches"""
        collection.insert_many.side_effect = fake_insert_many
        docs = [{"i": i} for i in range(2500)]

        inserted = insert_in_batches(collection, docs, batch_size=1000)

        assert inserted == 2500
        sizes = [len(c.args[0]) for c in collection.insert_many.call_args_list]
        assert sizes == [1000, 1000, 500]
        assert all(c.kwargs["ordered"] is False for c in collection.insert_many.call_args_list)

    def test_empty_input(self, collection):
        """Test that nothing is sent for an empty list"""
        assert insert_in_batches(collection, []) == 0
        collection.insert_many.assert_not_called()

    def test_batch_size_must_be_positive(self, collection):
        """Test batch size validation"""
        with pytest.raises(ValueError):
            insert_in_batches(collection, [{"i": 1}], batch_size=0)


class TestSetupSampleData:
    """Test loading the aggregation data"""

    def test_clears_and_inserts(self, capsys):
        """Test that each collection is emptied then filled"""
        db = {name: MagicMock() for name in ("users", "products", "orders")}
        for coll in db.values():
            coll.insert_many.side_effect = fake_insert_many

        counts = setup_sample_data(db)

        assert counts == {"users": 3, "products": 5, "orders": 4}
        for coll in db.values():
            coll.delete_many.assert_called_once_with({})
        assert "Sample data created" in capsys.readouterr().out

    def test_constants_not_mutated(self):
        """Test that inserts receive copies of the module data"""
        db = {name: MagicMock() for name in ("users", "products", "orders")}
        for coll in db.values():
            coll.insert_many.side_effect = fake_insert_many

        setup_sample_data(db)

        sent = db["products"].insert_many.call_args.args[0]
        assert sent == AGG_PRODUCTS
        assert all(a is not b for a, b in zip(sent, AGG_PRODUCTS))


class TestExamplePayloads:
    """Test invariants of the example data"""

    def test_orders_reference_existing_users(self):
        """Test that every order points at a seeded user"""
        user_ids = {u["_id"] for u in AGG_USERS}

        assert all(o["userId"] in user_ids for o in AGG_ORDERS)

    def test_order_statuses(self):
        """Test three completed orders and one pending"""
        statuses = [o["status"] for o in AGG_ORDERS]

        assert statuses.count("completed") == 3
        assert statuses.count("pending") == 1

    def test_crud_users(self):
        """Test the CRUD demo payloads"""
        first = crud_first_user()

        assert first["email"] == "john@example.com"
        assert first["hobbies"] == ["reading", "coding"]
        assert first is not crud_first_user()
        assert [u["status"] for u in CRUD_BATCH_USERS] == ["active", "inactive", "active"]
