"""Shared fixtures for the mongo_practice test suite."""

from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
from bson import ObjectId


def make_cursor(docs):
    """A stand-in for a pymongo Cursor: iterable, with sort().limit() chaining."""
    cursor = MagicMock()
    cursor.__iter__.side_effect = lambda: iter(list(docs))
    cursor.sort.return_value = cursor
    cursor.limit.side_effect = lambda n: make_cursor(list(docs)[:n])
    return cursor


@pytest.fixture
def user_doc():
    return {
        "_id": ObjectId(),
        "name": "John Doe",
        "email": "john@example.com",
        "age": 28,
        "status": "active",
        "hobbies": ["reading", "coding"],
        "profile": {"bio": "Software Developer", "social": {"twitter": "@johndoe"}},
        "credits": 0,
        "createdAt": datetime(2024, 10, 1, tzinfo=timezone.utc),
        "updatedAt": datetime(2024, 10, 1, tzinfo=timezone.utc),
    }


@pytest.fixture
def collection():
    coll = MagicMock()
    coll.name = "users"
    return coll


@pytest.fixture
def cursor_factory():
    return make_cursor
