"""Example payloads shared by the demos, plus the synthetic user generator
used by the indexing demo.
"""
from __future__ import annotations

import random
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Iterable, List, Optional

from pymongo.collection import Collection
from pymongo.database import Database

COUNTRIES = ["USA", "UK", "India", "Canada", "Australia"]
STATUSES = ["active", "inactive"]

# createdAt anchor for seeded runs
SEED_EPOCH = datetime(2024, 1, 1, tzinfo=timezone.utc)


# ---------------------------
# 01 basic CRUD
# ---------------------------
def crud_first_user() -> Dict[str, Any]:
    return {
        "name": "John Doe",
        "email": "john@example.com",
        "age": 28,
        "hobbies": ["reading", "coding"],
        "address": {"city": "New York", "country": "USA"},
        "createdAt": datetime.now(timezone.utc),
    }


CRUD_BATCH_USERS = [
    {"name": "Jane Smith", "email": "jane@example.com", "age": 25, "status": "active"},
    {"name": "Bob Wilson", "email": "bob@example.com", "age": 32, "status": "inactive"},
    {"name": "Alice Brown", "email": "alice@example.com", "age": 29, "status": "active"},
]


# ---------------------------
# 02 aggregation
# ---------------------------
AGG_USERS = [
    {"_id": 1, "name": "John Doe", "email": "john@example.com"},
    {"_id": 2, "name": "Jane Smith", "email": "jane@example.com"},
    {"_id": 3, "name": "Bob Wilson", "email": "bob@example.com"},
]

AGG_PRODUCTS = [
    {
        "name": "Laptop",
        "category": "electronics",
        "price": 999,
        "stock": 50,
        "reviews": [
            {"rating": 5, "comment": "Great!"},
            {"rating": 4, "comment": "Good"},
        ],
    },
    {
        "name": "Mouse",
        "category": "electronics",
        "price": 25,
        "stock": 200,
        "reviews": [{"rating": 5, "comment": "Perfect"}],
    },
    {"name": "Desk", "category": "furniture", "price": 350, "stock": 30, "reviews": []},
    {
        "name": "Chair",
        "category": "furniture",
        "price": 200,
        "stock": 40,
        "reviews": [{"rating": 4, "comment": "Comfortable"}],
    },
    {"name": "Book", "category": "books", "price": 15, "stock": 100, "reviews": []},
]

AGG_ORDERS = [
    {
        "orderNumber": "ORD-001",
        "userId": 1,
        "total": 999,
        "status": "completed",
        "createdAt": datetime(2024, 10, 15, tzinfo=timezone.utc),
    },
    {
        "orderNumber": "ORD-002",
        "userId": 2,
        "total": 550,
        "status": "completed",
        "createdAt": datetime(2024, 10, 20, tzinfo=timezone.utc),
    },
    {
        "orderNumber": "ORD-003",
        "userId": 1,
        "total": 25,
        "status": "completed",
        "createdAt": datetime(2024, 11, 1, tzinfo=timezone.utc),
    },
    {
        "orderNumber": "ORD-004",
        "userId": 3,
        "total": 200,
        "status": "pending",
        "createdAt": datetime(2024, 11, 2, tzinfo=timezone.utc),
    },
]


def _copies(docs: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    # insert_many adds _id to the dicts it is given; keep the module constants clean
    return [dict(d) for d in docs]


def setup_sample_data(db: Database) -> Dict[str, int]:
    """Clear users/products/orders and load the aggregation example data."""
    for name in ("users", "products", "orders"):
        db[name].delete_many({})

    counts = {
        "users": len(db["users"].insert_many(_copies(AGG_USERS)).inserted_ids),
        "products": len(db["products"].insert_many(_copies(AGG_PRODUCTS)).inserted_ids),
        "orders": len(db["orders"].insert_many(_copies(AGG_ORDERS)).inserted_ids),
    }
    print("✅ Sample data created")
    return counts


# ---------------------------
# 04 indexing
# ---------------------------
def generate_test_users(
    count: int = 10_000,
    seed: Optional[int] = None,
    now: Optional[datetime] = None,
) -> List[Dict[str, Any]]:
    """Fabricate ``count`` user documents for the indexing demo.

    Names and emails are sequential (``User 0`` / ``user0@example.com``) so the
    demo can look up a known record; the remaining fields are random but
    reproducible when ``seed`` is given. A seeded run without ``now`` dates
    its users back from ``SEED_EPOCH`` so repeated runs match exactly.
    """
    if count < 0:
        raise ValueError("count must be >= 0")
    rng = random.Random(seed)
    if now is None:
        now = SEED_EPOCH if seed is not None else datetime.now(timezone.utc)
    year = timedelta(days=365)

    return [
        {
            "name": f"User {i}",
            "email": f"user{i}@example.com",
            "age": 18 + rng.randrange(50),
            "country": rng.choice(COUNTRIES),
            "status": rng.choice(STATUSES),
            "createdAt": now - rng.random() * year,
        }
        for i in range(count)
    ]


def insert_in_batches(collection: Collection, docs: List[Dict[str, Any]], batch_size: int = 1000) -> int:
    if batch_size <= 0:
        raise ValueError("batch_size must be positive")
    inserted = 0
    for i in range(0, len(docs), batch_size):
        result = collection.insert_many(docs[i:i + batch_size], ordered=False)
        inserted += len(result.inserted_ids)
    return inserted
