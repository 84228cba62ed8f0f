"""mongo_practice/basic_crud.py

Basic CRUD walkthrough against ``practice_db.users``: inserts, the common
query operators, update operators (including upsert) and deletes.

Usage:
    python -m mongo_practice.basic_crud --uri mongodb://localhost:27017
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict

from pymongo import DESCENDING
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from mongo_practice.connect_db import CRUD_DB, build_parser, close_client, get_client, get_database
from mongo_practice.sample_data import CRUD_BATCH_USERS, crud_first_user

JOHN = {"email": "john@example.com"}


def create_operations(users: Collection) -> Dict[str, Any]:
    print("\n--- CREATE Operations ---")

    insert_result = users.insert_one(crud_first_user())
    print(f"Inserted user: {insert_result.inserted_id}")

    many_result = users.insert_many([dict(u) for u in CRUD_BATCH_USERS])
    print("Inserted multiple users")

    return {
        "inserted_id": insert_result.inserted_id,
        "inserted_many": len(many_result.inserted_ids),
    }


def read_operations(users: Collection) -> Dict[str, Any]:
    print("\n--- READ Operations ---")
    results: Dict[str, Any] = {}

    results["total"] = len(list(users.find({})))
    print(f"Total users: {results['total']}")

    user = users.find_one(JOHN)
    results["found"] = user["name"] if user else None
    print(f"Found user: {results['found']}")

    results["active"] = len(list(users.find({"status": "active"})))
    print(f"Active users: {results['active']}")

    results["over_30"] = len(list(users.find({"age": {"$gt": 30}})))
    print(f"Users over 30: {results['over_30']}")

    # implicit AND across fields
    results["active_25_plus"] = len(list(users.find({"status": "active", "age": {"$gte": 25}})))
    print(f"Active users 25+: {results['active_25_plus']}")

    results["young_or_inactive"] = len(
        list(users.find({"$or": [{"age": {"$lt": 26}}, {"status": "inactive"}]}))
    )
    print(f"Young or inactive users: {results['young_or_inactive']}")

    results["names"] = list(users.find({}, {"name": 1, "email": 1, "_id": 0}))
    print(f"User names and emails: {results['names']}")

    results["oldest"] = [u["name"] for u in users.find({}).sort("age", DESCENDING).limit(2)]
    print(f"Top 2 oldest users: {results['oldest']}")

    return results


def update_operations(users: Collection) -> Dict[str, Any]:
    print("\n--- UPDATE Operations ---")

    users.update_one(JOHN, {"$set": {"status": "active", "lastLogin": datetime.now(timezone.utc)}})
    print("Updated John's status")

    many = users.update_many({"age": {"$gte": 30}}, {"$set": {"category": "senior"}})
    print(f"Updated users: {many.modified_count}")

    users.update_one(JOHN, {"$inc": {"age": 1}})
    print("Incremented John's age")

    users.update_one(JOHN, {"$push": {"hobbies": "gaming"}})
    print("Added hobby to John")

    users.update_one(JOHN, {"$pull": {"hobbies": "reading"}})
    print("Removed hobby from John")

    upsert = users.update_one(
        {"email": "new@example.com"},
        {"$set": {"name": "New User", "age": 20}},
        upsert=True,
    )
    print("Upserted new user")

    return {"seniors": many.modified_count, "upserted_id": upsert.upserted_id}


def delete_operations(users: Collection) -> Dict[str, Any]:
    print("\n--- DELETE Operations ---")

    one = users.delete_one({"email": "new@example.com"})
    print("Deleted new user")

    many = users.delete_many({"status": "inactive"})
    print(f"Deleted inactive users: {many.deleted_count}")

    final_count = users.count_documents({})
    print(f"\nFinal user count: {final_count}")

    return {"deleted_one": one.deleted_count, "deleted_inactive": many.deleted_count, "final_count": final_count}


def run(users: Collection) -> Dict[str, Any]:
    # start from an empty collection so reruns print the same numbers
    users.delete_many({})
    summary: Dict[str, Any] = {}
    summary.update(create_operations(users))
    summary.update(read_operations(users))
    summary.update(update_operations(users))
    summary.update(delete_operations(users))
    return summary


def main(argv: list[str] | None = None) -> int:
    args = build_parser("Basic CRUD operations", CRUD_DB).parse_args(argv)
    client = get_client(args.uri)
    try:
        db = get_database(args.db, client)
        run(db["users"])
        return 0
    except PyMongoError as e:
        print(f"❌ Error: {e}")
        return 1
    finally:
        close_client(client)


if __name__ == "__main__":
    raise SystemExit(main())
