"""mongo_practice/indexing_performance.py

Indexing walkthrough on 10,000 generated users: the same lookup with and
without an index, compound/text/covered/unique/partial/TTL indexes, index
statistics and an ESR (equality, sort, range) compound index.

Usage:
    python -m mongo_practice.indexing_performance --count 10000
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List

from pymongo import ASCENDING, DESCENDING, TEXT
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError, PyMongoError

from mongo_practice.connect_db import PERF_DB, build_parser, close_client, get_client, get_database
from mongo_practice.explain import PlanSummary, explain_find, summarize_explain, timed
from mongo_practice.sample_data import generate_test_users, insert_in_batches

TARGET_EMAIL = "user5000@example.com"
SESSION_TTL_SECONDS = 3600


def seed_users(users: Collection, count: int = 10_000, seed: int | None = None) -> int:
    users.drop_indexes()
    users.delete_many({})
    print(f"Creating {count:,} test documents...")
    inserted = insert_in_batches(users, generate_test_users(count, seed=seed))
    print(f"✅ Created {inserted:,} documents\n")
    return inserted


def _print_plan(plan: PlanSummary) -> None:
    print(f"Documents examined: {plan.docs_examined}")
    print(f"Index used: {plan.index_name or plan.stage}")


def lookup_by_email(users: Collection, email: str = TARGET_EMAIL) -> Dict[str, Any]:
    found, elapsed = timed(lambda: list(users.find({"email": email})))
    print(f"Result: {len(found)}")
    print(f"Time taken: {elapsed:.2f} ms")
    plan = summarize_explain(explain_find(users, {"email": email}))
    _print_plan(plan)
    return {"found": len(found), "elapsed_ms": elapsed, "plan": plan}


def compound_index_query(users: Collection) -> PlanSummary:
    print("\n--- Compound Index (Country + Age) ---")
    users.create_index([("country", ASCENDING), ("age", DESCENDING)])
    plan = summarize_explain(explain_find(users, {"country": "USA", "age": {"$gte": 30}}))
    print(f"Index used: {plan.index_name or 'COLLSCAN'}")
    print(f"Documents examined: {plan.docs_examined}")
    return plan


def text_search(users: Collection, terms: str = "User 100") -> int:
    print("\n--- Text Index for Search ---")
    users.create_index([("name", TEXT)])
    # $text ORs the terms, so "User 100" matches every generated name
    count = users.count_documents({"$text": {"$search": terms}})
    print(f"Search results: {count}")
    return count


def covered_query(users: Collection) -> PlanSummary:
    print("\n--- Covered Query (All fields in index) ---")
    users.create_index([("name", ASCENDING), ("email", ASCENDING)])
    plan = summarize_explain(
        explain_find(users, {"name": "User 100"}, projection={"name": 1, "email": 1, "_id": 0})
    )
    print(f"Total docs examined: {plan.docs_examined}")
    print(f"Is covered?: {plan.is_covered}")
    return plan


def unique_index(users: Collection, existing_email: str = "user100@example.com") -> bool:
    """Swap the email index for a unique one; True when the duplicate is rejected."""
    print("\n--- Unique Index ---")
    users.drop_index("email_1")
    users.create_index("email", unique=True)
    try:
        users.insert_one({"name": "Duplicate", "email": existing_email})
    except DuplicateKeyError:
        print("Duplicate prevented: True")
        return True
    print("Duplicate prevented: False")
    return False


def partial_index(users: Collection) -> str:
    print("\n--- Partial Index (Conditional) ---")
    name = users.create_index("status", partialFilterExpression={"status": "active"})
    print("✅ Partial index created (only for active users)")
    return name


def ttl_index(sessions: Collection, expire_after: int = SESSION_TTL_SECONDS) -> str:
    print("\n--- TTL Index (Auto-delete) ---")
    sessions.delete_many({})
    name = sessions.create_index("createdAt", expireAfterSeconds=expire_after)
    sessions.insert_one({"sessionId": "abc123", "userId": "user1", "createdAt": datetime.now(timezone.utc)})
    print(f"✅ TTL index created (expires in {expire_after // 3600} hour)")
    return name


def list_indexes(users: Collection) -> List[Dict[str, Any]]:
    print("\n--- All Indexes on Users Collection ---")
    indexes = list(users.list_indexes())
    for index in indexes:
        print(f"- {index['name']}: {dict(index['key'])}")
    return indexes


def index_statistics(users: Collection) -> Dict[str, int]:
    print("\n--- Index Statistics ---")
    stats = next(users.aggregate([{"$collStats": {"storageStats": {}}}]), {})
    storage = stats.get("storageStats", {})
    result = {
        "nindexes": int(storage.get("nindexes", 0)),
        "total_index_kb": round(storage.get("totalIndexSize", 0) / 1024),
    }
    print(f"Total indexes: {result['nindexes']}")
    print(f"Total index size: {result['total_index_kb']} KB")
    return result


def esr_query(users: Collection) -> PlanSummary:
    print("\n--- ESR Rule (Equality, Sort, Range) ---")
    # equality on country, sort on name, range on age
    users.create_index([("country", ASCENDING), ("name", ASCENDING), ("age", ASCENDING)])
    plan = summarize_explain(
        explain_find(users, {"country": "USA", "age": {"$gt": 25}}, sort={"name": 1})
    )
    print(f"Index used: {plan.index_name or 'Unknown'}")
    print(f"Docs examined: {plan.docs_examined}")
    return plan


def drop_text_index(users: Collection) -> None:
    print("\n--- Dropping Unused Indexes ---")
    users.drop_index("name_text")
    print("✅ Dropped text index")


def run(db: Database, count: int = 10_000, seed: int | None = None) -> Dict[str, Any]:
    users = db["users"]
    seed_users(users, count, seed)

    print("--- Query WITHOUT Index ---")
    summary: Dict[str, Any] = {"without_index": lookup_by_email(users)}

    print("\n--- Creating Index on Email ---")
    users.create_index("email")  # 1 = ascending, -1 = descending
    print("✅ Index created")

    print("\n--- Query WITH Index ---")
    summary["with_index"] = lookup_by_email(users)

    summary["compound"] = compound_index_query(users)
    summary["text_results"] = text_search(users)
    summary["covered"] = covered_query(users)
    summary["duplicate_prevented"] = unique_index(users)
    summary["partial"] = partial_index(users)
    summary["ttl"] = ttl_index(db["sessions"])
    summary["indexes"] = list_indexes(users)
    summary["stats"] = index_statistics(users)
    summary["esr"] = esr_query(users)
    drop_text_index(users)
    return summary


def main(argv: list[str] | None = None) -> int:
    parser = build_parser("Indexing and query performance examples", PERF_DB)
    parser.add_argument("--count", type=int, default=10_000, help="Number of users to generate")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for generated users")
    args = parser.parse_args(argv)

    client = get_client(args.uri)
    try:
        db = get_database(args.db, client)
        run(db, args.count, args.seed)
        return 0
    except PyMongoError as e:
        print(f"❌ Error: {e}")
        return 1
    finally:
        close_client(client)


if __name__ == "__main__":
    raise SystemExit(main())
