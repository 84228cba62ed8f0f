"""mongo_practice/aggregation.py

Aggregation framework examples over the small e-commerce data set in
``sample_data``: grouping, match/project, $lookup joins, date grouping,
array operators and a $facet dashboard.

Usage:
    python -m mongo_practice.aggregation --db ecommerce_db
"""
from __future__ import annotations

from typing import Any, Dict, List

from bson import json_util
from pymongo.database import Database
from pymongo.errors import PyMongoError

from mongo_practice import pipelines
from mongo_practice.connect_db import AGG_DB, build_parser, close_client, get_client, get_database
from mongo_practice.sample_data import setup_sample_data

# (title, collection, pipeline factory)
EXAMPLES = [
    ("Sales by Category", "products", pipelines.sales_by_category),
    ("Expensive Electronics", "products", pipelines.expensive_products),
    ("Orders with User Details", "orders", pipelines.orders_with_users),
    ("Monthly Revenue Report", "orders", pipelines.monthly_revenue),
    ("Products with Reviews", "products", pipelines.top_rated_products),
    ("Product Analytics Dashboard", "products", pipelines.product_dashboard),
]


def run_examples(db: Database) -> Dict[str, List[Dict[str, Any]]]:
    results = {}
    for number, (title, collection, factory) in enumerate(EXAMPLES, start=1):
        print(f"\n--- Example {number}: {title} ---")
        rows = list(db[collection].aggregate(factory()))
        if factory is pipelines.product_dashboard:
            print(json_util.dumps(rows, indent=2))
        else:
            for row in rows:
                print(row)
        results[title] = rows
    return results


def main(argv: list[str] | None = None) -> int:
    args = build_parser("Aggregation framework examples", AGG_DB).parse_args(argv)
    client = get_client(args.uri)
    try:
        db = get_database(args.db, client)
        setup_sample_data(db)
        run_examples(db)
        return 0
    except PyMongoError as e:
        print(f"❌ Error: {e}")
        return 1
    finally:
        close_client(client)


if __name__ == "__main__":
    raise SystemExit(main())
