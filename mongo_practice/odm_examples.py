"""mongo_practice/odm_examples.py

Model-driven walkthrough: pydantic models validate and shape documents,
``$jsonSchema`` validators guard the collections server-side, and pymongo
does the I/O (populate via ``$lookup``, multi-document transactions).

Usage:
    python -m mongo_practice.odm_examples --db mongoose_practice
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from bson import ObjectId
from pydantic import ValidationError
from pymongo import DESCENDING, ReturnDocument
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import PyMongoError, WriteError

from mongo_practice import pipelines
from mongo_practice.connect_db import ODM_DB, build_parser, close_client, get_client, get_database
from mongo_practice.create_collections import create_collections, ensure_indexes
from mongo_practice.models import (
    USER_PUBLIC_PROJECTION,
    MongoModel,
    Order,
    OrderItem,
    Product,
    Review,
    ShippingAddress,
    User,
    UserOut,
    compute_total,
    from_document,
    to_document,
)
from mongo_practice.schema import DocumentValidationError, validate_document


# ======== Model persistence ========
def pre_save(model: MongoModel) -> None:
    if isinstance(model, User):
        print(f"About to save user: {model.name}")
    elif isinstance(model, Product):
        model.sync_slug()


def save(collection: Collection, model: MongoModel) -> ObjectId:
    """Insert a new model or replace the stored one, running the pre-save hook."""
    pre_save(model)
    doc = to_document(model)
    validate_document(collection.name, doc)
    if model.id is None:
        model.id = collection.insert_one(doc).inserted_id
    else:
        collection.replace_one({"_id": model.id}, doc)
    return model.id


def save_many(collection: Collection, models: List[MongoModel]) -> List[ObjectId]:
    # bulk insert skips the per-document hook
    docs = [to_document(m) for m in models]
    for doc in docs:
        validate_document(collection.name, doc)
    ids = collection.insert_many(docs).inserted_ids
    for model, _id in zip(models, ids):
        model.id = _id
    return ids


def find_user_by_email(users: Collection, email: str) -> Optional[UserOut]:
    return from_document(UserOut, users.find_one({"email": email.strip().lower()}, USER_PUBLIC_PROJECTION))


def find_user_by_id(users: Collection, user_id: ObjectId) -> Optional[UserOut]:
    return from_document(UserOut, users.find_one({"_id": user_id}, USER_PUBLIC_PROJECTION))


# ======== Demo steps ========
def reset_collections(db: Database) -> None:
    for name in ("users", "products", "orders"):
        db[name].delete_many({})


def create_step(db: Database) -> Dict[str, Any]:
    print("\n--- CREATE Operations ---")

    user1 = User(
        name="John Doe",
        email="john@example.com",
        password="password123",
        age=28,
        hobbies=["reading", "coding"],
        profile={"bio": "Software Developer", "social": {"twitter": "@johndoe"}},
    )
    save(db["users"], user1)
    print(f"Created user: {user1.name}")

    others = [
        User(name="Jane Smith", email="jane@example.com", password="pass123", age=25),
        User(name="Bob Wilson", email="bob@example.com", password="pass123", age=32),
    ]
    save_many(db["users"], others)
    print(f"Created users: {len(others)}")

    laptop = Product(
        name="Gaming Laptop",
        category="electronics",
        price=1299,
        stock=50,
        images=["laptop1.jpg", "laptop2.jpg"],
    )
    save(db["products"], laptop)
    print(f"Created product: {laptop.slug}")

    book = Product(name="JavaScript Guide", category="books", price=29.99, stock=100)
    save(db["products"], book)

    return {"user": user1, "laptop": laptop, "book": book}


def read_step(db: Database, user1: User) -> Dict[str, Any]:
    print("\n--- READ Operations ---")
    users = db["users"]
    results: Dict[str, Any] = {}

    everyone = [from_document(UserOut, d) for d in users.find({}, USER_PUBLIC_PROJECTION)]
    results["total"] = len(everyone)
    print(f"Total users: {results['total']}")

    john = find_user_by_email(users, "john@example.com")
    print(f"Found user: {john.name if john else None}")

    by_id = find_user_by_id(users, user1.id)
    print(f"Found by ID: {by_id.name if by_id else None}")

    results["adults"] = len(list(users.find({"age": {"$gte": 25}}, USER_PUBLIC_PROJECTION)))
    print(f"Adults: {results['adults']}")

    results["names"] = [u["name"] for u in users.find({}, {"name": 1, "email": 1, "_id": 0})]
    print(f"Names: {results['names']}")

    oldest = users.find({}, USER_PUBLIC_PROJECTION).sort("age", DESCENDING).limit(2)
    results["oldest"] = [u["name"] for u in oldest]
    print(f"Oldest users: {results['oldest']}")

    results["active"] = users.count_documents({"status": "active"})
    print(f"Active users: {results['active']}")

    results["search"] = len(list(users.find({"$text": {"$search": "john"}}, USER_PUBLIC_PROJECTION)))
    print(f"Search results: {results['search']}")

    return results


def update_step(db: Database, user1: User) -> Dict[str, Any]:
    print("\n--- UPDATE Operations ---")
    users = db["users"]

    users.update_one({"email": "john@example.com"}, {"$set": {"status": "active"}})
    print("Updated user status")

    updated = users.find_one_and_update(
        {"email": "jane@example.com"},
        {"$inc": {"age": 1}},
        projection=USER_PUBLIC_PROJECTION,
        return_document=ReturnDocument.AFTER,
    )
    print(f"Updated age: {updated['age'] if updated else None}")

    users.update_one({"_id": user1.id}, {"$push": {"hobbies": "gaming"}})
    print("Added hobby")

    return {"jane_age": updated["age"] if updated else None}


def review_step(db: Database, laptop: Product, user1: User) -> float:
    print("\n--- Relationships (Populate) ---")
    laptop.reviews.append(Review(user=user1.id, rating=5, comment="Excellent laptop!"))
    laptop.update_avg_rating()
    save(db["products"], laptop)
    print(f"Added review, avg rating: {laptop.avg_rating}")
    return laptop.avg_rating


def order_step(db: Database, user1: User, laptop: Product, book: Product) -> Order:
    items = [
        OrderItem(product=laptop.id, quantity=1, price=laptop.price),
        OrderItem(product=book.id, quantity=2, price=book.price),
    ]
    order = Order(
        orderNumber="ORD-2024-001",
        user=user1.id,
        items=items,
        total=compute_total(items),
        shippingAddress=ShippingAddress(street="123 Main St", city="New York", zipCode="10001", country="USA"),
    )
    save(db["orders"], order)
    print(f"Created order: {order.order_number}")
    return order


def populate_step(db: Database, order_id: ObjectId) -> Optional[Dict[str, Any]]:
    populated = next(db["orders"].aggregate(pipelines.populate_order(order_id)), None)
    if populated is None:
        print("Order not found")
        return None

    print("\nPopulated Order:")
    user = populated.get("user") or {}
    print(f"User: {user.get('name')}")
    items = [
        {"product": (item.get("product") or {}).get("name"), "quantity": item.get("quantity")}
        for item in populated.get("items", [])
    ]
    print(f"Items: {items}")
    return populated


def aggregation_step(db: Database) -> List[Dict[str, Any]]:
    print("\n--- Aggregation ---")
    stats = list(db["products"].aggregate(pipelines.category_price_stats()))
    print(f"Product stats: {stats}")
    return stats


def transaction_step(db: Database, user_id: ObjectId, product_id: ObjectId) -> bool:
    """Charge 10 credits and take one unit of stock atomically.

    Needs a replica set or mongos; on a standalone server the first write
    fails and the transaction is reported as aborted.
    """
    print("\n--- Transactions ---")
    with db.client.start_session() as session:
        try:
            with session.start_transaction():
                db["users"].update_one({"_id": user_id}, {"$inc": {"credits": -10}}, session=session)
                db["products"].update_one({"_id": product_id}, {"$inc": {"stock": -1}}, session=session)
        except PyMongoError as e:
            print(f"Transaction aborted: {e}")
            return False
    print("Transaction committed successfully")
    return True


def virtual_and_methods_step(db: Database, user1: User) -> Dict[str, Any]:
    print("\n--- Virtual Fields ---")
    user = find_user_by_id(db["users"], user1.id)
    print(f"Profile URL: {user.profile_url if user else None}")

    print("\n--- Custom Methods ---")
    is_adult = user.is_adult() if user else False
    print(f"Is adult? {is_adult}")

    found = find_user_by_email(db["users"], "john@example.com")
    print(f"Found by custom method: {found.name if found else None}")

    return {"profile_url": user.profile_url if user else None, "is_adult": is_adult}


def validation_step(db: Database) -> Dict[str, Optional[str]]:
    """Show an invalid user being rejected at each layer."""
    print("\n--- Validation ---")
    invalid = {"name": "Invalid", "email": "not-an-email", "password": "123"}
    errors: Dict[str, Optional[str]] = {"model": None, "schema": None, "server": None}

    try:
        User(**invalid)
    except ValidationError as e:
        errors["model"] = "; ".join(f"{'.'.join(map(str, err['loc']))}: {err['msg']}" for err in e.errors())
        print(f"Validation error: {errors['model']}")

    try:
        validate_document("users", invalid)
    except DocumentValidationError as e:
        errors["schema"] = e.message
        print(f"Schema validation error: {e.message}")

    try:
        db["users"].insert_one(dict(invalid))
        print("⚠️ Server accepted the document (validator not applied?)")
    except WriteError as e:
        errors["server"] = e.details.get("errmsg") if e.details else str(e)
        print(f"Server rejected document: {errors['server']}")

    return errors


def run(db: Database) -> Dict[str, Any]:
    create_collections(db, ["users", "products", "orders"])
    ensure_indexes(db)
    reset_collections(db)

    created = create_step(db)
    user1, laptop, book = created["user"], created["laptop"], created["book"]

    summary: Dict[str, Any] = {"read": read_step(db, user1)}
    summary["update"] = update_step(db, user1)
    summary["avg_rating"] = review_step(db, laptop, user1)
    order = order_step(db, user1, laptop, book)
    summary["order_total"] = order.total
    summary["populated"] = populate_step(db, order.id)
    summary["stats"] = aggregation_step(db)
    summary["committed"] = transaction_step(db, user1.id, laptop.id)
    summary["virtuals"] = virtual_and_methods_step(db, user1)
    summary["validation"] = validation_step(db)
    return summary


def main(argv: list[str] | None = None) -> int:
    args = build_parser("Model-driven MongoDB examples", ODM_DB).parse_args(argv)
    client = get_client(args.uri)
    try:
        db = get_database(args.db, client)
        run(db)
        return 0
    except (PyMongoError, ValidationError, DocumentValidationError) as e:
        print(f"❌ Error: {e}")
        return 1
    finally:
        close_client(client)


if __name__ == "__main__":
    raise SystemExit(main())
