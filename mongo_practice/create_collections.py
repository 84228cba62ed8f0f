from typing import Iterable, List, Optional

from pymongo import ASCENDING, TEXT
from pymongo.database import Database
from pymongo.errors import CollectionInvalid, OperationFailure

from mongo_practice.schema import VALIDATORS

# Indexes the ODM models declare; names are left to the server defaults.
MODEL_INDEXES = {
    "users": [
        ([("email", ASCENDING)], {"unique": True}),
        ([("name", TEXT)], {}),
    ],
    "products": [
        ([("slug", ASCENDING)], {"unique": True, "sparse": True}),
    ],
    "orders": [
        ([("orderNumber", ASCENDING)], {"unique": True}),
    ],
}


def create_collections(db: Database, collections: Optional[Iterable[str]] = None) -> List[str]:
    names = list(collections) if collections is not None else list(VALIDATORS)
    applied = []

    for name in names:
        schema = VALIDATORS.get(name)
        if schema is None:
            print(f"⚠️ No validator declared for '{name}', skipping.")
            continue

        try:
            db.create_collection(name)
        except CollectionInvalid:
            # already exists
            pass

        try:
            db.command("collMod", name, validator={"$jsonSchema": schema}, validationLevel="strict")
            print(f"✅ Created/updated collection '{name}' with validation.")
            applied.append(name)
        except OperationFailure as e:
            print(f"⚠️ Failed to apply validator to '{name}': {e}")

    return applied


def ensure_indexes(db: Database) -> List[str]:
    created = []
    for name, indexes in MODEL_INDEXES.items():
        for keys, options in indexes:
            created.append(db[name].create_index(keys, **options))
    return created


if __name__ == "__main__":
    from mongo_practice.connect_db import ODM_DB, get_client, get_database, close_client

    client = get_client()
    try:
        db = get_database(ODM_DB, client)
        create_collections(db)
        ensure_indexes(db)
    finally:
        close_client(client)
