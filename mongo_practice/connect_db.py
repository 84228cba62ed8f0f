# connect_db.py - client construction and database handles for the demos
import argparse
import os
from typing import Optional

from dotenv import load_dotenv
from pymongo import MongoClient
from pymongo.database import Database

load_dotenv()
MONGO_URI = os.getenv("MONGO_URI", "mongodb://localhost:27017")

CRUD_DB = os.getenv("CRUD_DB", "practice_db")
AGG_DB = os.getenv("AGG_DB", "ecommerce_db")
ODM_DB = os.getenv("ODM_DB", "mongoose_practice")
PERF_DB = os.getenv("PERF_DB", "performance_db")


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def get_client(uri: Optional[str] = None) -> MongoClient:
    """Build a MongoClient from env settings. Does not touch the network."""
    options = {
        "serverSelectionTimeoutMS": int(os.getenv("MONGO_TIMEOUT_MS", "5000")),
    }
    if _env_flag("MONGO_TLS"):
        options["tls"] = True
        options["tlsAllowInvalidCertificates"] = _env_flag("MONGO_TLS_ALLOW_INVALID")
    return MongoClient(uri or MONGO_URI, **options)


def get_database(name: str, client: MongoClient) -> Database:
    """Ping through the caller's client and return the named database."""
    try:
        # Test the connection
        client.admin.command("ping")

        db = client[name]
        print(f"✅ Connected to MongoDB database: {name}")
        return db
    except Exception as e:
        print(f"❌ Failed to connect to MongoDB: {e}")
        raise


def close_client(client: MongoClient) -> None:
    client.close()
    print("\n✅ Connection closed")


def build_parser(description: str, default_db: str) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=description)
    parser.add_argument("--uri", default=MONGO_URI, help="MongoDB connection string")
    parser.add_argument("--db", default=default_db, help="Database name")
    return parser


def main() -> None:
    client = get_client()
    try:
        get_database(CRUD_DB, client)
    finally:
        close_client(client)


if __name__ == "__main__":
    main()
