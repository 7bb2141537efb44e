"""
MongoDB Connection Utility

MongoDB stores the resource_analytics event log:
- one document per download / view / bookmark action
- append-only, no uniqueness constraint

WHY MongoDB for this?
- Write-heavy log that is only ever appended to and scanned
- Events never join back into the relational rows
- Losing it is survivable: analytics fall back to resources.download_count
"""
import logging

from pymongo import MongoClient, ASCENDING
from pymongo.database import Database
from pymongo.collection import Collection
from app.core.config import get_settings

logger = logging.getLogger(__name__)

settings = get_settings()

# Global client (connection pooling handled internally by pymongo)
_client: MongoClient = None
_db: Database = None


def get_mongo_client() -> MongoClient:
    """Get or create MongoDB client (singleton pattern)"""
    global _client
    if _client is None:
        _client = MongoClient(
            settings.mongodb_uri,
            serverSelectionTimeoutMS=settings.mongodb_timeout_ms
        )
    return _client


def get_mongo_db() -> Database:
    """Get the event log database"""
    global _db
    if _db is None:
        client = get_mongo_client()
        _db = client[settings.mongodb_db]
    return _db


def get_collection(name: str) -> Collection:
    """
    Get a specific collection.
    Collections we'll use:
    - resource_analytics: download/view/bookmark events
    """
    db = get_mongo_db()
    return db[name]


def test_mongo_connection() -> bool:
    """
    Test if MongoDB is reachable.
    Returns True if connection successful, False otherwise.
    """
    try:
        client = get_mongo_client()
        # ping command checks connection
        client.admin.command('ping')
        return True
    except Exception as e:
        logger.warning("MongoDB connection failed: %s", e)
        return False


# Collection name constants (avoid typos)
COLLECTIONS = {
    "resource_analytics": "resource_analytics",
}


def init_mongo_indexes():
    """
    Create indexes for better query performance.
    Call this once during app startup.
    """
    collection = get_collection(COLLECTIONS["resource_analytics"])

    # Per-resource counting and per-action totals
    collection.create_index([("resource_id", ASCENDING)])
    collection.create_index([("action", ASCENDING)])

    logger.info("MongoDB indexes created successfully")
