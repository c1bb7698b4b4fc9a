"""
MongoDB Connection Utility

MongoDB stores the flat profile and message collections:
- students, recruiters, admins: one document per issued identity,
  keyed by the identity id
- contactSubmissions: contact-form messages
"""
import logging

from pymongo import MongoClient
from pymongo.database import Database

from placement_admin.core.config import get_settings

logger = logging.getLogger(__name__)

# Global client (connection pooling handled internally by pymongo)
_client: MongoClient = None
_db: Database = None

# Collection name constants (avoid typos)
COLLECTIONS = {
    "students": "students",
    "recruiters": "recruiters",
    "admins": "admins",
    "messages": "contactSubmissions",
}


def get_mongo_client() -> MongoClient:
    """Get or create MongoDB client (singleton pattern)"""
    global _client
    if _client is None:
        _client = MongoClient(get_settings().mongodb_uri)
    return _client


def get_mongo_db() -> Database:
    """Get the console database"""
    global _db
    if _db is None:
        _db = get_mongo_client()[get_settings().mongodb_db]
    return _db


def test_mongo_connection() -> bool:
    """
    Test if MongoDB is reachable.
    Returns True if connection successful, False otherwise.
    """
    try:
        get_mongo_client().admin.command("ping")
        return True
    except Exception as e:
        logger.warning("MongoDB connection failed: %s", e)
        return False


def init_mongo_indexes():
    """
    Create indexes for the equality filters the console runs.
    Call this once during app startup.
    """
    db = get_mongo_db()

    for name in ("students", "recruiters", "admins"):
        db[COLLECTIONS[name]].create_index("email")
        db[COLLECTIONS[name]].create_index("status")

    # Department-scoped listings
    db[COLLECTIONS["students"]].create_index("branchCode")
    db[COLLECTIONS["messages"]].create_index("departmentCode")
    db[COLLECTIONS["messages"]].create_index("status")

    logger.info("MongoDB indexes created")
