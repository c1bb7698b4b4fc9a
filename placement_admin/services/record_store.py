"""
Record Store - keyed document collections in MongoDB.

Collections:
1. students           - student profiles, keyed by identity id
2. recruiters         - recruiter profiles, keyed by identity id
3. admins             - admin profiles, keyed by identity id
4. contactSubmissions - contact-form messages, keyed by a generated id

Every document's _id is a string. Documents come back with "id" in place
of "_id". Driver failures surface as StoreError.
"""

import logging
import uuid
from typing import Any, Dict, List, Optional

from pymongo.database import Database
from pymongo.errors import DuplicateKeyError, PyMongoError

from placement_admin.core.errors import StoreError
from placement_admin.db.mongodb import get_mongo_db

logger = logging.getLogger(__name__)


# ============================================================
# HELPER: Convert _id to id for JSON serialization
# ============================================================

def serialize_doc(doc: Optional[dict]) -> Optional[dict]:
    """Convert a MongoDB document to a JSON-friendly record."""
    if doc is None:
        return None
    record = dict(doc)
    if "_id" in record:
        record["id"] = str(record.pop("_id"))
    return record


def serialize_docs(docs) -> List[dict]:
    return [serialize_doc(doc) for doc in docs]


class RecordStore:
    """
    Opaque keyed-record store with query-by-field.

    Usage:
        store = RecordStore()
        store.insert_with_id("students", identity_id, {...})
        store.list_where("students", "branchCode", "CS")
    """

    def __init__(self, db: Database = None):
        self.db: Database = db if db is not None else get_mongo_db()

    def insert(self, collection: str, fields: Dict[str, Any]) -> str:
        """Insert with a generated id. Returns the id."""
        record_id = uuid.uuid4().hex
        self.insert_with_id(collection, record_id, fields)
        return record_id

    def insert_with_id(self, collection: str, record_id: str, fields: Dict[str, Any]) -> None:
        doc = {key: value for key, value in fields.items() if key not in ("_id", "id")}
        doc["_id"] = record_id
        try:
            self.db[collection].insert_one(doc)
        except DuplicateKeyError as exc:
            raise StoreError(f"Record {record_id} already exists in {collection}") from exc
        except PyMongoError as exc:
            logger.exception("insert into %s failed", collection)
            raise StoreError(f"Failed to save record in {collection}") from exc

    def get(self, collection: str, record_id: str) -> Optional[dict]:
        try:
            return serialize_doc(self.db[collection].find_one({"_id": record_id}))
        except PyMongoError as exc:
            logger.exception("get from %s failed", collection)
            raise StoreError(f"Failed to fetch record from {collection}") from exc

    def list_all(self, collection: str) -> List[dict]:
        try:
            return serialize_docs(self.db[collection].find({}))
        except PyMongoError as exc:
            logger.exception("list of %s failed", collection)
            raise StoreError(f"Failed to fetch {collection}") from exc

    def list_where(self, collection: str, field: str, value: Any) -> List[dict]:
        try:
            return serialize_docs(self.db[collection].find({field: value}))
        except PyMongoError as exc:
            logger.exception("filtered list of %s failed", collection)
            raise StoreError(f"Failed to fetch {collection}") from exc

    def update(self, collection: str, record_id: str, fields: Dict[str, Any]) -> bool:
        """Set the given fields. Returns False when no record has that id."""
        changes = {key: value for key, value in fields.items() if key not in ("_id", "id")}
        try:
            result = self.db[collection].update_one({"_id": record_id}, {"$set": changes})
        except PyMongoError as exc:
            logger.exception("update in %s failed", collection)
            raise StoreError(f"Failed to update record in {collection}") from exc
        return result.matched_count > 0

    def delete(self, collection: str, record_id: str) -> bool:
        try:
            result = self.db[collection].delete_one({"_id": record_id})
        except PyMongoError as exc:
            logger.exception("delete from %s failed", collection)
            raise StoreError(f"Failed to delete record from {collection}") from exc
        return result.deleted_count > 0


def get_record_store() -> RecordStore:
    """FastAPI dependency; overridden in tests."""
    return RecordStore()
