"""
Database module - identity (PostgreSQL) and record store (MongoDB) connections.
"""
from placement_admin.db.postgres import get_db_session, init_identity_schema, test_postgres_connection
from placement_admin.db.mongodb import COLLECTIONS, get_mongo_db, init_mongo_indexes, test_mongo_connection

__all__ = [
    "COLLECTIONS",
    "get_db_session",
    "init_identity_schema",
    "test_postgres_connection",
    "get_mongo_db",
    "init_mongo_indexes",
    "test_mongo_connection",
]
