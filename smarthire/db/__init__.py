"""
Database module - relational store (SQLAlchemy) and MongoDB connections.
"""
from smarthire.db.database import get_db_session, init_db, test_db_connection
from smarthire.db.mongodb import get_mongo_db, test_mongo_connection

__all__ = [
    "get_db_session",
    "init_db",
    "test_db_connection",
    "get_mongo_db",
    "test_mongo_connection"
]
