"""
MongoDB Connection Utility

MongoDB stores:
- Raw resume text as uploaded
- Raw AI scoring output per candidate
- AI parses of uploaded job description files
- Raw AI video-interview evaluations

The relational store keeps the validated fields; these documents keep the
original text and model output for audit and re-display.
"""
import logging

from pymongo import MongoClient
from pymongo.database import Database
from pymongo.collection import Collection
from smarthire.core.config import get_settings

logger = logging.getLogger(__name__)

settings = get_settings()

# Global client (connection pooling handled internally by pymongo)
_client: MongoClient = None
_db: Database = None


def get_mongo_client() -> MongoClient:
    """Get or create MongoDB client (singleton pattern)"""
    global _client
    if _client is None:
        _client = MongoClient(settings.mongodb_uri, serverSelectionTimeoutMS=5000)
    return _client


def get_mongo_db() -> Database:
    """Get the SmartHire documents database"""
    global _db
    if _db is None:
        client = get_mongo_client()
        _db = client[settings.mongodb_db]
    return _db


def reset_mongo(client: MongoClient = None) -> None:
    """Drop the cached client/database, optionally installing a replacement client."""
    global _client, _db
    _client = client
    _db = None


def get_collection(name: str) -> Collection:
    """Get a specific collection by name (see COLLECTIONS)."""
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
    "raw_resumes": "raw_resumes",
    "resume_evaluations": "resume_evaluations",
    "parsed_jds": "parsed_job_descriptions",
    "interview_evaluations": "interview_evaluations",
}


def init_mongo_indexes():
    """
    Create indexes for better query performance.
    Call this once during app startup.
    """
    db = get_mongo_db()

    db[COLLECTIONS["raw_resumes"]].create_index("user_id")
    db[COLLECTIONS["resume_evaluations"]].create_index("candidate_id")
    db[COLLECTIONS["parsed_jds"]].create_index("hr_id")
    db[COLLECTIONS["interview_evaluations"]].create_index("application_id")

    logger.info("MongoDB indexes created")
