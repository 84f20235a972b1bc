#!/usr/bin/env python3
"""
Connection Test Script

Run this to verify the database, MongoDB and AI endpoint configured in .env.
Usage: python scripts/test_connections.py
"""
from sqlalchemy.engine import make_url

from smarthire.core.config import get_settings
from smarthire.db.database import test_db_connection
from smarthire.db.mongodb import test_mongo_connection
from smarthire.services.llm_client import AIServiceError, get_llm_client


def main():
    settings = get_settings()
    print("=" * 50)
    print("SMARTHIRE - CONNECTION TEST")
    print("=" * 50)

    print("\n[1] Testing relational database...")
    print(f"    URL: {make_url(settings.database_url).render_as_string(hide_password=True)}")
    if test_db_connection():
        print("    ✅ Database: CONNECTED")
    else:
        print("    ❌ Database: FAILED")

    print("\n[2] Testing MongoDB...")
    print(f"    URI: {settings.mongodb_uri}")
    print(f"    Database: {settings.mongodb_db}")
    if test_mongo_connection():
        print("    ✅ MongoDB: CONNECTED")
    else:
        print("    ❌ MongoDB: FAILED")

    print("\n[3] Testing AI endpoint...")
    print(f"    Base URL: {settings.ai_base_url}")
    print(f"    Model: {settings.ai_model}")
    try:
        client = get_llm_client()
    except AIServiceError as e:
        print(f"    ⚠️  AI: {e}")
    else:
        if client.test_connection():
            print("    ✅ AI: CONNECTED")
        else:
            print("    ❌ AI: FAILED")

    print("\n" + "=" * 50)
    print("Connection test complete!")
    print("=" * 50)


if __name__ == "__main__":
    main()
