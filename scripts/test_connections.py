#!/usr/bin/env python3
"""
Connection Test Script

Run this to verify the database and the AI provider are reachable.
Usage: python scripts/test_connections.py
"""
import sys
sys.path.insert(0, '.')

from app.db.postgres import test_postgres_connection
from app.services.llm_client import OpenAIModelClient
from app.core.config import get_settings


def main():
    settings = get_settings()
    print("=" * 50)
    print("CV VALIDATOR - CONNECTION TEST")
    print("=" * 50)

    # Test PostgreSQL
    print("\n[1] Testing PostgreSQL...")
    if settings.database_url:
        print("    URL: DATABASE_URL (from environment)")
    else:
        print(f"    URL: postgresql://{settings.postgres_user}:****@{settings.postgres_host}:{settings.postgres_port}/{settings.postgres_db}")
    if test_postgres_connection():
        print("    ✅ PostgreSQL: CONNECTED")
    else:
        print("    ❌ PostgreSQL: FAILED")

    # Test the AI provider (only if API key is set)
    print("\n[2] Testing AI provider...")
    if settings.openai_api_key:
        print(f"    Base URL: {settings.openai_base_url or 'https://api.openai.com/v1'}")
        print(f"    Model: {settings.openai_model}")
        client = OpenAIModelClient(settings)
        if client.test_connection():
            print("    ✅ AI provider: CONNECTED")
        else:
            print("    ❌ AI provider: FAILED")
    else:
        print("    ⚠️  AI provider: OPENAI_API_KEY not configured (skip for now)")

    print("\n" + "=" * 50)
    print("Connection test complete!")
    print("=" * 50)


if __name__ == "__main__":
    main()
