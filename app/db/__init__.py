"""
Database module - PostgreSQL connection and schema setup.
"""
from app.db.postgres import get_db_session, init_database, test_postgres_connection

__all__ = [
    "get_db_session",
    "init_database",
    "test_postgres_connection"
]
