"""
bigeo/DB/database.py
==============================
Database Session and Utilities
==============================

Session lifecycle for FastAPI dependency injection plus the schema and
health helpers used at startup and by the test suite.

Session Lifecycle:
-----------------
- Each HTTP request gets a dedicated session (isolated transaction)
- Sessions come from the engine's pool (configured in session.py)
- The session is always closed, even when the handler raises

Created: 2024-11-18
"""

from typing import Generator
from sqlalchemy.orm import Session
from sqlalchemy import text
from bigeo.DB.session import SessionLocal, engine


# ============================================================
# Primary Database Session Generator
# ============================================================

def get_db() -> Generator[Session, None, None]:
    """
    Database session generator for FastAPI dependency injection.

    The session is NOT committed automatically; write operations in the
    repository layer commit explicitly.

    Yields:
        Session: SQLAlchemy database session
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


# ============================================================
# Database Health Check Utilities
# ============================================================

def test_db_connection() -> bool:
    """
    Test database connectivity with a simple query.

    Returns:
        bool: True if the database answered SELECT 1, False otherwise.
        Errors are printed, never raised.
    """
    try:
        with SessionLocal() as db:
            return db.execute(text("SELECT 1")).scalar() == 1
    except Exception as e:
        print(f"[DB] Connection test failed: {type(e).__name__}")
        return False


# test_db_connection is a utility, not a pytest test
test_db_connection.__test__ = False


# ============================================================
# Schema Utilities
# ============================================================

def create_all_tables():
    """
    Create every table registered in Base.metadata.

    Idempotent: existing tables are left untouched. There is no migration
    tooling; schema changes require recreating the table.
    """
    from bigeo.DB.base import Base
    print("[DB] Creating all tables...")
    Base.metadata.create_all(bind=engine)
    print("[DB] Tables created successfully")


def drop_all_tables():
    """
    Drop every table registered in Base.metadata.

    WARNING: destructive. Used by the test suite to reset state.
    """
    from bigeo.DB.base import Base
    print("[DB] Dropping all tables...")
    Base.metadata.drop_all(bind=engine)
    print("[DB] Tables dropped successfully")


__all__ = [
    "get_db",
    "test_db_connection",
    "create_all_tables",
    "drop_all_tables",
]
