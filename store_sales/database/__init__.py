from store_sales.database.base import Base
from store_sales.database.engine import engine, is_sqlite
from store_sales.database.session import SessionLocal, get_db, session_scope

__all__ = ["Base", "SessionLocal", "engine", "get_db", "is_sqlite", "session_scope"]
