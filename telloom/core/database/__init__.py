"""
Persistence for Telloom.

``entities`` holds the SQLModel tables, ``repositories`` the per-table data
access, ``session`` the process-wide engine and request sessions, and
``utils`` the engine and session factories reused by Alembic and the tests.
"""

from .base import Base
from .session import async_session_maker, engine, get_session, init_db
from .utils import create_all, create_engine, create_sessionmaker

__all__ = [
    "Base",
    "async_session_maker",
    "create_all",
    "create_engine",
    "create_sessionmaker",
    "engine",
    "get_session",
    "init_db",
]
