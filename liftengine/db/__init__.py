"""Database package."""
from liftengine.db.database import (
    Base,
    close_engine,
    create_engine,
    create_session_maker,
    get_db,
    init_db,
)

__all__ = [
    "Base",
    "close_engine",
    "create_engine",
    "create_session_maker",
    "get_db",
    "init_db",
]
