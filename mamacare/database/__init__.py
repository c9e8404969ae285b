from mamacare.database.async_db import (
    close_database,
    create_async_database_engine,
    create_session_factory,
    get_async_engine,
    get_session_factory,
)

__all__ = [
    "close_database",
    "create_async_database_engine",
    "create_session_factory",
    "get_async_engine",
    "get_session_factory",
]
