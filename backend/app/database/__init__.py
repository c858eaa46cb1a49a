"""
The console's own MongoDB and Redis, plus the catalog of its databases.
"""
from app.database.catalog import ALL_DATABASES, AUTH_DB, SYSTEM_DB, ConsoleDatabase
from app.database.connections import (
    close_connections,
    get_mongo_client,
    get_redis_client,
)

__all__ = [
    "ALL_DATABASES",
    "AUTH_DB",
    "SYSTEM_DB",
    "ConsoleDatabase",
    "close_connections",
    "get_mongo_client",
    "get_redis_client",
]
