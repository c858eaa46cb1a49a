"""
Startup bookkeeping for the console's own MongoDB.

Records every catalog database in the registry, builds the declared
indexes and creates the bootstrap admin.
"""
import logging
from datetime import datetime, timezone

from motor.motor_asyncio import AsyncIOMotorClient

from app.config import get_settings
from app.database.catalog import (
    ALL_DATABASES,
    AUTH_DB,
    METADATA_COLLECTION,
    REGISTRY_COLLECTION,
    SYSTEM_DB,
)
from app.services.auth_service import AuthService

logger = logging.getLogger(__name__)

SCHEMA_VERSION = "1.0"


async def sync_registry(client: AsyncIOMotorClient) -> None:
    """Upsert one registry entry and one metadata document per catalog database."""
    registry_collection = client[SYSTEM_DB.name][REGISTRY_COLLECTION]
    now = datetime.now(timezone.utc)

    for database in ALL_DATABASES:
        manifest = database.manifest()
        await registry_collection.update_one(
            {"_id": database.name},
            {
                "$set": {
                    "purpose": manifest["purpose"],
                    "collections": manifest["collections"],
                    "access_level": manifest["access_level"],
                    "schema_version": SCHEMA_VERSION,
                    "updated_at": now,
                },
                "$setOnInsert": {"created_at": now},
            },
            upsert=True,
        )

        await client[database.name][METADATA_COLLECTION].update_one(
            {"_id": "db_metadata"},
            {
                "$set": {"db_name": database.name, "last_updated_at": now},
                "$setOnInsert": {"created_at": now},
            },
            upsert=True,
        )

    logger.info("Registry synced for %d databases", len(ALL_DATABASES))


async def create_indexes(client: AsyncIOMotorClient) -> None:
    for database in ALL_DATABASES:
        for index in database.indexes:
            await client[database.name][index.collection].create_index(index.key, unique=index.unique)


async def ensure_bootstrap_admin(client: AsyncIOMotorClient) -> bool:
    """Create the admin account named in settings, if configured."""
    settings = get_settings()
    if not settings.bootstrap_admin_email or not settings.bootstrap_admin_password:
        logger.info("No bootstrap admin configured")
        return False

    auth_service = AuthService(client[AUTH_DB.name])
    return await auth_service.ensure_admin(
        settings.bootstrap_admin_email,
        settings.bootstrap_admin_password,
    )
