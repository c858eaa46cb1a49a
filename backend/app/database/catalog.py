"""
The console's own databases.

Only admin accounts and the registry live here. Collections opened by
operators are never part of the catalog.
"""
from pydantic import BaseModel, ConfigDict

METADATA_COLLECTION = "_metadata"
USERS_COLLECTION = "users"
REGISTRY_COLLECTION = "db_registry"


class IndexSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    collection: str
    key: str
    unique: bool = False


class ConsoleDatabase(BaseModel):
    """A database owned by the console, as recorded in the registry."""
    model_config = ConfigDict(frozen=True)

    name: str
    purpose: str
    access_level: str
    collections: tuple[str, ...]
    indexes: tuple[IndexSpec, ...] = ()

    def manifest(self) -> dict:
        return {
            "db_name": self.name,
            "purpose": self.purpose,
            "collections": [*self.collections, METADATA_COLLECTION],
            "access_level": self.access_level,
        }


AUTH_DB = ConsoleDatabase(
    name="auth_db",
    purpose="Console admin accounts",
    access_level="restricted",
    collections=(USERS_COLLECTION,),
    indexes=(IndexSpec(collection=USERS_COLLECTION, key="email", unique=True),),
)

SYSTEM_DB = ConsoleDatabase(
    name="system_db",
    purpose="Registry of console databases",
    access_level="system",
    collections=(REGISTRY_COLLECTION,),
)

ALL_DATABASES = (AUTH_DB, SYSTEM_DB)
