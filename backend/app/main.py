"""
DocConsole Backend - FastAPI Application

An admin console for browsing, querying and batch-editing MongoDB collections.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pymongo.errors import PyMongoError

from app.config import get_settings
from app.database.connections import get_mongo_client, close_connections
from app.database.registry import sync_registry, create_indexes, ensure_bootstrap_admin
from app.routers import auth, batch, connections, documents, health
from app.services.connection_manager import reset_connection_manager

settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s | %(levelname)s | %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Startup:
    - Sync database registry
    - Create indexes
    - Create the bootstrap admin account

    Shutdown:
    - Close every browsed connection
    - Close the console database connections
    """
    logger.info("Starting up DocConsole Backend...")

    try:
        client = await get_mongo_client()
        await sync_registry(client)
        await create_indexes(client)
        await ensure_bootstrap_admin(client)
        logger.info("Database registry synced and indexes created")
    except PyMongoError as e:
        logger.warning("Database initialization warning: %s", e)

    yield

    logger.info("Shutting down DocConsole Backend...")
    reset_connection_manager()
    await close_connections()


app = FastAPI(
    title="DocConsole API",
    description="""
## Document Database Admin Console API

Browse, query and batch-edit documents in MongoDB collections.

### Features
- **Connections**: Open a collection with a credentials JSON document
- **Documents**: List a collection or run filtered, sorted, limited queries
- **Batch operations**: Update, duplicate or delete selected documents
- **Authentication**: Batch operations require an admin sign-in

### Authentication
Batch endpoints require a JWT token passed as a query parameter:
```
POST /connections/{id}/batch/delete?token=your_jwt_token
```

Obtain a token via `POST /auth/login`.
    """,
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:8501",  # Streamlit default
        "http://streamlit_frontend:8501",  # Docker network
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(auth.router)
app.include_router(connections.router)
app.include_router(documents.router)
app.include_router(batch.router)


@app.get("/", tags=["Root"])
async def root():
    """Root endpoint with API information."""
    return {
        "name": "DocConsole API",
        "version": "0.1.0",
        "docs": "/docs",
        "health": "/health",
    }
