"""
API Routers module.
"""
from app.routers import auth, batch, connections, documents, health

__all__ = ["auth", "batch", "connections", "documents", "health"]
