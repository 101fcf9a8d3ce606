"""
core/database.py -- MongoDB connection handle for the Inventory API.

One AsyncIOMotorClient per process, created in the application lifespan and
closed on shutdown. Repositories (auth/store.py, inventory/store.py) receive
the database handle, never the URI, so tests can hand them an in-memory
double with the same API.

Layer rule: core/ is the kernel. No imports from api/, auth/, or inventory/.
"""

from __future__ import annotations

import logging

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from core.config import Settings

logger = logging.getLogger("inventory.store")


def create_client(settings: Settings) -> AsyncIOMotorClient:
    """Build the Motor client. No I/O happens until the first operation."""
    return AsyncIOMotorClient(settings.mongodb_uri, uuidRepresentation="standard")


def get_database(client: AsyncIOMotorClient, settings: Settings) -> AsyncIOMotorDatabase:
    logger.info("Using MongoDB database %r", settings.mongodb_db)
    return client[settings.mongodb_db]
