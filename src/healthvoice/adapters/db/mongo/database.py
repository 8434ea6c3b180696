"""
MongoDB connection bootstrap (Motor client + Beanie document registration).
"""

import logging

import certifi
from beanie import init_beanie
from motor.motor_asyncio import AsyncIOMotorClient

from healthvoice.core.config import DatabaseSettings

from .models import DOCUMENT_MODELS

logger = logging.getLogger("healthvoice.db")


async def init_database(settings: DatabaseSettings) -> AsyncIOMotorClient:
    """Connect to MongoDB and register the Beanie models."""
    # Enable TLS only for Atlas SRV URIs
    if settings.uri.startswith("mongodb+srv://"):
        client = AsyncIOMotorClient(
            settings.uri,
            serverSelectionTimeoutMS=15000,
            tls=True,
            tlsCAFile=certifi.where(),
            tlsAllowInvalidCertificates=False,
        )
    else:
        client = AsyncIOMotorClient(settings.uri, serverSelectionTimeoutMS=15000)

    await init_beanie(database=client[settings.db_name], document_models=DOCUMENT_MODELS)
    logger.info("Database connection established (db=%s)", settings.db_name)
    return client
