"""
MongoDB Client Management

Builds the pooled client used by every DAO and handles its lifecycle
"""

from pymongo import MongoClient
from pymongo.errors import ConnectionFailure, ServerSelectionTimeoutError
from typing import Optional
import logging

from mflix.config import Config, config as default_config

logger = logging.getLogger(__name__)


def create_mongodb_client(settings: Optional[Config] = None) -> MongoClient:
    """
    Create a MongoDB client with connection pooling

    The pool size and write timeout are taken from configuration once, here,
    and never change for the lifetime of the client.

    Args:
        settings: Configuration to use (defaults to the global config)

    Returns:
        MongoClient: Connected MongoDB client

    Raises:
        ConnectionFailure: If unable to connect to MongoDB
    """
    settings = settings or default_config
    settings.validate()

    try:
        client = MongoClient(
            settings.mflix_db_uri,
            maxPoolSize=settings.pool_size,
            wTimeoutMS=settings.wtimeout_ms,
            w=settings.write_concern,
            serverSelectionTimeoutMS=settings.server_selection_timeout_ms,
        )

        # Test connection
        client.admin.command('ping')
        logger.info(f"Successfully connected to MongoDB, namespace {settings.mflix_ns}")

    except (ConnectionFailure, ServerSelectionTimeoutError) as e:
        logger.error(f"Failed to connect to MongoDB: {e}")
        raise

    return client


def close_mongodb_client(client: Optional[MongoClient]):
    """
    Close MongoDB client connection
    """
    if client is not None:
        client.close()
        logger.info("MongoDB client connection closed")
