"""
Document store connection handling.

A single MongoClient is shared per process. The client owns the connection
pool; each collection operation borrows a connection for its duration.
"""

from typing import Optional

from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from . import config

_client: Optional[MongoClient] = None


def get_client() -> MongoClient:
    """Get the shared MongoClient, creating it on first use."""
    global _client
    if _client is None:
        _client = MongoClient(
            config.DOCUMENT_STORE_URI,
            maxPoolSize=config.DOCUMENT_STORE_MAX_POOL_SIZE,
            serverSelectionTimeoutMS=config.DOCUMENT_STORE_TIMEOUT_MS,
            socketTimeoutMS=config.DOCUMENT_STORE_TIMEOUT_MS,
            connectTimeoutMS=config.DOCUMENT_STORE_TIMEOUT_MS,
        )
    return _client


def close_client():
    """Close the shared client and its pool."""
    global _client
    if _client is not None:
        _client.close()
        _client = None


def get_collection(name: Optional[str] = None, client: Optional[MongoClient] = None) -> Collection:
    """Get the visit log collection (or another collection by name)."""
    client = client if client is not None else get_client()
    database = client[config.DOCUMENT_STORE_DATABASE]
    return database[name or config.VISIT_LOG_COLLECTION]


def health_check(client: Optional[MongoClient] = None) -> bool:
    """Ping the document store."""
    try:
        client = client if client is not None else get_client()
        client.admin.command("ping")
        return True
    except PyMongoError:
        return False
