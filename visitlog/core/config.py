"""
Visit log bridge configuration.
Relational visits live in SQLite, visit logs live in the document store.
"""

import os
from pathlib import Path

# Relational store (visits)
DB_PATH = os.getenv("DB_PATH", "./data/petclinic.db")

# Startup value; debug_enabled() re-reads the environment
DEBUG = os.getenv("DEBUG", "true").lower() == "true"

# Document store (visit logs)
DOCUMENT_STORE_URI = os.getenv("DOCUMENT_STORE_URI", "mongodb://localhost:27017")
DOCUMENT_STORE_DATABASE = os.getenv("DOCUMENT_STORE_DATABASE", "petclinic")
DOCUMENT_STORE_PROVIDER = os.getenv("DOCUMENT_STORE_PROVIDER", "mongo")  # mongo|memory
DOCUMENT_STORE_TIMEOUT_MS = int(os.getenv("DOCUMENT_STORE_TIMEOUT_MS", "5000"))
DOCUMENT_STORE_MAX_POOL_SIZE = int(os.getenv("DOCUMENT_STORE_MAX_POOL_SIZE", "50"))

# Collection name defaults to the persistence record name
VISIT_LOG_COLLECTION = os.getenv("VISIT_LOG_COLLECTION", "visitLogDocument")

# false loads the parent visit eagerly on every translation
LAZY_VISIT_RESOLUTION = os.getenv("LAZY_VISIT_RESOLUTION", "true").lower() == "true"

# Version string
VERSION = "1.0.0"

VALID_PROVIDERS = ["mongo", "memory"]


def get_db_path():
    """Get the SQLite path for the relational store."""
    return os.getenv("DB_PATH", DB_PATH)


def ensure_db_directory():
    """Ensure the database directory exists."""
    Path(get_db_path()).parent.mkdir(parents=True, exist_ok=True)


def debug_enabled():
    """Check if debug mode is enabled."""
    return os.getenv("DEBUG", "true").lower() == "true"


def get_document_store_provider():
    """Get document store provider (mongo|memory)."""
    return os.getenv("DOCUMENT_STORE_PROVIDER", DOCUMENT_STORE_PROVIDER)


def is_lazy_visit_resolution_enabled():
    """Check whether parent visits are resolved lazily."""
    return os.getenv("LAZY_VISIT_RESOLUTION", "true").lower() == "true"


def get_document_store():
    """Get configured visit log store implementation."""
    provider = get_document_store_provider()

    if provider == "memory":
        from ..log.repository import InMemoryVisitLogStore
        return InMemoryVisitLogStore()

    from ..log.repository import MongoVisitLogStore
    from .mongo import get_collection
    store = MongoVisitLogStore(get_collection())
    store.ensure_indexes()
    return store


def validate_config():
    """Validate document store configuration and return any issues."""
    issues = []

    provider = get_document_store_provider()
    if provider not in VALID_PROVIDERS:
        issues.append(f"Invalid DOCUMENT_STORE_PROVIDER: {provider}")

    if provider == "mongo" and not DOCUMENT_STORE_URI.startswith(("mongodb://", "mongodb+srv://")):
        issues.append(f"Invalid DOCUMENT_STORE_URI: {DOCUMENT_STORE_URI}")

    if not VISIT_LOG_COLLECTION.strip():
        issues.append("VISIT_LOG_COLLECTION must not be empty")

    if DOCUMENT_STORE_TIMEOUT_MS < 1:
        issues.append("DOCUMENT_STORE_TIMEOUT_MS must be >= 1")

    if DOCUMENT_STORE_MAX_POOL_SIZE < 1:
        issues.append("DOCUMENT_STORE_MAX_POOL_SIZE must be >= 1")

    return issues
