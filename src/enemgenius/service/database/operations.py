"""Server-level RavenDB operations: opening stores, database lifecycle, counts.

Every function takes an optional url and database; missing values come from
RavenDBConfig. Stores opened here for a single operation are always closed.
"""

import logging
from collections.abc import Iterable, Iterator
from contextlib import contextmanager

import requests
from ravendb import DocumentStore
from ravendb.serverwide.operations.common import DeleteDatabaseOperation

from enemgenius.service.database.config import RavenDBConfig
from enemgenius.service.database.models import ALL_COLLECTIONS, KNOWLEDGE_COLLECTION

logger = logging.getLogger(__name__)


def create_document_store(url: str | None = None, database: str | None = None) -> DocumentStore:
    """Open a long-lived DocumentStore; the caller owns closing it."""
    url, database = RavenDBConfig.resolve(url, database)
    store = DocumentStore([url], database)
    store.initialize()
    return store


@contextmanager
def _short_lived_store(url: str | None, database: str | None) -> Iterator[DocumentStore]:
    url, database = RavenDBConfig.resolve(url, database)
    store = DocumentStore([url], database)
    try:
        store.initialize()
        yield store
    finally:
        store.close()


def database_exists(url: str | None = None, database: str | None = None) -> bool:
    """Check whether the database can be opened and queried.

    Returns:
        bool: False for any connection or lookup failure
    """
    try:
        with _short_lived_store(url, database) as store:
            with store.open_session() as session:
                list(session.query().take(0))
        return True
    except Exception as e:
        logger.debug(f"Database check failed: {e}")
        return False


def create_database(url: str | None = None, database: str | None = None) -> None:
    """Create the database through the RavenDB admin endpoint.

    Raises:
        requests.HTTPError: If the server refuses the request
    """
    url, database = RavenDBConfig.resolve(url, database)
    logger.info(f"🗄️ Creating database '{database}' at {url}")
    response = requests.put(
        f"{url}/admin/databases",
        json={"DatabaseName": database, "Settings": {}, "Disabled": False},
        timeout=10,
    )
    response.raise_for_status()


def delete_database(url: str | None = None, database: str | None = None) -> None:
    """Hard-delete the database with every knowledge file, question and exam in it."""
    url, database = RavenDBConfig.resolve(url, database)
    logger.warning(f"🗑️ Deleting database '{database}' at {url}")
    with _short_lived_store(url, database) as store:
        store.maintenance.server.send(
            DeleteDatabaseOperation(database_name=database, hard_delete=True)
        )


def count_documents(
    collection: str = KNOWLEDGE_COLLECTION,
    url: str | None = None,
    database: str | None = None,
) -> int:
    """Count the documents of one collection (KnowledgeFiles by default)."""
    return collection_counts([collection], url, database)[collection]


def collection_counts(
    collections: Iterable[str] = ALL_COLLECTIONS,
    url: str | None = None,
    database: str | None = None,
) -> dict[str, int]:
    """Count the documents of several collections over one connection."""
    counts = {}
    with _short_lived_store(url, database) as store:
        with store.open_session() as session:
            for collection in collections:
                results = session.advanced.raw_query(f"from {collection}", object_type=dict)
                counts[collection] = len(list(results))
    return counts
