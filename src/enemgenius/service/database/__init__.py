"""Database configuration and connection management for RavenDB.

This package provides a unified interface for RavenDB operations:
- Configuration management (RavenDBConfig)
- Database lifecycle (create, delete, existence check, per-collection counts)
- KnowledgeStore: explicitly constructed persistence client for knowledge
  files, questions and exams

Usage:
    from enemgenius.service.database import KnowledgeStore

    with KnowledgeStore() as store:
        files = store.get_selected_files()
"""

# Re-export public API
from enemgenius.service.database.config import RavenDBConfig
from enemgenius.service.database.operations import (
    collection_counts,
    count_documents,
    create_database,
    create_document_store,
    database_exists,
    delete_database,
)
from enemgenius.service.database.storage import KnowledgeStore

__all__ = [
    # Config
    "RavenDBConfig",
    # Operations
    "create_document_store",
    "database_exists",
    "create_database",
    "delete_database",
    "count_documents",
    "collection_counts",
    # Storage
    "KnowledgeStore",
]
