"""Document store collaborators for the search service.

The search core only needs two calls from a store: run a full-text query and
fetch the whole corpus. ``ManticoreDocumentStore`` talks to a Manticore
server; ``InMemoryDocumentStore`` serves tests and local development.
"""

from .base import (
    DocumentStore,
    DocumentStoreConnectionError,
    DocumentStoreError,
    DocumentStoreQueryError,
    QueryHit,
    QueryResult,
    QuerySpec,
    document_from_fields,
)
from .factory import (
    DocumentStoreFactory,
    DocumentStoreType,
    create_document_store,
    create_document_store_from_config,
)
from .manticore import ManticoreDocumentStore
from .memory import InMemoryDocumentStore

__all__ = [
    "DocumentStore",
    "DocumentStoreConnectionError",
    "DocumentStoreError",
    "DocumentStoreFactory",
    "DocumentStoreQueryError",
    "DocumentStoreType",
    "InMemoryDocumentStore",
    "ManticoreDocumentStore",
    "QueryHit",
    "QueryResult",
    "QuerySpec",
    "create_document_store",
    "create_document_store_from_config",
    "document_from_fields",
]
