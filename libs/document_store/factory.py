"""Document store factory.

Centralizes creation of concrete ``DocumentStore`` backends so the search
service does not depend on implementation details.
"""

from enum import Enum
from typing import Any, Dict

import structlog

from libs.common.config import SearchConfig
from .base import DocumentStore
from .manticore import ManticoreDocumentStore
from .memory import InMemoryDocumentStore

logger = structlog.get_logger("document_store.factory")


class DocumentStoreType(Enum):
    """Supported document store types."""
    MANTICORE = "manticore"
    MEMORY = "memory"


class DocumentStoreFactory:
    """Factory for creating document store instances."""

    @staticmethod
    def create(store_type: DocumentStoreType, config: Dict[str, Any]) -> DocumentStore:
        """Create a document store instance.

        Parameters
        - store_type: A ``DocumentStoreType`` enum value
        - config: Backend-specific parameters (e.g., ``base_url`` for Manticore)
        """
        if store_type == DocumentStoreType.MANTICORE:
            base_url = config.get("base_url")
            if not base_url:
                raise ValueError("Manticore requires 'base_url' in config")

            return ManticoreDocumentStore(
                base_url=base_url,
                table=config.get("table", "documents"),
                timeout=config.get("timeout", 30.0),
                corpus_limit=config.get("corpus_limit", 10000),
                retry_attempts=config.get("retry_attempts", 3),
                retry_base_delay=config.get("retry_base_delay", 0.5),
                retry_max_delay=config.get("retry_max_delay", 5.0),
            )

        elif store_type == DocumentStoreType.MEMORY:
            return InMemoryDocumentStore(config.get("documents", ()))

        else:
            raise ValueError(f"Unsupported document store type: {store_type}")


def create_document_store(store_type: str, config: Dict[str, Any]) -> DocumentStore:
    """Convenience function to create a document store."""
    try:
        store_type_enum = DocumentStoreType(store_type)
    except ValueError:
        raise ValueError(f"Unsupported document store type: {store_type}")
    return DocumentStoreFactory.create(store_type_enum, config)


def create_document_store_from_config(config: SearchConfig) -> DocumentStore:
    """Create the document store selected by ``SearchConfig``."""
    store_config: Dict[str, Any] = {
        "base_url": config.manticore_base_url,
        "table": config.ml_manticore_table,
        "timeout": config.ml_manticore_timeout,
        "corpus_limit": config.ml_corpus_fetch_limit,
        "retry_attempts": config.ml_manticore_retry_attempts,
        "retry_base_delay": config.ml_manticore_retry_base_delay,
        "retry_max_delay": config.ml_manticore_retry_max_delay,
    }

    logger.info(
        "Creating document store",
        backend=config.ml_document_store_backend,
        base_url=store_config["base_url"],
    )
    return create_document_store(config.ml_document_store_backend, store_config)
