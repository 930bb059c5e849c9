"""Common utilities shared across the search service and its libraries.

Includes:
- ``config``: Pydantic-based service configuration from environment variables.
- ``logging``: structured logging setup with structlog.
- ``metrics``: Prometheus metrics helpers and decorators.
- ``models``: documents, search results, and search modes.
- ``errors``: exceptions raised by the search core.

Import pattern:
- from libs.common.config import SearchConfig
- from libs.common.logging import configure_logging
"""
