"""Configuration management for the document search service.

This module centralizes environment-driven configuration for the search
service and its document store collaborator. It builds on
``pydantic_settings.BaseSettings`` so configuration can be provided via
environment variables, ``.env`` files, or defaults.

Highlights
- Strongly-typed settings with sensible defaults
- One place to discover commonly used environment variables
- Small service-specific subclasses to keep concerns clear

Usage
- Inject the appropriate config in your service entrypoint:
  ``config = SearchConfig()``
- Or select dynamically: ``config = get_config("search")``
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BaseConfig(BaseSettings):
    """Base configuration class for all services.

    Parameters are read from the process environment with the given names.
    Defaults keep local development convenient while still being explicit.

    Notes
    - Add new shared settings here so downstream services inherit them.
    - Prefer a typed field over reading ``os.environ`` directly.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    # Environment
    ml_env: str = Field(default="local")

    # Logging
    ml_log_level: str = Field(default="INFO")
    ml_log_format: str = Field(default="json")

    # Observability
    ml_tracing_enabled: bool = Field(default=False)
    ml_otel_exporter: str = Field(default="http://localhost:4318/v1/traces")


class SearchConfig(BaseConfig):
    """Configuration for the search service.

    Adds the HTTP port, the Manticore collaborator endpoint and transport
    knobs, and the ranking weights used by hybrid fusion.
    """

    ml_search_port: int = Field(default=8080)
    ml_search_max_page_size: int = Field(default=100)

    # Document store
    ml_document_store_backend: str = Field(default="manticore")
    ml_manticore_host: str = Field(default="localhost")
    ml_manticore_port: int = Field(default=9308)
    ml_manticore_table: str = Field(default="documents")
    ml_manticore_timeout: float = Field(default=30.0)
    ml_manticore_retry_attempts: int = Field(default=3)
    ml_manticore_retry_base_delay: float = Field(default=0.5)
    ml_manticore_retry_max_delay: float = Field(default=5.0)
    ml_corpus_fetch_limit: int = Field(default=10000)

    # Hybrid fusion
    ml_search_fulltext_weight: float = Field(default=0.6)
    ml_search_vector_weight: float = Field(default=0.4)

    @property
    def manticore_base_url(self) -> str:
        """Base URL of the Manticore JSON API."""
        return f"http://{self.ml_manticore_host}:{self.ml_manticore_port}"


def get_config(service_name: str) -> BaseConfig:
    """Get configuration for a specific service.

    Parameters
    - service_name: Literal name, currently only ``search``.

    Returns
    - A concrete ``BaseConfig`` subclass pre-wired to read the right env vars.
    """
    config_map = {
        "search": SearchConfig,
    }

    # Default to ``BaseConfig`` to avoid surprising crashes for unknown names.
    config_class = config_map.get(service_name, BaseConfig)
    return config_class()

