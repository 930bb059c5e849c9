"""Manticore Search document store over the JSON HTTP API."""

import time
from typing import Any, Callable, Dict, List, Optional

import httpx
import structlog

from libs.common.models import Document
from .base import (
    DocumentStore,
    DocumentStoreConnectionError,
    DocumentStoreQueryError,
    QueryHit,
    QueryResult,
    QuerySpec,
    document_from_fields,
)

logger = structlog.get_logger("document_store.manticore")

HEALTH_CHECK_TABLE = "test_health_check"
HEALTH_CHECK_TIMEOUT = 5.0


class ManticoreDocumentStore(DocumentStore):
    """Manticore-backed document store.

    All reads go through ``POST /search``. Transport errors and 5xx responses
    are retried with exponential backoff; 4xx responses fail immediately.
    """

    def __init__(
        self,
        base_url: str,
        table: str = "documents",
        timeout: float = 30.0,
        corpus_limit: int = 10000,
        retry_attempts: int = 3,
        retry_base_delay: float = 0.5,
        retry_max_delay: float = 5.0,
        client: Optional[httpx.Client] = None,
    ):
        """Initialize the Manticore document store.

        Args:
            base_url: Manticore HTTP endpoint, e.g. ``http://localhost:9308``
            table: Table holding the documents
            timeout: Per-request timeout in seconds
            corpus_limit: Maximum number of documents fetched for vector search
            retry_attempts: Total attempts per request (1 disables retries)
            retry_base_delay: First backoff delay in seconds
            retry_max_delay: Upper bound for a single backoff delay
            client: Optional preconfigured ``httpx.Client`` (mainly for tests)
        """
        self.base_url = base_url.rstrip("/")
        self.table = table
        self.corpus_limit = corpus_limit
        self.retry_attempts = max(1, retry_attempts)
        self.retry_base_delay = retry_base_delay
        self.retry_max_delay = retry_max_delay
        self.client = client or httpx.Client(base_url=self.base_url, timeout=timeout)

    def execute_query(self, spec: QuerySpec, offset: int, limit: int) -> QueryResult:
        payload = {
            "index": self.table,
            "query": spec.to_query(),
            "offset": offset,
            "limit": limit,
        }
        response = self._search(payload, operation=spec.kind)
        return self._parse_hits(response)

    def fetch_corpus(self) -> List[Document]:
        payload = {
            "index": self.table,
            "query": {"match_all": {}},
            "offset": 0,
            "limit": self.corpus_limit,
        }
        response = self._search(payload, operation="match_all")
        result = self._parse_hits(response)
        documents = [document_from_fields(hit.id, hit.fields) for hit in result.hits]

        logger.info("Fetched corpus", documents=len(documents), table=self.table)
        return documents

    def health_check(self) -> bool:
        """Send a trivial search; anything below HTTP 500 counts as healthy.

        A missing table answers 4xx, which still proves the server is up.
        """
        payload = {"index": HEALTH_CHECK_TABLE, "query": {"match_all": {}}, "limit": 1}
        try:
            response = self.client.post("/search", json=payload, timeout=HEALTH_CHECK_TIMEOUT)
        except httpx.HTTPError as e:
            logger.warning("Health check failed", error=str(e))
            return False

        if response.status_code >= 500:
            logger.warning("Health check failed", status_code=response.status_code)
            return False
        return True

    def close(self) -> None:
        self.client.close()

    def _search(self, payload: Dict[str, Any], operation: str) -> Dict[str, Any]:
        def _post() -> Dict[str, Any]:
            try:
                response = self.client.post("/search", json=payload)
            except httpx.TransportError as e:
                raise DocumentStoreConnectionError(f"search request failed: {e}") from e

            if response.status_code >= 500:
                raise DocumentStoreConnectionError(
                    f"search operation failed: HTTP {response.status_code}, {response.text}"
                )
            if response.status_code >= 400:
                raise DocumentStoreQueryError(
                    f"search operation failed: HTTP {response.status_code}, {response.text}"
                )

            try:
                return response.json()
            except ValueError as e:
                raise DocumentStoreQueryError(f"failed to parse search response: {e}") from e

        start_time = time.time()
        body = self._call_with_retry(_post, operation)
        logger.debug(
            "Search request completed",
            operation=operation,
            duration_ms=(time.time() - start_time) * 1000,
        )
        return body

    def _call_with_retry(self, func: Callable[[], Dict[str, Any]], operation_name: str) -> Dict[str, Any]:
        """Execute ``func`` with retry and backoff on connection errors."""
        for attempt in range(1, self.retry_attempts + 1):
            try:
                return func()
            except DocumentStoreConnectionError as exc:
                if attempt == self.retry_attempts:
                    logger.error(
                        "Operation failed after retries",
                        operation=operation_name,
                        attempts=attempt,
                        error=str(exc)
                    )
                    raise

                delay = min(self.retry_base_delay * (2 ** (attempt - 1)), self.retry_max_delay)
                logger.warning(
                    "Operation failed, retrying",
                    operation=operation_name,
                    attempt=attempt,
                    max_attempts=self.retry_attempts,
                    delay_seconds=delay,
                    error=str(exc)
                )
                time.sleep(delay)

        raise RuntimeError(f"Retry logic failed for {operation_name}")

    @staticmethod
    def _parse_hits(body: Dict[str, Any]) -> QueryResult:
        hits_section = body.get("hits")
        if not isinstance(hits_section, dict):
            raise DocumentStoreQueryError("search response is missing 'hits'")

        hits: List[QueryHit] = []
        for raw in hits_section.get("hits") or []:
            try:
                doc_id = int(raw["_id"])
            except (KeyError, TypeError, ValueError) as e:
                raise DocumentStoreQueryError(f"search hit has no usable _id: {raw!r}") from e
            hits.append(QueryHit(
                id=doc_id,
                fields=raw.get("_source") or {},
                score=float(raw.get("_score") or 0.0),
            ))

        total = hits_section.get("total")
        return QueryResult(hits=hits, total=int(total) if total is not None else len(hits))
