"""Search manager dispatching queries to the four search modes.

``basic`` and ``fulltext`` are answered by the document store. ``vector``
fits a TF-IDF model over the store's full corpus on every call and ranks by
cosine similarity. ``hybrid`` runs full-text and vector search, fuses the two
rankings with weighted normalized scores, and paginates the fused list.
"""

import time
from typing import Callable, List, Optional, Sequence, TypeVar, Union

import structlog

from libs.common.config import SearchConfig
from libs.common.errors import CollaboratorFailure, InvalidModeError, InvalidPaginationError
from libs.common.metrics import MetricsCollector
from libs.common.tracing import trace_function
from libs.common.models import Document, SearchMode, SearchResponse, SearchResult
from libs.document_store.base import DocumentStore, QueryResult, QuerySpec, document_from_fields
from libs.vectorizer.search import vector_search
from libs.vectorizer.tfidf import TfidfVectorizer, Vectorizer
from ..ranking.fusion import RankFusionAlgorithm, create_fusion_algorithm

logger = structlog.get_logger("search_service.search_manager")

VALID_MODES = tuple(mode.value for mode in SearchMode)

T = TypeVar("T")


def validate_mode(mode: Union[str, SearchMode]) -> SearchMode:
    """Return the ``SearchMode`` for ``mode`` or raise ``InvalidModeError``.

    Only the exact lower-case names are accepted.
    """
    if isinstance(mode, SearchMode):
        return mode
    for candidate in SearchMode:
        if mode == candidate.value:
            return candidate
    raise InvalidModeError(str(mode), VALID_MODES)


def paginate(items: Sequence[T], page: int, page_size: int) -> List[T]:
    """Return the 1-indexed ``page`` of ``items``.

    The window is empty when it starts past the end and truncated when it
    runs past the end.
    """
    start = (page - 1) * page_size
    if start >= len(items):
        return []
    return list(items[start:start + page_size])


class SearchManager:
    """Dispatches search requests to the configured strategies.

    Responsibilities
    - Validate mode and pagination input
    - Delegate basic/full-text queries to the document store
    - Run per-call TF-IDF vector search over the store's corpus
    - Fuse full-text and vector rankings for hybrid search
    """

    def __init__(
        self,
        document_store: DocumentStore,
        config: Optional[SearchConfig] = None,
        fusion_algorithm: Optional[RankFusionAlgorithm] = None,
        vectorizer_factory: Callable[[], Vectorizer] = TfidfVectorizer,
        metrics_collector: Optional[MetricsCollector] = None,
    ):
        """Construct a search manager.

        Parameters
        - document_store: collaborator answering queries and corpus fetches
        - config: ``SearchConfig`` supplying fusion weights
        - fusion_algorithm: overrides the algorithm built from ``config``
        - vectorizer_factory: builds a fresh vectorizer for each vector search
        - metrics_collector: optional Prometheus collector
        """
        self.document_store = document_store
        self.config = config or SearchConfig()
        self.fusion_algorithm = fusion_algorithm or create_fusion_algorithm(
            "weighted",
            fulltext_weight=self.config.ml_search_fulltext_weight,
            vector_weight=self.config.ml_search_vector_weight,
        )
        self.vectorizer_factory = vectorizer_factory
        self.metrics_collector = metrics_collector

    @trace_function("search.dispatch", component="search_manager")
    def search(
        self,
        query: str,
        mode: Union[str, SearchMode] = SearchMode.BASIC,
        page: int = 1,
        page_size: int = 10,
    ) -> SearchResponse:
        """Run ``query`` in ``mode`` and return the requested page.

        Raises ``InvalidModeError`` for an unknown mode,
        ``InvalidPaginationError`` for ``page`` or ``page_size`` below 1, and
        ``CollaboratorFailure`` when the store fails outside hybrid mode.
        """
        search_mode = validate_mode(mode)
        if page < 1:
            raise InvalidPaginationError(f"page must be >= 1, got {page}")
        if page_size < 1:
            raise InvalidPaginationError(f"page_size must be >= 1, got {page_size}")

        handlers = {
            SearchMode.BASIC: self.basic_search,
            SearchMode.FULLTEXT: self.fulltext_search,
            SearchMode.VECTOR: self.vector_search,
            SearchMode.HYBRID: self.hybrid_search,
        }

        start_time = time.time()
        try:
            response = handlers[search_mode](query, page, page_size)
        except Exception:
            self._record_search(search_mode, time.time() - start_time, "error")
            raise

        duration = time.time() - start_time
        self._record_search(search_mode, duration, "success")
        logger.info(
            "Search completed",
            query=query,
            mode=search_mode.value,
            page=page,
            page_size=page_size,
            results_count=len(response.documents),
            total=response.total,
            duration_ms=duration * 1000,
        )
        return response

    def basic_search(self, query: str, page: int, page_size: int) -> SearchResponse:
        """Match ``query`` against all fields in the document store."""
        return self._store_search(
            QuerySpec.match_all_fields(query), SearchMode.BASIC, "basic search", page, page_size
        )

    def fulltext_search(self, query: str, page: int, page_size: int) -> SearchResponse:
        """Run ``query`` through the store's full-text query language."""
        return self._store_search(
            QuerySpec.query_string(query), SearchMode.FULLTEXT, "full-text search", page, page_size
        )

    def vector_search(self, query: str, page: int, page_size: int) -> SearchResponse:
        """Rank the store's whole corpus by TF-IDF cosine similarity.

        The ranking is truncated to ``page_size`` before pagination, so only
        page 1 can be non-empty. ``total`` is the size of the truncated ranking.
        """
        corpus = self._fetch_corpus()
        if not corpus:
            return SearchResponse(documents=[], total=0, page=page, mode=SearchMode.VECTOR.value)

        ranked = vector_search(query, corpus, page_size, vectorizer=self.vectorizer_factory())
        return SearchResponse(
            documents=paginate(ranked, page, page_size),
            total=len(ranked),
            page=page,
            mode=SearchMode.VECTOR.value,
        )

    def hybrid_search(self, query: str, page: int, page_size: int) -> SearchResponse:
        """Fuse full-text and vector rankings.

        Each side fetches ``page_size * 2`` candidates from page 1. A side whose
        collaborator call fails contributes no results; other errors propagate.
        ``total`` is the size of the fused list.
        """
        candidates = page_size * 2

        fulltext_results = self._hybrid_branch(
            "fulltext", lambda: self.fulltext_search(query, 1, candidates).documents
        )
        vector_results = self._hybrid_branch(
            "vector", lambda: self.vector_search(query, 1, candidates).documents
        )

        fused = self.fusion_algorithm.fuse_results(fulltext_results, vector_results)
        return SearchResponse(
            documents=paginate(fused, page, page_size),
            total=len(fused),
            page=page,
            mode=SearchMode.HYBRID.value,
        )

    def health_check(self) -> bool:
        """Check that the document store answers."""
        try:
            return self.document_store.health_check()
        except Exception as e:
            logger.error("Health check failed", error=str(e))
            return False

    def close(self) -> None:
        """Release the document store's resources."""
        self.document_store.close()

    def _hybrid_branch(
        self, branch: str, run: Callable[[], List[SearchResult]]
    ) -> List[SearchResult]:
        try:
            return run()
        except CollaboratorFailure as e:
            logger.error("Hybrid branch failed, continuing without it", branch=branch, error=str(e))
            if self.metrics_collector:
                self.metrics_collector.record_hybrid_branch_failure(branch)
            return []

    def _store_search(
        self,
        spec: QuerySpec,
        mode: SearchMode,
        operation: str,
        page: int,
        page_size: int,
    ) -> SearchResponse:
        offset = (page - 1) * page_size
        try:
            result: QueryResult = self.document_store.execute_query(spec, offset, page_size)
        except Exception as e:
            self._record_store_operation(spec.kind, "error")
            logger.error(f"{operation} failed", query=spec.text, error=str(e))
            raise CollaboratorFailure(operation, e) from e
        self._record_store_operation(spec.kind, "success")

        documents = [
            SearchResult(document=document_from_fields(hit.id, hit.fields), score=hit.score)
            for hit in result.hits
        ]
        return SearchResponse(documents=documents, total=result.total, page=page, mode=mode.value)

    def _fetch_corpus(self) -> List[Document]:
        try:
            corpus = self.document_store.fetch_corpus()
        except Exception as e:
            self._record_store_operation("fetch_corpus", "error")
            logger.error("Corpus fetch failed", error=str(e))
            raise CollaboratorFailure("corpus fetch for vector search", e) from e
        self._record_store_operation("fetch_corpus", "success")
        return corpus

    def _record_search(self, mode: SearchMode, duration: float, status: str) -> None:
        if self.metrics_collector:
            self.metrics_collector.record_search(mode.value, duration, status)

    def _record_store_operation(self, operation: str, status: str) -> None:
        if self.metrics_collector:
            self.metrics_collector.record_document_store_operation(operation, status)
