"""Tests for the search manager dispatcher."""

import pytest
from prometheus_client import CollectorRegistry

from libs.common.errors import CollaboratorFailure, InvalidModeError, InvalidPaginationError
from libs.common.metrics import MetricsCollector
from libs.common.models import Document, SearchMode
from libs.document_store.memory import InMemoryDocumentStore
from libs.vectorizer.tfidf import TfidfVectorizer
from service_search.app.hybrid.search_manager import SearchManager, paginate, validate_mode
from tests.stores import FailingCorpusStore, FailingQueryStore, FailingStore


class RecordingStore(InMemoryDocumentStore):
    """In-memory store that records the offset and limit of each query."""

    def __init__(self, documents=()):
        super().__init__(documents)
        self.calls = []

    def execute_query(self, spec, offset, limit):
        self.calls.append((spec.kind, offset, limit))
        return super().execute_query(spec, offset, limit)


def result_ids(response):
    return [result.document.id for result in response.documents]


class TestPaginate:
    """Page windows over a ranked list."""

    def test_windows(self):
        items = list(range(25))

        assert paginate(items, 1, 10) == list(range(10))
        assert paginate(items, 2, 10) == list(range(10, 20))
        assert paginate(items, 3, 10) == list(range(20, 25))
        assert paginate(items, 4, 10) == []

    def test_empty(self):
        assert paginate([], 1, 10) == []


class TestValidateMode:
    """Mode validation."""

    def test_valid_modes(self):
        assert validate_mode("vector") is SearchMode.VECTOR
        assert validate_mode(SearchMode.HYBRID) is SearchMode.HYBRID

    def test_invalid_mode_names_the_value(self):
        with pytest.raises(InvalidModeError) as exc_info:
            validate_mode("foo")

        assert exc_info.value.mode == "foo"
        assert str(exc_info.value) == (
            "invalid search mode: foo. Valid modes are: basic, fulltext, vector, hybrid"
        )

    def test_modes_are_case_sensitive(self):
        with pytest.raises(InvalidModeError):
            validate_mode("Vector")


class TestSearchModes:
    """Dispatch to each mode."""

    def test_basic(self, memory_store):
        response = SearchManager(memory_store).search("red", "basic", 1, 10)

        assert response.mode == "basic"
        assert response.page == 1
        assert response.total == 2
        assert result_ids(response) == [1, 3]

    def test_fulltext_second_page(self, memory_store):
        response = SearchManager(memory_store).search("red", SearchMode.FULLTEXT, 2, 1)

        assert response.mode == "fulltext"
        assert response.total == 2
        assert result_ids(response) == [3]

    def test_vector(self, memory_store):
        response = SearchManager(memory_store).search("red car", "vector", 1, 10)

        assert response.mode == "vector"
        assert response.total == 2
        assert result_ids(response) == [1, 3]
        assert response.documents[0].score > response.documents[1].score > 0

    def test_vector_ranking_is_truncated_to_the_page_size(self):
        documents = [Document(id=i, title=f"Red thing{i}") for i in range(1, 6)]
        documents.append(Document(id=6, title="Blue sky"))
        manager = SearchManager(InMemoryDocumentStore(documents))

        first = manager.search("red", "vector", 1, 2)
        second = manager.search("red", "vector", 2, 2)

        assert result_ids(first) == [1, 2]
        assert first.total == 2
        assert second.documents == []
        assert second.total == 2

    def test_vector_empty_corpus(self):
        response = SearchManager(InMemoryDocumentStore()).search("red", "vector", 1, 10)

        assert response.documents == []
        assert response.total == 0

    def test_hybrid(self, memory_store):
        response = SearchManager(memory_store).search("red car", "hybrid", 1, 10)

        assert response.mode == "hybrid"
        assert response.total == 2
        assert result_ids(response) == [1, 3]
        assert response.documents[0].score == pytest.approx(1.0)

    def test_hybrid_pagination(self, memory_store):
        response = SearchManager(memory_store).search("red car", "hybrid", 2, 1)

        assert result_ids(response) == [3]
        assert response.total == 2

    def test_unknown_mode(self, memory_store):
        with pytest.raises(InvalidModeError):
            SearchManager(memory_store).search("red", "foo", 1, 10)

    @pytest.mark.parametrize("page,page_size", [(0, 10), (-1, 10), (1, 0)])
    def test_invalid_pagination(self, memory_store, page, page_size):
        with pytest.raises(InvalidPaginationError):
            SearchManager(memory_store).search("red", "basic", page, page_size)


class TestCollaboratorFailures:
    """Store failures in single and hybrid modes."""

    def test_basic_failure_is_wrapped(self, corpus):
        with pytest.raises(CollaboratorFailure) as exc_info:
            SearchManager(FailingQueryStore(corpus)).search("red", "basic", 1, 10)

        assert exc_info.value.operation == "basic search"
        assert str(exc_info.value).startswith("basic search failed: ")

    def test_fulltext_failure_is_wrapped(self, corpus):
        with pytest.raises(CollaboratorFailure, match="^full-text search failed"):
            SearchManager(FailingQueryStore(corpus)).search("red", "fulltext", 1, 10)

    def test_vector_corpus_failure_is_wrapped(self, corpus):
        with pytest.raises(CollaboratorFailure, match="corpus fetch"):
            SearchManager(FailingCorpusStore(corpus)).search("red", "vector", 1, 10)

    def test_hybrid_without_fulltext(self, corpus):
        response = SearchManager(FailingQueryStore(corpus)).search("red car", "hybrid", 1, 10)

        assert result_ids(response) == [1, 3]
        assert response.documents[0].score == pytest.approx(0.4)

    def test_hybrid_without_vector(self, corpus):
        response = SearchManager(FailingCorpusStore(corpus)).search("red car", "hybrid", 1, 10)

        assert result_ids(response) == [1, 3]
        assert response.documents[0].score == pytest.approx(0.6)
        assert response.documents[1].score == pytest.approx(0.3)

    def test_hybrid_with_both_failing(self, corpus):
        response = SearchManager(FailingStore(corpus)).search("red car", "hybrid", 1, 10)

        assert response.documents == []
        assert response.total == 0

    def test_hybrid_does_not_hide_internal_errors(self, memory_store):
        class BrokenVectorizer(TfidfVectorizer):
            def fit(self, documents):
                raise TypeError("bad corpus element")

        manager = SearchManager(memory_store, vectorizer_factory=BrokenVectorizer)

        with pytest.raises(TypeError, match="bad corpus element"):
            manager.search("red car", "hybrid", 1, 10)

    def test_health_check(self, corpus):
        assert SearchManager(InMemoryDocumentStore(corpus)).health_check() is True
        assert SearchManager(FailingStore(corpus)).health_check() is False


class TestMetrics:
    """Metrics recorded by the dispatcher."""

    def test_search_and_branch_failures_are_counted(self, corpus):
        registry = CollectorRegistry()
        manager = SearchManager(
            FailingQueryStore(corpus),
            metrics_collector=MetricsCollector("test", registry=registry),
        )

        manager.search("red car", "hybrid", 1, 10)

        assert registry.get_sample_value(
            "search_hybrid_branch_failures_total", {"branch": "fulltext"}
        ) == 1.0
        assert registry.get_sample_value(
            "search_requests_total", {"mode": "hybrid", "status": "success"}
        ) == 1.0

    def test_failed_search_is_counted(self, corpus):
        registry = CollectorRegistry()
        manager = SearchManager(
            FailingQueryStore(corpus),
            metrics_collector=MetricsCollector("test", registry=registry),
        )

        with pytest.raises(CollaboratorFailure):
            manager.search("red", "basic", 1, 10)

        assert registry.get_sample_value(
            "search_requests_total", {"mode": "basic", "status": "error"}
        ) == 1.0
        assert registry.get_sample_value(
            "document_store_operations_total", {"operation": "match", "status": "error"}
        ) == 1.0


class TestCollaboratorCalls:
    """Offsets, limits and vectorizer lifetimes passed to collaborators."""

    def test_store_receives_page_offset(self, corpus):
        store = RecordingStore(corpus)

        SearchManager(store).search("red", "basic", 3, 10)

        assert store.calls == [("match", 20, 10)]

    def test_hybrid_fetches_twice_the_page_size_from_the_start(self, corpus):
        store = RecordingStore(corpus)

        SearchManager(store).search("red", "hybrid", 3, 5)

        assert store.calls == [("query_string", 0, 10)]

    def test_fresh_vectorizer_per_vector_search(self, memory_store):
        created = []

        def factory():
            vectorizer = TfidfVectorizer()
            created.append(vectorizer)
            return vectorizer

        manager = SearchManager(memory_store, vectorizer_factory=factory)
        manager.search("red", "vector", 1, 10)
        manager.search("blue", "vector", 1, 10)

        assert len(created) == 2
        assert created[0] is not created[1]
