"""Tests for hybrid result fusion."""

import pytest

from libs.common.models import Document, SearchResult
from service_search.app.ranking.fusion import (
    WeightedScoreFusion,
    create_fusion_algorithm,
    normalize_scores,
)


def result(doc_id: int, score: float) -> SearchResult:
    return SearchResult(document=Document(id=doc_id, title=f"Doc {doc_id}"), score=score)


def ids(results):
    return [r.document.id for r in results]


def scores(results):
    return [r.score for r in results]


class TestNormalizeScores:
    """Max normalization."""

    def test_divides_by_maximum(self):
        original = [result(1, 3.0), result(2, 1.5)]
        normalized = normalize_scores(original)

        assert scores(normalized) == pytest.approx([1.0, 0.5])
        assert scores(original) == [3.0, 1.5]

    def test_non_positive_maximum_is_unchanged(self):
        original = [result(1, 0.0), result(2, 0.0)]
        normalized = normalize_scores(original)

        assert scores(normalized) == [0.0, 0.0]
        assert normalized is not original

    def test_empty(self):
        assert normalize_scores([]) == []


class TestWeightedScoreFusion:
    """Weighted fusion of full-text and vector rankings."""

    def setup_method(self):
        self.fusion = WeightedScoreFusion()

    def test_fulltext_only(self):
        fused = self.fusion.fuse_results([result(1, 10.0), result(2, 5.0)], [])

        assert ids(fused) == [1, 2]
        assert scores(fused) == pytest.approx([0.6, 0.3])

    def test_vector_only(self):
        fused = self.fusion.fuse_results([], [result(1, 0.5), result(2, 0.25)])

        assert ids(fused) == [1, 2]
        assert scores(fused) == pytest.approx([0.4, 0.2])

    def test_overlapping_documents_are_summed(self):
        fulltext = [result(1, 10.0), result(2, 5.0)]
        vector = [result(2, 0.8), result(3, 0.4)]

        fused = self.fusion.fuse_results(fulltext, vector)

        assert ids(fused) == [2, 1, 3]
        assert scores(fused) == pytest.approx([0.7, 0.6, 0.2])

    def test_ties_keep_first_seen_order(self):
        fulltext = [result(5, 1.0)]
        vector = [result(7, 1.5)]
        fusion = WeightedScoreFusion(fulltext_weight=0.5, vector_weight=0.5)

        fused = fusion.fuse_results(fulltext, vector)

        assert ids(fused) == [5, 7]
        assert scores(fused) == pytest.approx([0.5, 0.5])

    def test_each_document_appears_once(self):
        fulltext = [result(1, 4.0), result(1, 2.0), result(2, 2.0)]
        vector = [result(2, 1.0), result(2, 0.5)]

        fused = self.fusion.fuse_results(fulltext, vector)

        assert ids(fused) == [2, 1]
        assert scores(fused) == pytest.approx([0.7, 0.6])

    def test_both_empty(self):
        assert self.fusion.fuse_results([], []) == []


class TestCreateFusionAlgorithm:
    """Fusion factory."""

    def test_weighted_with_custom_weights(self):
        fusion = create_fusion_algorithm("weighted", fulltext_weight=0.3, vector_weight=0.7)

        assert isinstance(fusion, WeightedScoreFusion)
        assert fusion.fulltext_weight == 0.3
        assert fusion.vector_weight == 0.7

    def test_unknown_algorithm(self):
        with pytest.raises(ValueError, match="Unknown fusion algorithm"):
            create_fusion_algorithm("rrf")
