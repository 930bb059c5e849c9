"""Result fusion algorithms for hybrid search."""

from typing import Dict, List, Sequence, Tuple

import structlog

from libs.common.models import SearchResult

logger = structlog.get_logger("search_fusion")

DEFAULT_FULLTEXT_WEIGHT = 0.6
DEFAULT_VECTOR_WEIGHT = 0.4


def normalize_scores(results: Sequence[SearchResult]) -> List[SearchResult]:
    """Rescale scores into [0, 1] by dividing by the maximum score.

    When the maximum is not positive the scores are left as they are. A new
    list is always returned; ``results`` is never modified.
    """
    if not results:
        return []

    max_score = max(result.score for result in results)
    if max_score <= 0:
        return list(results)
    return [result.with_score(result.score / max_score) for result in results]


class RankFusionAlgorithm:
    """Base class for rank fusion algorithms."""

    def fuse_results(
        self,
        fulltext_results: Sequence[SearchResult],
        vector_results: Sequence[SearchResult],
    ) -> List[SearchResult]:
        """Fuse full-text and vector search results."""
        raise NotImplementedError


class WeightedScoreFusion(RankFusionAlgorithm):
    """Weighted score fusion over max-normalized scores.

    Each side is normalized independently, multiplied by its weight, and
    summed per document id. A document found by one side only keeps that
    side's weighted score.
    """

    def __init__(
        self,
        fulltext_weight: float = DEFAULT_FULLTEXT_WEIGHT,
        vector_weight: float = DEFAULT_VECTOR_WEIGHT,
    ):
        self.fulltext_weight = fulltext_weight
        self.vector_weight = vector_weight

    def fuse_results(
        self,
        fulltext_results: Sequence[SearchResult],
        vector_results: Sequence[SearchResult],
    ) -> List[SearchResult]:
        """Fuse results using weighted normalized scores."""

        # id -> (first-seen position, result carrying the fused score)
        fused: Dict[int, Tuple[int, SearchResult]] = {}

        for result in normalize_scores(fulltext_results):
            doc_id = result.document.id
            if doc_id in fused:
                continue
            fused[doc_id] = (len(fused), result.with_score(result.score * self.fulltext_weight))

        seen_vector_ids = set()
        for result in normalize_scores(vector_results):
            doc_id = result.document.id
            if doc_id in seen_vector_ids:
                continue
            seen_vector_ids.add(doc_id)

            weighted = result.score * self.vector_weight
            if doc_id in fused:
                position, existing = fused[doc_id]
                fused[doc_id] = (position, existing.with_score(existing.score + weighted))
            else:
                fused[doc_id] = (len(fused), result.with_score(weighted))

        ordered = sorted(fused.values(), key=lambda entry: (-entry[1].score, entry[0]))
        fused_results = [result for _, result in ordered]

        logger.info(
            "Weighted score fusion completed",
            fulltext_count=len(fulltext_results),
            vector_count=len(vector_results),
            fused_count=len(fused_results),
            fulltext_weight=self.fulltext_weight,
            vector_weight=self.vector_weight
        )

        return fused_results


def create_fusion_algorithm(algorithm: str = "weighted", **params) -> RankFusionAlgorithm:
    """Create a fusion algorithm instance."""

    if algorithm == "weighted":
        fulltext_weight = params.get("fulltext_weight", DEFAULT_FULLTEXT_WEIGHT)
        vector_weight = params.get("vector_weight", DEFAULT_VECTOR_WEIGHT)
        return WeightedScoreFusion(fulltext_weight, vector_weight)

    else:
        raise ValueError(f"Unknown fusion algorithm: {algorithm}")
