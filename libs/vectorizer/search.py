"""Vector similarity search over an in-memory corpus."""

from typing import List, Optional, Sequence

import structlog

from libs.common.metrics import measure_time
from libs.common.models import Document, SearchResult
from .similarity import cosine_similarity
from .tfidf import TfidfVectorizer, Vectorizer

logger = structlog.get_logger("vectorizer.search")


@measure_time("vector_search")
def vector_search(
    query: str,
    corpus: Sequence[Document],
    limit: int = 0,
    vectorizer: Optional[Vectorizer] = None,
) -> List[SearchResult]:
    """Rank ``corpus`` against ``query`` by TF-IDF cosine similarity.

    The vocabulary is fitted on ``corpus`` for this call only. Documents whose
    similarity is not strictly positive are dropped. Results are sorted by
    descending score (stable for ties) and truncated to ``limit`` when it is
    positive.
    """
    if not corpus:
        return []

    vectorizer = vectorizer or TfidfVectorizer()
    model = vectorizer.fit(corpus)
    query_vector = vectorizer.transform(model, query)

    results: List[SearchResult] = []
    for document in corpus:
        similarity = cosine_similarity(query_vector, vectorizer.transform(model, document.text))
        if similarity > 0:
            results.append(SearchResult(document=document, score=similarity))

    results.sort(key=lambda result: result.score, reverse=True)

    if limit > 0:
        results = results[:limit]

    logger.debug(
        "Vector search completed",
        corpus_size=len(corpus),
        vocabulary_size=model.dimension,
        matched=len(results),
    )
    return results
