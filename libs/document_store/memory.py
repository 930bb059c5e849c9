"""In-memory document store used for tests and local development."""

from collections import Counter
from typing import Iterable, List

import structlog

from libs.common.models import Document
from libs.vectorizer.tokenizer import tokenize
from .base import DocumentStore, QueryHit, QueryResult, QuerySpec

logger = structlog.get_logger("document_store.memory")


class InMemoryDocumentStore(DocumentStore):
    """Keeps documents in a list and scores queries by token overlap.

    Both query kinds behave the same here: the query is tokenized and a
    document scores the number of its title/content tokens that occur in the
    query. Documents with a zero score are not returned.
    """

    def __init__(self, documents: Iterable[Document] = ()):
        self._documents: List[Document] = list(documents)

    def add_documents(self, documents: Iterable[Document]) -> None:
        self._documents.extend(documents)

    def execute_query(self, spec: QuerySpec, offset: int, limit: int) -> QueryResult:
        query_tokens = set(tokenize(spec.text))

        hits: List[QueryHit] = []
        for document in self._documents:
            counts = Counter(tokenize(document.text))
            score = sum(counts[token] for token in query_tokens)
            if score > 0:
                hits.append(QueryHit(id=document.id, fields=document.to_dict(), score=float(score)))

        hits.sort(key=lambda hit: hit.score, reverse=True)
        page = hits[offset:offset + limit] if limit > 0 else hits[offset:]

        logger.debug("In-memory query executed", kind=spec.kind, matched=len(hits), returned=len(page))
        return QueryResult(hits=page, total=len(hits))

    def fetch_corpus(self) -> List[Document]:
        return list(self._documents)

    def health_check(self) -> bool:
        return True
