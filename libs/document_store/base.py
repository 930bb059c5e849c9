"""Base document store interface.

Defines the contract the search service depends on, independent of the
backing search server. A store only needs to run full-text queries and hand
back the whole corpus for vector search; schema management and indexing live
elsewhere.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, NamedTuple

from libs.common.models import Document


@dataclass(frozen=True)
class QuerySpec:
    """A full-text query understood by the document store.

    ``kind`` is ``match`` (plain terms matched against every field) or
    ``query_string`` (the server's full-text query language).
    """

    kind: str
    text: str

    MATCH = "match"
    QUERY_STRING = "query_string"

    @classmethod
    def match_all_fields(cls, text: str) -> "QuerySpec":
        return cls(kind=cls.MATCH, text=text)

    @classmethod
    def query_string(cls, text: str) -> "QuerySpec":
        return cls(kind=cls.QUERY_STRING, text=text)

    def to_query(self) -> Dict[str, Any]:
        """Render the JSON query body fragment."""
        if self.kind == self.MATCH:
            return {"match": {"*": self.text}}
        if self.kind == self.QUERY_STRING:
            return {"query_string": self.text}
        raise ValueError(f"Unsupported query kind: {self.kind}")


class QueryHit(NamedTuple):
    """A single scored hit: document id, stored fields, and engine score."""
    id: int
    fields: Mapping[str, Any]
    score: float


class QueryResult(NamedTuple):
    """One page of hits plus the engine-reported total match count."""
    hits: List[QueryHit]
    total: int


def document_from_fields(doc_id: int, fields: Mapping[str, Any]) -> Document:
    """Build a ``Document`` from stored fields, ignoring non-string values."""

    def _text(name: str) -> str:
        value = fields.get(name)
        return value if isinstance(value, str) else ""

    return Document(
        id=int(doc_id),
        title=_text("title"),
        content=_text("content"),
        url=_text("url"),
    )


class DocumentStore(ABC):
    """Abstract base class for document stores."""

    @abstractmethod
    def execute_query(self, spec: QuerySpec, offset: int, limit: int) -> QueryResult:
        """Run ``spec`` and return hits in engine ranking order.

        Raises ``DocumentStoreError`` on failure.
        """
        pass

    @abstractmethod
    def fetch_corpus(self) -> List[Document]:
        """Return every stored document in a stable order.

        Raises ``DocumentStoreError`` on failure.
        """
        pass

    @abstractmethod
    def health_check(self) -> bool:
        """Check if the document store is reachable."""
        pass

    def close(self) -> None:
        """Release transport resources."""
        pass


class DocumentStoreError(Exception):
    """Base exception for document store operations."""
    pass


class DocumentStoreConnectionError(DocumentStoreError):
    """Connection error to the document store."""
    pass


class DocumentStoreQueryError(DocumentStoreError):
    """The document store rejected or failed a query."""
    pass
