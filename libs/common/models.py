"""Data models shared by the vectorizer, document stores, and search service."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List


class SearchMode(str, Enum):
    """Supported search strategies."""
    BASIC = "basic"
    FULLTEXT = "fulltext"
    VECTOR = "vector"
    HYBRID = "hybrid"


@dataclass(frozen=True)
class Document:
    """A searchable document as returned by the document store."""

    id: int
    title: str = ""
    content: str = ""
    url: str = ""

    @property
    def text(self) -> str:
        """Title and content joined the way the vectorizer consumes them."""
        return f"{self.title} {self.content}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "url": self.url,
            "content": self.content,
        }


@dataclass(frozen=True)
class SearchResult:
    """A document paired with its relevance score."""

    document: Document
    score: float

    def with_score(self, score: float) -> "SearchResult":
        """Return a copy carrying ``score``."""
        return SearchResult(document=self.document, score=score)

    def to_dict(self) -> Dict[str, Any]:
        return {"document": self.document.to_dict(), "score": self.score}


@dataclass
class SearchResponse:
    """One page of ranked results."""

    documents: List[SearchResult] = field(default_factory=list)
    total: int = 0
    page: int = 1
    mode: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "documents": [result.to_dict() for result in self.documents],
            "total": self.total,
            "page": self.page,
            "mode": self.mode,
        }
