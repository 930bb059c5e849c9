"""TF-IDF vectorization built from scratch.

The fit phase produces an immutable ``TfidfModel`` (sorted vocabulary plus an
IDF table); the transform phase turns any text into an L2-normalized vector
aligned with that vocabulary. Nothing is cached between fits: callers that
want a fresh vocabulary simply call :func:`fit` again.
"""

import math
from collections import Counter
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Mapping, Protocol, Sequence, Tuple

import numpy as np
import structlog

from libs.common.models import Document
from .tokenizer import tokenize

logger = structlog.get_logger("vectorizer.tfidf")

# Tokens present in a larger share of documents than this carry no signal.
MAX_DOCUMENT_FREQUENCY_RATIO = 0.95


@dataclass(frozen=True, eq=False)
class TfidfModel:
    """Result of fitting a corpus.

    Attributes
    - vocabulary: token -> dense index, assigned in sorted-token order
    - idf: inverse document frequency per vocabulary index (read-only)
    - document_count: number of documents the model was fitted on
    """

    vocabulary: Mapping[str, int]
    idf: np.ndarray
    document_count: int

    @property
    def dimension(self) -> int:
        return len(self.vocabulary)


def fit(documents: Sequence[Document]) -> TfidfModel:
    """Build vocabulary and IDF weights from ``documents``.

    Document frequency counts presence, not occurrences. Tokens are kept when
    they appear in at most 95% of the documents; an empty corpus yields an
    empty model.
    """
    document_frequency: Counter = Counter()
    for document in documents:
        document_frequency.update(set(tokenize(document.text)))

    total = len(documents)
    retained = sorted(
        token
        for token, count in document_frequency.items()
        if count >= 1 and count / total <= MAX_DOCUMENT_FREQUENCY_RATIO
    )

    vocabulary: Dict[str, int] = {token: index for index, token in enumerate(retained)}
    idf = np.array(
        [math.log(total / document_frequency[token]) for token in retained],
        dtype=np.float64,
    )
    idf.setflags(write=False)

    logger.info(
        "Built vocabulary",
        documents=total,
        vocabulary_size=len(vocabulary),
        distinct_tokens=len(document_frequency),
    )

    return TfidfModel(
        vocabulary=MappingProxyType(vocabulary),
        idf=idf,
        document_count=total,
    )


def transform(model: TfidfModel, text: str) -> np.ndarray:
    """Turn ``text`` into an L2-normalized TF-IDF vector under ``model``.

    TF is the token's share of all tokens in the text. Tokens outside the
    vocabulary are ignored. A text without vocabulary tokens maps to the zero
    vector.
    """
    vector = np.zeros(model.dimension, dtype=np.float64)
    tokens = tokenize(text)
    if not tokens:
        return vector

    total_tokens = len(tokens)
    for token, occurrences in Counter(tokens).items():
        index = model.vocabulary.get(token)
        if index is not None:
            vector[index] = (occurrences / total_tokens) * model.idf[index]

    norm = np.linalg.norm(vector)
    if norm > 0:
        vector /= norm
    return vector


def fit_transform(documents: Sequence[Document]) -> Tuple[TfidfModel, np.ndarray]:
    """Fit on ``documents`` and return the model with one vector row per document."""
    model = fit(documents)
    matrix = np.zeros((len(documents), model.dimension), dtype=np.float64)
    for row, document in enumerate(documents):
        matrix[row] = transform(model, document.text)

    logger.debug(
        "Generated document vectors",
        documents=len(documents),
        dimension=model.dimension,
    )
    return model, matrix


class Vectorizer(Protocol):
    """Fit/transform contract used by vector search.

    Implementations must not keep mutable state shared between calls; a
    cached-vocabulary variant would return a previously fitted model from
    ``fit`` instead.
    """

    def fit(self, documents: Sequence[Document]) -> TfidfModel:
        ...

    def transform(self, model: TfidfModel, text: str) -> np.ndarray:
        ...


class TfidfVectorizer:
    """Default vectorizer: fits from scratch on every call."""

    def fit(self, documents: Sequence[Document]) -> TfidfModel:
        return fit(documents)

    def transform(self, model: TfidfModel, text: str) -> np.ndarray:
        return transform(model, text)
