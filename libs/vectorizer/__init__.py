"""TF-IDF vectorizer and vector similarity search.

Contents
- ``tokenizer``: text normalization
- ``tfidf``: fit/transform and the immutable ``TfidfModel``
- ``similarity``: cosine similarity
- ``search``: ranks a corpus against a query
"""

from .search import vector_search
from .similarity import cosine_similarity
from .tfidf import TfidfModel, TfidfVectorizer, Vectorizer, fit, fit_transform, transform
from .tokenizer import tokenize

__all__ = [
    "TfidfModel",
    "TfidfVectorizer",
    "Vectorizer",
    "cosine_similarity",
    "fit",
    "fit_transform",
    "tokenize",
    "transform",
    "vector_search",
]
