"""Shared libraries for the document search service.

Subpackages:
- ``libs.common``: configuration, logging, metrics, models, and errors.
- ``libs.vectorizer``: TF-IDF vectorizer and vector similarity search.
- ``libs.document_store``: document store abstraction and concrete backends.

Notes:
- Avoid service-specific logic; keep modules cohesive and broadly useful.
"""
