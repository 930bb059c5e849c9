"""Tests for the document search service.

Covers the TF-IDF vectorizer, result fusion, the search manager, the document
store backends (Manticore through ``httpx.MockTransport``), and the HTTP API.
No external services are required.
"""
