"""API subpackage for the search service.

Routers expose search and status endpoints. The transport layer remains thin
and delegates to ``SearchManager``.
"""
