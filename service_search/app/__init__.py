"""Search service package.

Layout:
- ``api``: HTTP endpoints for search and service status.
- ``hybrid``: mode dispatch, pagination, and hybrid orchestration.
- ``ranking``: score normalization and result fusion.
- ``runtime``: service-local metrics and runtime helpers.
"""
