"""Document search service."""
