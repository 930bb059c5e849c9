"""Service-local runtime helpers (metrics)."""
