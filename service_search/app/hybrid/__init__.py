"""Search orchestration for basic, full-text, vector, and hybrid modes.

Includes the ``SearchManager`` which dispatches a query to its mode, runs
per-call TF-IDF vector search, and fuses full-text and vector rankings.
"""
