"""Search ranking and result fusion components.

Contents
- ``fusion``: score normalization and weighted fusion of full-text and
  vector rankings for hybrid search
"""
