"""Error types raised by the search core.

Collaborator-level failures (HTTP, parsing) live with the document store in
``libs.document_store.base``; the dispatcher wraps them in
``CollaboratorFailure`` so callers only need to handle this hierarchy.
"""

from typing import Optional, Sequence


class SearchError(Exception):
    """Base exception for search operations."""
    pass


class InvalidModeError(SearchError, ValueError):
    """Unrecognized search mode."""

    def __init__(self, mode: str, valid_modes: Sequence[str]):
        self.mode = mode
        self.valid_modes = tuple(valid_modes)
        super().__init__(
            f"invalid search mode: {mode}. Valid modes are: {', '.join(self.valid_modes)}"
        )


class InvalidPaginationError(SearchError, ValueError):
    """Page number or page size outside the accepted range."""
    pass


class CollaboratorFailure(SearchError):
    """An external fetch/query call failed.

    ``operation`` names what the search core was doing (e.g. ``basic
    search``) and ``cause`` holds the underlying exception.
    """

    def __init__(self, operation: str, cause: Optional[BaseException] = None):
        self.operation = operation
        self.cause = cause
        message = f"{operation} failed"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)
