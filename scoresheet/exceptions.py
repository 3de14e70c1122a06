"""Custom exceptions for the Futsal Scoresheet.

All exceptions inherit from :class:`ScoresheetError` so callers can catch
the full family with a single ``except ScoresheetError`` clause.
"""
from typing import Optional


class ScoresheetError(Exception):
    """Base exception for all scoresheet errors."""


class PhaseError(ScoresheetError):
    """Raised when an operation is not allowed in the current match phase."""


class UnknownPlayerError(ScoresheetError):
    """Raised when a player id does not refer to a known roster entry."""


class BackendError(ScoresheetError):
    """Raised when the persistence backend fails to complete a request."""


class RosterValidationError(ScoresheetError):
    """Raised when roster entry data is invalid."""


class TeamValidationError(ScoresheetError):
    """Raised when team profile data is invalid."""


class ResultCardExportError(ScoresheetError):
    """Raised when a result card cannot be exported."""


class FinalizeError(ScoresheetError):
    """Raised when saving a finished match did not complete.

    The session stays in review with its ledger intact; ``progress`` tells
    how far the save got so a retry resumes from there.
    """

    def __init__(self, message: str, progress: Optional[object] = None):
        super().__init__(message)
        self.progress = progress


class LedgerFileError(ScoresheetError):
    """Raised when a saved match file is unreadable or not a match ledger."""
