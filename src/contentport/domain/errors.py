"""Setup-phase errors that abort an import before reconciliation starts."""

from __future__ import annotations


class ContentImportError(RuntimeError):
    """Base class for errors surfaced to the caller of an import workflow."""


class ArchiveUnreadableError(ContentImportError):
    """Raised when the staged archive listings are missing or malformed."""


class ImportForbiddenError(ContentImportError):
    """Raised when an import is requested without an authenticated requester."""


class ImportSessionNotFoundError(ContentImportError):
    """Raised when no pending import session matches the given id."""


class JobNotFoundError(ContentImportError):
    """Raised when the job referenced by a pending session no longer exists."""
