"""Error taxonomy for the scheduling core.

Every error carries a human-readable, domain-specific message. The
``http_status`` attribute tells the HTTP layer how to surface it.
Only TransientStoreError is retryable.
"""

from __future__ import annotations


class SchedulingError(Exception):
    """Base exception for all scheduling and scoring errors."""

    http_status: int = 500
    retryable: bool = False


class ValidationError(SchedulingError):
    """Preconditions not met: too few teams, short rosters, wrong status."""

    http_status = 422


class NotFoundError(SchedulingError):
    """Competition or match does not exist."""

    http_status = 404


class StateConflictError(SchedulingError):
    """Schedule already exists, or competition is not ACTIVE for scoring."""

    http_status = 409


class TransientStoreError(SchedulingError):
    """Persistence failed in a way that may succeed on retry."""

    http_status = 503
    retryable = True
