from __future__ import annotations


class PortalError(Exception):
    """Base class for every failure the portal reports back to a user."""


class ValidationError(PortalError):
    """Raised before any write when a required field is missing or malformed."""


class TransitionError(ValidationError):
    """Raised when a document is asked to move out of a state that does not allow it."""


class PersistenceError(PortalError):
    """The store rejected a read or a write."""


class ConflictError(PersistenceError):
    """A versioned write was based on a stale copy of the document."""


class NotFoundError(PersistenceError):
    pass


class AccessDeniedError(PortalError):
    pass
