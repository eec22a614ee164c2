"""
Domain error taxonomy.

Services and the record store raise these; ``portal.main`` maps each one to
a structured ``{"error": ...}`` response using ``status_code``. Route
handlers never build error responses themselves.
"""


class PortalError(Exception):
    """Base class for every error the portal turns into an HTTP response."""
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class Unauthenticated(PortalError):
    """No principal (or the wrong kind) is bound to the session."""
    status_code = 401

    def __init__(self, message: str = "Authentication required", login_path: str = "/login"):
        super().__init__(message)
        self.login_path = login_path


class ValidationError(PortalError):
    """Malformed input: bad score, wrong file type, oversized upload."""
    status_code = 400


class DuplicateKey(PortalError):
    """Uniqueness violation, e.g. registering an email twice."""
    status_code = 409


class NotFound(PortalError):
    """Unknown submission, foreign submission, or missing file on disk."""
    status_code = 404


class VisibilityError(PortalError):
    """The leaderboard is hidden from the caller."""
    status_code = 403

    def __init__(self, message: str = "Leaderboard is not visible"):
        super().__init__(message)


class StorageError(PortalError):
    """The underlying store failed. Fatal to the request only."""
    status_code = 500
