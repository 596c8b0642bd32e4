class DomainError(Exception):
    """Base exception for business rule violations."""

    status_code = 400


class ValidationError(DomainError):
    """Raised when input data is missing or invalid."""

    status_code = 400


class AuthenticationError(DomainError):
    """Raised when no credentials are supplied or they do not match."""

    status_code = 401


class InvalidTokenError(DomainError):
    """Raised when a session token fails signature or expiry checks."""

    status_code = 403


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    status_code = 403


class NotFoundError(DomainError):
    """Raised when the requested row does not exist."""

    status_code = 404
