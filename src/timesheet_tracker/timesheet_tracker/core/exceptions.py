class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class ConflictError(DomainError):
    """Raised when a record would duplicate an existing one."""


class NotFoundError(DomainError):
    """Raised when the target user, project, timesheet or assignment does not exist."""


class AuthenticationError(DomainError):
    """Raised when there is no valid session or login credentials are invalid."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""
