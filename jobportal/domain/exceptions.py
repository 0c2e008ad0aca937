"""
Domain-level exceptions.

These exceptions represent business rule violations and domain logic errors.
They are mapped to HTTP responses in the API layer.
"""


class DomainException(Exception):
    """Base exception for all domain-level errors."""
    pass


class ValidationError(DomainException):
    """Raised when domain validation rules are violated."""
    pass


class DuplicateValueError(ValidationError):
    """Raised when a unique field value is already taken."""

    def __init__(self, field: str, value: str, message: str = None):
        self.field = field
        self.value = value
        super().__init__(message or f"{field} '{value}' already exists")


class NotFoundError(DomainException):
    """Base exception for entities not found."""
    pass


class MalformedIdError(NotFoundError, ValidationError):
    """Raised when an identifier is not a well-formed record id."""

    def __init__(self, kind: str, value: str):
        self.kind = kind
        self.value = value
        super().__init__(f"Not found {kind} with id: {value}")


class PermissionNotFoundError(NotFoundError):
    """Raised when a permission is not found."""
    pass


class RoleNotFoundError(NotFoundError):
    """Raised when a role is not found."""
    pass


class UserNotFoundError(NotFoundError):
    """Raised when a user is not found."""
    pass


class CompanyNotFoundError(NotFoundError):
    """Raised when a company is not found."""
    pass


class ResumeNotFoundError(NotFoundError):
    """Raised when a resume is not found."""
    pass


class AuthenticationError(DomainException):
    """Raised when the caller cannot be authenticated."""
    pass


class AuthorizationError(DomainException):
    """Base exception for authorization errors."""
    pass


class ForbiddenError(AuthorizationError):
    """Raised when the caller's role does not grant the requested endpoint."""

    def __init__(self, path: str, method: str, role: str = None):
        self.path = path
        self.method = method
        self.role = role
        super().__init__(f"You don't have permission to access this endpoint: {method} {path}")


class ProtectedResourceError(DomainException):
    """Raised when a mutation targets a record the system must keep."""
    pass


__all__ = [
    "DomainException",
    "ValidationError",
    "DuplicateValueError",
    "NotFoundError",
    "MalformedIdError",
    "PermissionNotFoundError",
    "RoleNotFoundError",
    "UserNotFoundError",
    "CompanyNotFoundError",
    "ResumeNotFoundError",
    "AuthenticationError",
    "AuthorizationError",
    "ForbiddenError",
    "ProtectedResourceError",
]
