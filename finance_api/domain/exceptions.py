"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class DomainValidationError(DomainException):
    """Input is missing, out of range or malformed"""

    pass


class NotFoundError(DomainException):
    """Referenced entity does not exist (or is not visible to the caller)"""

    pass


class InvalidAccountError(NotFoundError):
    """Balance requested for an account that does not exist"""

    pass


class ConflictError(DomainException):
    """Duplicate unique field or delete blocked by existing references"""

    def __init__(self, message: str, count: int | None = None):
        super().__init__(message)
        self.count = count


class AuthenticationError(DomainException):
    """Credentials or token rejected

    ``reason`` is kept for logs only; callers see a generic message.
    """

    def __init__(self, message: str = "Invalid credentials", reason: str | None = None):
        super().__init__(message)
        self.reason = reason or message


class AccessDeniedError(AuthenticationError):
    """Authenticated user tried to act on another user's data"""

    pass


class StorageError(DomainException):
    """Persistence layer unreachable or failed unexpectedly"""

    pass
