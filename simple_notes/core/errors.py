"""Service-level errors raised by permission checks and resource services."""


class ServiceError(Exception):
    """Base class for errors that services surface to the HTTP layer."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class AuthenticationRequired(ServiceError):
    """No identity was resolved but the operation needs one."""

    def __init__(self, message: str = "authentication required") -> None:
        super().__init__(message)


class InvalidCredentials(ServiceError):
    """Username or password did not match."""

    def __init__(self, message: str = "invalid username or password") -> None:
        super().__init__(message)


class PermissionDenied(ServiceError):
    """An identity is present but is not allowed to perform the operation."""

    def __init__(self, message: str = "permission denied") -> None:
        super().__init__(message)


class NotFound(ServiceError):
    pass


class InvalidArgument(ServiceError):
    pass


class AlreadyExists(ServiceError):
    pass


class FailedPrecondition(ServiceError):
    pass
