"""
Service Error Taxonomy

Every business-rule failure raised by a service derives from ServiceError.
Routers translate these into HTTP responses with a stable error code and a
human-readable message.
"""


class ServiceError(Exception):
    """Base exception for service-layer errors."""

    def __init__(self, message: str, error_code: str, status_code: int = 400):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        super().__init__(message)


class NotFoundError(ServiceError):
    """An entity referenced by the request does not exist."""

    def __init__(self, message: str, error_code: str):
        super().__init__(message=message, error_code=error_code, status_code=404)


class ConflictError(ServiceError):
    """The request conflicts with existing state (duplicates, already done)."""

    def __init__(self, message: str, error_code: str):
        super().__init__(message=message, error_code=error_code, status_code=409)


class PermissionDeniedError(ServiceError):
    """The caller does not own the entity it is trying to act on."""

    def __init__(self, message: str, error_code: str):
        super().__init__(message=message, error_code=error_code, status_code=403)


class InvalidCredentialError(ServiceError):
    """A password, verification code or session token was rejected."""

    def __init__(self, message: str, error_code: str, status_code: int = 401):
        super().__init__(message=message, error_code=error_code, status_code=status_code)


class ExpiredError(ServiceError):
    """A time-limited secret is past its expiry."""

    def __init__(self, message: str, error_code: str):
        super().__init__(message=message, error_code=error_code, status_code=400)


class RequestValidationError(ServiceError):
    """Request input failed a business validation rule."""

    def __init__(self, message: str, error_code: str = "VALIDATION_ERROR"):
        super().__init__(message=message, error_code=error_code, status_code=400)
